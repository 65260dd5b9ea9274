"""
cableway/errors/taxonomy.py - Error classification

Structured exceptions for precondition failures (caller or configuration
bugs). Validation outcomes are never raised; they are returned as result
objects.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional

__all__ = [
    'ErrorCategory',
    'CableEngineError',
    'UnsupportedConductorSizeError',
    'InvalidCalculationInputError',
    'UnknownSegregationClassError',
    'DuplicateSegregationClassError',
    'FillCalculationError',
    'MissingOuterDiameterError',
    'ContainerNotFoundError',
]


class ErrorCategory(Enum):
    """Error categories."""
    CONFIGURATION = "configuration"
    CALCULATION = "calculation"
    REGISTRY = "registry"
    FILL = "fill"


# =============================================================================
# BASE ERROR CLASS
# =============================================================================

class CableEngineError(Exception):
    """
    Base class for engine errors.

    Carries an error code for programmatic handling, a recovery hint and
    a details dict for debugging.
    """

    code: str = "CBL_000"
    category: ErrorCategory = ErrorCategory.CALCULATION

    def __init__(
        self,
        message: str = "",
        *,
        recovery_hint: str = "",
        details: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        self.message = message or self.__class__.__doc__ or "Cable engine error"
        self.recovery_hint = recovery_hint
        self.details = details or {}
        self.details.update(kwargs)

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "recovery_hint": self.recovery_hint,
            "details": self.details,
        }

    def __str__(self) -> str:
        return self.message


# =============================================================================
# CALCULATION ERRORS
# =============================================================================

class UnsupportedConductorSizeError(CableEngineError):
    """Conductor size/material pair is not in the reference table."""

    code = "CBL_101"
    category = ErrorCategory.CONFIGURATION

    def __init__(self, size: str, material: Any = None, **kwargs):
        kwargs.setdefault("recovery_hint", "Use a size listed in the conductor reference table")
        super().__init__(
            f"Unsupported conductor size: {size}",
            size=size,
            material=getattr(material, "value", material),
            **kwargs,
        )
        self.size = size
        self.material = material


class InvalidCalculationInputError(CableEngineError):
    """Calculation input outside its physical domain."""

    code = "CBL_102"
    category = ErrorCategory.CALCULATION


# =============================================================================
# REGISTRY ERRORS
# =============================================================================

class UnknownSegregationClassError(CableEngineError):
    """Segregation class is not registered."""

    code = "CBL_201"
    category = ErrorCategory.REGISTRY

    def __init__(self, name: str, **kwargs):
        super().__init__(
            f"Unknown segregation class: {name}",
            recovery_hint="Register the class with create_custom_segregation_class",
            name=name,
            **kwargs,
        )
        self.name = name


class DuplicateSegregationClassError(CableEngineError):
    """Segregation class name already registered."""

    code = "CBL_202"
    category = ErrorCategory.REGISTRY

    def __init__(self, name: str, **kwargs):
        super().__init__(
            f"Segregation class already registered: {name}",
            name=name,
            **kwargs,
        )
        self.name = name


# =============================================================================
# FILL ERRORS
# =============================================================================

class FillCalculationError(CableEngineError):
    """Fill recalculation failed."""

    code = "CBL_301"
    category = ErrorCategory.FILL


class MissingOuterDiameterError(FillCalculationError):
    """Routed cable has no outer diameter."""

    code = "CBL_302"

    def __init__(self, cable_tag: str, **kwargs):
        super().__init__(
            f"Cable {cable_tag} missing outer diameter for fill calculation",
            recovery_hint="Enter the cable's outer diameter",
            cable_tag=cable_tag,
            **kwargs,
        )
        self.cable_tag = cable_tag


class ContainerNotFoundError(FillCalculationError):
    """Routing container is not known to the container store."""

    code = "CBL_303"

    def __init__(self, container_tag: str, **kwargs):
        super().__init__(
            f"Routing container not found: {container_tag}",
            container_tag=container_tag,
            **kwargs,
        )
        self.container_tag = container_tag
