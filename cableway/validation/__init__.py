"""
cableway/validation/ - Cable field validation
"""

from .field_validator import (
    ValidationResult,
    ValidationOptions,
    CableFieldValidator,
    ProjectValidationEntry,
    ProjectValidationSummary,
)

__all__ = [
    "ValidationResult",
    "ValidationOptions",
    "CableFieldValidator",
    "ProjectValidationEntry",
    "ProjectValidationSummary",
]
