"""
cableway/__init__.py - Cable engineering compliance engine

Validates cable records, computes voltage drop against NEC limits, checks
segregation between cables sharing a container and keeps conduit/tray
fill percentages consistent with the routed cable set.

This package provides:
- Cable field validation with tag suggestion
- Conductor resistance table and voltage drop calculator
- Open segregation class registry and pairwise validator
- Diff-based, versioned container fill recomputation
- CableEngine facade tying them together for one project
"""

from .config import (
    ValidationConfig,
    VoltageDropConfig,
    FillAdjustmentTable,
    FillConfig,
    EngineConfig,
    DEFAULT_CONFIG,
)

from .core import (
    Cable,
    RoutingContainer,
    ConductorMaterial,
    ContainerKind,
    CircuitType,
    FillStatus,
    ViolationSeverity,
    ViolationType,
    RouteClassifier,
    RouteIndex,
)

from .errors import (
    CableEngineError,
    UnsupportedConductorSizeError,
    InvalidCalculationInputError,
    UnknownSegregationClassError,
    DuplicateSegregationClassError,
    FillCalculationError,
    MissingOuterDiameterError,
    ContainerNotFoundError,
    ErrorAggregator,
)

from .electrical import (
    ConductorReferenceTable,
    VoltageDropCalculator,
    VoltageDropParams,
    VoltageDropResult,
)

from .validation import (
    CableFieldValidator,
    ValidationOptions,
    ValidationResult,
)

from .segregation import (
    SegregationClassDefinition,
    SegregationClassRegistry,
    SegregationValidator,
)

from .fill import (
    FillCalculationService,
    find_affected_routes,
)

from .engine import CableEngine, CableChange, ProjectReport
from .log_config import configure_logging

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "ValidationConfig",
    "VoltageDropConfig",
    "FillAdjustmentTable",
    "FillConfig",
    "EngineConfig",
    "DEFAULT_CONFIG",
    # Records
    "Cable",
    "RoutingContainer",
    "ConductorMaterial",
    "ContainerKind",
    "CircuitType",
    "FillStatus",
    "ViolationSeverity",
    "ViolationType",
    "RouteClassifier",
    "RouteIndex",
    # Errors
    "CableEngineError",
    "UnsupportedConductorSizeError",
    "InvalidCalculationInputError",
    "UnknownSegregationClassError",
    "DuplicateSegregationClassError",
    "FillCalculationError",
    "MissingOuterDiameterError",
    "ContainerNotFoundError",
    "ErrorAggregator",
    # Components
    "ConductorReferenceTable",
    "VoltageDropCalculator",
    "VoltageDropParams",
    "VoltageDropResult",
    "CableFieldValidator",
    "ValidationOptions",
    "ValidationResult",
    "SegregationClassDefinition",
    "SegregationClassRegistry",
    "SegregationValidator",
    "FillCalculationService",
    "find_affected_routes",
    # Facade
    "CableEngine",
    "CableChange",
    "ProjectReport",
    "configure_logging",
]
