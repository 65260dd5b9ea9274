"""
cableway/segregation/ - Segregation class registry and validator
"""

from .classes import (
    SegregationClassDefinition,
    SegregationRules,
    SegregationClassRegistry,
    BUILTIN_SEGREGATION_CLASSES,
    IS_SIGNAL,
    NON_IS_SIGNAL,
    CONTROL_POWER_24VDC,
    POWER_120VAC,
    POWER_240VAC,
    POWER_480VAC,
    POWER_600VAC,
)

from .validator import (
    SegregationViolation,
    ViolationOverride,
    SegregationValidationResult,
    ConduitCables,
    ConduitSegregationResult,
    SegregationReport,
    SegregationValidator,
    violation_id,
)

__all__ = [
    # Classes
    "SegregationClassDefinition",
    "SegregationRules",
    "SegregationClassRegistry",
    "BUILTIN_SEGREGATION_CLASSES",
    "IS_SIGNAL",
    "NON_IS_SIGNAL",
    "CONTROL_POWER_24VDC",
    "POWER_120VAC",
    "POWER_240VAC",
    "POWER_480VAC",
    "POWER_600VAC",
    # Validation
    "SegregationViolation",
    "ViolationOverride",
    "SegregationValidationResult",
    "ConduitCables",
    "ConduitSegregationResult",
    "SegregationReport",
    "SegregationValidator",
    "violation_id",
]
