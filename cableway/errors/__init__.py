"""
cableway/errors/ - Error taxonomy and failure aggregation
"""

from .taxonomy import (
    ErrorCategory,
    CableEngineError,
    UnsupportedConductorSizeError,
    InvalidCalculationInputError,
    UnknownSegregationClassError,
    DuplicateSegregationClassError,
    FillCalculationError,
    MissingOuterDiameterError,
    ContainerNotFoundError,
)

from .aggregator import (
    RecalculationFailure,
    ErrorReport,
    ErrorAggregator,
)

__all__ = [
    # Taxonomy
    "ErrorCategory",
    "CableEngineError",
    "UnsupportedConductorSizeError",
    "InvalidCalculationInputError",
    "UnknownSegregationClassError",
    "DuplicateSegregationClassError",
    "FillCalculationError",
    "MissingOuterDiameterError",
    "ContainerNotFoundError",
    # Aggregator
    "RecalculationFailure",
    "ErrorReport",
    "ErrorAggregator",
]
