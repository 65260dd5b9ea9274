"""
cableway/electrical/ - Conductor reference data and voltage drop
"""

from .conductor_table import (
    ConductorReferenceTable,
    COPPER_RESISTANCE,
    ALUMINUM_RESISTANCE,
    normalize_conductor_size,
)

from .voltage_drop import (
    VoltageDropParams,
    VoltageDropResult,
    ConductorRecommendation,
    VoltageDropCalculator,
)

__all__ = [
    "ConductorReferenceTable",
    "COPPER_RESISTANCE",
    "ALUMINUM_RESISTANCE",
    "normalize_conductor_size",
    "VoltageDropParams",
    "VoltageDropResult",
    "ConductorRecommendation",
    "VoltageDropCalculator",
]
