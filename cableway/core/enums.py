"""
cableway/core/enums.py - Cable engineering enumerations

Shared enumerations for cables, routing containers and compliance
classification.
"""

from enum import Enum

__all__ = [
    'ConductorMaterial',
    'CableFunction',
    'ContainerKind',
    'CircuitType',
    'FillStatus',
    'VoltageDropSeverity',
    'SegregationCategory',
    'ViolationSeverity',
    'ViolationType',
]


class ConductorMaterial(Enum):
    """Conductor material."""
    COPPER = "Copper"
    ALUMINUM = "Aluminum"

    @classmethod
    def parse(cls, value) -> "ConductorMaterial":
        """Accept enum members or case-insensitive names/values."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown conductor material: {value}")


class CableFunction(Enum):
    """Cable function categories."""
    POWER = "Power"
    CONTROL = "Control"
    INSTRUMENTATION = "Instrumentation"
    COMMUNICATION = "Communication"
    SIGNAL = "Signal"
    LIGHTING = "Lighting"
    SPARE = "Spare"


class ContainerKind(Enum):
    """Routing container kinds."""
    CONDUIT = "conduit"
    TRAY = "tray"


class CircuitType(Enum):
    """Circuit types with distinct voltage-drop limits."""
    BRANCH = "branch"
    FEEDER = "feeder"


class FillStatus(Enum):
    """Fill classification relative to a container's maximum fill."""
    GOOD = "Good"
    WARNING = "Warning"
    CRITICAL = "Critical"
    OVERFILLED = "Overfilled"


class VoltageDropSeverity(Enum):
    """Voltage-drop severity bands."""
    GOOD = "Good"          # <= 3%
    WARNING = "Warning"    # 3-5%
    ERROR = "Error"        # > 5%


class SegregationCategory(Enum):
    """Electrical nature of a segregation class."""
    INTRINSICALLY_SAFE = "intrinsically_safe"
    SIGNAL = "signal"
    CONTROL_POWER = "control_power"
    POWER = "power"


class ViolationSeverity(Enum):
    """Severity of a segregation violation."""
    ERROR = "ERROR"
    WARNING = "WARNING"


class ViolationType(Enum):
    """Kinds of segregation violation."""
    IS_SEPARATION = "IS_SEPARATION"
    POWER_SIGNAL_SEPARATION = "POWER_SIGNAL_SEPARATION"
    VOLTAGE_LEVEL_SEPARATION = "VOLTAGE_LEVEL_SEPARATION"
    LOW_VOLTAGE_SIGNAL_MIX = "LOW_VOLTAGE_SIGNAL_MIX"
    CLASS_SEPARATION = "CLASS_SEPARATION"
