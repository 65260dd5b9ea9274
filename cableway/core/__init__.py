"""
cableway/core/ - Shared domain records and enumerations
"""

from .enums import (
    ConductorMaterial,
    CableFunction,
    ContainerKind,
    CircuitType,
    FillStatus,
    VoltageDropSeverity,
    SegregationCategory,
    ViolationSeverity,
    ViolationType,
)

from .models import (
    Cable,
    RoutingContainer,
    parse_route,
    join_route,
    DEFAULT_CONDUIT_MAX_FILL,
    DEFAULT_TRAY_MAX_FILL,
)

__all__ = [
    # Enums
    "ConductorMaterial",
    "CableFunction",
    "ContainerKind",
    "CircuitType",
    "FillStatus",
    "VoltageDropSeverity",
    "SegregationCategory",
    "ViolationSeverity",
    "ViolationType",
    # Records
    "Cable",
    "RoutingContainer",
    "parse_route",
    "join_route",
    "DEFAULT_CONDUIT_MAX_FILL",
    "DEFAULT_TRAY_MAX_FILL",
]

from .routes import (
    ContainerLookup,
    RouteClassifier,
    DEFAULT_CONDUIT_PATTERNS,
    DEFAULT_TRAY_PATTERNS,
)

__all__ += [
    "ContainerLookup",
    "RouteClassifier",
    "DEFAULT_CONDUIT_PATTERNS",
    "DEFAULT_TRAY_PATTERNS",
]

from .index import RouteIndex

__all__ += ["RouteIndex"]
