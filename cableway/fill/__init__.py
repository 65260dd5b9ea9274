"""
cableway/fill/ - Container fill calculation
"""

from .routes import (
    RouteReferences,
    AffectedRoutes,
    extract_route_references,
    find_affected_routes,
)

from .geometry import (
    FillStatusInfo,
    cable_area,
    calculate_fill_percentage,
    get_nec_fill_factor,
    fill_status,
    fill_message,
)

from .store import (
    CableSnapshot,
    CableSource,
    ContainerStore,
    InMemoryCableTable,
    InMemoryContainerStore,
)

from .service import (
    FillCalculationResult,
    FillComplianceResult,
    FillCalculationService,
)

__all__ = [
    # Routes
    "RouteReferences",
    "AffectedRoutes",
    "extract_route_references",
    "find_affected_routes",
    # Geometry
    "FillStatusInfo",
    "cable_area",
    "calculate_fill_percentage",
    "get_nec_fill_factor",
    "fill_status",
    "fill_message",
    # Stores
    "CableSnapshot",
    "CableSource",
    "ContainerStore",
    "InMemoryCableTable",
    "InMemoryContainerStore",
    # Service
    "FillCalculationResult",
    "FillComplianceResult",
    "FillCalculationService",
]
