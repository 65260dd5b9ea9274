"""
cableway/core/models.py - Cable and routing container records

In-memory domain records supplied by the caller. Container membership is
never stored: a cable belongs to a container when its route lists the
container's tag.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple, Union
import math

from .enums import ConductorMaterial, ContainerKind

__all__ = [
    'Cable',
    'RoutingContainer',
    'parse_route',
    'join_route',
    'DEFAULT_CONDUIT_MAX_FILL',
    'DEFAULT_TRAY_MAX_FILL',
]

DEFAULT_CONDUIT_MAX_FILL = 40.0
DEFAULT_TRAY_MAX_FILL = 50.0

RouteLike = Union[str, Iterable[str], None]


def parse_route(route: RouteLike) -> Tuple[str, ...]:
    """
    Parse a route into an ordered tuple of container tags.

    Accepts the external comma-joined form ("C-01, T-02") or any iterable
    of tags. Blank entries are dropped, order is preserved.
    """
    if route is None:
        return ()
    parts = route.split(",") if isinstance(route, str) else route
    return tuple(p.strip() for p in parts if p and p.strip())


def join_route(route: Iterable[str]) -> str:
    """Join container tags into the external comma-joined form."""
    return ",".join(route)


@dataclass
class Cable:
    """
    A cable record.

    Attributes left as None are "not supplied"; the field validator
    reports required ones as missing. `voltage_drop_percentage` is derived
    and only written by the voltage drop calculator.
    """

    tag: str = ""
    description: Optional[str] = None

    # Electrical
    voltage: Optional[float] = None
    current: Optional[float] = None
    conductor_size: Optional[str] = None
    conductor_material: ConductorMaterial = ConductorMaterial.COPPER
    function: Optional[str] = None
    cable_type: Optional[str] = None
    cores: Optional[int] = None
    segregation_class: Optional[str] = None

    # Routing
    from_location: Optional[str] = None
    to_location: Optional[str] = None
    length: Optional[float] = None  # feet, one-way
    route: Tuple[str, ...] = field(default_factory=tuple)

    # Physical
    outer_diameter: Optional[float] = None  # inches

    # Loading
    spare_percentage: Optional[float] = None
    load_percentage: Optional[float] = None

    # Derived
    voltage_drop_percentage: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.route, tuple):
            self.route = parse_route(self.route)
        if not isinstance(self.conductor_material, ConductorMaterial):
            self.conductor_material = ConductorMaterial.parse(self.conductor_material)

    @property
    def route_string(self) -> str:
        """Route in its external comma-joined form."""
        return join_route(self.route)

    def routes_through(self, container_tag: str) -> bool:
        """Check if the route lists a container."""
        return container_tag in self.route

    def with_changes(self, **changes: Any) -> "Cable":
        """Return a copy with fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "tag": self.tag,
            "description": self.description,
            "voltage": self.voltage,
            "current": self.current,
            "conductor_size": self.conductor_size,
            "conductor_material": self.conductor_material.value,
            "function": self.function,
            "cable_type": self.cable_type,
            "cores": self.cores,
            "segregation_class": self.segregation_class,
            "from_location": self.from_location,
            "to_location": self.to_location,
            "length": self.length,
            "route": self.route_string,
            "outer_diameter": self.outer_diameter,
            "spare_percentage": self.spare_percentage,
            "load_percentage": self.load_percentage,
            "voltage_drop_percentage": self.voltage_drop_percentage,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cable":
        """Deserialize from dictionary."""
        return cls(
            tag=data.get("tag", ""),
            description=data.get("description"),
            voltage=data.get("voltage"),
            current=data.get("current"),
            conductor_size=data.get("conductor_size"),
            conductor_material=data.get("conductor_material", ConductorMaterial.COPPER),
            function=data.get("function"),
            cable_type=data.get("cable_type"),
            cores=data.get("cores"),
            segregation_class=data.get("segregation_class"),
            from_location=data.get("from_location"),
            to_location=data.get("to_location"),
            length=data.get("length"),
            route=parse_route(data.get("route")),
            outer_diameter=data.get("outer_diameter"),
            spare_percentage=data.get("spare_percentage"),
            load_percentage=data.get("load_percentage"),
            voltage_drop_percentage=data.get("voltage_drop_percentage"),
        )


@dataclass
class RoutingContainer:
    """
    A conduit or cable tray.

    `fill_percentage` is a cache: it is always reproducible from the
    current cable set. `version` is the cable-table snapshot version the
    cached value was computed from.
    """

    tag: str
    kind: ContainerKind = ContainerKind.CONDUIT
    container_type: str = ""  # e.g. "EMT", "Ladder", "Perforated"

    # Conduit geometry (inches)
    internal_diameter: Optional[float] = None

    # Tray geometry (inches)
    width: Optional[float] = None
    height: Optional[float] = None

    max_fill_percentage: Optional[float] = None
    fill_percentage: float = 0.0
    version: int = 0

    def __post_init__(self):
        if not isinstance(self.kind, ContainerKind):
            self.kind = ContainerKind(str(self.kind).lower())
        if self.max_fill_percentage is None:
            self.max_fill_percentage = (
                DEFAULT_CONDUIT_MAX_FILL if self.kind == ContainerKind.CONDUIT
                else DEFAULT_TRAY_MAX_FILL
            )

    @property
    def is_conduit(self) -> bool:
        return self.kind == ContainerKind.CONDUIT

    @property
    def is_tray(self) -> bool:
        return self.kind == ContainerKind.TRAY

    @property
    def internal_area(self) -> float:
        """Internal cross-sectional area in square inches (0 if unknown)."""
        if self.kind == ContainerKind.CONDUIT:
            if not self.internal_diameter:
                return 0.0
            return math.pi * (self.internal_diameter / 2.0) ** 2
        if not self.width or not self.height:
            return 0.0
        return self.width * self.height

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "tag": self.tag,
            "kind": self.kind.value,
            "container_type": self.container_type,
            "internal_diameter": self.internal_diameter,
            "width": self.width,
            "height": self.height,
            "internal_area": self.internal_area,
            "max_fill_percentage": self.max_fill_percentage,
            "fill_percentage": self.fill_percentage,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoutingContainer":
        """Deserialize from dictionary."""
        return cls(
            tag=data["tag"],
            kind=ContainerKind(data.get("kind", "conduit")),
            container_type=data.get("container_type", ""),
            internal_diameter=data.get("internal_diameter"),
            width=data.get("width"),
            height=data.get("height"),
            max_fill_percentage=data.get("max_fill_percentage"),
            fill_percentage=data.get("fill_percentage", 0.0),
            version=data.get("version", 0),
        )
