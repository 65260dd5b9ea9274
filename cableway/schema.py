"""
cableway/schema.py - External record schema

Pydantic models for records as callers hold them: camelCase keys and the
route as a comma-joined string. Each model converts to and from the
engine's dataclasses.
"""

from __future__ import annotations
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .core.enums import ConductorMaterial, ContainerKind
from .core.models import Cable, RoutingContainer, join_route, parse_route

__all__ = [
    'CableRecord',
    'ConduitRecord',
    'TrayRecord',
]


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CableRecord(_Record):
    """A cable as stored by the caller."""

    tag: str = ""
    description: Optional[str] = None
    voltage: Optional[float] = None
    current: Optional[float] = None
    conductor_size: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("conductorSize", "size", "conductor_size"),
        serialization_alias="conductorSize",
    )
    conductor_material: ConductorMaterial = ConductorMaterial.COPPER
    function: Optional[str] = None
    cable_type: Optional[str] = None
    cores: Optional[int] = None
    segregation_class: Optional[str] = None
    from_location: Optional[str] = None
    to_location: Optional[str] = None
    length: Optional[float] = None
    route: Optional[str] = None
    outer_diameter: Optional[float] = Field(None, description="Inches")
    spare_percentage: Optional[float] = None
    load_percentage: Optional[float] = None
    voltage_drop_percentage: Optional[float] = None

    @field_validator("conductor_material", mode="before")
    @classmethod
    def _parse_material(cls, value: Any) -> Any:
        if value is None or value == "":
            return ConductorMaterial.COPPER
        return ConductorMaterial.parse(value)

    @field_validator("route", mode="before")
    @classmethod
    def _join_route(cls, value: Union[str, List[str], None]) -> Optional[str]:
        if value is None:
            return None
        return join_route(parse_route(value))

    def to_cable(self) -> Cable:
        return Cable(
            tag=self.tag,
            description=self.description,
            voltage=self.voltage,
            current=self.current,
            conductor_size=self.conductor_size,
            conductor_material=self.conductor_material,
            function=self.function,
            cable_type=self.cable_type,
            cores=self.cores,
            segregation_class=self.segregation_class,
            from_location=self.from_location,
            to_location=self.to_location,
            length=self.length,
            route=parse_route(self.route),
            outer_diameter=self.outer_diameter,
            spare_percentage=self.spare_percentage,
            load_percentage=self.load_percentage,
            voltage_drop_percentage=self.voltage_drop_percentage,
        )

    @classmethod
    def from_cable(cls, cable: Cable) -> "CableRecord":
        data = cable.to_dict()
        data["route"] = cable.route_string or None
        return cls.model_validate(data)

    def to_external(self) -> dict:
        """camelCase dict for the caller's store."""
        return self.model_dump(by_alias=True, mode="json")


class ConduitRecord(_Record):
    """A conduit as stored by the caller."""

    tag: str
    type: str = ""
    size: Optional[str] = None
    internal_diameter: Optional[float] = Field(None, gt=0, description="Inches")
    fill_percentage: float = 0.0
    max_fill_percentage: float = 40.0

    def to_container(self) -> RoutingContainer:
        return RoutingContainer(
            tag=self.tag,
            kind=ContainerKind.CONDUIT,
            container_type=self.type,
            internal_diameter=self.internal_diameter,
            max_fill_percentage=self.max_fill_percentage,
            fill_percentage=self.fill_percentage,
        )


class TrayRecord(_Record):
    """A cable tray as stored by the caller."""

    tag: str
    type: str = ""
    width: Optional[float] = Field(None, gt=0, description="Inches")
    height: Optional[float] = Field(None, gt=0, description="Inches")
    fill_percentage: float = 0.0
    max_fill_percentage: float = 50.0

    def to_container(self) -> RoutingContainer:
        return RoutingContainer(
            tag=self.tag,
            kind=ContainerKind.TRAY,
            container_type=self.type,
            width=self.width,
            height=self.height,
            max_fill_percentage=self.max_fill_percentage,
            fill_percentage=self.fill_percentage,
        )
