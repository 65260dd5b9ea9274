"""
cableway/fill/geometry.py - Fill geometry

Cross-sectional areas and the code-adjusted fill percentage of one
container. All lengths are inches, areas square inches.

    fill% = sum(pi x (OD/2)^2 x factor(n)) / internal_area x 100

factor(n) comes from an injectable FillAdjustmentTable.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence
import math

from ..config import FillAdjustmentTable, FillConfig, NEC_CONDUIT_FILL_TABLE
from ..core.enums import FillStatus
from ..core.models import Cable, RoutingContainer
from ..errors import FillCalculationError, MissingOuterDiameterError

__all__ = [
    'FillStatusInfo',
    'cable_area',
    'calculate_fill_percentage',
    'get_nec_fill_factor',
    'fill_status',
    'fill_message',
]


def cable_area(outer_diameter: float) -> float:
    """Cross-sectional area of a round cable."""
    return math.pi * (outer_diameter / 2.0) ** 2


def get_nec_fill_factor(
    conductor_count: int,
    table: FillAdjustmentTable = NEC_CONDUIT_FILL_TABLE,
) -> float:
    """Allowable conduit fill percentage for a conductor count (53 / 31 / 40)."""
    return table.allowable_fill(conductor_count)


def calculate_fill_percentage(
    container: RoutingContainer,
    cables: Sequence[Cable],
    table: FillAdjustmentTable,
) -> float:
    """
    Fill percentage of a container holding the given cables.

    Raises:
        MissingOuterDiameterError: a cable has no outer diameter
        FillCalculationError: the container has no usable geometry
    """
    if not cables:
        return 0.0

    internal_area = container.internal_area
    if internal_area <= 0:
        raise FillCalculationError(
            f"Container {container.tag} has no internal area",
            container_tag=container.tag,
        )

    for cable in cables:
        if not cable.outer_diameter or cable.outer_diameter <= 0:
            raise MissingOuterDiameterError(cable.tag)

    factor = table.adjustment_factor(len(cables))
    occupied = sum(cable_area(c.outer_diameter) * factor for c in cables)
    return occupied / internal_area * 100.0


@dataclass(frozen=True)
class FillStatusInfo:
    """Display classification of a fill percentage."""
    status: FillStatus
    fill_percentage: float
    max_fill_percentage: float
    message: str

    @property
    def is_overfilled(self) -> bool:
        return self.status == FillStatus.OVERFILLED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'fill_percentage': self.fill_percentage,
            'max_fill_percentage': self.max_fill_percentage,
            'is_overfilled': self.is_overfilled,
            'message': self.message,
        }


def fill_status(
    fill_percentage: float,
    max_fill_percentage: float,
    config: Optional[FillConfig] = None,
) -> FillStatus:
    """Good below 70% of max, Warning to 90%, Critical to max, then Overfilled."""
    config = config or FillConfig()
    if fill_percentage > max_fill_percentage:
        return FillStatus.OVERFILLED
    if fill_percentage < max_fill_percentage * config.warning_fraction:
        return FillStatus.GOOD
    if fill_percentage < max_fill_percentage * config.critical_fraction:
        return FillStatus.WARNING
    return FillStatus.CRITICAL


def fill_message(
    status: FillStatus,
    fill_percentage: float,
    max_fill_percentage: float,
    kind: str = "conduit",
) -> str:
    pct = f"{fill_percentage:.1f}%"
    limit = f"{kind} limit: {max_fill_percentage:.0f}%"
    if status == FillStatus.GOOD:
        return f"{pct} fill - Within safe limits ({limit})"
    if status == FillStatus.WARNING:
        return f"{pct} fill - Approaching limit ({limit})"
    if status == FillStatus.CRITICAL:
        return f"{pct} fill - Near limit ({limit})"
    return f"{pct} fill - Exceeds NEC limit ({limit})"
