"""
cableway/electrical/voltage_drop.py - Voltage Drop Calculator

Single-phase/DC voltage drop against NEC recommended limits:

    VD = (2 x L / 1000) x R x I x PF
    VD% = VD / V x 100

where L is the one-way length in feet and R is ohms per 1000 ft.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import logging
import math

from ..config import VoltageDropConfig
from ..core.enums import CircuitType, ConductorMaterial, VoltageDropSeverity
from ..core.models import Cable
from ..errors import InvalidCalculationInputError, UnsupportedConductorSizeError
from .conductor_table import ConductorReferenceTable, normalize_conductor_size

__all__ = [
    'VoltageDropParams',
    'VoltageDropResult',
    'ConductorRecommendation',
    'VoltageDropCalculator',
]

logger = logging.getLogger(__name__)


# =============================================================================
# Parameter and Result Classes
# =============================================================================

@dataclass(frozen=True)
class VoltageDropParams:
    """Inputs to a voltage drop calculation."""
    voltage: float             # V
    current: float             # A
    distance: float            # ft, one-way
    conductor_size: str
    material: ConductorMaterial = ConductorMaterial.COPPER
    power_factor: Optional[float] = None  # None = configured default

    def with_size(self, conductor_size: str) -> "VoltageDropParams":
        return VoltageDropParams(
            voltage=self.voltage,
            current=self.current,
            distance=self.distance,
            conductor_size=conductor_size,
            material=self.material,
            power_factor=self.power_factor,
        )


@dataclass(frozen=True)
class VoltageDropResult:
    """Result of a voltage drop calculation."""
    voltage_drop_volts: float
    voltage_drop_percentage: float
    conductor_size: str = ""
    material: Optional[ConductorMaterial] = None
    resistance_ohms_per_kft: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "voltage_drop_volts": self.voltage_drop_volts,
            "voltage_drop_percentage": self.voltage_drop_percentage,
            "conductor_size": self.conductor_size,
            "material": self.material.value if self.material else None,
            "resistance_ohms_per_kft": self.resistance_ohms_per_kft,
        }


@dataclass(frozen=True)
class ConductorRecommendation:
    """Outcome of a conductor upsizing scan."""
    current_size: str
    recommended_size: str
    meets_nec_limit: bool          # compliance of current_size
    recommended_meets_limit: bool  # False only when even the largest size fails
    current_percentage: float
    recommended_percentage: float
    limit_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_size": self.current_size,
            "recommended_size": self.recommended_size,
            "meets_nec_limit": self.meets_nec_limit,
            "recommended_meets_limit": self.recommended_meets_limit,
            "current_percentage": self.current_percentage,
            "recommended_percentage": self.recommended_percentage,
            "limit_pct": self.limit_pct,
        }


ResultLike = Union[VoltageDropResult, float, int]


# =============================================================================
# Calculator
# =============================================================================

class VoltageDropCalculator:
    """
    Voltage drop and NEC compliance calculations.

    Usage:
        calc = VoltageDropCalculator()
        result = calc.calculate_voltage_drop_percentage(VoltageDropParams(
            voltage=120, current=20, distance=100, conductor_size="12 AWG",
            power_factor=1.0,
        ))
        calc.exceeds_nec_limit(result, "branch")  # True (6.67%)
    """

    def __init__(
        self,
        conductor_table: Optional[ConductorReferenceTable] = None,
        config: Optional[VoltageDropConfig] = None,
    ):
        self.conductor_table = conductor_table or ConductorReferenceTable()
        self.config = config or VoltageDropConfig()

    # -------------------------------------------------------------------------
    # Core calculation
    # -------------------------------------------------------------------------

    def get_conductor_resistance(self, size: str, material: ConductorMaterial) -> float:
        """Resistance in ohms per 1000 ft; raises UnsupportedConductorSizeError."""
        return self.conductor_table.resistance(size, material)

    def calculate_voltage_drop_percentage(self, params: VoltageDropParams) -> VoltageDropResult:
        """
        Calculate voltage drop for a circuit.

        Raises:
            UnsupportedConductorSizeError: size/material not in table
            InvalidCalculationInputError: non-positive voltage, negative
                current or distance, power factor outside (0, 1]
        """
        power_factor = self._power_factor(params)
        self._check_inputs(params, power_factor)

        resistance = self.get_conductor_resistance(params.conductor_size, params.material)

        round_trip_distance = 2.0 * params.distance
        voltage_drop_volts = (
            (round_trip_distance / 1000.0) * resistance * params.current * power_factor
        )
        voltage_drop_percentage = voltage_drop_volts / params.voltage * 100.0

        logger.debug(
            f"VD {params.conductor_size} {params.material.value}: "
            f"{voltage_drop_volts:.3f} V ({voltage_drop_percentage:.2f}%)"
        )

        return VoltageDropResult(
            voltage_drop_volts=voltage_drop_volts,
            voltage_drop_percentage=voltage_drop_percentage,
            conductor_size=normalize_conductor_size(params.conductor_size),
            material=params.material,
            resistance_ohms_per_kft=resistance,
        )

    def _power_factor(self, params: VoltageDropParams) -> float:
        if params.power_factor is None:
            return self.config.default_power_factor
        return params.power_factor

    @staticmethod
    def _check_inputs(params: VoltageDropParams, power_factor: float) -> None:
        if params.voltage is None or not params.voltage > 0:
            raise InvalidCalculationInputError(
                f"Voltage must be positive: {params.voltage}", voltage=params.voltage
            )
        if params.current is None or params.current < 0 or math.isnan(params.current):
            raise InvalidCalculationInputError(
                f"Current must be non-negative: {params.current}", current=params.current
            )
        if params.distance is None or params.distance < 0 or math.isnan(params.distance):
            raise InvalidCalculationInputError(
                f"Distance must be non-negative: {params.distance}", distance=params.distance
            )
        if not 0 < power_factor <= 1:
            raise InvalidCalculationInputError(
                f"Power factor must be in (0, 1]: {power_factor}", power_factor=power_factor
            )

    # -------------------------------------------------------------------------
    # Compliance
    # -------------------------------------------------------------------------

    def nec_limit(self, circuit_type: Union[CircuitType, str]) -> float:
        """Voltage drop limit (percent) for a circuit type."""
        if isinstance(circuit_type, str):
            circuit_type = CircuitType(circuit_type.strip().lower())
        if circuit_type == CircuitType.FEEDER:
            return self.config.feeder_limit_pct
        return self.config.branch_limit_pct

    def exceeds_nec_limit(
        self,
        result: ResultLike,
        circuit_type: Union[CircuitType, str] = CircuitType.BRANCH,
    ) -> bool:
        """
        Check a result against the NEC limit.

        The limit itself is compliant: exactly 3.0% on a branch circuit
        does not exceed it.
        """
        return _percentage(result) > self.nec_limit(circuit_type)

    def classify(self, result: ResultLike) -> VoltageDropSeverity:
        """Severity band of a voltage drop."""
        pct = _percentage(result)
        if pct <= self.config.good_max_pct:
            return VoltageDropSeverity.GOOD
        if pct <= self.config.warning_max_pct:
            return VoltageDropSeverity.WARNING
        return VoltageDropSeverity.ERROR

    def compliance_status(self, result: ResultLike) -> str:
        """Human-readable compliance message for a result."""
        severity = self.classify(result)
        good = f"{self.config.good_max_pct:g}%"
        high = f"{self.config.warning_max_pct:g}%"
        if severity == VoltageDropSeverity.GOOD:
            return f"Compliant with NEC recommendations (<={good})"
        if severity == VoltageDropSeverity.WARNING:
            return f"Acceptable but high ({good}-{high}, consider larger conductor)"
        return f"Exceeds NEC recommendations (>{high}, larger conductor required)"

    # -------------------------------------------------------------------------
    # Sizing
    # -------------------------------------------------------------------------

    def recommend_conductor_size(
        self,
        params: VoltageDropParams,
        circuit_type: Union[CircuitType, str] = CircuitType.BRANCH,
    ) -> ConductorRecommendation:
        """
        Find the smallest compliant conductor at or above the current size.

        Scans from `params.conductor_size` toward larger conductors. If no
        size satisfies the limit the largest supported size is returned.
        """
        limit = self.nec_limit(circuit_type)
        current = self.calculate_voltage_drop_percentage(params)
        current_size = current.conductor_size
        meets = current.voltage_drop_percentage <= limit

        recommended = current
        for size in self.conductor_table.larger_sizes(current_size, params.material):
            recommended = self.calculate_voltage_drop_percentage(params.with_size(size))
            if recommended.voltage_drop_percentage <= limit:
                break

        recommended_meets = recommended.voltage_drop_percentage <= limit
        if not recommended_meets:
            logger.warning(
                f"No conductor size meets {limit}% for {params.distance} ft at "
                f"{params.current} A; largest size {recommended.conductor_size} gives "
                f"{recommended.voltage_drop_percentage:.2f}%"
            )

        return ConductorRecommendation(
            current_size=current_size,
            recommended_size=recommended.conductor_size,
            meets_nec_limit=meets,
            recommended_meets_limit=recommended_meets,
            current_percentage=current.voltage_drop_percentage,
            recommended_percentage=recommended.voltage_drop_percentage,
            limit_pct=limit,
        )

    def minimum_conductor_size(
        self,
        voltage: float,
        current: float,
        distance: float,
        material: ConductorMaterial = ConductorMaterial.COPPER,
        max_drop_percent: float = 3.0,
        power_factor: Optional[float] = None,
    ) -> str:
        """
        Smallest conductor in the table meeting a voltage drop limit.

        Raises:
            UnsupportedConductorSizeError: no size in the table is adequate
        """
        for size in self.conductor_table.sizes(material):
            result = self.calculate_voltage_drop_percentage(VoltageDropParams(
                voltage=voltage,
                current=current,
                distance=distance,
                conductor_size=size,
                material=material,
                power_factor=power_factor,
            ))
            if result.voltage_drop_percentage <= max_drop_percent:
                return size

        raise UnsupportedConductorSizeError(
            f">{self.conductor_table.largest(material)}",
            material,
            recovery_hint="No standard conductor size meets the voltage drop requirement",
        )

    @staticmethod
    def current_from_power(
        power_watts: float,
        voltage: float,
        power_factor: float = 0.85,
        phases: int = 1,
    ) -> float:
        """Load current from real power; three-phase uses line-to-line voltage."""
        if voltage <= 0 or power_factor <= 0:
            raise InvalidCalculationInputError(
                "Voltage and power factor must be positive",
                voltage=voltage,
                power_factor=power_factor,
            )
        if phases == 3:
            return power_watts / (voltage * math.sqrt(3) * power_factor)
        return power_watts / (voltage * power_factor)

    # -------------------------------------------------------------------------
    # Cable integration
    # -------------------------------------------------------------------------

    def voltage_drop_for_cable(
        self,
        cable: Cable,
        power_factor: Optional[float] = None,
    ) -> Optional[Cable]:
        """
        Compute a cable's voltage drop and return an updated copy.

        Returns None when the cable lacks voltage, current, length or
        conductor size. Unsupported sizes still raise.
        """
        if not cable.voltage or cable.current is None or cable.length is None:
            return None
        if not cable.conductor_size:
            return None

        result = self.calculate_voltage_drop_percentage(VoltageDropParams(
            voltage=cable.voltage,
            current=cable.current,
            distance=cable.length,
            conductor_size=cable.conductor_size,
            material=cable.conductor_material,
            power_factor=power_factor,
        ))
        return cable.with_changes(voltage_drop_percentage=result.voltage_drop_percentage)


def _percentage(result: ResultLike) -> float:
    if isinstance(result, VoltageDropResult):
        return result.voltage_drop_percentage
    return float(result)
