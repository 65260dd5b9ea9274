"""
cableway/config.py - Engine configuration

Configuration dataclasses for validation limits, voltage-drop limits and
fill rules. Every table the calculators depend on is injectable here
rather than hardcoded at a call site.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple
import logging

from .core.routes import DEFAULT_CONDUIT_PATTERNS, DEFAULT_TRAY_PATTERNS
from .errors import InvalidCalculationInputError

__all__ = [
    'ValidationConfig',
    'VoltageDropConfig',
    'FillAdjustmentTable',
    'FillConfig',
    'EngineConfig',
    'NEC_CONDUIT_FILL_TABLE',
    'TRAY_FILL_TABLE',
    'DEFAULT_CONFIG',
]

logger = logging.getLogger(__name__)


# =============================================================================
# FIELD VALIDATION
# =============================================================================

@dataclass
class ValidationConfig:
    """Limits and lookup tables for the cable field validator."""

    # Formats (part of the data contract, do not change for existing data)
    tag_pattern: str = r"^[A-Z]{2,4}-\d{3}$"
    location_pattern: str = r"^[A-Z0-9-]+$"
    default_tag_prefix: str = "CBL"

    # Voltage
    max_voltage: float = 50000.0

    # Cores
    min_cores: int = 1
    max_cores: int = 48
    multi_conductor_sizes: FrozenSet[str] = field(default_factory=lambda: frozenset({
        'Cat5e',
        'Cat6',
    }))

    # Length (feet)
    max_length: float = 5000.0
    long_direct_length: float = 300.0
    short_tray_length: float = 20.0
    direct_route_names: FrozenSet[str] = field(default_factory=lambda: frozenset({'Direct'}))
    tray_route_names: FrozenSet[str] = field(default_factory=lambda: frozenset({'Cable Tray'}))

    # Loading
    low_load_percentage: float = 10.0
    high_load_percentage: float = 90.0

    # Functions
    valid_functions: Tuple[str, ...] = (
        'Power',
        'Control',
        'Instrumentation',
        'Communication',
        'Signal',
        'Lighting',
        'Spare',
    )
    zero_voltage_functions: FrozenSet[str] = field(default_factory=lambda: frozenset({
        'Communication',
    }))

    # function -> cable types it cannot use
    incompatible_cable_types: Dict[str, FrozenSet[str]] = field(default_factory=lambda: {
        'Communication': frozenset({'XLPE', 'VFD', 'EPR'}),
        'Power': frozenset({'Cat5e', 'Cat6'}),
        'Instrumentation': frozenset({'VFD'}),
    })

    # Segregation class vs voltage
    elv_voltage_ceiling: float = 1000.0
    hv_voltage_floor: float = 50.0
    extra_low_voltage_classes: FrozenSet[str] = field(default_factory=lambda: frozenset({
        'ELV',
        'IS Signal',
        'Non-IS Signal',
        'Control Power 24VDC',
    }))
    high_voltage_classes: FrozenSet[str] = field(default_factory=lambda: frozenset({
        'HV',
        'Power 480VAC',
        'Power 600VAC',
    }))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'tag_pattern': self.tag_pattern,
            'location_pattern': self.location_pattern,
            'default_tag_prefix': self.default_tag_prefix,
            'max_voltage': self.max_voltage,
            'min_cores': self.min_cores,
            'max_cores': self.max_cores,
            'multi_conductor_sizes': sorted(self.multi_conductor_sizes),
            'max_length': self.max_length,
            'long_direct_length': self.long_direct_length,
            'short_tray_length': self.short_tray_length,
            'direct_route_names': sorted(self.direct_route_names),
            'tray_route_names': sorted(self.tray_route_names),
            'low_load_percentage': self.low_load_percentage,
            'high_load_percentage': self.high_load_percentage,
            'valid_functions': list(self.valid_functions),
            'zero_voltage_functions': sorted(self.zero_voltage_functions),
            'incompatible_cable_types': {
                k: sorted(v) for k, v in self.incompatible_cable_types.items()
            },
            'elv_voltage_ceiling': self.elv_voltage_ceiling,
            'hv_voltage_floor': self.hv_voltage_floor,
            'extra_low_voltage_classes': sorted(self.extra_low_voltage_classes),
            'high_voltage_classes': sorted(self.high_voltage_classes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationConfig":
        """Deserialize from dictionary."""
        data = dict(data)
        for key in (
            'multi_conductor_sizes',
            'direct_route_names',
            'tray_route_names',
            'zero_voltage_functions',
            'extra_low_voltage_classes',
            'high_voltage_classes',
        ):
            if key in data:
                data[key] = frozenset(data[key])
        if 'valid_functions' in data:
            data['valid_functions'] = tuple(data['valid_functions'])
        if 'incompatible_cable_types' in data:
            data['incompatible_cable_types'] = {
                k: frozenset(v) for k, v in data['incompatible_cable_types'].items()
            }

        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in data.items() if k in known_fields})


# =============================================================================
# VOLTAGE DROP
# =============================================================================

@dataclass
class VoltageDropConfig:
    """NEC voltage-drop limits and severity bands (percent)."""

    branch_limit_pct: float = 3.0
    feeder_limit_pct: float = 2.5

    good_max_pct: float = 3.0
    warning_max_pct: float = 5.0

    default_power_factor: float = 0.85

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branch_limit_pct': self.branch_limit_pct,
            'feeder_limit_pct': self.feeder_limit_pct,
            'good_max_pct': self.good_max_pct,
            'warning_max_pct': self.warning_max_pct,
            'default_power_factor': self.default_power_factor,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VoltageDropConfig":
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in data.items() if k in known_fields})


# =============================================================================
# FILL RULES
# =============================================================================

@dataclass(frozen=True)
class FillAdjustmentTable:
    """
    Allowable fill by cable count, in the style of NEC Chapter 9 Table 1.

    A container's fill percentage is expressed on the reference scale
    (the multi-cable allowance), so each cable's area is multiplied by
    reference_fill_pct / allowable_fill(count). With the NEC defaults a
    single cable filling 53% of a conduit reads as 40%.
    """

    reference_fill_pct: float = 40.0
    allowable_fill_by_count: Tuple[Tuple[int, float], ...] = ((1, 53.0), (2, 31.0))
    default_allowable_fill_pct: float = 40.0

    def allowable_fill(self, cable_count: int) -> float:
        """Allowable fill percentage for a number of cables."""
        if cable_count < 1:
            raise InvalidCalculationInputError(
                f"Invalid conductor count: {cable_count}",
                cable_count=cable_count,
            )
        for count, pct in self.allowable_fill_by_count:
            if count == cable_count:
                return pct
        return self.default_allowable_fill_pct

    def adjustment_factor(self, cable_count: int) -> float:
        """Multiplier applied to each cable's area."""
        return self.reference_fill_pct / self.allowable_fill(cable_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'reference_fill_pct': self.reference_fill_pct,
            'allowable_fill_by_count': [list(p) for p in self.allowable_fill_by_count],
            'default_allowable_fill_pct': self.default_allowable_fill_pct,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FillAdjustmentTable":
        return cls(
            reference_fill_pct=data.get('reference_fill_pct', 40.0),
            allowable_fill_by_count=tuple(
                (int(c), float(p)) for c, p in data.get('allowable_fill_by_count', ())
            ),
            default_allowable_fill_pct=data.get('default_allowable_fill_pct', 40.0),
        )


NEC_CONDUIT_FILL_TABLE = FillAdjustmentTable()

# Trays are filled by plain area ratio regardless of count
TRAY_FILL_TABLE = FillAdjustmentTable(
    reference_fill_pct=50.0,
    allowable_fill_by_count=(),
    default_allowable_fill_pct=50.0,
)


@dataclass
class FillConfig:
    """Fill calculation rules."""

    conduit_table: FillAdjustmentTable = NEC_CONDUIT_FILL_TABLE
    tray_table: FillAdjustmentTable = TRAY_FILL_TABLE

    conduit_max_fill_pct: float = 40.0
    tray_max_fill_pct: float = 50.0

    # Status bands as fractions of max fill
    warning_fraction: float = 0.70
    critical_fraction: float = 0.90

    # Compliance advisories
    emt_advisory_pct: float = 35.0
    perforated_advisory_pct: float = 45.0

    # Tag prefix conventions (matched case-insensitively)
    conduit_tag_patterns: Tuple[str, ...] = DEFAULT_CONDUIT_PATTERNS
    tray_tag_patterns: Tuple[str, ...] = DEFAULT_TRAY_PATTERNS

    def to_dict(self) -> Dict[str, Any]:
        return {
            'conduit_table': self.conduit_table.to_dict(),
            'tray_table': self.tray_table.to_dict(),
            'conduit_max_fill_pct': self.conduit_max_fill_pct,
            'tray_max_fill_pct': self.tray_max_fill_pct,
            'warning_fraction': self.warning_fraction,
            'critical_fraction': self.critical_fraction,
            'emt_advisory_pct': self.emt_advisory_pct,
            'perforated_advisory_pct': self.perforated_advisory_pct,
            'conduit_tag_patterns': list(self.conduit_tag_patterns),
            'tray_tag_patterns': list(self.tray_tag_patterns),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FillConfig":
        data = dict(data)
        if 'conduit_table' in data:
            data['conduit_table'] = FillAdjustmentTable.from_dict(data['conduit_table'])
        if 'tray_table' in data:
            data['tray_table'] = FillAdjustmentTable.from_dict(data['tray_table'])
        for key in ('conduit_tag_patterns', 'tray_tag_patterns'):
            if key in data:
                data[key] = tuple(data[key])

        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in data.items() if k in known_fields})


# =============================================================================
# ENGINE CONFIGURATION
# =============================================================================

@dataclass
class EngineConfig:
    """Top-level configuration for a CableEngine instance."""

    validation: ValidationConfig = field(default_factory=ValidationConfig)
    voltage_drop: VoltageDropConfig = field(default_factory=VoltageDropConfig)
    fill: FillConfig = field(default_factory=FillConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'validation': self.validation.to_dict(),
            'voltage_drop': self.voltage_drop.to_dict(),
            'fill': self.fill.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        return cls(
            validation=ValidationConfig.from_dict(data.get('validation', {})),
            voltage_drop=VoltageDropConfig.from_dict(data.get('voltage_drop', {})),
            fill=FillConfig.from_dict(data.get('fill', {})),
        )


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

DEFAULT_CONFIG = EngineConfig()
