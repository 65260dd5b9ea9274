"""
tests/unit/test_voltage_drop.py - Tests for the voltage drop calculator.
"""

import pytest

from cableway.config import VoltageDropConfig
from cableway.core.enums import CircuitType, ConductorMaterial, VoltageDropSeverity
from cableway.core.models import Cable
from cableway.electrical import (
    VoltageDropCalculator,
    VoltageDropParams,
    VoltageDropResult,
)
from cableway.errors import InvalidCalculationInputError, UnsupportedConductorSizeError


@pytest.fixture
def calc():
    return VoltageDropCalculator()


def params(**overrides) -> VoltageDropParams:
    fields = dict(
        voltage=120.0,
        current=20.0,
        distance=100.0,
        conductor_size="12 AWG",
        material=ConductorMaterial.COPPER,
        power_factor=1.0,
    )
    fields.update(overrides)
    return VoltageDropParams(**fields)


# =============================================================================
# CALCULATION
# =============================================================================

class TestCalculateVoltageDrop:
    """Test the voltage drop formula."""

    def test_reference_circuit(self, calc):
        """120 V, 20 A, 100 ft of 12 AWG copper at unity power factor."""
        result = calc.calculate_voltage_drop_percentage(params())
        assert result.voltage_drop_volts == pytest.approx(8.0)
        assert result.voltage_drop_percentage == pytest.approx(6.67, abs=0.01)
        assert result.conductor_size == "12 AWG"
        assert result.resistance_ohms_per_kft == 2.0

    def test_default_power_factor(self, calc):
        result = calc.calculate_voltage_drop_percentage(params(power_factor=None))
        assert result.voltage_drop_volts == pytest.approx(8.0 * 0.85)

    def test_aluminum(self, calc):
        result = calc.calculate_voltage_drop_percentage(
            params(material=ConductorMaterial.ALUMINUM)
        )
        assert result.voltage_drop_volts == pytest.approx(12.8)

    def test_zero_current(self, calc):
        result = calc.calculate_voltage_drop_percentage(params(current=0))
        assert result.voltage_drop_percentage == 0.0

    def test_unsupported_size(self, calc):
        with pytest.raises(UnsupportedConductorSizeError):
            calc.calculate_voltage_drop_percentage(params(conductor_size="Cat6"))

    @pytest.mark.parametrize("overrides", [
        {"voltage": 0},
        {"voltage": -120},
        {"current": -1},
        {"distance": -10},
        {"power_factor": 0},
        {"power_factor": 1.2},
    ])
    def test_invalid_inputs(self, calc, overrides):
        with pytest.raises(InvalidCalculationInputError):
            calc.calculate_voltage_drop_percentage(params(**overrides))


# =============================================================================
# NEC LIMITS
# =============================================================================

class TestNecLimit:
    """Test NEC limit checks and the boundary convention."""

    def test_branch_exceeded(self, calc):
        assert calc.exceeds_nec_limit(VoltageDropResult(0.0, 3.5), "branch") is True

    def test_branch_within(self, calc):
        assert calc.exceeds_nec_limit(VoltageDropResult(0.0, 2.5), "branch") is False

    def test_branch_boundary_is_compliant(self, calc):
        assert calc.exceeds_nec_limit(3.0, CircuitType.BRANCH) is False
        assert calc.exceeds_nec_limit(3.0001, CircuitType.BRANCH) is True

    def test_feeder_boundary_is_compliant(self, calc):
        assert calc.exceeds_nec_limit(2.5, "feeder") is False
        assert calc.exceeds_nec_limit(2.51, "feeder") is True

    def test_circuit_type_case_insensitive(self, calc):
        assert calc.nec_limit("Feeder") == 2.5

    def test_configured_limits(self):
        calc = VoltageDropCalculator(config=VoltageDropConfig(branch_limit_pct=5.0))
        assert calc.exceeds_nec_limit(4.0, "branch") is False

    @pytest.mark.parametrize("pct,severity", [
        (1.0, VoltageDropSeverity.GOOD),
        (3.0, VoltageDropSeverity.GOOD),
        (4.0, VoltageDropSeverity.WARNING),
        (5.0, VoltageDropSeverity.WARNING),
        (5.1, VoltageDropSeverity.ERROR),
    ])
    def test_classify(self, calc, pct, severity):
        assert calc.classify(pct) == severity

    def test_compliance_status(self, calc):
        assert calc.compliance_status(2.0).startswith("Compliant")
        assert calc.compliance_status(6.0).startswith("Exceeds")


# =============================================================================
# SIZING
# =============================================================================

class TestRecommendConductorSize:
    """Test the upsizing scan."""

    def test_recommends_smallest_compliant_branch(self, calc):
        rec = calc.recommend_conductor_size(params(), "branch")
        assert rec.current_size == "12 AWG"
        assert rec.meets_nec_limit is False
        # 10 AWG gives 4.0%, 8 AWG 2.55%
        assert rec.recommended_size == "8 AWG"
        assert rec.recommended_meets_limit is True

    def test_feeder_needs_larger(self, calc):
        rec = calc.recommend_conductor_size(params(), "feeder")
        assert rec.recommended_size == "6 AWG"

    def test_already_compliant(self, calc):
        rec = calc.recommend_conductor_size(params(distance=10), "branch")
        assert rec.meets_nec_limit is True
        assert rec.recommended_size == rec.current_size

    def test_never_recommends_higher_resistance(self, calc):
        table = calc.conductor_table
        for size in table.sizes(ConductorMaterial.COPPER):
            rec = calc.recommend_conductor_size(params(conductor_size=size, distance=400))
            if not rec.meets_nec_limit:
                assert table.resistance(rec.recommended_size, ConductorMaterial.COPPER) <= \
                    table.resistance(rec.current_size, ConductorMaterial.COPPER)

    def test_falls_back_to_largest(self, calc):
        rec = calc.recommend_conductor_size(params(current=1000, distance=5000))
        assert rec.recommended_size == "1000 MCM"
        assert rec.recommended_meets_limit is False

    def test_minimum_conductor_size(self, calc):
        assert calc.minimum_conductor_size(120, 20, 100, power_factor=1.0) == "8 AWG"

    def test_minimum_conductor_size_impossible(self, calc):
        with pytest.raises(UnsupportedConductorSizeError):
            calc.minimum_conductor_size(120, 1000, 5000, power_factor=1.0)


class TestHelpers:
    """Test current_from_power and cable integration."""

    def test_single_phase_current(self):
        assert VoltageDropCalculator.current_from_power(1200, 120, power_factor=1.0) == pytest.approx(10.0)

    def test_three_phase_current(self):
        amps = VoltageDropCalculator.current_from_power(10000, 480, power_factor=1.0, phases=3)
        assert amps == pytest.approx(12.028, abs=0.001)

    def test_voltage_drop_for_cable(self, calc, valid_cable):
        updated = calc.voltage_drop_for_cable(valid_cable)
        # (2 x 150 / 1000) x 2.0 x 20 x 0.85 = 10.2 V of 480 V
        assert updated.voltage_drop_percentage == pytest.approx(2.125)
        assert valid_cable.voltage_drop_percentage is None

    def test_voltage_drop_for_cable_missing_current(self, calc):
        cable = Cable(tag="CBL-001", voltage=120, length=100, conductor_size="12 AWG")
        assert calc.voltage_drop_for_cable(cable) is None
