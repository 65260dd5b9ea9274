"""
tests/unit/test_fill_geometry.py - Tests for fill percentage and status.
"""

import math

import pytest

from cableway.config import FillAdjustmentTable, NEC_CONDUIT_FILL_TABLE, TRAY_FILL_TABLE
from cableway.core.enums import FillStatus
from cableway.core.models import Cable
from cableway.errors import FillCalculationError, InvalidCalculationInputError, MissingOuterDiameterError
from cableway.fill import (
    cable_area,
    calculate_fill_percentage,
    fill_status,
    get_nec_fill_factor,
)


def od(tag, diameter):
    return Cable(tag=tag, outer_diameter=diameter)


class TestNecFillFactor:
    """Test allowable fill by conductor count."""

    def test_single(self):
        assert get_nec_fill_factor(1) == 53

    def test_two(self):
        assert get_nec_fill_factor(2) == 31

    @pytest.mark.parametrize("count", [3, 5, 10])
    def test_three_or_more(self, count):
        assert get_nec_fill_factor(count) == 40

    @pytest.mark.parametrize("count", [0, -1])
    def test_invalid_count(self, count):
        with pytest.raises(InvalidCalculationInputError, match=f"Invalid conductor count: {count}"):
            get_nec_fill_factor(count)

    def test_custom_table(self):
        table = FillAdjustmentTable(allowable_fill_by_count=((1, 60.0),))
        assert get_nec_fill_factor(1, table) == 60.0
        assert table.adjustment_factor(1) == pytest.approx(40 / 60)


class TestCalculateFillPercentage:
    """Test the area-based fill formula."""

    def test_cable_area(self):
        assert cable_area(0.5) == pytest.approx(0.19635, abs=1e-5)

    def test_internal_area(self, conduit):
        assert conduit.internal_area == pytest.approx(0.8643, abs=1e-4)

    def test_single_cable(self, conduit):
        fill = calculate_fill_percentage(conduit, [od("C-001", 0.5)], NEC_CONDUIT_FILL_TABLE)
        expected = cable_area(0.5) * (40 / 53) / conduit.internal_area * 100
        assert fill == pytest.approx(expected)
        assert fill == pytest.approx(17.15, abs=0.01)

    def test_two_cables(self, conduit):
        fill = calculate_fill_percentage(
            conduit, [od("C-001", 0.5), od("C-002", 0.5)], NEC_CONDUIT_FILL_TABLE
        )
        assert fill == pytest.approx(58.63, abs=0.01)

    def test_three_cables_unadjusted(self, conduit):
        cables = [od("C-001", 0.25), od("C-002", 0.32), od("C-003", 0.45)]
        fill = calculate_fill_percentage(conduit, cables, NEC_CONDUIT_FILL_TABLE)
        raw = sum(cable_area(c.outer_diameter) for c in cables) / conduit.internal_area * 100
        assert fill == pytest.approx(raw)

    def test_tray_plain_ratio(self, tray):
        fill = calculate_fill_percentage(tray, [od("C-001", 1.0), od("C-002", 1.0)], TRAY_FILL_TABLE)
        assert fill == pytest.approx(2 * math.pi * 0.25 / 48 * 100)

    def test_no_cables(self, conduit):
        assert calculate_fill_percentage(conduit, [], NEC_CONDUIT_FILL_TABLE) == 0

    def test_missing_outer_diameter(self, conduit):
        with pytest.raises(
            MissingOuterDiameterError,
            match="Cable C-001 missing outer diameter for fill calculation",
        ):
            calculate_fill_percentage(conduit, [od("C-001", None)], NEC_CONDUIT_FILL_TABLE)

    def test_missing_geometry(self, conduit):
        conduit.internal_diameter = None
        with pytest.raises(FillCalculationError):
            calculate_fill_percentage(conduit, [od("C-001", 0.5)], NEC_CONDUIT_FILL_TABLE)

    def test_exactly_reproducible(self, conduit):
        cables = [od("C-001", 0.25), od("C-002", 0.32), od("C-003", 0.45)]
        first = calculate_fill_percentage(conduit, cables, NEC_CONDUIT_FILL_TABLE)
        second = calculate_fill_percentage(conduit, cables, NEC_CONDUIT_FILL_TABLE)
        assert first == second


class TestFillStatus:
    """Test status bands against max fill."""

    @pytest.mark.parametrize("pct,status", [
        (0.0, FillStatus.GOOD),
        (27.9, FillStatus.GOOD),
        (28.0, FillStatus.WARNING),
        (35.9, FillStatus.WARNING),
        (36.0, FillStatus.CRITICAL),
        (40.0, FillStatus.CRITICAL),
        (40.1, FillStatus.OVERFILLED),
    ])
    def test_conduit_bands(self, pct, status):
        assert fill_status(pct, 40.0) == status

    def test_tray_bands(self):
        assert fill_status(34.9, 50.0) == FillStatus.GOOD
        assert fill_status(50.5, 50.0) == FillStatus.OVERFILLED
