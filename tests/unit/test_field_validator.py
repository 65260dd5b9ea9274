"""
tests/unit/test_field_validator.py - Tests for the cable field validator.
"""

import pytest

from cableway.config import ValidationConfig
from cableway.core.models import Cable
from cableway.validation import (
    CableFieldValidator,
    ValidationOptions,
    ValidationResult,
)


@pytest.fixture
def validator():
    return CableFieldValidator()


# =============================================================================
# RESULT
# =============================================================================

class TestValidationResult:
    """Test ValidationResult semantics."""

    def test_valid_without_errors(self):
        result = ValidationResult(warnings={"voltage": "odd"})
        assert result.is_valid is True

    def test_invalid_with_errors(self):
        result = ValidationResult(errors={"tag": "Tag is required"})
        assert result.is_valid is False

    def test_to_dict_omits_empty_maps(self):
        data = ValidationResult().to_dict()
        assert data == {"isValid": True, "errors": {}}

    def test_to_dict_includes_warnings(self):
        data = ValidationResult(warnings={"cores": "x"}).to_dict()
        assert data["warnings"] == {"cores": "x"}
        assert "suggestions" not in data


# =============================================================================
# FIELD RULES
# =============================================================================

class TestValidCable:
    """A fully specified cable passes."""

    def test_valid_cable(self, validator, valid_cable):
        result = validator.validate(valid_cable)
        assert result.is_valid
        assert result.errors == {}
        assert result.warnings == {}


class TestAllRulesEvaluated:
    """Every field is checked in one pass."""

    def test_blank_cable_reports_every_required_field(self, validator):
        result = validator.validate(Cable(tag="", voltage=-100))

        assert result.is_valid is False
        for key in (
            "tag",
            "description",
            "voltage",
            "function",
            "cable_type",
            "conductor_size",
            "cores",
            "from_location",
            "to_location",
            "route",
            "segregation_class",
        ):
            assert key in result.errors, key
        assert result.errors["voltage"] == "Voltage must be positive"


class TestTagRule:
    """Test tag format and uniqueness."""

    @pytest.mark.parametrize("tag", ["CBL-001", "PW-123", "INST-999"])
    def test_accepts_valid_formats(self, validator, make_cable, tag):
        assert "tag" not in validator.validate(make_cable(tag=tag)).errors

    @pytest.mark.parametrize("tag", ["cbl-001", "C-001", "CABLE-001", "CBL-01", "CBL001", "CBL-0001"])
    def test_rejects_invalid_formats(self, validator, make_cable, tag):
        result = validator.validate(make_cable(tag=tag))
        assert "Invalid format" in result.errors["tag"]

    @pytest.mark.parametrize("tag", ["CBL-001\n", "CBL-\u0661\u0662\u0663", "CBL-\uff10\uff10\uff11"])
    def test_rejects_trailing_newline_and_non_ascii_digits(self, validator, make_cable, tag):
        result = validator.validate(make_cable(tag=tag))
        assert "Invalid format" in result.errors["tag"]

    def test_rejects_existing_tag(self, validator, make_cable):
        result = validator.validate(
            make_cable(tag="CBL-002"),
            ValidationOptions(existing_tags=["CBL-001", "CBL-002"]),
        )
        assert result.errors["tag"] == "Tag already exists"


class TestCurrentRule:
    """Test load current rule."""

    def test_negative_current(self, validator, make_cable):
        result = validator.validate(make_cable(current=-5.0))
        assert result.errors["current"] == "Current cannot be negative"

    def test_nan_current(self, validator, make_cable):
        result = validator.validate(make_cable(current=float("nan")))
        assert result.errors["current"] == "Current must be a number"

    @pytest.mark.parametrize("current", [None, 0, 0.02])
    def test_accepted(self, validator, make_cable, current):
        assert "current" not in validator.validate(make_cable(current=current)).errors


class TestVoltageRule:
    """Test voltage limits."""

    def test_negative_voltage(self, validator, make_cable):
        assert validator.validate(make_cable(voltage=-1)).errors["voltage"] == "Voltage must be positive"

    def test_voltage_above_maximum(self, validator, make_cable):
        result = validator.validate(make_cable(voltage=50001))
        assert "exceeds maximum" in result.errors["voltage"]

    def test_maximum_voltage_allowed(self, validator, make_cable):
        result = validator.validate(make_cable(voltage=50000, segregation_class="HV"))
        assert "voltage" not in result.errors

    def test_zero_voltage_warns_for_power(self, validator, make_cable):
        result = validator.validate(make_cable(voltage=0, segregation_class="ELV"))
        assert "voltage" not in result.errors
        assert "voltage" in result.warnings
        assert result.is_valid

    def test_zero_voltage_fine_for_communication(self, validator, make_cable):
        result = validator.validate(make_cable(
            voltage=0, function="Communication", cable_type="Cat6", cores=8,
            segregation_class="Non-IS Signal",
        ))
        assert "voltage" not in result.warnings


class TestFunctionAndTypeRules:
    """Test function validity and cable type compatibility."""

    def test_unknown_function(self, validator, make_cable):
        assert validator.validate(make_cable(function="Heating")).errors["function"] == "Invalid function"

    @pytest.mark.parametrize("function,cable_type", [
        ("Communication", "XLPE"),
        ("Communication", "VFD"),
        ("Communication", "EPR"),
        ("Power", "Cat5e"),
        ("Power", "Cat6"),
        ("Instrumentation", "VFD"),
    ])
    def test_incompatible_types(self, validator, make_cable, function, cable_type):
        result = validator.validate(make_cable(function=function, cable_type=cable_type))
        assert "incompatible" in result.errors["cable_type"]

    def test_compatible_type(self, validator, make_cable):
        result = validator.validate(make_cable(function="Control", cable_type="PVC"))
        assert "cable_type" not in result.errors


class TestCoresRule:
    """Test core count limits."""

    def test_zero_cores(self, validator, make_cable):
        assert "at least" in validator.validate(make_cable(cores=0)).errors["cores"]

    def test_too_many_cores(self, validator, make_cable):
        assert "exceeds maximum" in validator.validate(make_cable(cores=49)).errors["cores"]

    def test_limits_inclusive(self, validator, make_cable):
        assert "cores" not in validator.validate(make_cable(cores=1)).errors
        assert "cores" not in validator.validate(make_cable(cores=48)).errors

    def test_single_core_multi_conductor_warns(self, validator, make_cable):
        result = validator.validate(make_cable(
            function="Communication", cable_type="Cat6", conductor_size="Cat6",
            cores=1, voltage=0, segregation_class="Non-IS Signal",
        ))
        assert "cores" in result.warnings
        assert result.is_valid


class TestLocationRules:
    """Test from/to location rules."""

    def test_same_locations(self, validator, make_cable):
        result = validator.validate(make_cable(from_location="MCC-1", to_location="MCC-1"))
        assert result.errors["to_location"] == "From and To locations cannot be the same"

    def test_lowercase_location(self, validator, make_cable):
        result = validator.validate(make_cable(from_location="mcc-1"))
        assert "Invalid location format" in result.errors["from_location"]

    @pytest.mark.parametrize("location", ["MCC-1\n", "MCC-\u0661"])
    def test_rejects_trailing_newline_and_non_ascii(self, validator, make_cable, location):
        result = validator.validate(make_cable(from_location=location))
        assert "Invalid location format" in result.errors["from_location"]

    def test_missing_location(self, validator, make_cable):
        result = validator.validate(make_cable(to_location=None))
        assert result.errors["to_location"] == "To location is required"


class TestLengthRule:
    """Test length limits and route-related warnings."""

    def test_zero_length(self, validator, make_cable):
        assert validator.validate(make_cable(length=0)).errors["length"] == "Length must be greater than 0"

    def test_length_above_maximum(self, validator, make_cable):
        assert "length" in validator.validate(make_cable(length=5001)).errors

    def test_maximum_length_allowed(self, validator, make_cable):
        assert "length" not in validator.validate(make_cable(length=5000)).errors

    def test_length_optional(self, validator, make_cable):
        assert "length" not in validator.validate(make_cable(length=None)).errors

    def test_long_direct_route_warns(self, validator, make_cable):
        result = validator.validate(make_cable(length=301, route="Direct"))
        assert "intermediate support" in result.warnings["length"]

    def test_short_tray_route_warns(self, validator, make_cable):
        result = validator.validate(make_cable(length=10, route="C-01,T-02"))
        assert "cable tray" in result.warnings["length"]

    def test_short_cable_tray_literal_warns(self, validator, make_cable):
        result = validator.validate(make_cable(length=10, route="Cable Tray"))
        assert "length" in result.warnings

    def test_short_conduit_route_no_warning(self, validator, make_cable):
        result = validator.validate(make_cable(length=10, route="C-01"))
        assert "length" not in result.warnings


class TestPercentageRules:
    """Test spare and load percentage ranges."""

    @pytest.mark.parametrize("value", [0, 50, 100])
    def test_spare_bounds_inclusive(self, validator, make_cable, value):
        assert "spare_percentage" not in validator.validate(make_cable(spare_percentage=value)).errors

    @pytest.mark.parametrize("value", [-1, 101])
    def test_spare_out_of_range(self, validator, make_cable, value):
        assert "spare_percentage" in validator.validate(make_cable(spare_percentage=value)).errors

    def test_load_out_of_range(self, validator, make_cable):
        assert "load_percentage" in validator.validate(make_cable(load_percentage=120)).errors

    def test_low_load_warns(self, validator, make_cable):
        result = validator.validate(make_cable(load_percentage=5))
        assert "unusually low" in result.warnings["load_percentage"]

    def test_high_load_warns(self, validator, make_cable):
        result = validator.validate(make_cable(load_percentage=95))
        assert "larger cable" in result.warnings["load_percentage"]
        assert result.is_valid


class TestSegregationVoltageRule:
    """Test segregation class against voltage."""

    def test_elv_class_high_voltage(self, validator, make_cable):
        result = validator.validate(make_cable(voltage=4160, segregation_class="ELV"))
        assert "incompatible with ELV" in result.errors["segregation_class"]

    def test_hv_class_low_voltage(self, validator, make_cable):
        result = validator.validate(make_cable(voltage=24, segregation_class="HV"))
        assert "segregation_class" in result.warnings
        assert "segregation_class" not in result.errors


class TestContextChecks:
    """Test checks against existing cables."""

    def test_duplicate_endpoints_warn(self, validator, make_cable):
        existing = make_cable(tag="CBL-002")
        result = validator.validate(
            make_cable(tag="CBL-003"),
            ValidationOptions(existing_cables=[existing]),
        )
        assert "CBL-002" in result.warnings["route"]
        assert result.is_valid

    def test_same_tag_is_not_duplicate_route(self, validator, make_cable):
        result = validator.validate(
            make_cable(),
            ValidationOptions(existing_cables=[make_cable()]),
        )
        assert "route" not in result.warnings

    def test_validate_project(self, validator, make_cable):
        cables = [
            make_cable(tag="CBL-001"),
            make_cable(tag="CBL-001", to_location="P-102"),
            make_cable(tag="CBL-002", to_location="P-103", load_percentage=95),
        ]
        summary = validator.validate_project(cables)

        assert summary.total_cables == 3
        assert summary.invalid_cables == 2  # both CBL-001 collide
        assert summary.warning_count == 1
        assert summary.is_valid is False
        assert summary.to_dict()["results"][2]["isValid"] is True


# =============================================================================
# TAG SUGGESTION
# =============================================================================

class TestTagSuggestion:
    """Test suggest_tag."""

    def test_fills_first_gap(self, validator):
        assert validator.suggest_tag("CBL-010", ["CBL-001", "CBL-002", "CBL-004"]) == "CBL-003"

    def test_next_after_contiguous(self, validator):
        assert validator.suggest_tag("CBL-010", ["CBL-001", "CBL-002"]) == "CBL-003"

    def test_ignores_other_prefixes(self, validator):
        assert validator.suggest_tag("PWR-005", ["CBL-001", "PWR-002"]) == "PWR-001"

    def test_default_prefix(self, validator):
        assert validator.suggest_tag("", ["CBL-001"]) == "CBL-002"

    def test_empty_existing(self, validator):
        assert validator.suggest_tag("INST-001", []) == "INST-001"

    def test_suggestion_in_result(self, validator, make_cable):
        result = validator.validate(
            make_cable(tag="CBL-002"),
            ValidationOptions(existing_tags=["CBL-001", "CBL-002"], suggest_tag=True),
        )
        assert result.suggestions["tag"] == "CBL-003"
        # never applied
        assert result.errors["tag"] == "Tag already exists"

    def test_ignores_non_ascii_numbers(self, validator):
        assert validator.suggest_tag("CBL-009", ["CBL-\u0660\u0660\u0661"]) == "CBL-001"

    def test_prefix_requires_ascii_letters(self, validator):
        assert validator.tag_prefix("PWR-001") == "PWR"
        assert validator.tag_prefix("pwr-001") == "CBL"

    def test_custom_default_prefix(self):
        validator = CableFieldValidator(ValidationConfig(default_tag_prefix="W"))
        assert validator.suggest_tag(None, []) == "W-001"
