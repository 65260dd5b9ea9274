"""
cableway/validation/field_validator.py - Cable Field Validator

Stateless rule evaluation over a single cable record. Every rule runs on
every call, so one pass reports all field problems at once; nothing is
raised for bad data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import logging
import math
import re

from ..config import ValidationConfig
from ..core.models import Cable
from ..core.routes import RouteClassifier

__all__ = [
    'ValidationResult',
    'ValidationOptions',
    'CableFieldValidator',
    'ProjectValidationEntry',
    'ProjectValidationSummary',
]

logger = logging.getLogger(__name__)

_ASCII_DIGITS = re.compile(r"[0-9]+")


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class ValidationResult:
    """Field-keyed outcome of validating one cable."""

    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, str] = field(default_factory=dict)
    suggestions: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """True iff there are no errors; warnings never count."""
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary, omitting empty warnings/suggestions."""
        data: Dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": dict(self.errors),
        }
        if self.warnings:
            data["warnings"] = dict(self.warnings)
        if self.suggestions:
            data["suggestions"] = dict(self.suggestions)
        return data


@dataclass
class ValidationOptions:
    """Optional project context for validation."""
    existing_tags: Sequence[str] = ()
    existing_cables: Sequence[Cable] = ()
    suggest_tag: bool = False


@dataclass
class ProjectValidationEntry:
    """Validation result for one cable of a project."""
    index: int
    cable_tag: str
    result: ValidationResult


@dataclass
class ProjectValidationSummary:
    """Validation of every cable in a project against the others."""

    total_cables: int = 0
    error_count: int = 0
    warning_count: int = 0
    invalid_cables: int = 0
    entries: List[ProjectValidationEntry] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.invalid_cables == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cables": self.total_cables,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "invalid_cables": self.invalid_cables,
            "is_valid": self.is_valid,
            "results": [
                {"index": e.index, "tag": e.cable_tag, **e.result.to_dict()}
                for e in self.entries
            ],
        }


def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


# =============================================================================
# VALIDATOR
# =============================================================================

class CableFieldValidator:
    """
    Validates cable records field by field.

    Usage:
        validator = CableFieldValidator()
        result = validator.validate(cable, ValidationOptions(
            existing_tags=["CBL-001", "CBL-002"], suggest_tag=True,
        ))
        if not result.is_valid:
            show(result.errors)
    """

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        classifier: Optional[RouteClassifier] = None,
    ):
        self.config = config or ValidationConfig()
        self.classifier = classifier or RouteClassifier()
        self._tag_re = re.compile(self.config.tag_pattern, re.ASCII)
        self._location_re = re.compile(self.config.location_pattern, re.ASCII)

    def validate(
        self,
        cable: Cable,
        options: Optional[ValidationOptions] = None,
    ) -> ValidationResult:
        """Run every field rule and aggregate the outcome."""
        options = options or ValidationOptions()
        result = ValidationResult()

        self._check_tag(cable, options, result)
        self._check_description(cable, result)
        self._check_voltage(cable, result)
        self._check_current(cable, result)
        self._check_function(cable, result)
        self._check_cable_type(cable, result)
        self._check_conductor_size(cable, result)
        self._check_cores(cable, result)
        self._check_locations(cable, result)
        self._check_route(cable, result)
        self._check_length(cable, result)
        self._check_percentages(cable, result)
        self._check_segregation_class(cable, result)
        self._check_context(cable, options, result)

        if options.suggest_tag:
            suggestion = self.suggest_tag(cable.tag, options.existing_tags)
            if suggestion:
                result.suggestions["tag"] = suggestion

        if not result.is_valid:
            logger.debug(f"Cable '{cable.tag}' failed validation: {sorted(result.errors)}")
        return result

    def validate_project(self, cables: Sequence[Cable]) -> ProjectValidationSummary:
        """Validate each cable with the rest of the project as context."""
        summary = ProjectValidationSummary(total_cables=len(cables))

        for index, cable in enumerate(cables):
            others = [c for i, c in enumerate(cables) if i != index]
            result = self.validate(cable, ValidationOptions(
                existing_tags=[c.tag for c in others if c.tag],
                existing_cables=others,
            ))
            summary.entries.append(ProjectValidationEntry(index, cable.tag, result))
            summary.error_count += len(result.errors)
            summary.warning_count += len(result.warnings)
            if not result.is_valid:
                summary.invalid_cables += 1

        logger.info(
            f"Validated {summary.total_cables} cables: {summary.error_count} errors, "
            f"{summary.warning_count} warnings"
        )
        return summary

    # -------------------------------------------------------------------------
    # Field rules
    # -------------------------------------------------------------------------

    def _check_tag(self, cable: Cable, options: ValidationOptions, result: ValidationResult) -> None:
        if _blank(cable.tag):
            result.errors["tag"] = "Tag is required"
        elif not self._tag_re.fullmatch(cable.tag):
            result.errors["tag"] = "Invalid format. Use format like CBL-001, PWR-001"
        elif cable.tag in options.existing_tags:
            result.errors["tag"] = "Tag already exists"

    def _check_description(self, cable: Cable, result: ValidationResult) -> None:
        if _blank(cable.description):
            result.errors["description"] = "Description is required"

    def _check_voltage(self, cable: Cable, result: ValidationResult) -> None:
        voltage = cable.voltage
        if voltage is None:
            result.errors["voltage"] = "Voltage is required"
        elif voltage < 0:
            result.errors["voltage"] = "Voltage must be positive"
        elif voltage > self.config.max_voltage:
            result.errors["voltage"] = (
                f"Voltage exceeds maximum allowed ({self.config.max_voltage / 1000:g}kV)"
            )
        elif voltage == 0 and cable.function not in self.config.zero_voltage_functions:
            result.warnings["voltage"] = "Zero voltage is unusual for non-communication cables"

    def _check_current(self, cable: Cable, result: ValidationResult) -> None:
        current = cable.current
        if current is None:
            return
        if not isinstance(current, (int, float)) or math.isnan(current):
            result.errors["current"] = "Current must be a number"
        elif current < 0:
            result.errors["current"] = "Current cannot be negative"

    def _check_function(self, cable: Cable, result: ValidationResult) -> None:
        if _blank(cable.function):
            result.errors["function"] = "Function is required"
        elif cable.function not in self.config.valid_functions:
            result.errors["function"] = "Invalid function"

    def _check_cable_type(self, cable: Cable, result: ValidationResult) -> None:
        if _blank(cable.cable_type):
            result.errors["cable_type"] = "Cable type is required"
            return

        incompatible = self.config.incompatible_cable_types.get(cable.function or "", frozenset())
        if cable.cable_type in incompatible:
            result.errors["cable_type"] = (
                f"Cable type {cable.cable_type} is incompatible with {cable.function} function"
            )

    def _check_conductor_size(self, cable: Cable, result: ValidationResult) -> None:
        if _blank(cable.conductor_size):
            result.errors["conductor_size"] = "Size is required"

    def _check_cores(self, cable: Cable, result: ValidationResult) -> None:
        cores = cable.cores
        if cores is None:
            result.errors["cores"] = "Core count is required"
        elif cores < self.config.min_cores:
            result.errors["cores"] = f"Core count must be at least {self.config.min_cores}"
        elif cores > self.config.max_cores:
            result.errors["cores"] = f"Core count exceeds maximum ({self.config.max_cores})"
        elif cores == 1:
            multi = self.config.multi_conductor_sizes
            kind = cable.conductor_size if cable.conductor_size in multi else cable.cable_type
            if kind in multi:
                result.warnings["cores"] = f"{kind} cables are typically multi-conductor (8 cores)"

    def _check_locations(self, cable: Cable, result: ValidationResult) -> None:
        for name, value, label in (
            ("from_location", cable.from_location, "From"),
            ("to_location", cable.to_location, "To"),
        ):
            if _blank(value):
                result.errors[name] = f"{label} location is required"
            elif not self._location_re.fullmatch(value):
                result.errors[name] = (
                    "Invalid location format. Use uppercase letters, numbers, and hyphens only"
                )

        if (
            not _blank(cable.from_location)
            and not _blank(cable.to_location)
            and cable.from_location == cable.to_location
        ):
            result.errors["to_location"] = "From and To locations cannot be the same"

    def _check_route(self, cable: Cable, result: ValidationResult) -> None:
        if not cable.route:
            result.errors["route"] = "Route is required"

    def _check_length(self, cable: Cable, result: ValidationResult) -> None:
        length = cable.length
        if length is None:
            return

        if length <= 0:
            result.errors["length"] = "Length must be greater than 0"
        elif length > self.config.max_length:
            result.errors["length"] = (
                f"Length exceeds practical maximum ({self.config.max_length:g} ft)"
            )
        elif length > self.config.long_direct_length and self._is_direct(cable):
            result.warnings["length"] = "Long cable with direct route may need intermediate support"
        elif length < self.config.short_tray_length and self._uses_tray(cable):
            result.warnings["length"] = "Short cable in cable tray may be unnecessary"

    def _check_percentages(self, cable: Cable, result: ValidationResult) -> None:
        spare = cable.spare_percentage
        if spare is not None:
            if spare < 0:
                result.errors["spare_percentage"] = "Spare percentage cannot be negative"
            elif spare > 100:
                result.errors["spare_percentage"] = "Spare percentage cannot exceed 100%"

        load = cable.load_percentage
        if load is not None:
            if load < 0:
                result.errors["load_percentage"] = "Load percentage cannot be negative"
            elif load > 100:
                result.errors["load_percentage"] = "Load percentage cannot exceed 100%"
            elif load < self.config.low_load_percentage:
                result.warnings["load_percentage"] = "Load percentage seems unusually low"
            elif load > self.config.high_load_percentage:
                result.warnings["load_percentage"] = "High load percentage - consider larger cable"

    def _check_segregation_class(self, cable: Cable, result: ValidationResult) -> None:
        seg_class = cable.segregation_class
        if _blank(seg_class):
            result.errors["segregation_class"] = "Segregation class is required"
            return

        voltage = cable.voltage
        if voltage is None:
            return
        if voltage > self.config.elv_voltage_ceiling and seg_class in self.config.extra_low_voltage_classes:
            result.errors["segregation_class"] = (
                f"High voltage incompatible with {seg_class} segregation"
            )
        elif voltage < self.config.hv_voltage_floor and seg_class in self.config.high_voltage_classes:
            result.warnings["segregation_class"] = "Consider ELV segregation for low voltage cables"

    def _check_context(self, cable: Cable, options: ValidationOptions, result: ValidationResult) -> None:
        if not options.existing_cables or _blank(cable.from_location) or _blank(cable.to_location):
            return

        for existing in options.existing_cables:
            if existing is cable or (cable.tag and existing.tag == cable.tag):
                continue
            if (
                existing.from_location == cable.from_location
                and existing.to_location == cable.to_location
            ):
                result.warnings["route"] = (
                    f"Similar cable route exists ({existing.tag or 'untagged'}) - "
                    f"check if routing is intentional"
                )
                break

    # -------------------------------------------------------------------------
    # Route helpers
    # -------------------------------------------------------------------------

    def _is_direct(self, cable: Cable) -> bool:
        return len(cable.route) == 1 and cable.route[0] in self.config.direct_route_names

    def _uses_tray(self, cable: Cable) -> bool:
        return any(
            tag in self.config.tray_route_names or self.classifier.is_tray(tag)
            for tag in cable.route
        )

    # -------------------------------------------------------------------------
    # Tag suggestion
    # -------------------------------------------------------------------------

    def tag_prefix(self, tag: Optional[str]) -> str:
        """Prefix of a tag ("PWR" for "PWR-012"), or the default prefix."""
        if tag:
            match = re.match(r"([A-Z]{2,4})-", tag, re.ASCII)
            if match:
                return match.group(1)
        return self.config.default_tag_prefix

    def suggest_tag(self, tag: Optional[str], existing_tags: Sequence[str]) -> str:
        """
        Lowest free tag number for the cable's prefix.

        Used numbers are scanned in ascending order and the first gap wins:
        CBL-001, CBL-002, CBL-004 -> CBL-003.
        """
        prefix = self.tag_prefix(tag)
        marker = f"{prefix}-"

        used = set()
        for existing in existing_tags:
            if not existing.startswith(marker):
                continue
            number = existing[len(marker):]
            if _ASCII_DIGITS.fullmatch(number):
                used.add(int(number))

        suggested = 1
        for number in sorted(used):
            if number == suggested:
                suggested += 1
            elif number > suggested:
                break

        return f"{prefix}-{suggested:03d}"
