"""
cableway/segregation/validator.py - Segregation Validator

Pairwise compatibility check of the cables sharing one routing container.
Validation never raises for bad data; unknown classes are logged and
checked using whatever the other class declares.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import hashlib
import logging
import threading

from ..core.enums import SegregationCategory, ViolationSeverity, ViolationType
from ..core.index import RouteIndex
from ..core.models import Cable, RoutingContainer
from .classes import SegregationClassDefinition, SegregationClassRegistry, SegregationRules

__all__ = [
    'SegregationViolation',
    'ViolationOverride',
    'SegregationValidationResult',
    'ConduitCables',
    'ConduitSegregationResult',
    'SegregationReport',
    'SegregationValidator',
    'violation_id',
]

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class SegregationViolation:
    """
    One incompatible pair of cables.

    `id` is derived from the violation type, the cable tags and the
    container tag, so the same pair produces the same id on every run.
    """

    id: str
    type: ViolationType
    severity: ViolationSeverity
    cables: Tuple[str, str]
    conduit_tag: Optional[str] = None
    message: str = ""
    classes: Tuple[str, str] = ("", "")
    overridden: bool = False

    @property
    def is_error(self) -> bool:
        return self.severity == ViolationSeverity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "cables": list(self.cables),
            "conduit_tag": self.conduit_tag,
            "message": self.message,
            "classes": list(self.classes),
            "overridden": self.overridden,
        }


@dataclass(frozen=True)
class ViolationOverride:
    """Engineering approval recorded against a violation id."""
    violation_id: str
    justification: str
    approved_by: str
    date: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "violation_id": self.violation_id,
            "justification": self.justification,
            "approved_by": self.approved_by,
            "date": self.date.isoformat(),
        }


@dataclass
class SegregationValidationResult:
    """Outcome of validating one group of cables."""

    is_valid: bool = True
    violations: List[SegregationViolation] = field(default_factory=list)
    overrides: List[str] = field(default_factory=list)

    @property
    def errors(self) -> List[SegregationViolation]:
        return [v for v in self.violations if v.is_error]

    @property
    def warnings(self) -> List[SegregationViolation]:
        return [v for v in self.violations if not v.is_error]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "violations": [v.to_dict() for v in self.violations],
            "overrides": list(self.overrides),
        }


@dataclass
class ConduitCables:
    """Cables sharing one container, as handed to the report."""
    tag: str
    cables: Sequence[Cable] = ()


@dataclass
class ConduitSegregationResult:
    conduit_tag: str
    is_valid: bool
    violations: List[SegregationViolation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conduit_tag": self.conduit_tag,
            "is_valid": self.is_valid,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass
class SegregationReport:
    """Per-container segregation report."""

    total_conduits: int = 0
    violation_count: int = 0
    error_count: int = 0
    warning_count: int = 0
    conduit_violations: List[ConduitSegregationResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return all(c.is_valid for c in self.conduit_violations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_conduits": self.total_conduits,
            "violation_count": self.violation_count,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "is_valid": self.is_valid,
            "conduit_violations": [c.to_dict() for c in self.conduit_violations],
        }


ConduitLike = Union[ConduitCables, Tuple[str, Sequence[Cable]]]


def violation_id(
    violation_type: ViolationType,
    cable_tags: Iterable[str],
    conduit_tag: Optional[str] = None,
) -> str:
    """Stable id for a violation."""
    key = "|".join([
        violation_type.value,
        ",".join(sorted(cable_tags)),
        conduit_tag or "",
    ])
    return "SEG-" + hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


# =============================================================================
# VALIDATOR
# =============================================================================

class SegregationValidator:
    """
    Validates segregation between cables sharing a container.

    Usage:
        validator = SegregationValidator()
        result = validator.validate_cable_segregation(cables_in_c01, conduit_tag="C-01")
        for v in result.violations:
            print(v.severity.value, v.type.value, v.cables)
    """

    def __init__(self, registry: Optional[SegregationClassRegistry] = None):
        self.registry = registry or SegregationClassRegistry()
        self._overrides: Dict[str, ViolationOverride] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_cable_segregation(
        self,
        cables: Sequence[Cable],
        override_ids: Optional[Iterable[str]] = None,
        conduit_tag: Optional[str] = None,
    ) -> SegregationValidationResult:
        """
        Check every unordered pair of cables.

        Overridden violations are still reported (flagged and listed under
        `overrides`) but do not count against `is_valid`. Warnings never do.
        """
        override_set = set(override_ids or ())
        result = SegregationValidationResult()

        classified = [c for c in cables if c.segregation_class]
        self._log_unknown_classes(classified)

        for cable_a, cable_b in combinations(classified, 2):
            violation = self._check_pair(cable_a, cable_b, conduit_tag)
            if violation is None:
                continue
            if violation.id in override_set:
                violation.overridden = True
                result.overrides.append(violation.id)
            result.violations.append(violation)

        result.is_valid = not any(v.is_error and not v.overridden for v in result.violations)
        return result

    def _log_unknown_classes(self, cables: Sequence[Cable]) -> None:
        unknown = sorted({
            c.segregation_class for c in cables if c.segregation_class not in self.registry
        })
        for name in unknown:
            logger.warning(f"Unknown segregation class '{name}', checking against known classes only")

    def _check_pair(
        self,
        cable_a: Cable,
        cable_b: Cable,
        conduit_tag: Optional[str],
    ) -> Optional[SegregationViolation]:
        class_a, class_b = cable_a.segregation_class, cable_b.segregation_class

        if self.registry.cannot_mix(class_a, class_b):
            severity = ViolationSeverity.ERROR
        elif self.registry.warn_mix(class_a, class_b):
            severity = ViolationSeverity.WARNING
        else:
            return None

        violation_type = self._violation_type(class_a, class_b)
        tags = (cable_a.tag, cable_b.tag)
        return SegregationViolation(
            id=violation_id(violation_type, tags, conduit_tag),
            type=violation_type,
            severity=severity,
            cables=tags,
            conduit_tag=conduit_tag,
            message=self._message(violation_type, severity, class_a, class_b),
            classes=(class_a, class_b),
        )

    def _violation_type(self, class_a: str, class_b: str) -> ViolationType:
        categories = {self.registry.category_of(class_a), self.registry.category_of(class_b)}

        if SegregationCategory.INTRINSICALLY_SAFE in categories:
            return ViolationType.IS_SEPARATION
        if categories == {SegregationCategory.POWER, SegregationCategory.SIGNAL}:
            return ViolationType.POWER_SIGNAL_SEPARATION
        if categories in (
            {SegregationCategory.POWER},
            {SegregationCategory.POWER, SegregationCategory.CONTROL_POWER},
        ):
            return ViolationType.VOLTAGE_LEVEL_SEPARATION
        if categories == {SegregationCategory.CONTROL_POWER, SegregationCategory.SIGNAL}:
            return ViolationType.LOW_VOLTAGE_SIGNAL_MIX
        return ViolationType.CLASS_SEPARATION

    @staticmethod
    def _message(
        violation_type: ViolationType,
        severity: ViolationSeverity,
        class_a: str,
        class_b: str,
    ) -> str:
        if violation_type == ViolationType.IS_SEPARATION:
            return f"Intrinsically safe circuits must be segregated: {class_a} with {class_b}"
        if violation_type == ViolationType.POWER_SIGNAL_SEPARATION:
            return f"Power and signal cables must be segregated: {class_a} with {class_b}"
        if violation_type == ViolationType.VOLTAGE_LEVEL_SEPARATION:
            if severity == ViolationSeverity.WARNING:
                return f"Mixed voltage levels should be reviewed: {class_a} with {class_b}"
            return f"Different voltage levels must be segregated: {class_a} with {class_b}"
        if violation_type == ViolationType.LOW_VOLTAGE_SIGNAL_MIX:
            return f"Low voltage power mixed with signal cables: {class_a} with {class_b}"
        if severity == ViolationSeverity.ERROR:
            return f"Segregation classes cannot share a container: {class_a} with {class_b}"
        return f"Segregation classes should be reviewed together: {class_a} with {class_b}"

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def get_segregation_rules(self, name: str) -> SegregationRules:
        """Symmetric rule set; raises UnknownSegregationClassError."""
        return self.registry.rules_for(name)

    def create_custom_segregation_class(
        self,
        definition: Union[SegregationClassDefinition, Dict[str, Any]],
    ) -> SegregationClassDefinition:
        """Register a class for all later validations; returns it as registered."""
        if not isinstance(definition, SegregationClassDefinition):
            definition = SegregationClassDefinition.from_dict(definition)
        self.registry.register(definition)
        return definition

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    def override_violation(
        self,
        violation_id: str,
        justification: str,
        approved_by: str,
        date: Optional[datetime] = None,
    ) -> ViolationOverride:
        """Record an approval for a violation id."""
        override = ViolationOverride(
            violation_id=violation_id,
            justification=justification,
            approved_by=approved_by,
            date=date or datetime.now(timezone.utc),
        )
        with self._lock:
            self._overrides[violation_id] = override
        logger.info(f"Segregation violation {violation_id} overridden by {approved_by}")
        return override

    def get_override(self, violation_id: str) -> Optional[ViolationOverride]:
        return self._overrides.get(violation_id)

    @property
    def overrides(self) -> List[ViolationOverride]:
        return list(self._overrides.values())

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def generate_segregation_report(
        self,
        conduits: Iterable[ConduitLike],
        override_ids: Optional[Iterable[str]] = None,
    ) -> SegregationReport:
        """Validate each container on its own and aggregate the counts."""
        override_ids = list(override_ids or ())
        report = SegregationReport()

        for conduit in conduits:
            tag, cables = (conduit.tag, conduit.cables) if isinstance(conduit, ConduitCables) else conduit
            result = self.validate_cable_segregation(cables, override_ids, conduit_tag=tag)

            report.total_conduits += 1
            report.violation_count += len(result.violations)
            report.error_count += len(result.errors)
            report.warning_count += len(result.warnings)
            report.conduit_violations.append(ConduitSegregationResult(
                conduit_tag=tag,
                is_valid=result.is_valid,
                violations=result.violations,
            ))

        logger.debug(
            f"Segregation report: {report.total_conduits} containers, "
            f"{report.violation_count} violations"
        )
        return report

    def segregation_report_for_cables(
        self,
        cables: Sequence[Cable],
        containers: Optional[Iterable[RoutingContainer]] = None,
        override_ids: Optional[Iterable[str]] = None,
    ) -> SegregationReport:
        """
        Report over containers whose membership is derived from routes.

        With `containers` given, only those containers are reported (in the
        given order); otherwise every container tag found on a route.
        """
        index = RouteIndex.from_cables(cables)
        if containers is None:
            tags = sorted(index.container_tags())
        else:
            tags = [c.tag for c in containers]
        return self.generate_segregation_report(
            [ConduitCables(tag, index.cables_in(tag)) for tag in tags],
            override_ids,
        )
