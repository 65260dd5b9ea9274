"""
cableway/engine.py - Cable engine facade

Caller-constructed engine holding the reference table, the segregation
registry, the validators and the fill service for one project. Nothing
here is a process-wide singleton; two engines never share state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging
import uuid

from .config import EngineConfig
from .core.enums import CircuitType, FillStatus
from .core.models import Cable, RoutingContainer
from .electrical import ConductorReferenceTable, VoltageDropCalculator
from .errors import ErrorReport, InvalidCalculationInputError, UnsupportedConductorSizeError
from .fill import FillCalculationService, FillStatusInfo, InMemoryCableTable, InMemoryContainerStore
from .segregation import SegregationClassRegistry, SegregationReport, SegregationValidator
from .validation import CableFieldValidator, ProjectValidationSummary, ValidationOptions, ValidationResult

__all__ = [
    'CableChange',
    'ProjectReport',
    'CableEngine',
]

logger = logging.getLogger(__name__)


@dataclass
class CableChange:
    """Outcome of a create/update through the engine."""

    validation: ValidationResult
    cable: Optional[Cable] = None  # stored record, None when rejected
    scheduled_containers: List[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.cable is not None


@dataclass
class ProjectReport:
    """Whole-project compliance snapshot."""

    report_id: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    validation: Optional[ProjectValidationSummary] = None
    segregation: Optional[SegregationReport] = None
    fill_status: Dict[str, FillStatusInfo] = field(default_factory=dict)
    voltage_drop_exceedances: List[str] = field(default_factory=list)
    recalculation_failures: Optional[ErrorReport] = None

    @property
    def overfilled_containers(self) -> List[str]:
        return [tag for tag, info in self.fill_status.items() if info.status == FillStatus.OVERFILLED]

    @property
    def is_compliant(self) -> bool:
        return (
            (self.validation is None or self.validation.is_valid)
            and (self.segregation is None or self.segregation.is_valid)
            and not self.overfilled_containers
            and not self.voltage_drop_exceedances
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "timestamp": self.timestamp,
            "is_compliant": self.is_compliant,
            "validation": self.validation.to_dict() if self.validation else None,
            "segregation": self.segregation.to_dict() if self.segregation else None,
            "fill_status": {tag: info.to_dict() for tag, info in self.fill_status.items()},
            "overfilled_containers": self.overfilled_containers,
            "voltage_drop_exceedances": self.voltage_drop_exceedances,
            "recalculation_failures": (
                self.recalculation_failures.to_dict() if self.recalculation_failures else None
            ),
        }


class CableEngine:
    """
    Compliance engine for one project.

    Usage:
        engine = CableEngine(containers=[RoutingContainer("C-01", internal_diameter=1.049)])
        change = await engine.create_cable(cable)
        if not change.accepted:
            show(change.validation.errors)
        await engine.fill.wait_for_pending()
        report = engine.project_report()
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        conductor_table: Optional[ConductorReferenceTable] = None,
        segregation_registry: Optional[SegregationClassRegistry] = None,
        cables: Optional[Iterable[Cable]] = None,
        containers: Optional[Iterable[RoutingContainer]] = None,
    ):
        self.config = config or EngineConfig()
        self.conductor_table = conductor_table or ConductorReferenceTable()
        self.registry = segregation_registry or SegregationClassRegistry()

        self.cable_table = InMemoryCableTable(cables)
        self.container_store = InMemoryContainerStore(containers)

        self.fill = FillCalculationService(self.cable_table, self.container_store, self.config.fill)
        self.field_validator = CableFieldValidator(self.config.validation, self.fill.classifier)
        self.voltage_drop = VoltageDropCalculator(self.conductor_table, self.config.voltage_drop)
        self.segregation = SegregationValidator(self.registry)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_cable(
        self,
        cable: Cable,
        suggest_tag: bool = False,
        is_update: bool = False,
    ) -> ValidationResult:
        """
        Validate a cable against the rest of the project.

        For an update the stored record with the same tag is not counted
        as a collision.
        """
        others = self.cable_table.all()
        if is_update:
            others = [c for c in others if c.tag != cable.tag]
        return self.field_validator.validate(cable, ValidationOptions(
            existing_tags=[c.tag for c in others],
            existing_cables=others,
            suggest_tag=suggest_tag,
        ))

    def validate_project(self) -> ProjectValidationSummary:
        return self.field_validator.validate_project(self.cable_table.all())

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_cable(self, cable: Cable) -> CableChange:
        """Validate, store and schedule fill recomputation for a new cable."""
        validation = self.validate_cable(cable, suggest_tag=True)
        if not validation.is_valid:
            return CableChange(validation)

        stored = self._with_voltage_drop(cable)
        self.cable_table.upsert(stored)
        tasks = await self.fill.on_cable_created(stored)
        return CableChange(validation, stored, [t.get_name() for t in tasks])

    async def update_cable(self, cable: Cable) -> CableChange:
        """Validate and store a changed cable; recompute only affected containers."""
        validation = self.validate_cable(cable, is_update=True)
        if not validation.is_valid:
            return CableChange(validation)

        stored = self._with_voltage_drop(cable)
        previous = self.cable_table.upsert(stored)
        if previous is None:
            tasks = await self.fill.on_cable_created(stored)
        else:
            tasks = await self.fill.on_cable_updated(previous, stored)
        return CableChange(validation, stored, [t.get_name() for t in tasks])

    async def delete_cable(self, tag: str) -> Optional[Cable]:
        """Remove a cable and recompute the containers it ran through."""
        removed = self.cable_table.remove(tag)
        if removed is not None:
            await self.fill.on_cable_deleted(removed)
        return removed

    def add_container(self, container: RoutingContainer) -> None:
        self.container_store.add(container)

    def _with_voltage_drop(self, cable: Cable) -> Cable:
        try:
            updated = self.voltage_drop.voltage_drop_for_cable(cable)
        except (UnsupportedConductorSizeError, InvalidCalculationInputError) as exc:
            logger.warning(f"Voltage drop not computed for {cable.tag}: {exc}")
            return cable.with_changes(voltage_drop_percentage=None)
        return updated if updated is not None else cable

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def segregation_report(self, override_ids: Optional[Iterable[str]] = None) -> SegregationReport:
        """Segregation report over every stored container."""
        return self.segregation.segregation_report_for_cables(
            self.cable_table.all(),
            self.container_store.all(),
            override_ids,
        )

    def voltage_drop_exceedances(self, circuit_type: CircuitType = CircuitType.BRANCH) -> List[str]:
        """Tags of cables whose stored voltage drop exceeds the NEC limit."""
        return [
            c.tag for c in self.cable_table.all()
            if c.voltage_drop_percentage is not None
            and self.voltage_drop.exceeds_nec_limit(c.voltage_drop_percentage, circuit_type)
        ]

    def project_report(self, override_ids: Optional[Iterable[str]] = None) -> ProjectReport:
        """Validation, segregation, fill and voltage drop in one report."""
        report = ProjectReport(
            report_id=str(uuid.uuid4())[:8],
            validation=self.validate_project(),
            segregation=self.segregation_report(override_ids),
            fill_status={
                c.tag: self.fill.fill_status_for(c) for c in self.container_store.all()
            },
            voltage_drop_exceedances=self.voltage_drop_exceedances(),
            recalculation_failures=self.fill.aggregator.generate_report(),
        )
        logger.info(
            f"Project report {report.report_id}: compliant={report.is_compliant}, "
            f"{len(report.overfilled_containers)} overfilled"
        )
        return report
