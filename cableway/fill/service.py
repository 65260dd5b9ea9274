"""
cableway/fill/service.py - Fill Calculation Service

Keeps each container's cached fill equal to what a full recomputation
from the current cable table would give, recomputing only the containers
a cable mutation actually touched.

Recomputation is best-effort: background failures are logged and
collected in an ErrorAggregator, never raised into the mutation that
triggered them. Each container is recomputed on its own, so one failure
does not stop the others.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set
import asyncio
import logging

from ..config import FillAdjustmentTable, FillConfig
from ..core.enums import ContainerKind, FillStatus
from ..core.models import Cable, RouteLike, RoutingContainer
from ..core.routes import RouteClassifier
from ..errors import (
    ContainerNotFoundError,
    ErrorAggregator,
    FillCalculationError,
    RecalculationFailure,
)
from .geometry import (
    FillStatusInfo,
    calculate_fill_percentage,
    fill_message,
    fill_status,
)
from .routes import AffectedRoutes, RouteReferences, extract_route_references, find_affected_routes
from .store import CableSource, ContainerStore

__all__ = [
    'FillCalculationResult',
    'FillComplianceResult',
    'FillCalculationService',
]

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class FillCalculationResult:
    """Outcome of recomputing one container."""

    container_tag: str
    container_kind: ContainerKind
    fill_percentage: float
    max_fill_percentage: float
    status: FillStatus
    message: str = ""
    cable_count: int = 0
    snapshot_version: int = 0
    applied: bool = True  # False when a newer value was already stored

    @property
    def is_overfilled(self) -> bool:
        return self.status == FillStatus.OVERFILLED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "container_tag": self.container_tag,
            "container_kind": self.container_kind.value,
            "fill_percentage": self.fill_percentage,
            "max_fill_percentage": self.max_fill_percentage,
            "status": self.status.value,
            "is_overfilled": self.is_overfilled,
            "message": self.message,
            "cable_count": self.cable_count,
            "snapshot_version": self.snapshot_version,
            "applied": self.applied,
        }


@dataclass
class FillComplianceResult:
    """Compliance check of a fill percentage."""

    violations: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def is_compliant(self) -> bool:
        return not self.violations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_compliant": self.is_compliant,
            "violations": self.violations,
            "recommendations": self.recommendations,
        }


# =============================================================================
# SERVICE
# =============================================================================

class FillCalculationService:
    """
    Recomputes cached container fills.

    Usage:
        service = FillCalculationService(cable_table, container_store)
        cable_table.upsert(new_cable)
        await service.on_cable_created(new_cable)   # returns immediately
        ...
        await service.wait_for_pending()             # tests / shutdown
    """

    def __init__(
        self,
        cables: CableSource,
        containers: ContainerStore,
        config: Optional[FillConfig] = None,
        classifier: Optional[RouteClassifier] = None,
        aggregator: Optional[ErrorAggregator] = None,
    ):
        self.cables = cables
        self.containers = containers
        self.config = config or FillConfig()
        if classifier is None:
            classifier = RouteClassifier(
                self.config.conduit_tag_patterns,
                self.config.tray_tag_patterns,
                lookup=self._store_kind,
            )
        self.classifier = classifier
        self.aggregator = aggregator or ErrorAggregator()
        self._pending: Set[asyncio.Task] = set()

    def _store_kind(self, tag: str) -> Optional[ContainerKind]:
        container = self.containers.get(tag)
        return container.kind if container else None

    # -------------------------------------------------------------------------
    # Route analysis
    # -------------------------------------------------------------------------

    def extract_route_references(self, route: RouteLike) -> RouteReferences:
        return extract_route_references(route, self.classifier)

    def find_affected_routes(
        self,
        old_route: RouteLike = None,
        new_route: RouteLike = None,
    ) -> AffectedRoutes:
        return find_affected_routes(old_route, new_route, self.classifier)

    # -------------------------------------------------------------------------
    # Recalculation
    # -------------------------------------------------------------------------

    def table_for(self, kind: ContainerKind) -> FillAdjustmentTable:
        if kind == ContainerKind.CONDUIT:
            return self.config.conduit_table
        return self.config.tray_table

    def recalculate(self, container_tag: str) -> FillCalculationResult:
        """
        Recompute one container from a fresh cable snapshot and store it.

        The write is a compare-and-swap on the snapshot version: if a
        newer snapshot's value is already stored, this one is discarded
        and the result reports applied=False.

        Raises:
            ContainerNotFoundError: tag unknown to the container store
            MissingOuterDiameterError: a routed cable has no outer diameter
            FillCalculationError: container has no usable geometry
        """
        container = self.containers.get(container_tag)
        if container is None:
            raise ContainerNotFoundError(container_tag)

        snapshot = self.cables.snapshot()
        members = snapshot.routed_through(container_tag)
        fill = calculate_fill_percentage(container, members, self.table_for(container.kind))

        applied = self.containers.write_fill(container_tag, fill, snapshot.version)
        logger.debug(
            f"Recalculated {container.kind.value} {container_tag}: {fill:.2f}% "
            f"from {len(members)} cables (v{snapshot.version}, applied={applied})"
        )

        status = fill_status(fill, container.max_fill_percentage, self.config)
        return FillCalculationResult(
            container_tag=container_tag,
            container_kind=container.kind,
            fill_percentage=fill,
            max_fill_percentage=container.max_fill_percentage,
            status=status,
            message=fill_message(status, fill, container.max_fill_percentage, container.kind.value),
            cable_count=len(members),
            snapshot_version=snapshot.version,
            applied=applied,
        )

    def recalculate_conduit_fill(self, conduit_tag: str) -> float:
        """Recompute a conduit; returns its fill percentage."""
        return self._recalculate_kind(conduit_tag, ContainerKind.CONDUIT).fill_percentage

    def recalculate_tray_fill(self, tray_tag: str) -> float:
        """Recompute a tray; returns its fill percentage."""
        return self._recalculate_kind(tray_tag, ContainerKind.TRAY).fill_percentage

    def _recalculate_kind(self, tag: str, kind: ContainerKind) -> FillCalculationResult:
        container = self.containers.get(tag)
        if container is None:
            raise ContainerNotFoundError(tag)
        if container.kind != kind:
            raise FillCalculationError(
                f"{tag} is a {container.kind.value}, not a {kind.value}",
                container_tag=tag,
            )
        return self.recalculate(tag)

    def recalculate_all_fills(self) -> List[FillCalculationResult]:
        """Recompute every stored container; failures are logged and skipped."""
        return self._recalculate_many(
            [c.tag for c in self.containers.all()], trigger="all"
        )

    def batch_recalculate_fills(
        self,
        conduit_tags: Iterable[str] = (),
        tray_tags: Iterable[str] = (),
    ) -> List[FillCalculationResult]:
        """Recompute the given containers; failures are logged and skipped."""
        results = []
        for tag in conduit_tags:
            result = self._safe(lambda t=tag: self._recalculate_kind(t, ContainerKind.CONDUIT), tag, "batch")
            if result is not None:
                results.append(result)
        for tag in tray_tags:
            result = self._safe(lambda t=tag: self._recalculate_kind(t, ContainerKind.TRAY), tag, "batch")
            if result is not None:
                results.append(result)
        return results

    def _recalculate_many(self, tags: Iterable[str], trigger: str) -> List[FillCalculationResult]:
        results = []
        for tag in tags:
            result = self._safe(lambda t=tag: self.recalculate(t), tag, trigger)
            if result is not None:
                results.append(result)
        return results

    def _safe(self, func, tag: str, trigger: str) -> Optional[FillCalculationResult]:
        try:
            return func()
        except Exception as exc:
            self._record_failure(tag, exc, trigger)
            return None

    def _record_failure(self, tag: str, exc: Exception, trigger: str) -> None:
        kind = self._store_kind(tag) or self.classifier.classify(tag)
        kind_name = kind.value if kind else "unknown"
        if isinstance(exc, FillCalculationError):
            logger.error(f"Fill recalculation failed for {kind_name} {tag} ({trigger}): {exc}")
        else:
            logger.exception(f"Unexpected error recalculating {kind_name} {tag} ({trigger})")
        self.aggregator.add(RecalculationFailure.from_exception(tag, kind_name, exc, trigger))

    # -------------------------------------------------------------------------
    # Mutation triggers
    # -------------------------------------------------------------------------

    async def on_cable_created(self, cable: Cable) -> List[asyncio.Task]:
        """Schedule recomputation of every container on the new route."""
        return self._schedule(cable.route, "create")

    async def on_cable_updated(self, old: Cable, new: Cable) -> List[asyncio.Task]:
        """
        Schedule recomputation of containers whose membership changed.

        Containers on both routes are skipped unless the outer diameter
        changed, in which case every container on the new route is stale.
        """
        affected = self.find_affected_routes(old.route, new.route)
        tags = set(affected.affected_tags)
        if old.outer_diameter != new.outer_diameter:
            tags.update(new.route)
        return self._schedule([t for t in new.route + old.route if t in tags], "update")

    async def on_cable_deleted(self, cable: Cable) -> List[asyncio.Task]:
        """Schedule recomputation of every container on the former route."""
        return self._schedule(cable.route, "delete")

    def _schedule(self, tags: Iterable[str], trigger: str) -> List[asyncio.Task]:
        tasks = []
        seen = set()
        for tag in tags:
            if tag in seen:
                continue
            seen.add(tag)
            if self.containers.get(tag) is None:
                logger.debug(f"Route tag {tag} is not a known container, skipping")
                continue
            task = asyncio.create_task(
                self._recalculate_in_background(tag, trigger), name=tag
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def _recalculate_in_background(self, tag: str, trigger: str) -> Optional[FillCalculationResult]:
        try:
            return await asyncio.to_thread(self.recalculate, tag)
        except Exception as exc:
            self._record_failure(tag, exc, trigger)
            return None

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled recomputation has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------------
    # Status and compliance
    # -------------------------------------------------------------------------

    def fill_status_for(self, container: RoutingContainer) -> FillStatusInfo:
        """Classify a container's cached fill."""
        pct = container.fill_percentage or 0.0
        max_pct = container.max_fill_percentage
        status = fill_status(pct, max_pct, self.config)
        return FillStatusInfo(
            status=status,
            fill_percentage=pct,
            max_fill_percentage=max_pct,
            message=fill_message(status, pct, max_pct, container.kind.value),
        )

    def validate_conduit_fill(
        self,
        fill_percentage: float,
        conduit_type: Optional[str] = None,
    ) -> FillComplianceResult:
        result = FillComplianceResult()
        limit = self.config.conduit_max_fill_pct

        if fill_percentage > limit:
            result.violations.append(
                f"Fill percentage ({fill_percentage:.1f}%) exceeds NEC limit of {limit:g}%"
            )
            result.recommendations.append("Consider using larger conduit or multiple conduits")
        elif (
            conduit_type
            and "emt" in conduit_type.lower()
            and fill_percentage > self.config.emt_advisory_pct
        ):
            result.recommendations.append(
                "EMT fill approaching limit - monitor cable additions carefully"
            )
        return result

    def validate_tray_fill(
        self,
        fill_percentage: float,
        tray_type: Optional[str] = None,
    ) -> FillComplianceResult:
        result = FillComplianceResult()
        limit = self.config.tray_max_fill_pct

        if fill_percentage > limit:
            result.violations.append(
                f"Fill percentage ({fill_percentage:.1f}%) exceeds recommended limit of {limit:g}%"
            )
            result.recommendations.append("Consider using wider tray or multiple trays")
        elif (
            tray_type
            and "perforated" in tray_type.lower()
            and fill_percentage > self.config.perforated_advisory_pct
        ):
            result.recommendations.append(
                "Perforated tray approaching limit - ensure adequate ventilation"
            )
        return result
