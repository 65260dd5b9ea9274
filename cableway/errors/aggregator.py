"""
cableway/errors/aggregator.py - Aggregate background recalculation failures

Fill recalculations are best-effort: failures are logged and collected
here instead of being propagated to the cable mutation that triggered them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import threading
import uuid

from .taxonomy import CableEngineError

__all__ = [
    'RecalculationFailure',
    'ErrorReport',
    'ErrorAggregator',
]


@dataclass
class RecalculationFailure:
    """A failed recalculation of one routing container."""

    container_tag: str
    container_kind: str
    message: str
    code: str = "CBL_000"
    trigger: str = ""  # "create", "update", "delete", "manual"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_exception(
        cls,
        container_tag: str,
        container_kind: str,
        exc: BaseException,
        trigger: str = "",
    ) -> "RecalculationFailure":
        code = exc.code if isinstance(exc, CableEngineError) else type(exc).__name__
        return cls(
            container_tag=container_tag,
            container_kind=container_kind,
            message=str(exc),
            code=code,
            trigger=trigger,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "container_tag": self.container_tag,
            "container_kind": self.container_kind,
            "message": self.message,
            "code": self.code,
            "trigger": self.trigger,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class ErrorReport:
    """Aggregated failure report."""

    report_id: str = ""
    total_failures: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)
    by_code: Dict[str, int] = field(default_factory=dict)
    summary: str = ""
    failures: List[RecalculationFailure] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "total_failures": self.total_failures,
            "by_kind": self.by_kind,
            "by_code": self.by_code,
            "summary": self.summary,
        }


class ErrorAggregator:
    """
    Collects recalculation failures from concurrent background tasks.
    """

    def __init__(self, max_entries: int = 1000):
        self._failures: List[RecalculationFailure] = []
        self._max_entries = max_entries
        self._lock = threading.Lock()

    def add(self, failure: RecalculationFailure) -> None:
        """Record a failure, dropping the oldest beyond max_entries."""
        with self._lock:
            self._failures.append(failure)
            if len(self._failures) > self._max_entries:
                del self._failures[0]

    def get_by_container(self, container_tag: str) -> List[RecalculationFailure]:
        with self._lock:
            return [f for f in self._failures if f.container_tag == container_tag]

    def latest(self) -> Optional[RecalculationFailure]:
        with self._lock:
            return self._failures[-1] if self._failures else None

    def has_failures(self) -> bool:
        with self._lock:
            return bool(self._failures)

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)

    def generate_report(self) -> ErrorReport:
        """Generate aggregated report."""
        with self._lock:
            failures = list(self._failures)

        report = ErrorReport(
            report_id=str(uuid.uuid4())[:8],
            total_failures=len(failures),
            failures=failures,
        )

        for failure in failures:
            report.by_kind[failure.container_kind] = report.by_kind.get(failure.container_kind, 0) + 1
            report.by_code[failure.code] = report.by_code.get(failure.code, 0) + 1

        if failures:
            containers = sorted({f.container_tag for f in failures})
            report.summary = (
                f"{len(failures)} recalculation failure(s) across "
                f"{len(containers)} container(s)"
            )
        else:
            report.summary = "No recalculation failures"

        return report

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()
