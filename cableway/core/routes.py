"""
cableway/core/routes.py - Container tag classification

Classifies route entries as conduits or trays, either through an injected
lookup (typically backed by the caller's container table) or by tag
prefix convention: C-01, CONDUIT-3, EMT_12 are conduits; T-01, TRAY-2,
CT07 are trays.
"""

from typing import Callable, Iterable, Optional, Pattern, Sequence, Tuple
import re

from .enums import ContainerKind

__all__ = [
    'ContainerLookup',
    'RouteClassifier',
    'DEFAULT_CONDUIT_PATTERNS',
    'DEFAULT_TRAY_PATTERNS',
]

ContainerLookup = Callable[[str], Optional[ContainerKind]]

DEFAULT_CONDUIT_PATTERNS: Tuple[str, ...] = (
    r"^C[-_]?\d+$",
    r"^CONDUIT[-_]?\d+$",
    r"^EMT[-_]?\d+$",
)

DEFAULT_TRAY_PATTERNS: Tuple[str, ...] = (
    r"^T[-_]?\d+$",
    r"^TRAY[-_]?\d+$",
    r"^CT[-_]?\d+$",
)


def _compile(patterns: Iterable[str]) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


class RouteClassifier:
    """
    Decides whether a route tag names a conduit, a tray, or neither.

    An injected lookup takes precedence; tags it does not know fall back
    to the prefix patterns.
    """

    def __init__(
        self,
        conduit_patterns: Sequence[str] = DEFAULT_CONDUIT_PATTERNS,
        tray_patterns: Sequence[str] = DEFAULT_TRAY_PATTERNS,
        lookup: Optional[ContainerLookup] = None,
    ):
        self._conduit = _compile(conduit_patterns)
        self._tray = _compile(tray_patterns)
        self._lookup = lookup

    def with_lookup(self, lookup: Optional[ContainerLookup]) -> "RouteClassifier":
        """Copy of this classifier using another lookup."""
        clone = RouteClassifier.__new__(RouteClassifier)
        clone._conduit = self._conduit
        clone._tray = self._tray
        clone._lookup = lookup
        return clone

    def classify(self, tag: str) -> Optional[ContainerKind]:
        """Container kind for a tag, or None if unrecognised."""
        if self._lookup is not None:
            kind = self._lookup(tag)
            if kind is not None:
                return kind

        text = tag.strip()
        if any(p.match(text) for p in self._conduit):
            return ContainerKind.CONDUIT
        if any(p.match(text) for p in self._tray):
            return ContainerKind.TRAY
        return None

    def is_conduit(self, tag: str) -> bool:
        return self.classify(tag) == ContainerKind.CONDUIT

    def is_tray(self, tag: str) -> bool:
        return self.classify(tag) == ContainerKind.TRAY
