"""
cableway/fill/store.py - Cable table and container store

In-memory collaborators for the fill service. The cable table hands out
versioned snapshots; the container store accepts a fill write only when
its snapshot is at least as new as the one the cached value came from.
Callers with their own persistence implement the two protocols instead.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Protocol, Tuple
import logging
import threading

from ..core.enums import ContainerKind
from ..core.models import Cable, RoutingContainer

__all__ = [
    'CableSnapshot',
    'CableSource',
    'ContainerStore',
    'InMemoryCableTable',
    'InMemoryContainerStore',
]

logger = logging.getLogger(__name__)


# =============================================================================
# PROTOCOLS
# =============================================================================

@dataclass(frozen=True)
class CableSnapshot:
    """Immutable view of the cable table at one version."""
    version: int
    cables: Tuple[Cable, ...]

    def routed_through(self, container_tag: str) -> List[Cable]:
        """Cables whose route lists the container."""
        return [c for c in self.cables if c.routes_through(container_tag)]


class CableSource(Protocol):
    """Protocol for anything that can snapshot the current cable set."""

    def snapshot(self) -> CableSnapshot:
        ...


class ContainerStore(Protocol):
    """Protocol for the store holding cached container fills."""

    def get(self, tag: str) -> Optional[RoutingContainer]:
        ...

    def all(self, kind: Optional[ContainerKind] = None) -> List[RoutingContainer]:
        ...

    def write_fill(self, tag: str, fill_percentage: float, snapshot_version: int) -> bool:
        """Apply a fill if snapshot_version >= stored version; return whether applied."""
        ...


# =============================================================================
# CABLE TABLE
# =============================================================================

class InMemoryCableTable:
    """
    Cable table with a monotonically increasing version.

    Every mutation bumps the version, so a snapshot's version orders it
    against every other snapshot.
    """

    def __init__(self, cables: Optional[Iterable[Cable]] = None):
        self._cables: Dict[str, Cable] = {}
        self._version = 0
        self._lock = threading.Lock()
        for cable in cables or ():
            self._cables[cable.tag] = cable

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._cables)

    def __contains__(self, tag: str) -> bool:
        return tag in self._cables

    def get(self, tag: str) -> Optional[Cable]:
        return self._cables.get(tag)

    def all(self) -> List[Cable]:
        return list(self._cables.values())

    def upsert(self, cable: Cable) -> Optional[Cable]:
        """Insert or replace by tag; returns the previous record."""
        with self._lock:
            previous = self._cables.get(cable.tag)
            self._cables[cable.tag] = cable
            self._version += 1
        return previous

    def remove(self, tag: str) -> Optional[Cable]:
        with self._lock:
            previous = self._cables.pop(tag, None)
            if previous is not None:
                self._version += 1
        return previous

    def snapshot(self) -> CableSnapshot:
        with self._lock:
            return CableSnapshot(self._version, tuple(self._cables.values()))


# =============================================================================
# CONTAINER STORE
# =============================================================================

class InMemoryContainerStore:
    """Container records keyed by tag with compare-and-swap fill writes."""

    def __init__(self, containers: Optional[Iterable[RoutingContainer]] = None):
        self._containers: Dict[str, RoutingContainer] = {}
        self._lock = threading.Lock()
        for container in containers or ():
            self._containers[container.tag] = container

    def __len__(self) -> int:
        return len(self._containers)

    def __contains__(self, tag: str) -> bool:
        return tag in self._containers

    def add(self, container: RoutingContainer) -> None:
        with self._lock:
            self._containers[container.tag] = container

    def remove(self, tag: str) -> Optional[RoutingContainer]:
        with self._lock:
            return self._containers.pop(tag, None)

    def get(self, tag: str) -> Optional[RoutingContainer]:
        return self._containers.get(tag)

    def all(self, kind: Optional[ContainerKind] = None) -> List[RoutingContainer]:
        containers = list(self._containers.values())
        if kind is None:
            return containers
        return [c for c in containers if c.kind == kind]

    def kind_of(self, tag: str) -> Optional[ContainerKind]:
        """Lookup usable as a RouteClassifier override."""
        container = self._containers.get(tag)
        return container.kind if container else None

    def write_fill(self, tag: str, fill_percentage: float, snapshot_version: int) -> bool:
        with self._lock:
            current = self._containers.get(tag)
            if current is None:
                return False
            if snapshot_version < current.version:
                logger.warning(
                    f"Discarding stale fill for {tag}: snapshot v{snapshot_version} "
                    f"older than stored v{current.version}"
                )
                return False
            self._containers[tag] = replace(
                current, fill_percentage=fill_percentage, version=snapshot_version
            )
        logger.info(f"Fill for {tag} set to {fill_percentage:.2f}% (v{snapshot_version})")
        return True
