"""
cableway/core/index.py - Route index

Bipartite cable/container graph derived from cable routes. Membership is
never stored on a container; this index is rebuilt (or incrementally
maintained) from the routes whenever a caller needs container -> cables.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Set, Tuple
import logging

import networkx as nx

from .models import Cable

__all__ = ['RouteIndex']

logger = logging.getLogger(__name__)

CABLE = "cable"
CONTAINER = "container"


def _cable_node(tag: str) -> Tuple[str, str]:
    return (CABLE, tag)


def _container_node(tag: str) -> Tuple[str, str]:
    return (CONTAINER, tag)


class RouteIndex:
    """
    Index of which cables route through which containers.

    Usage:
        index = RouteIndex.from_cables(cables)
        index.cables_in("C-01")       # [Cable, ...] in insertion order
        index.containers_of("PWR-001")  # ("C-01", "T-02")
    """

    def __init__(self):
        self.graph = nx.Graph()

    @classmethod
    def from_cables(cls, cables: Iterable[Cable]) -> "RouteIndex":
        index = cls()
        for cable in cables:
            if cable.tag and cable.tag in index:
                logger.warning(
                    f"Duplicate cable tag {cable.tag} in route index, keeping the last record"
                )
            index.add_cable(cable)
        return index

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def add_cable(self, cable: Cable) -> None:
        """Add or replace a cable and its route edges."""
        if not cable.tag:
            logger.debug("Skipping untagged cable in route index")
            return

        self.remove_cable(cable.tag)
        node = _cable_node(cable.tag)
        self.graph.add_node(node, bipartite=0, cable=cable)

        for position, container_tag in enumerate(cable.route):
            container = _container_node(container_tag)
            if container not in self.graph:
                self.graph.add_node(container, bipartite=1)
            self.graph.add_edge(node, container, position=position)

    def remove_cable(self, cable_tag: str) -> None:
        node = _cable_node(cable_tag)
        if node not in self.graph:
            return
        containers = [n for n in self.graph.neighbors(node)]
        self.graph.remove_node(node)
        # Drop containers no cable routes through any more
        for container in containers:
            if self.graph.degree(container) == 0:
                self.graph.remove_node(container)

    def update_cable(self, cable: Cable) -> None:
        self.add_cable(cable)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def __contains__(self, cable_tag: str) -> bool:
        return _cable_node(cable_tag) in self.graph

    def cable(self, cable_tag: str) -> Optional[Cable]:
        node = _cable_node(cable_tag)
        if node not in self.graph:
            return None
        return self.graph.nodes[node]["cable"]

    def cables_in(self, container_tag: str) -> List[Cable]:
        """Cables whose route lists the container."""
        container = _container_node(container_tag)
        if container not in self.graph:
            return []
        return [self.graph.nodes[n]["cable"] for n in self.graph.neighbors(container)]

    def containers_of(self, cable_tag: str) -> Tuple[str, ...]:
        """Container tags on a cable's route, in route order."""
        node = _cable_node(cable_tag)
        if node not in self.graph:
            return ()
        edges = sorted(self.graph.edges(node, data="position"), key=lambda e: e[2])
        return tuple(other[1] for _, other, _ in edges)

    def container_tags(self) -> Set[str]:
        return {tag for kind, tag in self.graph.nodes if kind == CONTAINER}

    def membership(self) -> Dict[str, List[str]]:
        """Container tag -> cable tags."""
        return {
            tag: [c.tag for c in self.cables_in(tag)]
            for tag in sorted(self.container_tags())
        }

    def cables_sharing(self, cable_tag: str) -> Set[str]:
        """Tags of cables that share at least one container with a cable."""
        node = _cable_node(cable_tag)
        if node not in self.graph:
            return set()
        shared = set()
        for container in self.graph.neighbors(node):
            shared.update(n[1] for n in self.graph.neighbors(container) if n != node)
        return shared
