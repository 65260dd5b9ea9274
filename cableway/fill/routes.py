"""
cableway/fill/routes.py - Route diffing

Translates a routing edit into the minimal set of containers whose fill
must be recomputed: tags present in exactly one of the old and new routes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..core.enums import ContainerKind
from ..core.models import RouteLike, parse_route
from ..core.routes import RouteClassifier

__all__ = [
    'RouteReferences',
    'AffectedRoutes',
    'extract_route_references',
    'find_affected_routes',
]


@dataclass
class RouteReferences:
    """Container tags on one route, bucketed by kind."""
    conduit_tags: List[str] = field(default_factory=list)
    tray_tags: List[str] = field(default_factory=list)
    unclassified_tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'conduit_tags': self.conduit_tags,
            'tray_tags': self.tray_tags,
            'unclassified_tags': self.unclassified_tags,
        }


@dataclass
class AffectedRoutes:
    """
    Containers touched by a route change.

    `added_tags`/`removed_tags` split the symmetric difference by
    direction; tags that cannot be classified as conduit or tray stay in
    `unclassified_tags` and are still part of `affected_tags`.
    """

    affected_conduit_tags: Set[str] = field(default_factory=set)
    affected_tray_tags: Set[str] = field(default_factory=set)
    unclassified_tags: Set[str] = field(default_factory=set)
    added_tags: Set[str] = field(default_factory=set)
    removed_tags: Set[str] = field(default_factory=set)

    @property
    def affected_tags(self) -> Set[str]:
        return self.added_tags | self.removed_tags

    @property
    def has_changes(self) -> bool:
        return bool(self.added_tags or self.removed_tags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'affected_conduit_tags': sorted(self.affected_conduit_tags),
            'affected_tray_tags': sorted(self.affected_tray_tags),
            'unclassified_tags': sorted(self.unclassified_tags),
            'added_tags': sorted(self.added_tags),
            'removed_tags': sorted(self.removed_tags),
        }


def extract_route_references(
    route: RouteLike,
    classifier: Optional[RouteClassifier] = None,
) -> RouteReferences:
    """Bucket a route's container tags by kind, keeping route order."""
    classifier = classifier or RouteClassifier()
    refs = RouteReferences()
    for tag in parse_route(route):
        kind = classifier.classify(tag)
        if kind == ContainerKind.CONDUIT:
            refs.conduit_tags.append(tag)
        elif kind == ContainerKind.TRAY:
            refs.tray_tags.append(tag)
        else:
            refs.unclassified_tags.append(tag)
    return refs


def find_affected_routes(
    old_route: RouteLike = None,
    new_route: RouteLike = None,
    classifier: Optional[RouteClassifier] = None,
) -> AffectedRoutes:
    """
    Containers whose membership changed between two routes.

    Absent routes count as empty, so a create is find_affected_routes(None,
    new) and a delete is find_affected_routes(old, None).

    Example:
        find_affected_routes("A,B", "B,C").affected_tags == {"A", "C"}
    """
    classifier = classifier or RouteClassifier()
    old_tags = set(parse_route(old_route))
    new_tags = set(parse_route(new_route))

    result = AffectedRoutes(
        added_tags=new_tags - old_tags,
        removed_tags=old_tags - new_tags,
    )
    for tag in result.affected_tags:
        kind = classifier.classify(tag)
        if kind == ContainerKind.CONDUIT:
            result.affected_conduit_tags.add(tag)
        elif kind == ContainerKind.TRAY:
            result.affected_tray_tags.add(tag)
        else:
            result.unclassified_tags.add(tag)
    return result
