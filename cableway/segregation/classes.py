"""
cableway/segregation/classes.py - Segregation class registry

Open registry of segregation classes. Each class lists the classes it
cannot share a container with and the ones that only warrant a warning.
Registrations may be one-sided; lookups normalize them so that a pair is
treated the same from either direction.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set
import logging
import threading

from ..core.enums import SegregationCategory
from ..errors import DuplicateSegregationClassError, UnknownSegregationClassError

__all__ = [
    'SegregationClassDefinition',
    'SegregationRules',
    'SegregationClassRegistry',
    'BUILTIN_SEGREGATION_CLASSES',
    'IS_SIGNAL',
    'NON_IS_SIGNAL',
    'CONTROL_POWER_24VDC',
    'POWER_120VAC',
    'POWER_240VAC',
    'POWER_480VAC',
    'POWER_600VAC',
]

logger = logging.getLogger(__name__)


IS_SIGNAL = "IS Signal"
NON_IS_SIGNAL = "Non-IS Signal"
CONTROL_POWER_24VDC = "Control Power 24VDC"
POWER_120VAC = "Power 120VAC"
POWER_240VAC = "Power 240VAC"
POWER_480VAC = "Power 480VAC"
POWER_600VAC = "Power 600VAC"

_POWER_CLASSES = (POWER_120VAC, POWER_240VAC, POWER_480VAC, POWER_600VAC)


# =============================================================================
# CLASS DEFINITION
# =============================================================================

def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return ()


@dataclass(frozen=True)
class SegregationClassDefinition:
    """
    A named segregation class as registered.

    Attributes:
        name: Unique class name (e.g. "Power 480VAC")
        description: Human-readable description
        cannot_mix_with: Classes that must never share a container
        warning_mix_with: Classes that may share with a warning
        category: Electrical nature; None for custom classes
    """

    name: str
    description: str = ""
    cannot_mix_with: FrozenSet[str] = field(default_factory=frozenset)
    warning_mix_with: FrozenSet[str] = field(default_factory=frozenset)
    category: Optional[SegregationCategory] = None

    def __post_init__(self):
        # Accept lists/sets from callers
        object.__setattr__(self, "cannot_mix_with", frozenset(self.cannot_mix_with))
        object.__setattr__(self, "warning_mix_with", frozenset(self.warning_mix_with))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "cannot_mix_with": sorted(self.cannot_mix_with),
            "warning_mix_with": sorted(self.warning_mix_with),
            "category": self.category.value if self.category else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SegregationClassDefinition":
        """Deserialize from snake_case or camelCase keys."""
        category = data.get("category")
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            cannot_mix_with=frozenset(_first(data, "cannot_mix_with", "cannotMixWith")),
            warning_mix_with=frozenset(_first(data, "warning_mix_with", "warningMixWith")),
            category=SegregationCategory(category) if category else None,
        )


@dataclass(frozen=True)
class SegregationRules:
    """Resolved (symmetric) rule set for one class."""
    name: str
    description: str
    cannot_mix_with: FrozenSet[str]
    warning_mix_with: FrozenSet[str]
    category: Optional[SegregationCategory] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "cannot_mix_with": sorted(self.cannot_mix_with),
            "warning_mix_with": sorted(self.warning_mix_with),
            "category": self.category.value if self.category else None,
        }


def _builtin_classes() -> List[SegregationClassDefinition]:
    return [
        SegregationClassDefinition(
            name=IS_SIGNAL,
            description="Signal circuits on intrinsically safe loops in hazardous areas",
            cannot_mix_with=frozenset({NON_IS_SIGNAL, CONTROL_POWER_24VDC, *_POWER_CLASSES}),
            category=SegregationCategory.INTRINSICALLY_SAFE,
        ),
        SegregationClassDefinition(
            name=NON_IS_SIGNAL,
            description="Non-intrinsically safe instrument and signal circuits",
            cannot_mix_with=frozenset({IS_SIGNAL, *_POWER_CLASSES}),
            warning_mix_with=frozenset({CONTROL_POWER_24VDC}),
            category=SegregationCategory.SIGNAL,
        ),
        SegregationClassDefinition(
            name=CONTROL_POWER_24VDC,
            description="24VDC control power circuits",
            cannot_mix_with=frozenset({IS_SIGNAL, POWER_480VAC, POWER_600VAC}),
            warning_mix_with=frozenset({NON_IS_SIGNAL, POWER_120VAC, POWER_240VAC}),
            category=SegregationCategory.CONTROL_POWER,
        ),
    ] + [
        SegregationClassDefinition(
            name=power,
            description=f"{power.split()[1]} power circuits",
            cannot_mix_with=frozenset(
                {IS_SIGNAL, NON_IS_SIGNAL} | (set(_POWER_CLASSES) - {power})
            ),
            warning_mix_with=frozenset({CONTROL_POWER_24VDC}),
            category=SegregationCategory.POWER,
        )
        for power in _POWER_CLASSES
    ]


BUILTIN_SEGREGATION_CLASSES = tuple(_builtin_classes())


# =============================================================================
# REGISTRY
# =============================================================================

class SegregationClassRegistry:
    """
    Registry of segregation classes.

    The registry keeps each definition as registered plus two reverse
    indexes, so `rules_for` returns the union of what a class declares and
    what other classes declare about it.
    """

    def __init__(
        self,
        definitions: Optional[Iterable[SegregationClassDefinition]] = None,
        include_builtins: bool = True,
    ):
        self._definitions: Dict[str, SegregationClassDefinition] = {}
        self._cannot_reverse: Dict[str, Set[str]] = {}
        self._warning_reverse: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

        if include_builtins:
            for definition in BUILTIN_SEGREGATION_CLASSES:
                self._add(definition)
        for definition in definitions or ():
            self.register(definition)

    def register(self, definition: SegregationClassDefinition) -> None:
        """Register a class; raises DuplicateSegregationClassError."""
        with self._lock:
            if definition.name in self._definitions:
                raise DuplicateSegregationClassError(definition.name)
            self._add(definition)
        logger.info(f"Registered segregation class '{definition.name}'")

    def _add(self, definition: SegregationClassDefinition) -> None:
        self._definitions[definition.name] = definition
        for other in definition.cannot_mix_with:
            self._cannot_reverse.setdefault(other, set()).add(definition.name)
        for other in definition.warning_mix_with:
            self._warning_reverse.setdefault(other, set()).add(definition.name)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def names(self) -> List[str]:
        return list(self._definitions)

    def get(self, name: str) -> Optional[SegregationClassDefinition]:
        return self._definitions.get(name)

    def definition(self, name: str) -> SegregationClassDefinition:
        """Registered definition; raises UnknownSegregationClassError."""
        definition = self._definitions.get(name)
        if definition is None:
            raise UnknownSegregationClassError(name)
        return definition

    def rules_for(self, name: str) -> SegregationRules:
        """Symmetric-normalized rules; raises UnknownSegregationClassError."""
        definition = self.definition(name)
        cannot = set(definition.cannot_mix_with) | self._cannot_reverse.get(name, set())
        warning = set(definition.warning_mix_with) | self._warning_reverse.get(name, set())
        return SegregationRules(
            name=definition.name,
            description=definition.description,
            cannot_mix_with=frozenset(cannot),
            warning_mix_with=frozenset(warning - cannot),
            category=definition.category,
        )

    def category_of(self, name: str) -> Optional[SegregationCategory]:
        definition = self._definitions.get(name)
        return definition.category if definition else None

    def cannot_mix(self, class_a: str, class_b: str) -> bool:
        """Either class declares the other as incompatible."""
        return (
            class_b in self._declared(class_a, "cannot_mix_with")
            or class_a in self._declared(class_b, "cannot_mix_with")
        )

    def warn_mix(self, class_a: str, class_b: str) -> bool:
        """Either class declares the other as a warning pair."""
        return (
            class_b in self._declared(class_a, "warning_mix_with")
            or class_a in self._declared(class_b, "warning_mix_with")
        )

    def _declared(self, name: str, attr: str) -> FrozenSet[str]:
        definition = self._definitions.get(name)
        if definition is None:
            return frozenset()
        return getattr(definition, attr)
