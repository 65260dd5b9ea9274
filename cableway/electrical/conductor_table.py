"""
cableway/electrical/conductor_table.py - Conductor Reference Table

DC resistance of uncoated conductors at 75C, ohms per 1000 ft, after NEC
Chapter 9 Table 8. Sizes are ordered from the smallest physical conductor
to the largest, so resistance strictly decreases along each list.
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging
import re

from ..core.enums import ConductorMaterial
from ..errors import UnsupportedConductorSizeError

__all__ = [
    'ConductorReferenceTable',
    'COPPER_RESISTANCE',
    'ALUMINUM_RESISTANCE',
    'normalize_conductor_size',
]

logger = logging.getLogger(__name__)


# =============================================================================
# Resistance tables (smallest conductor first)
# =============================================================================

COPPER_RESISTANCE: Tuple[Tuple[str, float], ...] = (
    ("18 AWG", 7.77),
    ("16 AWG", 4.89),
    ("14 AWG", 3.1),
    ("12 AWG", 2.0),
    ("10 AWG", 1.2),
    ("8 AWG", 0.764),
    ("6 AWG", 0.491),
    ("4 AWG", 0.308),
    ("3 AWG", 0.245),
    ("2 AWG", 0.194),
    ("1 AWG", 0.154),
    ("1/0 AWG", 0.122),
    ("2/0 AWG", 0.0967),
    ("3/0 AWG", 0.0766),
    ("4/0 AWG", 0.0608),
    ("250 MCM", 0.0515),
    ("300 MCM", 0.0429),
    ("350 MCM", 0.0367),
    ("400 MCM", 0.0321),
    ("500 MCM", 0.0258),
    ("600 MCM", 0.0214),
    ("750 MCM", 0.0171),
    ("1000 MCM", 0.0129),
)

# Aluminum building wire starts at 12 AWG
ALUMINUM_RESISTANCE: Tuple[Tuple[str, float], ...] = (
    ("12 AWG", 3.2),
    ("10 AWG", 2.0),
    ("8 AWG", 1.26),
    ("6 AWG", 0.808),
    ("4 AWG", 0.508),
    ("3 AWG", 0.403),
    ("2 AWG", 0.319),
    ("1 AWG", 0.253),
    ("1/0 AWG", 0.201),
    ("2/0 AWG", 0.159),
    ("3/0 AWG", 0.126),
    ("4/0 AWG", 0.100),
    ("250 MCM", 0.0847),
    ("300 MCM", 0.0707),
    ("350 MCM", 0.0605),
    ("400 MCM", 0.0529),
    ("500 MCM", 0.0424),
    ("600 MCM", 0.0353),
    ("750 MCM", 0.0282),
    ("1000 MCM", 0.0212),
)

_AWG_NUMBER = re.compile(r"^\d{1,2}(/0)?$")


def normalize_conductor_size(size: str) -> str:
    """
    Normalize a conductor size string for lookup.

    "12 AWG", "12awg", "#12" and "12" all become "12 AWG";
    "250 kcmil" and "250MCM" become "250 MCM".
    """
    text = str(size).strip().upper()
    text = re.sub(r"\s+", " ", text)

    if text.startswith("#"):
        text = text[1:].strip()

    for suffix in ("KCMIL", "MCM"):
        if text.endswith(suffix):
            return f"{text[:-len(suffix)].strip()} MCM"

    if text.endswith("AWG"):
        return f"{text[:-3].strip()} AWG"

    if _AWG_NUMBER.match(text):
        return f"{text} AWG"

    return text


class ConductorReferenceTable:
    """
    Lookup of resistance per 1000 ft by (conductor size, material).

    Usage:
        table = ConductorReferenceTable()
        r = table.resistance("12 AWG", ConductorMaterial.COPPER)  # 2.0
    """

    def __init__(
        self,
        tables: Optional[Dict[ConductorMaterial, Iterable[Tuple[str, float]]]] = None,
    ):
        """
        Initialize reference table.

        Args:
            tables: material -> ordered (size, ohms/kft) pairs, smallest
                conductor first. Defaults to the NEC copper/aluminum tables.

        Raises:
            ValueError: if a resistance is not positive or not strictly
                decreasing toward larger conductors
        """
        if tables is None:
            tables = {
                ConductorMaterial.COPPER: COPPER_RESISTANCE,
                ConductorMaterial.ALUMINUM: ALUMINUM_RESISTANCE,
            }

        self._order: Dict[ConductorMaterial, List[str]] = {}
        self._resistance: Dict[Tuple[str, ConductorMaterial], float] = {}

        for material, rows in tables.items():
            previous = None
            sizes = []
            for size, ohms in rows:
                size = normalize_conductor_size(size)
                if ohms <= 0:
                    raise ValueError(f"Resistance must be positive: {size} {material.value}")
                if previous is not None and ohms >= previous:
                    raise ValueError(
                        f"Resistance must decrease toward larger conductors: "
                        f"{size} {material.value} ({ohms} >= {previous})"
                    )
                sizes.append(size)
                self._resistance[(size, material)] = ohms
                previous = ohms
            self._order[material] = sizes

    def contains(self, size: str, material: ConductorMaterial) -> bool:
        """Check if a (size, material) pair is listed."""
        return (normalize_conductor_size(size), material) in self._resistance

    def resistance(self, size: str, material: ConductorMaterial) -> float:
        """
        Get resistance in ohms per 1000 ft.

        Raises:
            UnsupportedConductorSizeError: pair not in table
        """
        key = (normalize_conductor_size(size), material)
        try:
            return self._resistance[key]
        except KeyError:
            raise UnsupportedConductorSizeError(size, material) from None

    def sizes(self, material: ConductorMaterial) -> List[str]:
        """Supported sizes for a material, smallest conductor first."""
        return list(self._order.get(material, []))

    def larger_sizes(self, size: str, material: ConductorMaterial) -> List[str]:
        """
        Sizes from `size` (inclusive) toward the largest conductor.

        Raises:
            UnsupportedConductorSizeError: pair not in table
        """
        normalized = normalize_conductor_size(size)
        order = self._order.get(material, [])
        if normalized not in order:
            raise UnsupportedConductorSizeError(size, material)
        return order[order.index(normalized):]

    def largest(self, material: ConductorMaterial) -> Optional[str]:
        order = self._order.get(material)
        return order[-1] if order else None

    def items(self) -> List[Tuple[str, ConductorMaterial, float]]:
        """All (size, material, resistance) entries."""
        return [
            (size, material, self._resistance[(size, material)])
            for material, order in self._order.items()
            for size in order
        ]
