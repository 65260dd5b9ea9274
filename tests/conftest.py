"""
Cableway Test Configuration and Fixtures

Shared cable and container builders for unit and integration tests.
"""

import pytest

from cableway.core.enums import ContainerKind
from cableway.core.models import Cable, RoutingContainer


def build_cable(**overrides) -> Cable:
    """Build a cable that passes field validation, with overrides."""
    fields = dict(
        tag="CBL-001",
        description="MCC-1 to pump P-101 motor feed",
        voltage=480.0,
        current=20.0,
        conductor_size="12 AWG",
        function="Power",
        cable_type="XLPE",
        cores=3,
        segregation_class="Power 480VAC",
        from_location="MCC-1",
        to_location="P-101",
        length=150.0,
        route="C-01",
        outer_diameter=0.5,
    )
    fields.update(overrides)
    return Cable(**fields)


@pytest.fixture
def valid_cable() -> Cable:
    """A cable with every field valid."""
    return build_cable()


@pytest.fixture
def make_cable():
    """
    Factory fixture for cables.

    Usage:
        cable = make_cable(tag="PWR-002", voltage=-5)
    """
    return build_cable


@pytest.fixture
def conduit() -> RoutingContainer:
    """1 inch EMT conduit."""
    return RoutingContainer(
        tag="C-01",
        kind=ContainerKind.CONDUIT,
        container_type="EMT",
        internal_diameter=1.049,
    )


@pytest.fixture
def tray() -> RoutingContainer:
    """12 x 4 inch ladder tray."""
    return RoutingContainer(
        tag="T-01",
        kind=ContainerKind.TRAY,
        container_type="Ladder",
        width=12.0,
        height=4.0,
    )
