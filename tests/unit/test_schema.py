"""
tests/unit/test_schema.py - Tests for external record conversion.
"""

import pytest
from pydantic import ValidationError

from cableway.core.enums import ConductorMaterial, ContainerKind
from cableway.schema import CableRecord, ConduitRecord, TrayRecord


class TestCableRecord:
    """Test camelCase cable records."""

    def test_camel_case_input(self):
        record = CableRecord.model_validate({
            "tag": "PWR-001",
            "fromLocation": "MCC-1",
            "toLocation": "P-101",
            "segregationClass": "Power 480VAC",
            "outerDiameter": 0.62,
            "route": "C-01, T-02",
        })
        cable = record.to_cable()

        assert cable.from_location == "MCC-1"
        assert cable.segregation_class == "Power 480VAC"
        assert cable.outer_diameter == 0.62
        assert cable.route == ("C-01", "T-02")

    @pytest.mark.parametrize("key", ["size", "conductorSize", "conductor_size"])
    def test_conductor_size_aliases(self, key):
        record = CableRecord.model_validate({"tag": "PWR-001", key: "10 AWG"})
        assert record.to_cable().conductor_size == "10 AWG"

    def test_route_list_joined(self):
        record = CableRecord.model_validate({"tag": "PWR-001", "route": ["C-01", " T-02 "]})
        assert record.route == "C-01,T-02"

    def test_material_parsing(self):
        record = CableRecord.model_validate({"tag": "PWR-001", "conductorMaterial": "aluminum"})
        assert record.conductor_material == ConductorMaterial.ALUMINUM

    def test_blank_material_defaults_to_copper(self):
        record = CableRecord.model_validate({"tag": "PWR-001", "conductorMaterial": ""})
        assert record.conductor_material == ConductorMaterial.COPPER

    def test_unknown_fields_ignored(self):
        record = CableRecord.model_validate({"tag": "PWR-001", "projectId": 7})
        assert record.tag == "PWR-001"

    def test_from_cable_round_trip(self, valid_cable):
        external = CableRecord.from_cable(valid_cable).to_external()

        assert external["conductorSize"] == "12 AWG"
        assert external["conductorMaterial"] == "Copper"
        assert external["route"] == "C-01"
        assert CableRecord.model_validate(external).to_cable() == valid_cable


class TestContainerRecords:
    """Test conduit and tray records."""

    def test_conduit(self):
        record = ConduitRecord.model_validate(
            {"tag": "C-01", "type": "EMT", "internalDiameter": 1.049, "fillPercentage": 12.5}
        )
        container = record.to_container()

        assert container.kind == ContainerKind.CONDUIT
        assert container.container_type == "EMT"
        assert container.fill_percentage == 12.5
        assert container.max_fill_percentage == 40.0

    def test_tray(self):
        container = TrayRecord.model_validate({"tag": "T-01", "width": 12, "height": 4}).to_container()
        assert container.kind == ContainerKind.TRAY
        assert container.internal_area == 48

    def test_rejects_non_positive_geometry(self):
        with pytest.raises(ValidationError):
            ConduitRecord.model_validate({"tag": "C-01", "internalDiameter": 0})
