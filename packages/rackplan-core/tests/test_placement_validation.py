"""
Tests for placement validation.

Covers single-candidate checks, conflict lookup and whole-rack validation.
"""

import pytest
from rackplan_core.layout.unit_map import build_unit_map
from rackplan_core.models import Device, Rack
from rackplan_core.models.device_type import DeviceTypeOverride, TypeRegistry
from rackplan_core.validation.placement import find_conflicts, validate_placement, validate_rack


def codes(result):
    return [f.code for f in result.findings]


@pytest.fixture
def occupied_map():
    """42U rack with a 2U server at U40 and a 1U switch at U20."""
    devices = [
        Device(id="srv-1", name="web-01", type="server", start_unit=40, unit_span=2),
        Device(id="sw-1", name="core-switch", type="switch", start_unit=20, unit_span=1),
    ]
    return build_unit_map(devices, 42)


class TestValidatePlacement:
    """Test each placement check."""

    def test_valid_placement(self, occupied_map):
        candidate = Device(id="new", name="new", type="server", start_unit=10, unit_span=2)
        result = validate_placement(candidate, occupied_map, 42)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.parametrize("start", [None, "", "   "])
    def test_missing_start_unit(self, occupied_map, start):
        result = validate_placement(Device(id="new", start_unit=start), occupied_map, 42)

        assert not result.is_valid
        assert codes(result) == ["PLACEMENT_START_MISSING"]
        assert result.errors == ["Device must have a start unit"]

    def test_non_numeric_start_unit(self, occupied_map):
        result = validate_placement(Device(id="new", start_unit="top"), occupied_map, 42)
        assert codes(result) == ["PLACEMENT_START_INVALID"]

    @pytest.mark.parametrize("start", [0, 43, 100])
    def test_start_out_of_range(self, occupied_map, start):
        result = validate_placement(Device(id="new", start_unit=start), occupied_map, 42)

        assert not result.is_valid
        assert "PLACEMENT_START_OUT_OF_RANGE" in codes(result)
        assert "Start unit must be between 1 and 42" in result.errors

    @pytest.mark.parametrize("span", [0, -1])
    def test_span_below_one(self, occupied_map, span):
        result = validate_placement(Device(id="new", start_unit=10, unit_span=span), occupied_map, 42)

        assert codes(result) == ["PLACEMENT_SPAN_INVALID"]
        assert result.errors == ["Unit span must be at least 1"]

    def test_non_numeric_span(self, occupied_map):
        result = validate_placement(Device(id="new", start_unit=10, unit_span="big"), occupied_map, 42)
        assert codes(result) == ["PLACEMENT_SPAN_INVALID"]

    def test_extends_below_unit_one(self, occupied_map):
        result = validate_placement(Device(id="new", start_unit=2, unit_span=3), occupied_map, 42)

        assert codes(result) == ["PLACEMENT_BELOW_UNIT_1"]
        assert result.errors == ["Device extends below unit 1"]

    def test_overlap_names_occupier(self, occupied_map):
        """Overlapping an existing device is an error naming that device."""
        candidate = Device(id="new", name="new", type="server", start_unit=41, unit_span=2)
        result = validate_placement(candidate, occupied_map, 42)

        assert not result.is_valid
        assert result.errors == ["Unit 40 is already occupied by web-01"]
        assert result.findings[0].context["occupied_by"] == "srv-1"

    def test_overlap_reported_per_unit(self, occupied_map):
        candidate = Device(id="new", start_unit=40, unit_span=2)
        result = validate_placement(candidate, occupied_map, 42)

        assert result.errors == [
            "Unit 40 is already occupied by web-01",
            "Unit 39 is already occupied by web-01",
        ]

    def test_same_device_does_not_conflict_with_itself(self, occupied_map):
        """Editing a device in place is not a conflict."""
        edited = Device(id="srv-1", name="web-01", type="server", start_unit=40, unit_span=2, status="retired")
        assert validate_placement(edited, occupied_map, 42).is_valid

    def test_all_problems_reported_together(self, occupied_map):
        """Checks accumulate instead of stopping at the first error."""
        candidate = Device(id="new", type="switch", start_unit=43, unit_span=45)
        result = validate_placement(candidate, occupied_map, 42)

        assert codes(result) == [
            "PLACEMENT_START_OUT_OF_RANGE",
            "PLACEMENT_BELOW_UNIT_1",
            "PLACEMENT_UNIT_OCCUPIED",
            "PLACEMENT_UNIT_OCCUPIED",
            "PLACEMENT_UNIT_OCCUPIED",
            "PLACEMENT_SPAN_EXCEEDS_TYPE",
        ]

    def test_span_over_type_max_is_warning(self, occupied_map):
        """Exceeding a type's usual span warns without blocking."""
        candidate = Device(id="new", type="Switch", start_unit=10, unit_span=3)
        result = validate_placement(candidate, occupied_map, 42)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == ["Switch devices typically don't exceed 2U"]

    def test_unknown_type_has_no_span_warning(self, occupied_map):
        candidate = Device(id="new", type="blade-chassis", start_unit=30, unit_span=10)
        assert validate_placement(candidate, occupied_map, 42).warnings == []

    def test_registry_override_changes_warning(self, occupied_map):
        registry = TypeRegistry.default().with_overrides({"switch": DeviceTypeOverride(max_span=4)})
        candidate = Device(id="new", type="switch", start_unit=10, unit_span=3)
        assert validate_placement(candidate, occupied_map, 42, registry).warnings == []

    def test_overlapping_claimants_all_reported(self):
        """Units already contested report every other claimant."""
        unit_map = build_unit_map(
            [Device(id="a", name="A", start_unit=10), Device(id="b", name="B", start_unit=10)], 42
        )
        result = validate_placement(Device(id="c", start_unit=10), unit_map, 42)
        assert result.errors == ["Unit 10 is already occupied by A", "Unit 10 is already occupied by B"]

    def test_serialized_shape(self, occupied_map):
        """Dumped results carry is_valid, errors and warnings for form callers."""
        dumped = validate_placement(Device(id="new", start_unit=40), occupied_map, 42).model_dump()
        assert dumped["is_valid"] is False
        assert dumped["errors"] == ["Unit 40 is already occupied by web-01"]
        assert dumped["warnings"] == []


class TestFindConflicts:
    """Test conflict lookup for a prospective range."""

    def test_conflicting_units(self, occupied_map):
        conflicts = find_conflicts(41, 3, occupied_map)
        assert [(unit, device.id) for unit, device in conflicts] == [(40, "srv-1"), (39, "srv-1")]

    def test_free_range(self, occupied_map):
        assert find_conflicts(10, 2, occupied_map) == []

    def test_unusable_input(self, occupied_map):
        assert find_conflicts(None, 2, occupied_map) == []
        assert find_conflicts(10, "x", occupied_map) == []


class TestValidateRack:
    """Test whole-rack validation."""

    def test_clean_rack(self):
        rack = Rack(id="R1", name="Rack A", height=42, devices=[
            Device(id="a", name="A", start_unit=42, unit_span=2),
            Device(id="b", name="B", start_unit=10),
        ])
        result = validate_rack(rack)
        assert result.is_valid
        assert result.findings == []

    def test_overlap_reported_once_on_later_device(self):
        rack = Rack(id="R1", height=42, devices=[
            Device(id="a", name="A", start_unit=10, unit_span=2),
            Device(id="b", name="B", start_unit=9, unit_span=2),
        ])
        result = validate_rack(rack)

        assert result.errors == ["B: Unit 9 is already occupied by A"]
        assert result.findings[0].context["rack_id"] == "R1"
        assert result.findings[0].context["device_id"] == "b"

    def test_uses_default_height_when_rack_has_none(self):
        rack = Rack(id="R1", devices=[Device(id="a", name="A", start_unit=46)])
        assert validate_rack(rack).errors == ["A: Start unit must be between 1 and 45"]
        assert validate_rack(rack, default_height=48).is_valid

    def test_duplicate_ids(self):
        rack = Rack(id="R1", name="Rack A", devices=[
            Device(id="a", name="A", start_unit=10),
            Device(id="a", name="A again", start_unit=20),
        ])
        result = validate_rack(rack)
        assert [f.code for f in result.findings] == ["PLACEMENT_DUPLICATE_ID"]

    def test_malformed_devices_surface(self):
        rack = Rack(id="R1", devices=[Device(id="a", name="A"), Device(id="b", name="B", start_unit=5, unit_span="x")])
        result = validate_rack(rack)
        assert [f.code for f in result.findings] == ["PLACEMENT_START_MISSING", "PLACEMENT_SPAN_INVALID"]
