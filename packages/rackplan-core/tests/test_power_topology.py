"""
Tests for power topology resolution.

Covers source partitioning, port capacity resolution, port tables,
the reverse feed map and cross-rack flattening.
"""

import pytest
from rackplan_core.models import Device, DeviceKind, PowerPolicy, Rack
from rackplan_core.power.topology import (
    explicit_port_count,
    flatten_racks,
    heuristic_port_count,
    partition_devices,
    power_table_rows,
    resolve_port_capacity,
    resolve_power_topology,
)


def consumer(device_id, *connections, **kwargs):
    return Device(
        id=device_id,
        name=kwargs.pop("name", device_id),
        type=kwargs.pop("type", "server"),
        power_connections=[{"sourceId": s, "port": p} for s, p in connections],
        **kwargs,
    )


class TestPartition:
    """Test the split into sources and consumers."""

    def test_pdu_and_ups_are_sources(self):
        devices = [
            Device(id="p", type="PDU"),
            Device(id="u", type="Ups"),
            Device(id="s", type="server"),
            Device(id="x", type="mystery"),
        ]
        sources, consumers = partition_devices(devices)
        assert [d.id for d in sources] == ["p", "u"]
        assert [d.id for d in consumers] == ["s", "x"]

    def test_policy_source_kinds(self):
        policy = PowerPolicy(source_kinds=["pdu"])
        sources, _ = partition_devices([Device(id="p", type="pdu"), Device(id="u", type="ups")], policy)
        assert [d.id for d in sources] == ["p"]


class TestPortCapacity:
    """Test capacity resolution order and heuristics."""

    def test_explicit_precedence(self):
        """ports beats outlets, which beats port_count."""
        assert explicit_port_count(Device(id="p", type="pdu", port_count=8, outlets=12, ports=16)) == 16
        assert explicit_port_count(Device(id="p", type="pdu", port_count=8, outlets=12)) == 12
        assert explicit_port_count(Device(id="p", type="pdu", portCount="10")) == 10

    def test_outlet_list_counts_entries(self):
        assert explicit_port_count(Device(id="p", type="pdu", outlets=["A1", "A2", "B1"])) == 3

    def test_unusable_explicit_values_ignored(self):
        assert explicit_port_count(Device(id="p", type="pdu", port_count=0, outlets="many")) is None

    @pytest.mark.parametrize("highest,expected", [(1, 8), (5, 8), (8, 8), (9, 12), (12, 12), (13, 16), (30, 32)])
    def test_ups_rounds_to_multiple_of_four(self, highest, expected):
        assert heuristic_port_count(DeviceKind.UPS, highest) == expected

    @pytest.mark.parametrize("highest,expected", [(1, 8), (8, 8), (9, 16), (16, 16), (17, 24), (25, 48), (48, 48)])
    def test_pdu_snaps_to_standard_sizes(self, highest, expected):
        assert heuristic_port_count(DeviceKind.PDU, highest) == expected

    def test_pdu_beyond_largest_size_keeps_highest(self):
        assert heuristic_port_count(DeviceKind.PDU, 50) == 50

    def test_capacity_basis(self):
        assert resolve_port_capacity(Device(id="p", type="pdu", port_count=24), 3) == (24, "declared")
        assert resolve_port_capacity(Device(id="p", type="pdu"), 3) == (8, "heuristic")
        assert resolve_port_capacity(Device(id="p", type="pdu"), 0) == (8, "fallback")

    def test_policy_sizes(self):
        policy = PowerPolicy(pdu_port_sizes=[24, 12], fallback_ports=12)
        assert heuristic_port_count(DeviceKind.PDU, 5, policy) == 12
        assert resolve_port_capacity(Device(id="p", type="pdu"), 0, policy) == (12, "fallback")


class TestResolvePowerTopology:
    """Test resolved port tables and feeds."""

    def test_single_consumer_on_declared_pdu(self):
        """PDU-1 with 8 ports and Switch-1 on port 3."""
        devices = [
            Device(id="PDU-1", name="PDU-1", type="pdu", port_count=8),
            consumer("Switch-1", ("PDU-1", 3), type="switch"),
        ]
        source = resolve_power_topology(devices).source("PDU-1")

        assert source.total_ports == 8
        assert source.used_ports == 1
        assert [entry.port for entry in source.port_table] == list(range(1, 9))
        assert source.entry(3).is_used
        assert source.entry(3).consumer_id == "Switch-1"
        assert [entry.port for entry in source.port_table if not entry.is_used] == [1, 2, 4, 5, 6, 7, 8]
        assert all(entry.consumer_id is None for entry in source.port_table if not entry.is_used)

    def test_ups_heuristic_capacity(self):
        """UPS-1 with consumers on ports 1, 2 and 5 sizes to 8 ports."""
        devices = [
            Device(id="UPS-1", name="UPS-1", type="ups"),
            consumer("a", ("UPS-1", 1)),
            consumer("b", ("UPS-1", 2)),
            consumer("c", ("UPS-1", 5)),
        ]
        source = resolve_power_topology(devices).source("UPS-1")

        assert source.total_ports == 8
        assert source.capacity_basis == "heuristic"
        assert source.used_ports == 3

    def test_unreferenced_source_falls_back(self):
        source = resolve_power_topology([Device(id="p", type="pdu")]).source("p")
        assert source.total_ports == 8
        assert source.capacity_basis == "fallback"
        assert source.used_ports == 0

    def test_total_ports_covers_highest_referenced(self):
        """Declared capacity grows when devices reference higher ports."""
        devices = [Device(id="p", type="pdu", port_count=8), consumer("a", ("p", 12))]
        source = resolve_power_topology(devices).source("p")

        assert source.declared_ports == 8
        assert source.total_ports == 12
        assert source.entry(12).consumer_id == "a"

    def test_multi_corded_device(self):
        """A dual-corded device appears on both sources and in the feed map."""
        devices = [
            Device(id="pdu-a", type="pdu"),
            Device(id="pdu-b", type="pdu"),
            consumer("srv", ("pdu-a", 4), ("pdu-b", 4)),
        ]
        topology = resolve_power_topology(devices)

        assert topology.source("pdu-a").entry(4).consumer_id == "srv"
        assert topology.source("pdu-b").entry(4).consumer_id == "srv"
        assert [(a.source_id, a.port) for a in topology.feeds_for("srv")] == [("pdu-a", 4), ("pdu-b", 4)]

    def test_feeds_include_unknown_sources(self):
        topology = resolve_power_topology([consumer("srv", ("ghost", 2))])
        assert topology.sources == ()
        assert [(a.source_id, a.port) for a in topology.feeds_for("srv")] == [("ghost", 2)]

    def test_unusable_ports_skipped(self):
        devices = [Device(id="p", type="pdu"), consumer("srv", ("p", "left"), ("p", 0), ("p", "2"))]
        topology = resolve_power_topology(devices)

        assert [(a.source_id, a.port) for a in topology.feeds_for("srv")] == [("p", 2)]
        assert topology.source("p").used_ports == 1

    def test_shared_port_lists_all_claimants(self):
        """The first claimant owns the entry; every claimant is recorded."""
        devices = [Device(id="p", type="pdu"), consumer("a", ("p", 1)), consumer("b", ("p", 1))]
        entry = resolve_power_topology(devices).source("p").entry(1)

        assert entry.consumer_id == "a"
        assert entry.claimants == ("a", "b")

    def test_source_fed_by_source(self):
        """A PDU plugged into a UPS shows on the UPS table."""
        devices = [
            Device(id="ups", type="ups"),
            Device(id="pdu", type="pdu", power_connections=[{"sourceId": "ups", "port": 1}]),
        ]
        topology = resolve_power_topology(devices)
        assert topology.source("ups").entry(1).consumer_id == "pdu"
        assert [s.source_id for s in topology.sources] == ["ups", "pdu"]

    def test_numeric_ids_match(self):
        devices = [
            Device(id=7, type="pdu"),
            Device(id=8, type="server", power_connections=[{"pduId": 7, "portNumber": "2", "voltage": 230}]),
        ]
        entry = resolve_power_topology(devices).source("7").entry(2)
        assert entry.consumer_id == "8"
        assert entry.voltage == 230

    def test_idempotent(self):
        devices = [
            Device(id="p", type="pdu", port_count=16),
            consumer("a", ("p", 1)),
            consumer("b", ("p", 9), ("u", 3)),
            Device(id="u", type="ups"),
        ]
        assert resolve_power_topology(devices) == resolve_power_topology(devices)
        assert resolve_power_topology(devices).model_dump() == resolve_power_topology(list(devices)).model_dump()


class TestCrossRack:
    """Test flattening racks and the printable rows."""

    def test_flatten_tags_rack(self):
        racks = [
            Rack(id="R1", name="Rack A", devices=[Device(id="p", type="pdu")]),
            Rack(id="R2", devices=[consumer("srv", ("p", 2), name="db-01", start_unit=20)]),
        ]
        devices = flatten_racks(racks)

        assert [(d.id, d.rack_id, d.rack_name) for d in devices] == [("p", "R1", "Rack A"), ("srv", "R2", "R2")]
        assert racks[1].devices[0].rack_id is None

    def test_table_rows(self):
        racks = [
            Rack(id="R1", name="Rack A", devices=[Device(id="p", name="PDU-1", type="pdu", port_count=4)]),
            Rack(id="R2", name="Rack B", devices=[consumer("srv", ("p", 2), name="db-01", start_unit=20, unit_span=4)]),
        ]
        source = resolve_power_topology(flatten_racks(racks)).source("p")
        rows = power_table_rows(source)

        assert [r.port for r in rows] == [1, 2, 3, 4]
        assert rows[1].model_dump() == {
            "port": 2,
            "connected_device_name": "db-01",
            "rack_name": "Rack B",
            "position": "U20",
        }
        assert rows[0].connected_device_name == ""
        assert rows[0].position == ""
