"""
Power topology resolution.

Turns the flat, cross-rack device list into one table per power source
(which device sits on which outlet) and the reverse map from each fed device
to the outlets it occupies. Every view of power data, whether the terminal
tables, the exports or the graph, goes through `resolve_power_topology` so
they cannot disagree.
"""

import logging
import math
from typing import Iterable

from rackplan_core.codebase.debug import spy_trace
from rackplan_core.layout.positions import parse_int, position_label
from rackplan_core.models.device import Device, PowerConnection, Rack
from rackplan_core.models.device_type import DeviceKind
from rackplan_core.models.power import (
    CapacityBasis,
    PortAssignment,
    PortEntry,
    PowerPolicy,
    PowerTableRow,
    PowerTopology,
    SourceTopology,
)

logger = logging.getLogger(__name__)

DEFAULT_POWER_POLICY = PowerPolicy()

# source_id -> port -> [(device, connection), ...] in declaration order
PortClaims = dict[str, dict[int, list[tuple[Device, PowerConnection]]]]


def flatten_racks(racks: Iterable[Rack]) -> list[Device]:
    """All devices across racks, tagged with the rack they are mounted in."""
    devices = []
    for rack in racks:
        for device in rack.devices:
            devices.append(device.model_copy(update={"rack_id": rack.id, "rack_name": rack.display_name}))
    return devices


def is_power_source(device: Device, policy: PowerPolicy = DEFAULT_POWER_POLICY) -> bool:
    return device.kind in policy.source_kinds


def partition_devices(
    devices: Iterable[Device], policy: PowerPolicy = DEFAULT_POWER_POLICY
) -> tuple[list[Device], list[Device]]:
    """Split devices into (sources, consumers)."""
    sources, consumers = [], []
    for device in devices:
        (sources if is_power_source(device, policy) else consumers).append(device)
    return sources, consumers


def explicit_port_count(device: Device) -> int | None:
    """Port count the record declares itself: `ports`, then `outlets`, then `port_count`."""
    for raw in (device.ports, device.outlets, device.port_count):
        count = len(raw) if isinstance(raw, tuple) else parse_int(raw)
        if count is not None and count > 0:
            return count
    return None


def heuristic_port_count(kind: DeviceKind, highest_port: int, policy: PowerPolicy = DEFAULT_POWER_POLICY) -> int:
    """Standard outlet count that fits `highest_port` for a source of this kind."""
    if highest_port < 1:
        return policy.fallback_ports
    if kind == DeviceKind.UPS:
        multiple = policy.ups_port_multiple
        return max(policy.ups_min_ports, math.ceil(highest_port / multiple) * multiple)
    if kind == DeviceKind.PDU:
        return next((size for size in policy.pdu_port_sizes if size >= highest_port), highest_port)
    return max(policy.fallback_ports, highest_port)


def resolve_port_capacity(
    source: Device, highest_port: int, policy: PowerPolicy = DEFAULT_POWER_POLICY
) -> tuple[int, CapacityBasis]:
    """(port count, where it came from) before growth to cover referenced ports."""
    explicit = explicit_port_count(source)
    if explicit is not None:
        return explicit, "declared"
    if highest_port >= 1:
        return heuristic_port_count(source.kind, highest_port, policy), "heuristic"
    return policy.fallback_ports, "fallback"


def collect_port_claims(devices: Iterable[Device]) -> tuple[PortClaims, dict[str, tuple[PortAssignment, ...]]]:
    """Scan every declared connection; returns (claims per source port, feeds per device)."""
    claims: PortClaims = {}
    feeds: dict[str, tuple[PortAssignment, ...]] = {}
    for device in devices:
        assignments = []
        for connection in device.power_connections:
            port = parse_int(connection.port)
            if port is None or port < 1:
                logger.debug(
                    "ignoring connection %s -> %s: unusable port %r", device.id, connection.source_id, connection.port
                )
                continue
            assignments.append(PortAssignment(source_id=connection.source_id, port=port, voltage=connection.voltage))
            claims.setdefault(connection.source_id, {}).setdefault(port, []).append((device, connection))
        if assignments:
            feeds[device.id] = feeds.get(device.id, ()) + tuple(assignments)
    return claims, feeds


def _port_entry(port: int, claimants: list[tuple[Device, PowerConnection]]) -> PortEntry:
    if not claimants:
        return PortEntry(port=port)
    consumer, connection = claimants[0]
    return PortEntry(
        port=port,
        is_used=True,
        consumer_id=consumer.id,
        consumer_name=consumer.display_name,
        rack_name=consumer.rack_name or consumer.rack_id,
        position=position_label(consumer),
        voltage=connection.voltage,
        claimants=tuple(device.id for device, _ in claimants),
    )


@spy_trace
def resolve_power_topology(devices: Iterable[Device], policy: PowerPolicy = DEFAULT_POWER_POLICY) -> PowerTopology:
    """Resolve every power source's port table and the reverse feed map.

    Sources are devices whose kind is one of `policy.source_kinds`. Port
    tables are filled from the connections of every device, so a PDU fed by a
    UPS shows up on the UPS table. Stateless: the same devices always give an
    equal topology.
    """
    devices = list(devices)
    sources, _ = partition_devices(devices, policy)
    claims, feeds = collect_port_claims(devices)

    resolved = []
    seen: set[str] = set()
    for source in sources:
        if source.id in seen:
            logger.debug("duplicate power source id %s; keeping the first", source.id)
            continue
        seen.add(source.id)

        port_claims = claims.get(source.id, {})
        highest = max(port_claims, default=0)
        declared, basis = resolve_port_capacity(source, highest, policy)
        total = max(declared, highest)

        table = tuple(_port_entry(port, port_claims.get(port, [])) for port in range(1, total + 1))
        resolved.append(
            SourceTopology(
                source_id=source.id,
                source_name=source.display_name,
                kind=source.kind,
                rack_id=source.rack_id,
                total_ports=total,
                declared_ports=declared,
                used_ports=len([entry for entry in table if entry.is_used]),
                capacity_basis=basis,
                port_table=table,
            )
        )

    return PowerTopology(sources=tuple(resolved), feeds=feeds)


def power_table_rows(source: SourceTopology) -> list[PowerTableRow]:
    """(port, connected device, rack, position) rows for one source."""
    return [
        PowerTableRow(
            port=entry.port,
            connected_device_name=entry.consumer_name or "",
            rack_name=entry.rack_name or "",
            position=entry.position or "",
        )
        for entry in source.port_table
    ]
