import graphviz
from rackplan_core.models import Device, DeviceKind, PowerTopology

SOURCE_COLORS = {DeviceKind.UPS: "lightblue", DeviceKind.PDU: "lightgreen"}


def _node_id(device_id: str) -> str:
    return f"dev@{device_id}"


def render_power_topology(devices: list[Device], topology: PowerTopology) -> graphviz.Digraph:
    """
    Render the resolved power topology grouped by rack:
    - Each PDU/UPS is a filled ellipse labelled with its port usage.
    - Each fed device is a box.
    - Each edge runs from a source to the device it feeds, labelled with the port.
    """
    dot = graphviz.Digraph("rackplan_power_topology", format="svg")
    dot.attr(rankdir="LR")

    sources = {source.source_id: source for source in topology.sources}
    fed_ids = set(topology.feeds)
    shown = [d for d in devices if d.id in sources or d.id in fed_ids]

    by_rack: dict[str, list[Device]] = {}
    for device in shown:
        by_rack.setdefault(device.rack_name or device.rack_id or "unassigned", []).append(device)

    drawn: set[str] = set()
    for rack_name, rack_devices in by_rack.items():
        with dot.subgraph(name=f"cluster_{rack_name}") as c:
            c.attr(label=f"Rack: {rack_name}", style="rounded", color="gray")
            for device in rack_devices:
                if device.id in drawn:
                    continue
                drawn.add(device.id)
                source = sources.get(device.id)
                if source is not None:
                    c.node(
                        _node_id(device.id),
                        label=f"{source.source_name}\\n{source.kind.value.upper()} {source.used_ports}/{source.total_ports}",
                        shape="ellipse",
                        style="filled",
                        fillcolor=SOURCE_COLORS.get(source.kind, "orange"),
                    )
                else:
                    c.node(_node_id(device.id), label=f"{device.display_name}\\n{device.type}", shape="box")

    for device_id, assignments in topology.feeds.items():
        for assignment in assignments:
            if assignment.source_id not in sources:
                continue
            label = f"P{assignment.port}"
            if assignment.voltage is not None:
                label += f" {assignment.voltage}V"
            dot.edge(_node_id(assignment.source_id), _node_id(device_id), label=label)

    return dot
