from rackplan_core.layout.memo import rack_unit_map, utilization_for
from rackplan_core.layout.positions import rack_unit_labels
from rackplan_core.models import Rack, RackPolicy, UnitMap, UtilizationStats
from rich.console import Console
from rich.table import Table

console = Console()

STATUS_STYLES = {"low": "green", "moderate": "cyan", "warning": "yellow", "critical": "red"}


def elevation_rows(unit_map: UnitMap) -> list[tuple[str, str, str]]:
    """(unit label, marker, device label) per unit, top of the rack first."""
    rows = []
    for unit in rack_unit_labels(unit_map.height):
        occupancy = unit_map.get(unit)
        if occupancy is None:
            rows.append((f"{unit:02}", "[ ]", ""))
            continue
        marker = "[!]" if occupancy.has_conflict else ("[█]" if occupancy.is_first else "[■]")
        label = ""
        if occupancy.is_first:
            label = f"{occupancy.device.display_name} ({occupancy.device.type}, {occupancy.total_span}U)"
        if occupancy.has_conflict:
            label = (label + " " if label else "") + "overlaps " + ", ".join(
                d.display_name for d in occupancy.claimants if d.id != occupancy.device.id
            )
        rows.append((f"{unit:02}", marker, label))
    return rows


def utilization_line(stats: UtilizationStats) -> str:
    style = STATUS_STYLES.get(stats.status, "white")
    return (
        f"{stats.occupied}/{stats.total}U used, {stats.available}U free "
        f"[{style}]{stats.percentage}% ({stats.status})[/{style}]"
    )


def render_rack_layout(rack: Rack, policy: RackPolicy | None = None, out: Console = console) -> UnitMap:
    """Render a vertical rack view with device assignments."""
    policy = policy or RackPolicy()
    height = rack.resolved_height(policy.default_height)
    unit_map = rack_unit_map(rack, policy.default_height)
    stats = utilization_for(rack.devices, height, policy.utilization)

    table = Table(title=f"Rack Layout: {rack.display_name} ({height}U)", box=None, show_header=False)
    table.add_column("U")
    table.add_column("Occupied")
    table.add_column("Device")

    for row in elevation_rows(unit_map):
        table.add_row(*row)

    out.print(table)
    out.print(utilization_line(stats))
    return unit_map


def render_utilization(racks: list[Rack], policy: RackPolicy | None = None, out: Console = console) -> list[UtilizationStats]:
    """Summary table of utilization for every rack."""
    policy = policy or RackPolicy()
    table = Table(title="Rack Utilization")
    table.add_column("Rack", style="cyan")
    table.add_column("Used", justify="right")
    table.add_column("Free", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Status")

    results = []
    for rack in racks:
        height = rack.resolved_height(policy.default_height)
        stats = utilization_for(rack.devices, height, policy.utilization)
        style = STATUS_STYLES.get(stats.status, "white")
        table.add_row(
            rack.display_name,
            str(stats.occupied),
            str(stats.available),
            str(stats.total),
            str(stats.percentage),
            f"[{style}]{stats.status}[/{style}]",
        )
        results.append(stats)

    out.print(table)
    return results
