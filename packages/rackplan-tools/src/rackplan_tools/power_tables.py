"""Per-source power outlet tables for the terminal and for export."""

import csv
import logging
from pathlib import Path

from rackplan_core.models import PowerTopology
from rackplan_core.power.topology import power_table_rows
from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)

console = Console()

TABLE_HEADERS = ["Port", "Connected Device", "Rack", "Position"]


def render_power_tables(topology: PowerTopology, out: Console = console) -> None:
    """Print one table per PDU/UPS with its outlet assignments."""
    if not topology.sources:
        out.print("[yellow]No PDU or UPS devices found for power outlet mapping[/yellow]")
        return

    out.print(f"Power Sources Found: {len(topology.sources)} PDU/UPS devices")
    for source in topology.sources:
        title = (
            f"{source.source_name} ({source.kind.value.upper()}) "
            f"{source.used_ports}/{source.total_ports} ports used"
        )
        table = Table(title=title)
        for header in TABLE_HEADERS:
            table.add_column(header, justify="right" if header == "Port" else "left")

        for row in power_table_rows(source):
            table.add_row(str(row.port), row.connected_device_name, row.rack_name, row.position)

        out.print(table)
        if source.total_ports > source.declared_ports:
            out.print(
                f"[yellow]⚠[/yellow] {source.source_name} declares {source.declared_ports} ports "
                f"but devices reference port {source.total_ports}"
            )


def export_power_tables(topology: PowerTopology, export_path: str | Path, export_format: str = "yaml") -> None:
    """Write the power tables as CSV (one row per port) or YAML (grouped by source)."""
    export_path = Path(export_path)
    export_path.parent.mkdir(parents=True, exist_ok=True)

    if export_format.lower() == "csv":
        with open(export_path, "w", newline="") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(["Source", *TABLE_HEADERS])
            for source in topology.sources:
                for row in power_table_rows(source):
                    writer.writerow([source.source_name, row.port, row.connected_device_name, row.rack_name, row.position])
    else:
        # local import to keep yaml scoped to this function only
        import yaml

        output_data = {
            "metadata": {
                "generated_by": "rackplan power tables",
                "sources": len(topology.sources),
            },
            "sources": [
                {
                    "source_id": source.source_id,
                    "source_name": source.source_name,
                    "kind": source.kind.value,
                    "total_ports": source.total_ports,
                    "used_ports": source.used_ports,
                    "capacity_basis": source.capacity_basis,
                    "rows": [row.model_dump() for row in power_table_rows(source)],
                }
                for source in topology.sources
            ],
        }
        with open(export_path, "w") as yamlfile:
            yaml.dump(output_data, yamlfile, default_flow_style=False, sort_keys=False)

    logger.info("exported %d power tables to %s", len(topology.sources), export_path)
