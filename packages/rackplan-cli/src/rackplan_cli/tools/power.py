import sys
from typing import Optional

import click
from rich.console import Console

from .options import inventory_option, policy_option, strict_option


@click.group()
def power() -> None:
    """PDU/UPS outlet tables and connection checks."""
    pass


@power.command()
@inventory_option
@policy_option
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    help="Write the power tables to this path (YAML/CSV).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["yaml", "csv"], case_sensitive=False),
    default="yaml",
    show_default=True,
    help="Export format.",
)
def tables(inventory: str, policy: str, export: Optional[str], fmt: str) -> None:
    """Per-source port tables across all racks."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_core.layout.memo import power_topology_for
    from rackplan_core.power import flatten_racks
    from rackplan_tools.power_tables import export_power_tables, render_power_tables

    console = Console()
    try:
        console.print("\n[bold cyan]Power Outlet Mapping[/bold cyan]")
        site = load_site_inventory(inventory)
        rack_policy = load_rack_policy(policy)
        topology = power_topology_for(flatten_racks(site.racks), rack_policy.power)

        render_power_tables(topology, out=console)
        if export:
            export_power_tables(topology, export, fmt)
            console.print(f"\n[green]✓[/green] Power tables exported to {export}")
    except Exception as e:
        console.print(f"[red]Error building power tables: {e}[/red]")
        sys.exit(1)


@power.command()
@inventory_option
@policy_option
@strict_option
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    help="Export validation findings to YAML file.",
)
def validate(inventory: str, policy: str, strict: bool, export: Optional[str]) -> None:
    """Check power connections for shared ports, unknown sources and bad port numbers."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_core.layout.memo import power_topology_for
    from rackplan_core.power import flatten_racks
    from rackplan_core.validation import validate_power
    from rackplan_tools.findings import exit_code, export_findings, render_findings

    console = Console()
    try:
        console.print("\n[bold cyan]Power Connection Validation[/bold cyan]")
        site = load_site_inventory(inventory)
        rack_policy = load_rack_policy(policy)
        devices = flatten_racks(site.racks)
        result = validate_power(devices, power_topology_for(devices, rack_policy.power), rack_policy.power)

        if export:
            export_findings(result, export)
            console.print(f"[green]✓[/green] Findings exported to {export}")

        render_findings(result, "Validation Summary", console)
        code = exit_code(result, strict)
    except Exception as e:
        console.print(f"[red]Error during validation: {e}[/red]")
        sys.exit(1)
    sys.exit(code)
