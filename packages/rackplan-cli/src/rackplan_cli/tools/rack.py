import sys
from typing import Optional

import click
from rich.console import Console

from .options import inventory_option, policy_option, strict_option


@click.group()
def rack() -> None:
    """Rack elevation, utilization and placement checks."""
    pass


@rack.command()
@inventory_option
@policy_option
@click.option("--rack-id", type=str, required=True, help="Rack id or name to render.")
def layout(inventory: str, policy: str, rack_id: str) -> None:
    """Render a front elevation layout for a rack."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_tools.layout import render_rack_layout

    console = Console()
    try:
        site = load_site_inventory(inventory)
        render_rack_layout(site.get_rack(rack_id), load_rack_policy(policy), out=console)
    except Exception as e:
        console.print(f"[red]Error rendering rack layout: {e}[/red]")
        sys.exit(1)


@rack.command()
@inventory_option
@policy_option
def utilization(inventory: str, policy: str) -> None:
    """Show occupied/free units and alert status for every rack."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_tools.layout import render_utilization

    console = Console()
    try:
        site = load_site_inventory(inventory)
        render_utilization(site.racks, load_rack_policy(policy), out=console)
    except Exception as e:
        console.print(f"[red]Error computing utilization: {e}[/red]")
        sys.exit(1)


@rack.command()
@inventory_option
@policy_option
@strict_option
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    help="Export validation findings to YAML file.",
)
def validate(inventory: str, policy: str, strict: bool, export: Optional[str]) -> None:
    """Check every rack for overlapping, out-of-range and malformed placements."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_core.models import ValidationResult
    from rackplan_core.validation import validate_rack
    from rackplan_tools.findings import exit_code, export_findings, render_findings

    console = Console()
    try:
        console.print("\n[bold cyan]Rack Placement Validation[/bold cyan]")
        site = load_site_inventory(inventory)
        rack_policy = load_rack_policy(policy)
        registry = rack_policy.type_registry()

        result = ValidationResult()
        for r in site.racks:
            result = result.merged(validate_rack(r, registry, rack_policy.default_height))

        if export:
            export_findings(result, export)
            console.print(f"[green]✓[/green] Findings exported to {export}")

        render_findings(result, "Validation Summary", console)
        code = exit_code(result, strict)
    except Exception as e:
        console.print(f"[red]Error during validation: {e}[/red]")
        sys.exit(1)
    sys.exit(code)


@rack.command()
@inventory_option
@policy_option
@click.option("--rack-id", type=str, required=True, help="Rack id or name to place the device in.")
@click.option("--start-unit", type=str, required=True, help="Topmost unit of the device.")
@click.option("--span", type=str, default="1", show_default=True, help="Units the device occupies.")
@click.option("--type", "device_type", type=str, default="other", show_default=True, help="Device type tag.")
@click.option("--device-id", type=str, default="candidate", show_default=True, help="Id of the device being placed (an existing id means edit).")
@click.option("--name", type=str, default="", help="Display name of the device.")
def check(
    inventory: str,
    policy: str,
    rack_id: str,
    start_unit: str,
    span: str,
    device_type: str,
    device_id: str,
    name: str,
) -> None:
    """Validate a prospective device placement before recording it."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_core.layout.memo import rack_unit_map
    from rackplan_core.models import Device
    from rackplan_core.validation import validate_placement
    from rackplan_tools.findings import render_findings

    console = Console()
    try:
        site = load_site_inventory(inventory)
        rack_policy = load_rack_policy(policy)
        target = site.get_rack(rack_id)
        candidate = Device(id=device_id, name=name, type=device_type, start_unit=start_unit, unit_span=span)

        result = validate_placement(
            candidate,
            rack_unit_map(target, rack_policy.default_height),
            target.resolved_height(rack_policy.default_height),
            rack_policy.type_registry(),
        )
        render_findings(result, f"Placement Check: {target.display_name}", console)
    except Exception as e:
        console.print(f"[red]Error checking placement: {e}[/red]")
        sys.exit(1)
    sys.exit(0 if result.is_valid else 1)
