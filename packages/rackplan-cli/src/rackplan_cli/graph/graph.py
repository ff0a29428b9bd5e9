import sys

import click
from rich.console import Console

from rackplan_cli.tools.options import inventory_option, policy_option


@click.group()
def graph():
    """Graphviz diagrams of the site."""
    pass


@graph.command()
@inventory_option
@policy_option
@click.option(
    "--output",
    type=click.Path(path_type=str, dir_okay=False),
    default="rackplan_power_topology.dot",
    show_default=True,
    help="Write the DOT source to this path.",
)
def power(inventory: str, policy: str, output: str) -> None:
    """Power topology: sources, fed devices and the ports between them."""
    from rackplan_core.data import load_rack_policy, load_site_inventory
    from rackplan_core.layout.memo import power_topology_for
    from rackplan_core.power import flatten_racks
    from rackplan_graph.render import render_power_topology

    console = Console()
    try:
        site = load_site_inventory(inventory)
        devices = flatten_racks(site.racks)
        topology = power_topology_for(devices, load_rack_policy(policy).power)
        dot = render_power_topology(devices, topology)
        with open(output, "w") as f:
            f.write(dot.source)
        console.print(f"[green]✓[/green] Power topology written to {output}")
    except Exception as e:
        console.print(f"[red]Error rendering power topology: {e}[/red]")
        sys.exit(1)
