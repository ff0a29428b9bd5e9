import logging

import click
from rackplan_cli.graph.graph import graph
from rackplan_cli.tools.power import power
from rackplan_cli.tools.rack import rack
from rackplan_core.codebase.debug import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug details from the rack model.")
def cli(verbose: bool):
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


# add cli groups here

cli.add_command(rack)
cli.add_command(power)
cli.add_command(graph)
