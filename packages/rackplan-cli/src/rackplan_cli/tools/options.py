import click

inventory_option = click.option(
    "--inventory",
    type=click.Path(path_type=str, dir_okay=False, exists=False),
    default="site/inventory.yaml",
    show_default=True,
    help="Site inventory YAML/JSON (racks and their devices).",
)

policy_option = click.option(
    "--policy",
    type=click.Path(path_type=str, dir_okay=False, exists=False),
    default="site/rack-policy.yaml",
    show_default=True,
    help="Rack policy YAML (thresholds, device type spans, power sizing). Defaults apply when missing.",
)

strict_option = click.option(
    "--strict",
    is_flag=True,
    help="Treat warnings as failures (exit code 2).",
)
