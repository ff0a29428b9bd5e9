from .findings import exit_code, export_findings, render_findings
from .layout import render_rack_layout, render_utilization
from .power_tables import export_power_tables, render_power_tables

__all__ = [
    "exit_code",
    "export_findings",
    "export_power_tables",
    "render_findings",
    "render_power_tables",
    "render_rack_layout",
    "render_utilization",
]
