from pathlib import Path

import yaml
from rackplan_core.models import ValidationResult
from rich.console import Console
from rich.table import Table

SEVERITY_COLORS = {"FAIL": "red", "WARN": "yellow", "INFO": "blue"}


def render_findings(result: ValidationResult, title: str, out: Console) -> None:
    """Print a severity summary table followed by each finding."""
    summary = result.summary
    table = Table(title=title)
    table.add_column("Severity", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("INFO", str(summary["info"]), style="blue")
    table.add_row("WARN", str(summary["warn"]), style="yellow")
    table.add_row("FAIL", str(summary["fail"]), style="red")
    out.print(table)

    if not result.findings:
        out.print("\n[green]✓ All validation checks passed[/green]")
        return

    for finding in result.findings:
        color = SEVERITY_COLORS.get(finding.severity, "white")
        out.print(f"[{color}]{finding.severity}[/{color}] {finding.code}: {finding.message}")


def export_findings(result: ValidationResult, export_path: str | Path) -> None:
    with open(export_path, "w") as f:
        yaml.dump(result.model_dump(mode="json"), f, default_flow_style=False, sort_keys=True)


def exit_code(result: ValidationResult, strict: bool = False) -> int:
    """0 when clean, 1 on failures, 2 on warnings in strict mode."""
    summary = result.summary
    if summary["fail"] > 0:
        return 1
    if strict and summary["warn"] > 0:
        return 2
    return 0
