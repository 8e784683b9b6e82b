"""Report aggregation and console rendering."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core import Analysis
from .settings import Settings

RUNTIME_NOTE = "Note: Some may be required at runtime (e.g., react-dom)."


def aggregate(analysis: Analysis, settings: Settings) -> dict[str, Any]:
    """Return a JSON-friendly summary of an analysis.

    Lists are sorted so that two runs over the same tree produce identical
    output.
    """
    return {
        "version": "1",
        "project": str(analysis.manifest_path),
        "hasUnused": bool(analysis.unused),
        "settings": {
            "extensions": list(settings.extensions),
            "ignoreFolders": list(settings.ignore_folders),
            "dependencySections": list(settings.dependency_sections),
        },
        "totals": {
            "exploredFiles": len(analysis.scan.explored),
            "ignoredPaths": len(analysis.scan.ignored),
            "dependencies": len(analysis.declared),
            "used": len(analysis.used),
            "unused": len(analysis.unused),
            "required": len(analysis.required & analysis.declared),
            "ignored": len(analysis.ignored & analysis.declared),
        },
        "used": analysis.sorted_used(),
        "unused": analysis.sorted_unused(),
    }


def build_table(analysis: Analysis, settings: Settings) -> Table:
    table = Table("Metric", "Value")
    table.add_row("Project", escape(str(analysis.manifest_path)))
    table.add_row("Extensions", ", ".join(settings.extensions))
    table.add_row("Ignored Folders", ", ".join(settings.ignore_folders))
    table.add_row("Explored Files", str(len(analysis.scan.explored)))
    table.add_row("Ignored Paths", str(len(analysis.scan.ignored)))
    table.add_row("Total Dependencies", str(len(analysis.declared)))
    table.add_row("Used Dependencies", f"[green]{len(analysis.used)}[/]")
    table.add_row("Unused Dependencies", f"[red]{len(analysis.unused)}[/]")
    return table


def print_report(analysis: Analysis, settings: Settings, console: Console) -> None:
    """Print the metrics table and the sorted used and unused lists."""
    console.print("\n[bold blue]Dependency Usage Report[/]")
    console.print(build_table(analysis, settings))

    if analysis.used:
        console.print("\n[bold green]Used Dependencies:[/]")
        for name in analysis.sorted_used():
            console.print(f"- [green]{escape(name)}[/]")

    if analysis.unused:
        console.print("\n[bold red]Unused Dependencies:[/]")
        console.print(f"[yellow]{RUNTIME_NOTE}[/]")
        for name in analysis.sorted_unused():
            console.print(f"- [red]{escape(name)}[/]")
    else:
        console.print("\n[bold green]No unused dependencies found![/]")
