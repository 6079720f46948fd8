"""Rich rendering helpers for DepGraph CLI output."""

from __future__ import annotations

from typing import Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .impact_calculator import is_test_file
from .models import BreakingChange, ChangeImpactResult, ChangeType, GraphStats, ImpactLevel

console = Console()

_LEVEL_COLORS: Dict[ImpactLevel, str] = {
    ImpactLevel.LOW: "green",
    ImpactLevel.MEDIUM: "yellow",
    ImpactLevel.HIGH: "red",
    ImpactLevel.CRITICAL: "bold red",
}

_CHANGE_LABELS: Dict[ChangeType, str] = {
    ChangeType.REMOVED: "[red]removed[/red]",
    ChangeType.SIGNATURE_CHANGED: "[yellow]signature changed[/yellow]",
}


def render_stats(stats: GraphStats, import_targets: int) -> None:
    if stats.last_built is None:
        console.print(Panel(
            "[bold]Status:[/bold] Not built yet\n\nRun [cyan]dg build[/cyan] to build the dependency graph.",
            title="Dependency Graph",
            expand=False,
        ))
        return

    table = Table(title="Dependency Graph", show_header=True, show_lines=False)
    table.add_column("Metric", style="cyan", width=18)
    table.add_column("Value", justify="right")
    table.add_row("Files analyzed", str(stats.file_count))
    table.add_row("Total imports", str(stats.total_imports))
    table.add_row("Total exports", str(stats.total_exports))
    if stats.file_count:
        table.add_row("Avg imports/file", f"{stats.total_imports / stats.file_count:.1f}")
        table.add_row("Avg exports/file", f"{stats.total_exports / stats.file_count:.1f}")
    table.add_row("Import targets", str(import_targets))
    table.add_row("Last built", stats.last_built.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(table)


def render_dependents(file: str, dependents: List[str]) -> None:
    if not dependents:
        console.print(f"[green]No files import[/green] [cyan]{file}[/cyan]")
        return
    console.print(f"[bold]{len(dependents)}[/bold] file(s) import [cyan]{file}[/cyan]:")
    for dependent in dependents:
        console.print(f"  - {dependent}")


def render_impact(result: ChangeImpactResult) -> None:
    color = _LEVEL_COLORS[result.impact_level]
    targets = "\n".join(f"- {f}" for f in result.target_files)
    console.print(Panel(
        f"[bold]Targets[/bold]\n{targets}\n\n"
        f"[bold]Impact:[/bold] [{color}]{result.impact_level.value.upper()}[/{color}]  "
        f"({len(result.affected_files)} affected file(s))",
        title="Change Impact",
        expand=False,
    ))

    if result.details:
        table = Table(show_header=True, show_lines=False)
        table.add_column("File", style="cyan")
        table.add_column("Reason")
        table.add_column("Symbols")
        table.add_column("Imports", justify="right")
        for detail in result.details:
            table.add_row(
                detail.file,
                detail.reason,
                ", ".join(detail.imported_symbols) or "-",
                str(detail.usage_count),
            )
        console.print(table)

    indirect = sorted(set(result.affected_files) - {d.file for d in result.details})
    if indirect:
        console.print("[bold]Indirectly affected:[/bold]")
        for file in indirect:
            console.print(f"  - {file}")

    for suggestion in result.suggestions:
        console.print(f"[dim]>[/dim] {suggestion}")


def render_breaking_changes(file: str, changes: List[BreakingChange]) -> None:
    if not changes:
        console.print(f"[green]No breaking changes detected in[/green] [cyan]{file}[/cyan]")
        return

    table = Table(title=f"Breaking changes in {file}", show_header=True, show_lines=True)
    table.add_column("Symbol", style="cyan")
    table.add_column("Change")
    table.add_column("Affected files")
    table.add_column("Suggestion", min_width=30)
    for change in changes:
        table.add_row(
            change.symbol,
            _CHANGE_LABELS[change.change_type],
            "\n".join(change.affected_files),
            change.suggestion,
        )
    console.print(table)


def _file_list(files: List[str], limit: int) -> str:
    lines = [f"  - {f}" for f in files[:limit]]
    if len(files) > limit:
        lines.append(f"  ... and {len(files) - limit} more")
    return "\n".join(lines)


def render_impact_preview(result: ChangeImpactResult) -> None:
    color = _LEVEL_COLORS[result.impact_level]
    tests = [f for f in result.affected_files if is_test_file(f)]
    production = [f for f in result.affected_files if not is_test_file(f)]
    targets = "\n".join(f"- {f}" for f in result.target_files)

    if result.affected_files:
        next_steps = f"Review affected files:\n{_file_list(result.affected_files, 10)}"
    else:
        next_steps = "[green]Safe to proceed with changes[/green]"

    console.print(Panel(
        f"[bold]Before modifying[/bold]\n{targets}\n\n"
        f"[bold]Impact:[/bold] [{color}]{result.impact_level.value.upper()}[/{color}]\n"
        f"{len(production)} production file(s) affected\n"
        f"{len(tests)} test file(s) affected\n\n"
        f"{next_steps}",
        title="Impact Preview",
        expand=False,
    ))
    console.print("[dim]Run without --preview for the full analysis.[/dim]")


def render_validation(result: ChangeImpactResult) -> None:
    targets = "\n".join(f"- {f}" for f in result.target_files)
    if not result.affected_files:
        console.print(Panel(
            "[green]Change validation passed[/green]\n\n"
            f"[bold]Modified files[/bold]\n{targets}\n\n"
            "Dependency graph rebuilt; no dependent files to check.",
            title="Change Validation",
            expand=False,
        ))
        return

    console.print(Panel(
        "[yellow]Review required[/yellow]\n\n"
        f"[bold]Modified files[/bold]\n{targets}\n\n"
        f"[bold]Files that may need updates[/bold]\n{_file_list(result.affected_files, 20)}",
        title="Change Validation",
        expand=False,
    ))
