"""Typer-based CLI for DepGraph dependency and change-impact analysis."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__, config, config_manager
from .analyzer import ImpactAnalyzer
from .cli_render import (
    console,
    render_breaking_changes,
    render_dependents,
    render_impact,
    render_impact_preview,
    render_stats,
    render_validation,
)
from .errors import InvalidProjectRootError
from .models import ImpactAnalysisOptions

app = typer.Typer(
    help="DepGraph CLI: import graphs and change-impact analysis for JS/TS projects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="Configuration: cache TTL, traversal depth, and exclusions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"DepGraph CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """DepGraph CLI: find out who breaks when a file's exports change."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _open_analyzer(project_path: Path) -> ImpactAnalyzer:
    try:
        return ImpactAnalyzer(project_path)
    except InvalidProjectRootError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        typer.echo(f"Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command("build")
def build(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to analyze."),
    force: bool = typer.Option(False, "--force", "-f", help="Rebuild even if the cache is fresh."),
):
    """Build the dependency graph and print its statistics."""
    analyzer = _open_analyzer(project_path)
    graph = asyncio.run(analyzer.build_graph(force_rebuild=force))
    render_stats(analyzer.get_graph_stats(), len(graph.dependents))


@app.command("stats")
def stats(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to analyze."),
    as_json: bool = typer.Option(False, "--json", help="Print statistics as JSON."),
):
    """Print import/export totals for a project."""
    analyzer = _open_analyzer(project_path)
    graph = asyncio.run(analyzer.build_graph())
    graph_stats = analyzer.get_graph_stats()

    if as_json:
        typer.echo(json.dumps({
            "file_count": graph_stats.file_count,
            "total_imports": graph_stats.total_imports,
            "total_exports": graph_stats.total_exports,
            "import_targets": len(graph.dependents),
            "last_built": graph_stats.last_built.isoformat() if graph_stats.last_built else None,
        }, indent=2))
        return
    render_stats(graph_stats, len(graph.dependents))


@app.command("dependents")
def dependents(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to analyze."),
    file: str = typer.Argument(..., help="Project-relative file to look up."),
):
    """List files that directly import FILE."""
    analyzer = _open_analyzer(project_path)
    found = asyncio.run(analyzer.get_dependents(file))
    render_dependents(analyzer.graph_builder.normalize_path(file), found)


@app.command("impact")
def impact(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to analyze."),
    files: List[str] = typer.Argument(..., help="Project-relative files you plan to change."),
    max_depth: int = typer.Option(config.MAX_DEPTH, min=1, max=50, help="Dependency traversal depth."),
    include_tests: bool = typer.Option(
        config.INCLUDE_TESTS, "--tests/--no-tests", help="Include *.test.* / *.spec.* files.",
    ),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="Glob pattern to skip (repeatable)."),
    preview: bool = typer.Option(
        False, "--preview", help=f"Quick look: depth {config.PREVIEW_MAX_DEPTH}, tests counted separately.",
    ),
):
    """Show every file affected, directly or transitively, by changing FILES."""
    analyzer = _open_analyzer(project_path)
    if preview:
        render_impact_preview(asyncio.run(analyzer.preview_impact(files)))
        return

    options = ImpactAnalysisOptions(
        include_tests=include_tests,
        max_depth=max_depth,
        exclude_patterns=list(exclude),
    )
    result = asyncio.run(analyzer.analyze_impact(files, options))
    render_impact(result)


@app.command("validate")
def validate(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to analyze."),
    files: List[str] = typer.Argument(..., help="Project-relative files you just modified."),
):
    """Rebuild the graph and list files that may need updating after changing FILES."""
    analyzer = _open_analyzer(project_path)
    result = asyncio.run(analyzer.validate_changes(files))
    render_validation(result)


@app.command("breaking")
def breaking(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to analyze."),
    file: str = typer.Argument(..., help="Project-relative file whose exports changed."),
    old: Path = typer.Option(..., "--old", exists=True, dir_okay=False, help="Previous version of FILE."),
    new: Optional[Path] = typer.Option(
        None, "--new", exists=True, dir_okay=False, help="New version of FILE (default: FILE on disk).",
    ),
):
    """Report exports removed or changed in FILE that break its importers."""
    analyzer = _open_analyzer(project_path)
    key = analyzer.graph_builder.normalize_path(file)
    old_content = _read_text(old)
    new_content = _read_text(new if new is not None else analyzer.project_root / key)

    changes = asyncio.run(analyzer.detect_breaking_changes(key, old_content, new_content))
    render_breaking_changes(key, changes)
    if changes:
        raise typer.Exit(code=2)


# ------------------------------------------------------------------
# dg config ...
# ------------------------------------------------------------------

@config_app.command("show")
def config_show():
    """Show effective graph settings."""
    stored = config_manager.load_graph_config()
    effective = {
        "cache_ttl_seconds": config.CACHE_TTL_SECONDS,
        "max_depth": config.MAX_DEPTH,
        "include_tests": config.INCLUDE_TESTS,
        "extensions": list(config.EXTENSIONS),
        "exclude_dirs": sorted(config.EXCLUDE_DIRS | config.EXTRA_EXCLUDE_DIRS),
    }
    effective.update(stored)
    console.print(f"Config file: [cyan]{config_manager.CONFIG_FILE}[/cyan]")
    for key, value in effective.items():
        marker = "*" if key in stored else " "
        typer.echo(f"{marker} {key} = {value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help=f"One of: {', '.join(config_manager.GRAPH_KEYS)}."),
    value: str = typer.Argument(..., help="New value; lists are comma-separated."),
):
    """Persist a graph setting to config.toml."""
    try:
        coerced = config_manager.coerce_graph_value(key, value)
    except KeyError:
        raise typer.BadParameter(f"Unknown setting '{key}'.")
    except ValueError as exc:
        raise typer.BadParameter(str(exc))

    if not config_manager.save_graph_config(key, coerced):
        typer.echo(f"Could not write {config_manager.CONFIG_FILE}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset():
    """Remove all graph settings, restoring defaults."""
    if not config_manager.clear_graph_config():
        typer.echo(f"Could not write {config_manager.CONFIG_FILE}", err=True)
        raise typer.Exit(code=1)
    typer.echo("Graph settings reset to defaults.")


if __name__ == "__main__":
    app()
