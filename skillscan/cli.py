#!/usr/bin/env python3
"""
skillscan: heuristic code analysis and skill scoring for source trees.
"""
from enum import Enum
from typing import Optional

import typer
from skillscan.error_handler import handle_errors
from skillscan.ui import console

app = typer.Typer(
    name="skillscan",
    help="Heuristic code analysis & skill scoring CLI.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

from skillscan.commands import config_cmd

app.add_typer(config_cmd.app, name="config", help="Manage configuration", rich_help_panel="Advanced")


@app.callback()
def main_callback(
    plain: bool = typer.Option(
        False, "--plain",
        help="Plain text output (no colors, no panels). Also enabled by NO_COLOR.",
    ),
):
    """Heuristic code analysis & skill scoring CLI."""
    import os

    if plain or os.environ.get("NO_COLOR"):
        from skillscan.ui import set_plain_mode
        set_plain_mode(True)


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    yaml = "yaml"


def _configure_logging(verbose: bool) -> None:
    from skillscan.core.config_service import get_config_service
    from skillscan.logging_config import setup_logging

    setup_logging(verbose=verbose, level=get_config_service().get("logging.level", "WARNING"))


@app.command(rich_help_panel="Analysis")
@handle_errors
def analyze(
    path: str = typer.Argument(".", help="Path to project directory"),
    output: OutputFormat = typer.Option(OutputFormat.table, "--format", "-f", help="Output format"),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Include the dense statistical section"),
    profile: bool = typer.Option(False, "--profile", "-p", help="Include the heuristic skill profile"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Files to scan concurrently"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """[bold cyan]Analyze[/bold cyan] a project directory and score it."""
    from pathlib import Path

    from skillscan.analyzers.insights import build_profile
    from skillscan.analyzers.project_analyzer import ProjectAnalyzer
    from skillscan.config import load_settings
    from skillscan.ui import print_json_output, print_yaml_output, render_profile, render_report

    _configure_logging(verbose)
    settings = load_settings().with_overrides(workers=workers)
    analyzer = ProjectAnalyzer(settings)
    project_path = Path(path).resolve()
    include_detailed = detailed or settings.include_detailed

    if output is OutputFormat.table:
        with console.status("[bold cyan]Analyzing project...[/bold cyan]"):
            report = analyzer.analyze_directory(project_path, include_detailed=include_detailed)
        render_report(report, title=project_path.name or "Project Analysis")
        if report.detailed_scores is not None:
            console.print(
                f"\n[bold]Statistical score:[/bold] {report.detailed_scores.overall}/10 "
                f"[dim](dense pass, informational)[/dim]"
            )
        if profile:
            render_profile(build_profile(report))
        return

    report = analyzer.analyze_directory(project_path, include_detailed=include_detailed)
    data = report.to_dict()
    if profile:
        data["profile"] = build_profile(report)
    if output is OutputFormat.json:
        print_json_output(data)
    else:
        print_yaml_output(data)


@app.command(rich_help_panel="Analysis")
@handle_errors
def classify(
    path: str = typer.Argument(".", help="Path to project directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Show which files would be [bold cyan]selected[/bold cyan] for analysis."""
    from pathlib import Path

    from rich.table import Table

    from skillscan.analyzers.project_analyzer import ProjectAnalyzer, load_directory
    from skillscan.config import load_settings
    from skillscan.ui import section_divider

    _configure_logging(verbose)
    settings = load_settings()
    files, sizes = load_directory(Path(path).resolve(), settings.max_read_bytes)
    categorized, quality = ProjectAnalyzer(settings).select(files, sizes)

    table = Table(title="Selected Files", show_header=True, expand=False)
    table.add_column("Category", style="cyan")
    table.add_column("Path")
    table.add_column("Bytes", justify="right")
    for category in ("frontend", "backend", "style", "test", "config"):
        for file in getattr(categorized, category):
            table.add_row(category, file.path, f"{file.size:,}")
    console.print(table)

    stats = categorized.stats
    console.print(
        f"{stats.get('total_files', 0)} files read, {stats.get('quality_files', 0)} accepted, "
        f"{stats.get('filtered_out', 0)} filtered, {stats.get('selected', 0)} selected"
    )
    section_divider(f"Selection quality: {quality.quality}")
    for issue in quality.issues:
        console.print(f"  [warning]•[/warning] {issue}")


if __name__ == "__main__":
    app()
