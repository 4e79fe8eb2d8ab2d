"""Shared UI theme, console, and display helpers for skillscan."""

import json
import sys

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

# ── Output Mode State ──
_plain_mode: bool = False


def set_plain_mode(enabled: bool = True) -> None:
    """Enable or disable plain text output (no colors, no panels)."""
    global _plain_mode, console
    _plain_mode = enabled
    if enabled:
        console = Console(theme=SKILLSCAN_THEME, no_color=True, highlight=False)


def is_plain() -> bool:
    return _plain_mode


def print_json_output(data: dict | list) -> None:
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


def print_yaml_output(data: dict | list) -> None:
    """Print data as block-style YAML to stdout."""
    print(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), end="")


# ── Theme ──
SKILLSCAN_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "yellow",
    "error": "bold red",
    "score.high": "bold green",
    "score.mid": "yellow",
    "score.low": "red",
    "brand": "bold cyan",
    "muted": "dim",
})

console = Console(theme=SKILLSCAN_THEME)

SCORE_ROWS: tuple[tuple[str, str], ...] = (
    ("architecture", "Architecture"),
    ("complexity", "Complexity"),
    ("quality", "Quality"),
    ("technology", "Technology"),
    ("testing", "Testing"),
    ("documentation", "Documentation"),
    ("performance", "Performance"),
    ("size", "Size"),
)


def score_style(score: float) -> str:
    if score >= 7:
        return "score.high"
    if score >= 4:
        return "score.mid"
    return "score.low"


def score_bar(score: float, width: int = 20) -> str:
    """Fixed-width bar for a 0-10 score."""
    filled = round(max(0.0, min(10.0, score)) / 10 * width)
    if _plain_mode:
        return "#" * filled + "." * (width - filled)
    return f"[{score_style(score)}]{'█' * filled}[/]" + f"[dim]{'░' * (width - filled)}[/dim]"


def _joined(items, empty: str = "none") -> str:
    return ", ".join(items) if items else f"[dim]{empty}[/dim]"


def render_report(report, title: str = "Project Analysis") -> None:
    """Render a Report as panels and tables."""
    overview = report.overview
    scores = report.scores
    console.print()
    console.print(Panel(
        f"[bold]Overall score:[/bold] [{score_style(scores.overall)}]{scores.overall}/10[/]\n"
        f"{overview.total_files} files, {overview.total_lines:,} lines, "
        f"{overview.components} components, {overview.api_endpoints} endpoints, "
        f"{overview.total_functions} functions",
        title=title,
        border_style="cyan",
    ))

    table = Table(title="Scores", show_header=True, expand=False)
    table.add_column("Area", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("")
    for key, label in SCORE_ROWS:
        value = getattr(scores, key)
        table.add_row(label, f"{value:.1f}", score_bar(value))
    console.print(table)

    tech = report.technologies
    section_divider("Technologies")
    console.print(f"[bold]Frameworks:[/bold] {_joined(tech.frameworks)}")
    console.print(f"[bold]Libraries:[/bold] {_joined(tech.libraries)}")
    console.print(f"[bold]Databases:[/bold] {_joined(tech.database)}")
    console.print(f"[bold]Patterns:[/bold] {_joined(tech.patterns)}")
    if tech.detected:
        console.print(f"[bold]Stack:[/bold] {', '.join(tech.detected)}")

    section_divider("Architecture")
    arch = report.architecture
    console.print(f"[bold]Separation:[/bold] {arch.separation_level}")
    console.print(f"[bold]Descriptors:[/bold] {_joined(arch.descriptors)}")
    complexity = report.complexity
    console.print(
        f"[bold]Complexity:[/bold] {complexity.rating} "
        f"(cyclomatic {complexity.cyclomatic}, avg function {complexity.avg_function_length} lines, "
        f"max nesting {complexity.nesting_depth})"
    )

    if arch.api_endpoints:
        endpoints = Table(title="API Endpoints", show_header=True, expand=False)
        endpoints.add_column("Method", style="cyan")
        endpoints.add_column("Route")
        endpoints.add_column("File", style="dim")
        for endpoint in arch.api_endpoints:
            endpoints.add_row(endpoint.method.value, endpoint.route, endpoint.file)
        console.print(endpoints)

    if report.warnings:
        section_divider("Warnings")
        for warning in report.warnings:
            console.print(f"  [warning]•[/warning] {warning}")


def render_profile(profile: dict) -> None:
    """Render the heuristic profile produced by ``build_profile``."""
    hiring = profile["hiring_potential"]
    lines = [f"[bold]{profile['conclusion']}[/bold]", f"Level: [cyan]{hiring['level']}[/cyan]", hiring["details"]]
    for heading, key in (("Strengths", "strengths"), ("Weaknesses", "weaknesses"), ("Improvements", "improvements")):
        lines.append(f"\n[bold]{heading}[/bold]")
        lines.extend(f"  • {item}" for item in profile[key])
    console.print(Panel("\n".join(lines), title="Profile", border_style="blue"))


def success_panel(title: str, content=None):
    """Display a success panel."""
    if _plain_mode:
        print(f"OK: {title}")
        if content:
            print(f"  {content}")
        return

    console.print(Panel(
        content or "",
        title=f"[bold green]{title}[/bold green]",
        border_style="green",
    ))


def error_panel(title: str, content: str = ""):
    """Display an error panel."""
    if _plain_mode:
        print(f"ERROR: {title}", file=sys.stderr)
        if content:
            print(f"  {content}", file=sys.stderr)
        return

    console.print(Panel(
        content,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def section_divider(text: str = ""):
    """Print a subtle section divider."""
    if _plain_mode:
        if text:
            print(f"\n-- {text} --")
        else:
            print()
        return

    if text:
        console.print(f"\n[dim]── {text} ──[/dim]")
    else:
        console.print()
