"""Unified CLI error handler for skillscan commands."""

from __future__ import annotations

import functools
import logging
import os
import traceback

import typer

from skillscan.errors import ConfigError, IngestionError, SkillscanError
from skillscan.ui import console

logger = logging.getLogger("skillscan.error_handler")


def _debug_mode() -> bool:
    """Check if debug output is enabled via SKILLSCAN_DEBUG env var."""
    return os.environ.get("SKILLSCAN_DEBUG", "").lower() in ("1", "true", "yes")


def _render_skillscan_error(e: SkillscanError) -> None:
    """Render a SkillscanError with Rich formatting and context."""
    console.print(f"\n[bold red]Error:[/bold red] {e}")

    if e.context and _debug_mode():
        context_parts = [
            f"  [dim]{key}:[/dim] {value}" for key, value in e.context.items() if value
        ]
        if context_parts:
            console.print("[dim]Context:[/dim]")
            for part in context_parts:
                console.print(part)

    if isinstance(e, ConfigError):
        console.print("[dim]Run 'skillscan config show' to inspect the resolved configuration.[/dim]")
    elif isinstance(e, IngestionError):
        console.print("[dim]Pass the path of a readable project directory.[/dim]")


def handle_errors(func):
    """Decorator that catches SkillscanError and renders formatted CLI output.

    Usage::

        @app.command()
        @handle_errors
        def my_command(...):
            ...  # no try/except needed
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SkillscanError as e:
            _render_skillscan_error(e)
            if _debug_mode():
                console.print(f"\n[dim]{traceback.format_exc()}[/dim]")
            raise typer.Exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n[dim]Interrupted.[/dim]")
            raise typer.Exit(130)
        except (typer.Exit, typer.Abort, SystemExit):
            raise
        except Exception as e:
            logger.debug("Unhandled error in %s", func.__name__, exc_info=True)
            console.print(f"\n[bold red]Unexpected error:[/bold red] {e}")
            if _debug_mode():
                console.print(f"\n[dim]{traceback.format_exc()}[/dim]")
            else:
                console.print("[dim]Set SKILLSCAN_DEBUG=1 for full traceback.[/dim]")
            raise typer.Exit(1)

    return wrapper
