"""Logging setup for the skillscan CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
CLI decides the level and installs a Rich handler on stderr.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, level: Optional[str] = None) -> logging.Logger:
    """Configure the root logger.

    Args:
        verbose: Force DEBUG level and show source paths.
        level: Level name from config (e.g. ``"WARNING"``); ignored when verbose.
    """
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = logging.getLevelName((level or "WARNING").upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    logging.basicConfig(level=resolved, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)

    logger = logging.getLogger("skillscan")
    logger.setLevel(resolved)
    return logger
