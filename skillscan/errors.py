"""Custom exception hierarchy for skillscan.

All skillscan-specific exceptions derive from SkillscanError. Each exception
carries an optional ``context`` dict with structured metadata (file path,
config key, etc.) that the CLI error handler can render.

Scan and manifest failures never escape an analysis run: the pipeline turns
them into warnings on the report. Only ingestion and configuration errors
reach the CLI.

Exception hierarchy::

    SkillscanError
    ├── ConfigError
    ├── IngestionError
    ├── ScanError
    └── ManifestError
"""
from __future__ import annotations

from typing import Optional


class SkillscanError(Exception):
    """Base class for all skillscan exceptions.

    Args:
        message: Human-readable error description.
        context: Optional dict of structured metadata.
    """

    exit_code: int = 1

    def __init__(self, message: str, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__(message)


# ── Configuration ──────────────────────────────────────────────────

class ConfigError(SkillscanError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str = ""):
        super().__init__(message, context={"key": key})


# ── Input ──────────────────────────────────────────────────────────

class IngestionError(SkillscanError):
    """Raised when a project root cannot be read."""

    exit_code = 2

    def __init__(self, message: str, path: str = ""):
        super().__init__(message, context={"path": path})


# ── Per-file failures (recovered inside the pipeline) ──────────────

class ScanError(SkillscanError):
    """Raised when a file cannot be parsed."""

    def __init__(self, message: str, path: str = "", line: int = 0):
        super().__init__(message, context={"path": path, "line": line})
        self.path = path
        self.line = line


class ManifestError(SkillscanError):
    """Raised when a dependency manifest (package.json, ...) is malformed."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message, context={"path": path})
        self.path = path
