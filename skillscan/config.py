"""Analyzer settings built from the layered configuration.

``skillscan.core.config_service`` owns resolution (defaults, global file,
project file, environment). This module turns the resolved values into
the typed knobs the pipeline takes.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from skillscan.analyzers.aggregator import LIBRARY_LIMIT
from skillscan.analyzers.classifier import CONFIG_CAP, MAX_FILE_BYTES, MIN_FILE_BYTES, SOURCE_CAP
from skillscan.analyzers.models import Category
from skillscan.core.config_service import ResolvedConfig, get_config_service
from skillscan.errors import ConfigError

AMBIGUOUS_CHOICES = (Category.FRONTEND.value, Category.BACKEND.value)


@dataclass(frozen=True)
class AnalyzerSettings:
    """Knobs for one analysis run."""
    min_bytes: int = MIN_FILE_BYTES
    max_bytes: int = MAX_FILE_BYTES
    source_cap: int = SOURCE_CAP
    config_cap: int = CONFIG_CAP
    ambiguous_default: Category = Category.BACKEND
    workers: int = 1
    max_read_bytes: int = 1_000_000
    library_limit: int = LIBRARY_LIMIT
    include_detailed: bool = False

    @classmethod
    def from_config(cls, resolved: ResolvedConfig) -> AnalyzerSettings:
        """Build settings from a resolved config.

        Raises:
            ConfigError: if a value has the wrong type or is out of range.
        """
        ambiguous = str(resolved.get("classifier.ambiguous_default", "backend")).lower()
        if ambiguous not in AMBIGUOUS_CHOICES:
            raise ConfigError(
                f"classifier.ambiguous_default must be one of {', '.join(AMBIGUOUS_CHOICES)}, not {ambiguous!r}",
                key="classifier.ambiguous_default",
            )
        settings = cls(
            min_bytes=_int(resolved, "classifier.min_bytes", MIN_FILE_BYTES),
            max_bytes=_int(resolved, "classifier.max_bytes", MAX_FILE_BYTES),
            source_cap=_int(resolved, "classifier.source_cap", SOURCE_CAP),
            config_cap=_int(resolved, "classifier.config_cap", CONFIG_CAP),
            ambiguous_default=Category(ambiguous),
            workers=_int(resolved, "scanner.workers", 1),
            max_read_bytes=_int(resolved, "ingest.max_read_bytes", 1_000_000),
            library_limit=_int(resolved, "report.library_limit", LIBRARY_LIMIT),
            include_detailed=bool(resolved.get("report.include_detailed", False)),
        )
        if settings.min_bytes > settings.max_bytes:
            raise ConfigError(
                f"classifier.min_bytes ({settings.min_bytes}) exceeds classifier.max_bytes ({settings.max_bytes})",
                key="classifier.min_bytes",
            )
        return settings

    def with_overrides(self, **overrides) -> AnalyzerSettings:
        """Copy with the given non-None fields replaced (CLI flags)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _int(resolved: ResolvedConfig, key: str, default: int) -> int:
    value = resolved.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}", key=key)
    if value < 0 or (key == "scanner.workers" and value < 1):
        raise ConfigError(f"{key} is out of range: {value}", key=key)
    return value


def load_settings(resolved: Optional[ResolvedConfig] = None) -> AnalyzerSettings:
    """Settings from the given config, or from the global config service."""
    return AnalyzerSettings.from_config(resolved or get_config_service().resolve())
