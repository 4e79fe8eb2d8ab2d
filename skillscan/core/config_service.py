"""Layered configuration service for skillscan.

Priority (highest to lowest):
1. Environment variables (SKILLSCAN_*)
2. Project config (.skillscan.toml in current directory)
3. Global config (~/.config/skillscan/config.toml)
4. Built-in defaults
"""
from __future__ import annotations

import copy
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli_w

from skillscan.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger("skillscan.config")


# Default configuration values
DEFAULTS: dict[str, Any] = {
    "classifier": {
        "min_bytes": 50,
        "max_bytes": 1_000_000,
        "source_cap": 15,
        "config_cap": 5,
        "ambiguous_default": "backend",
    },
    "scanner": {
        "workers": 1,
    },
    "ingest": {
        "max_read_bytes": 1_000_000,
    },
    "report": {
        "library_limit": 8,
        "include_detailed": False,
    },
    "logging": {
        "level": "WARNING",
    },
}

# Mapping of env vars to config paths
ENV_VAR_MAP = {
    "SKILLSCAN_MIN_BYTES": "classifier.min_bytes",
    "SKILLSCAN_MAX_BYTES": "classifier.max_bytes",
    "SKILLSCAN_AMBIGUOUS_DEFAULT": "classifier.ambiguous_default",
    "SKILLSCAN_WORKERS": "scanner.workers",
    "SKILLSCAN_LIBRARY_LIMIT": "report.library_limit",
    "SKILLSCAN_LOG_LEVEL": "logging.level",
}


def _global_config_dir() -> Path:
    """Return the global config directory: ~/.config/skillscan/."""
    return Path.home() / ".config" / "skillscan"


def _global_config_path() -> Path:
    return _global_config_dir() / "config.toml"


def _project_config_path() -> Path:
    """Return the project config file path (.skillscan.toml in cwd)."""
    return Path.cwd() / ".skillscan.toml"


def _read_toml(path: Path) -> dict:
    """Read a TOML file, returning empty dict if missing or unreadable."""
    if not path.is_file():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return {}


def _write_toml(data: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base (override wins)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _get_nested(data: dict, dotted_key: str, default: Any = None) -> Any:
    """Get a value from a nested dict using dotted key notation."""
    current = data
    for key in dotted_key.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def _set_nested(data: dict, dotted_key: str, value: Any) -> None:
    """Set a value in a nested dict using dotted key notation."""
    keys = dotted_key.split(".")
    current = data
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value


def coerce_value(dotted_key: str, raw: str) -> Any:
    """Convert a string (env var or CLI argument) to the type of the key's default.

    Raises:
        ConfigError: if the key is unknown or the value does not convert.
    """
    default = _get_nested(DEFAULTS, dotted_key)
    if default is None or isinstance(default, dict):
        raise ConfigError(f"Unknown config key: {dotted_key}", key=dotted_key)
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
        raise ConfigError(f"Expected a boolean for {dotted_key}, got {raw!r}", key=dotted_key)
    if isinstance(default, int):
        try:
            return int(raw.strip().replace("_", ""))
        except ValueError:
            raise ConfigError(f"Expected an integer for {dotted_key}, got {raw!r}", key=dotted_key) from None
    return raw


@dataclass
class ResolvedConfig:
    """Fully resolved configuration after merging all layers."""
    data: dict = field(default_factory=dict)
    global_config_path: Optional[Path] = None
    project_config_path: Optional[Path] = None

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a config value using dotted key notation."""
        return _get_nested(self.data, dotted_key, default)


class ConfigService:
    """Layered configuration service.

    Resolves config from multiple sources with clear precedence:
    1. Environment variables (SKILLSCAN_*)
    2. Project config (.skillscan.toml)
    3. Global config (~/.config/skillscan/config.toml)
    4. Built-in defaults
    """

    def __init__(self):
        self._resolved: Optional[ResolvedConfig] = None

    def resolve(self, force: bool = False) -> ResolvedConfig:
        """Resolve the full config from all layers."""
        if self._resolved is not None and not force:
            return self._resolved

        merged = copy.deepcopy(DEFAULTS)

        # Layer 3: Global config
        global_path = _global_config_path()
        global_data = _read_toml(global_path)
        if global_data:
            merged = _deep_merge(merged, global_data)
            logger.debug("Loaded global config from %s", global_path)

        # Layer 2: Project config
        project_path = _project_config_path()
        project_data = _read_toml(project_path)
        if project_data:
            merged = _deep_merge(merged, project_data)
            logger.debug("Loaded project config from %s", project_path)

        # Layer 1: Environment variables
        for env_var, config_path in ENV_VAR_MAP.items():
            env_value = os.environ.get(env_var)
            if env_value is not None:
                _set_nested(merged, config_path, coerce_value(config_path, env_value))

        self._resolved = ResolvedConfig(
            data=merged,
            global_config_path=global_path if global_path.is_file() else None,
            project_config_path=project_path if project_path.is_file() else None,
        )
        return self._resolved

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a resolved config value."""
        return self.resolve().get(dotted_key, default)

    def set_global(self, dotted_key: str, value: Any) -> None:
        """Set a value in the global config file."""
        path = _global_config_path()
        data = _read_toml(path)
        _set_nested(data, dotted_key, value)
        _write_toml(data, path)
        self._resolved = None
        logger.info("Set %s = %s in %s", dotted_key, value, path)

    def init_project_config(self) -> Path:
        """Create a .skillscan.toml in the current directory with defaults."""
        path = _project_config_path()
        if path.exists():
            raise FileExistsError(f"Project config already exists: {path}")

        data = {
            "classifier": dict(DEFAULTS["classifier"]),
            "report": dict(DEFAULTS["report"]),
        }
        _write_toml(data, path)
        self._resolved = None
        logger.info("Created project config: %s", path)
        return path

    def show(self) -> dict:
        """Return the resolved config and where it came from."""
        resolved = self.resolve(force=True)
        return {
            "resolved": resolved.data,
            "sources": {
                "global_config": str(resolved.global_config_path) if resolved.global_config_path else None,
                "project_config": str(resolved.project_config_path) if resolved.project_config_path else None,
            },
        }

    def config_paths(self) -> dict[str, str]:
        """Return all config file locations and their existence status."""
        global_path = _global_config_path()
        project_path = _project_config_path()
        return {
            "global_config": f"{global_path} ({'exists' if global_path.is_file() else 'not found'})",
            "project_config": f"{project_path} ({'exists' if project_path.is_file() else 'not found'})",
        }


# Module-level singleton
_config_service: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """Get or create the global ConfigService instance."""
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service


def reset_config_service() -> None:
    """Reset the global config service (useful for testing)."""
    global _config_service
    _config_service = None
