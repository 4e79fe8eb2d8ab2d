"""Tests for custom exception hierarchy."""

import pytest

from skillscan.errors import (
    ConfigError,
    IngestionError,
    ManifestError,
    ScanError,
    SkillscanError,
)


class TestSkillscanErrorBase:
    def test_message(self):
        assert str(SkillscanError("test error")) == "test error"

    def test_empty_context_by_default(self):
        assert SkillscanError("test error").context == {}

    def test_context_passed_through(self):
        e = SkillscanError("test error", context={"path": "src/app.js"})
        assert e.context == {"path": "src/app.js"}

    def test_exit_code_default(self):
        assert SkillscanError("test error").exit_code == 1

    def test_is_exception(self):
        assert issubclass(SkillscanError, Exception)


class TestSubclasses:
    @pytest.mark.parametrize("cls", [ConfigError, IngestionError, ScanError, ManifestError])
    def test_hierarchy(self, cls):
        assert issubclass(cls, SkillscanError)

    def test_config_error_key(self):
        e = ConfigError("bad value", key="scanner.workers")
        assert e.context["key"] == "scanner.workers"
        assert e.exit_code == 1

    def test_ingestion_error_exit_code(self):
        e = IngestionError("Not a directory: /nope", path="/nope")
        assert e.exit_code == 2
        assert e.context["path"] == "/nope"

    def test_scan_error_location(self):
        e = ScanError("Unterminated string", path="src/a.js", line=12)
        assert (e.path, e.line) == ("src/a.js", 12)
        assert e.context == {"path": "src/a.js", "line": 12}

    def test_manifest_error_path(self):
        e = ManifestError("Invalid JSON", path="package.json")
        assert e.path == "package.json"
        assert str(e) == "Invalid JSON"
