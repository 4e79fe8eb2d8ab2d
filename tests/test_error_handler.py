"""Tests for the unified CLI error handler."""
import pytest
import typer

from skillscan.error_handler import _debug_mode, handle_errors
from skillscan.errors import ConfigError, IngestionError, SkillscanError


class TestHandleErrorsDecorator:
    def test_passes_through_on_success(self):
        @handle_errors
        def good_func():
            return "ok"

        assert good_func() == "ok"

    def test_catches_config_error(self, capsys):
        @handle_errors
        def bad_func():
            raise ConfigError("scanner.workers must be an integer", key="scanner.workers")

        with pytest.raises(typer.Exit) as exc_info:
            bad_func()
        assert exc_info.value.exit_code == 1
        out = capsys.readouterr().out
        assert "scanner.workers must be an integer" in out
        assert "skillscan config show" in out

    def test_ingestion_error_exit_code(self):
        @handle_errors
        def bad_func():
            raise IngestionError("Not a directory: /nope", path="/nope")

        with pytest.raises(typer.Exit) as exc_info:
            bad_func()
        assert exc_info.value.exit_code == 2

    def test_context_shown_in_debug_mode(self, monkeypatch, capsys):
        monkeypatch.setenv("SKILLSCAN_DEBUG", "1")

        @handle_errors
        def bad_func():
            raise SkillscanError("generic issue", context={"path": "src/app.js"})

        with pytest.raises(typer.Exit):
            bad_func()
        assert "src/app.js" in capsys.readouterr().out

    def test_catches_unexpected_error(self, capsys):
        @handle_errors
        def crash_func():
            raise RuntimeError("oops")

        with pytest.raises(typer.Exit) as exc_info:
            crash_func()
        assert exc_info.value.exit_code == 1
        assert "SKILLSCAN_DEBUG=1" in capsys.readouterr().out

    def test_catches_keyboard_interrupt(self):
        @handle_errors
        def interrupted():
            raise KeyboardInterrupt()

        with pytest.raises(typer.Exit) as exc_info:
            interrupted()
        assert exc_info.value.exit_code == 130

    def test_exit_passes_through(self):
        @handle_errors
        def exits():
            raise typer.Exit(3)

        with pytest.raises(typer.Exit) as exc_info:
            exits()
        assert exc_info.value.exit_code == 3


class TestDebugMode:
    def test_debug_off_by_default(self):
        assert _debug_mode() is False

    @pytest.mark.parametrize("value", ["1", "true", "YES"])
    def test_debug_on(self, monkeypatch, value):
        monkeypatch.setenv("SKILLSCAN_DEBUG", value)
        assert _debug_mode() is True

    def test_debug_other_value(self, monkeypatch):
        monkeypatch.setenv("SKILLSCAN_DEBUG", "0")
        assert _debug_mode() is False
