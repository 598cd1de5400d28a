"""Tests for the output formatting system.

Covers:
- Format resolution (rich/json based on TTY and colour settings)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Structured output as JSON
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from wrench import output as output_module
from wrench.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture
def no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def color(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


# ------------------------------------------------------------------ #
# Format resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that the format resolves correctly based on environment."""

    def test_json_when_not_tty(self, non_tty, color):
        assert OutputManager().format == OutputFormat.JSON

    def test_rich_when_tty(self, tty, color):
        assert OutputManager().format == OutputFormat.RICH

    def test_json_when_tty_but_no_color(self, tty, no_color):
        assert OutputManager().format == OutputFormat.JSON


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, color):
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout, diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty, no_color):
        OutputManager().print_data("wrench 0.1")
        captured = capfd.readouterr()
        assert captured.out == "wrench 0.1\n"
        assert captured.err == ""

    def test_print_data_keeps_single_trailing_newline(self, capfd, non_tty, no_color):
        OutputManager().print_data("USAGE:\n")
        assert capfd.readouterr().out == "USAGE:\n"

    def test_error_goes_to_stderr(self, capfd, non_tty, no_color):
        OutputManager().error("bad size")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == "Error: bad size\n"

    def test_warning_goes_to_stderr(self, capfd, non_tty, no_color):
        OutputManager().warning("inert flag")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Warning: inert flag" in captured.err

    def test_usage_goes_to_stderr(self, capfd, non_tty, no_color):
        OutputManager().usage("USAGE:\n    wrench show <INPUT>")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "wrench show <INPUT>" in captured.err

    def test_suggest_goes_to_stderr(self, capfd, non_tty, no_color):
        OutputManager().suggest("For more information try --help")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "For more information try --help" in captured.err

    def test_colored_error_keeps_brackets(self, capfd, non_tty, color):
        OutputManager().error("possible values: [yaml, json]")
        assert "[yaml, json]" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Structured output
# ------------------------------------------------------------------ #


class TestPrintStructured:
    DATA = {
        "debug": False,
        "window_size": {"width": 800, "height": 600},
        "time_limit": None,
        "mode": {"kind": "show", "input_path": "scene.yaml"},
    }

    def test_json_when_piped(self, capfd, non_tty, no_color):
        OutputManager().print_structured(self.DATA)
        assert json.loads(capfd.readouterr().out) == self.DATA

    def test_highlighted_on_tty(self, capfd, tty, color):
        OutputManager().print_structured(self.DATA)
        out = capfd.readouterr().out
        assert "\x1b[" in out
        assert "window_size" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_is_returned(self):
        mgr = OutputManager()
        set_output(mgr)
        assert get_output() is mgr

    def test_convenience_functions_delegate(self, capfd, non_tty, no_color):
        set_output(OutputManager())
        output_module.print_data("data")
        output_module.error("oops")
        output_module.suggest("next")
        captured = capfd.readouterr()
        assert captured.out == "data\n"
        assert "Error: oops" in captured.err
        assert "next" in captured.err
