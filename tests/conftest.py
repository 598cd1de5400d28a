"""Shared test fixtures for wrench.

Provides the built-in schema, the clap-style ``args.yaml`` fixture, and
output-state management. These fixtures are discovered automatically by
pytest and available to all test modules.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from wrench.args.schema import WRENCH_SCHEMA
from wrench.models import CommandSpec
from wrench.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; pytest's capture swaps those streams per test, so a
    stale manager would write to a closed file.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def schema() -> CommandSpec:
    """The built-in wrench option table."""
    return WRENCH_SCHEMA


@pytest.fixture
def args_yaml_path() -> Path:
    """Path to the clap-style argument definition wrench originally shipped."""
    return FIXTURES_DIR / "args.yaml"


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def non_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("wrench.output._is_tty", lambda: False)


@pytest.fixture
def tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("wrench.output._is_tty", lambda: True)
