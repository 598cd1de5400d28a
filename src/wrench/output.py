"""Output formatting with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only: help text, version string, and the
  resolved configuration printed by a dry run.
* **stderr** -- diagnostics: errors, warnings and next-step suggestions.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- respects ``NO_COLOR`` and ``TERM=dumb``.

The module exposes two layers:

1. :class:`OutputManager` -- holds format preferences and the two Rich
   consoles. Created once by :func:`~wrench.app.main` and installed via
   :func:`set_output`.
2. Module-level convenience functions (:func:`error`, :func:`warning`, ...)
   that delegate to the global instance.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """Formats for structured data on stdout.

    ``RICH`` is used when stdout is an interactive TTY and colour is not
    disabled; otherwise ``JSON``, so piped output stays machine-readable.
    """

    JSON = "json"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    The format and colour settings are resolved once, from TTY detection and
    the ``NO_COLOR`` / ``TERM`` environment variables.
    """

    def __init__(self) -> None:
        self._no_color = _should_disable_color()
        self._format = (
            OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.JSON
        )

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, without markup interpretation."""
        print(text, file=sys.stdout, end="" if text.endswith("\n") else "\n", flush=True)

    def print_structured(self, data: dict[str, Any]) -> None:
        """Print a mapping (e.g. a dumped config) to stdout as JSON.

        Indented plain JSON when piped, syntax-highlighted on a TTY.
        """
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}", markup=True, highlight=False)

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print("[bold red]Error:[/bold red] ", end="")
            # Messages quote user input, which may contain "[...]".
            self._stderr.print(message, markup=False, highlight=False)

    def usage(self, text: str) -> None:
        """Print a usage block to stderr beneath an error."""
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        else:
            self._stderr.print(text, markup=False, highlight=False)

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr."""
        formatted = f"→ {message}"
        if self._no_color:
            print(formatted, file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]{formatted}[/dim]")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites: a manager caches ``sys.stdout`` and
    ``sys.stderr`` at creation time, which pytest swaps between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def print_structured(data: dict[str, Any]) -> None:
    """Print a mapping to stdout via the global OutputManager."""
    get_output().print_structured(data)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def usage(text: str) -> None:
    """Print a usage block to stderr via the global OutputManager."""
    get_output().usage(text)


def suggest(message: str) -> None:
    """Print next-step suggestion to stderr via the global OutputManager."""
    get_output().suggest(message)
