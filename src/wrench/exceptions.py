"""Exception hierarchy for wrench.

All errors inherit from :class:`WrenchError`, which carries an ``exit_code``
attribute mapped to a constant from :mod:`wrench.exit_codes`. The entry point
in :func:`wrench.app.main` catches ``WrenchError``, prints the message and
exits with the matching code.

Subclass hierarchy::

    WrenchError (exit 1)
    +-- SchemaError                 (exit 1)
    +-- UsageError                  (exit 2)
        +-- ParseError
        |   +-- UnknownArgument
        |   +-- MissingValue
        |   +-- MultipleSubcommands
        +-- BuildError
            +-- MissingRequiredArgument
            +-- MissingSubcommand
            +-- InvalidNumber
            +-- InvalidFormat
            +-- InvalidEnumValue

:class:`HelpRequested` and :class:`VersionRequested` are not errors. The
parser raises them to stop scanning as soon as ``--help`` or ``--version``
is seen; the entry point prints the derived text and exits 0.
"""

from __future__ import annotations

from typing import Optional, Sequence

from wrench.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)


class WrenchError(Exception):
    """Base exception for all wrench errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SchemaError(WrenchError):
    """Raised when an argument schema definition is malformed or inconsistent."""

    exit_code = EXIT_GENERIC_FAILURE


class UsageError(WrenchError):
    """Raised for any malformed invocation.

    Args:
        message: Description naming the offending option and the expected form.
        option: Schema name of the option involved, if any.
        command: Names of the command scopes active when the error was found,
            root first (e.g. ``("wrench", "show")``). Used to pick the usage
            line printed under the error.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        command: Sequence[str] = (),
    ):
        super().__init__(message)
        self.option = option
        self.command = tuple(command)


# --- Parse errors ---


class ParseError(UsageError):
    """Base class for errors found while scanning raw tokens."""


class UnknownArgument(ParseError):
    """A token matched no flag, no subcommand and no open positional slot."""

    def __init__(self, token: str, command: Sequence[str] = (), reason: str = ""):
        message = f"Found argument '{token}' which wasn't expected"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, option=None, command=command)
        self.token = token


class MissingValue(ParseError):
    """A value-taking option was the last token."""

    def __init__(self, option: str, display: str, command: Sequence[str] = ()):
        super().__init__(
            f"The argument '{display}' requires a value but none was supplied",
            option=option,
            command=command,
        )


class MultipleSubcommands(ParseError):
    """A second subcommand name appeared after one was already selected."""

    def __init__(self, first: str, second: str, command: Sequence[str] = ()):
        super().__init__(
            f"Subcommand '{second}' cannot be used together with '{first}'; "
            "choose exactly one of them",
            command=command,
        )
        self.first = first
        self.second = second


# --- Build errors ---


class BuildError(UsageError):
    """Base class for errors found while converting raw values into a config."""


class MissingRequiredArgument(BuildError):
    """A required positional argument was not supplied."""

    def __init__(self, option: str, display: str, command: Sequence[str] = ()):
        super().__init__(
            f"The following required argument was not provided: {display}",
            option=option,
            command=command,
        )


class MissingSubcommand(BuildError):
    """Neither of the mode subcommands was given."""

    def __init__(self, available: Sequence[str], command: Sequence[str] = ()):
        names = ", ".join(available)
        super().__init__(
            f"A subcommand is required; expected one of: {names}",
            command=command,
        )
        self.available = tuple(available)


class InvalidNumber(BuildError):
    """A numeric option value did not parse or was out of range."""

    def __init__(
        self,
        option: str,
        display: str,
        value: str,
        expected: str,
        command: Sequence[str] = (),
    ):
        super().__init__(
            f"Invalid value '{value}' for '{display}': expected {expected}",
            option=option,
            command=command,
        )
        self.value = value


class InvalidFormat(BuildError):
    """A value did not match the option's compound pattern."""

    def __init__(
        self,
        option: str,
        display: str,
        value: str,
        expected: str,
        command: Sequence[str] = (),
    ):
        super().__init__(
            f"Invalid value '{value}' for '{display}': expected {expected}",
            option=option,
            command=command,
        )
        self.value = value


class InvalidEnumValue(BuildError):
    """A value was not one of the option's allowed choices."""

    def __init__(
        self,
        option: str,
        display: str,
        value: str,
        allowed: Sequence[str],
        command: Sequence[str] = (),
    ):
        choices = ", ".join(allowed)
        super().__init__(
            f"'{value}' isn't a valid value for '{display}'; "
            f"possible values: [{choices}]",
            option=option,
            command=command,
        )
        self.value = value
        self.allowed = tuple(allowed)


# --- Early exits ---


class HelpRequested(WrenchError):
    """``-h``/``--help`` was given; carries the command path to describe."""

    exit_code = EXIT_SUCCESS

    def __init__(self, command: Sequence[str]):
        super().__init__("help requested")
        self.command = tuple(command)


class VersionRequested(WrenchError):
    """``-V``/``--version`` was given."""

    exit_code = EXIT_SUCCESS

    def __init__(self, command: Sequence[str]):
        super().__init__("version requested")
        self.command = tuple(command)
