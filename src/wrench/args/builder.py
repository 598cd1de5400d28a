"""Convert raw parser output into a validated :class:`~wrench.models.Config`.

Every option in the schema names a :class:`~wrench.models.ValueKind`; this
module owns the matching coercion rules:

=====================  ================================================
Kind                   Accepted raw value
=====================  ================================================
``flag``               presence only
``string``, ``path``   any string, passed through untouched
``positive_float``     decimal or exponent notation, finite, ``> 0``
``non_negative_float`` decimal or exponent notation, finite, ``>= 0``
``positive_int``       ASCII digits, ``> 0``
``size``               ``<digits>x<digits>``, both components ``> 0``
``choice``             one of the declared choices (case-sensitive)
=====================  ================================================

Conversion is fail-fast: the root scope is checked first in declaration
order, then the subcommand scope, and the first problem is raised. Paths are
never checked against the filesystem; that is left to the renderer driver.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Sequence

from pydantic import BaseModel, ValidationError

from wrench.args.schema import REPLAY, SHOW, WRENCH_SCHEMA
from wrench.exceptions import (
    InvalidEnumValue,
    InvalidFormat,
    InvalidNumber,
    MissingRequiredArgument,
    MissingSubcommand,
    SchemaError,
    UnknownArgument,
)
from wrench.models import (
    CommandSpec,
    Config,
    OptionSpec,
    RawArgs,
    ReplayMode,
    ShowMode,
    ValueKind,
    WindowSize,
)

logger = logging.getLogger(__name__)

# Python's float() also accepts "inf", "nan", "1_000" and surrounding
# whitespace; none of those are valid on the command line.
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
# Integers are capped at 18 digits: int() refuses very long digit strings and
# nothing on this command line needs more.
_INT_RE = re.compile(r"\d{1,18}", re.ASCII)
_SIZE_RE = re.compile(r"(\d{1,18})x(\d{1,18})", re.ASCII)

_MODE_MODELS: dict[str, type[ShowMode] | type[ReplayMode]] = {
    SHOW: ShowMode,
    REPLAY: ReplayMode,
}


# ---------------------------------------------------------------------------
# Coercion rules
# ---------------------------------------------------------------------------


def _parse_float(opt: OptionSpec, value: str, path: Sequence[str], expected: str) -> float:
    if _FLOAT_RE.fullmatch(value) is None:
        raise InvalidNumber(opt.name, opt.display, value, expected, command=path)
    number = float(value)
    if not math.isfinite(number):
        raise InvalidNumber(opt.name, opt.display, value, expected, command=path)
    return number


def _coerce_positive_float(opt: OptionSpec, value: str, path: Sequence[str]) -> float:
    expected = "a number greater than 0"
    number = _parse_float(opt, value, path, expected)
    if number <= 0:
        raise InvalidNumber(opt.name, opt.display, value, expected, command=path)
    return number


def _coerce_non_negative_float(opt: OptionSpec, value: str, path: Sequence[str]) -> float:
    expected = "a number of seconds, 0 or greater"
    number = _parse_float(opt, value, path, expected)
    if number < 0:
        raise InvalidNumber(opt.name, opt.display, value, expected, command=path)
    return number


def _coerce_positive_int(opt: OptionSpec, value: str, path: Sequence[str]) -> int:
    expected = "a whole number greater than 0"
    if _INT_RE.fullmatch(value) is None or int(value) == 0:
        raise InvalidNumber(opt.name, opt.display, value, expected, command=path)
    return int(value)


def _coerce_size(opt: OptionSpec, value: str, path: Sequence[str]) -> WindowSize:
    match = _SIZE_RE.fullmatch(value)
    if match is None or int(match.group(1)) == 0 or int(match.group(2)) == 0:
        raise InvalidFormat(
            opt.name,
            opt.display,
            value,
            "WIDTHxHEIGHT with positive integers (e.g. 1024x768)",
            command=path,
        )
    return WindowSize(width=int(match.group(1)), height=int(match.group(2)))


def _coerce_choice(opt: OptionSpec, value: str, path: Sequence[str]) -> str:
    if value not in opt.choices:
        raise InvalidEnumValue(opt.name, opt.display, value, opt.choices, command=path)
    return value


def _coerce_string(opt: OptionSpec, value: str, path: Sequence[str]) -> str:
    return value


_COERCERS: dict[ValueKind, Callable[[OptionSpec, str, Sequence[str]], Any]] = {
    ValueKind.STRING: _coerce_string,
    ValueKind.PATH: _coerce_string,
    ValueKind.POSITIVE_FLOAT: _coerce_positive_float,
    ValueKind.NON_NEGATIVE_FLOAT: _coerce_non_negative_float,
    ValueKind.POSITIVE_INT: _coerce_positive_int,
    ValueKind.SIZE: _coerce_size,
    ValueKind.CHOICE: _coerce_choice,
}


def coerce_value(opt: OptionSpec, value: str, path: Sequence[str] = ()) -> Any:
    """Convert one raw *value* according to *opt*'s value kind.

    Args:
        opt: The option the value was given for.
        value: Raw string from the command line (or the option's default).
        path: Command scope names, root first, attached to any error.

    Returns:
        The typed value (``float``, ``int``, :class:`~wrench.models.WindowSize`
        or ``str``).

    Raises:
        InvalidNumber: Numeric kinds that fail to parse or are out of range.
        InvalidFormat: ``size`` values that are not ``WIDTHxHEIGHT``.
        InvalidEnumValue: ``choice`` values outside the declared set.
    """
    return _COERCERS[opt.kind](opt, value, path)


# ---------------------------------------------------------------------------
# Scope conversion
# ---------------------------------------------------------------------------


def convert_values(
    command: CommandSpec,
    raw: RawArgs,
    path: Sequence[str] = (),
) -> dict[str, Any]:
    """Convert the raw values of one command scope into typed values keyed by ``dest``.

    Flags become ``True``/``False``. Absent value options take their coerced
    default when one is declared and are otherwise left out, so the receiving
    model's own default applies.

    Args:
        command: The scope's schema.
        raw: Raw values captured for that scope.
        path: Command scope names, root first, attached to any error.

    Raises:
        UnknownArgument: *raw* holds a value no option of *command* declares.
        MissingRequiredArgument: A required option is absent.
        InvalidNumber: See :func:`coerce_value`.
        InvalidFormat: See :func:`coerce_value`.
        InvalidEnumValue: See :func:`coerce_value`.
    """
    path = tuple(path) or (command.name,)
    for name in raw.values:
        if command.find_option(name) is None:
            raise UnknownArgument(name, command=path)

    converted: dict[str, Any] = {}
    for opt in command.options:
        value = raw.values.get(opt.name)
        if not opt.takes_value:
            converted[opt.dest] = value is True
            continue
        if value is None or value is True:
            if opt.required:
                raise MissingRequiredArgument(opt.name, opt.display, command=path)
            if opt.default is not None:
                logger.debug("Option '%s' not given; using default %r", opt.name, opt.default)
                converted[opt.dest] = coerce_value(opt, opt.default, path)
            continue
        converted[opt.dest] = coerce_value(opt, value, path)
    return converted


def build(raw: RawArgs, schema: CommandSpec = WRENCH_SCHEMA) -> Config:
    """Validate *raw* against *schema* and produce the typed configuration.

    Args:
        raw: Output of :func:`~wrench.args.parser.parse`.
        schema: The schema *raw* was parsed with.

    Returns:
        An immutable :class:`~wrench.models.Config`.

    Raises:
        MissingSubcommand: Neither ``show`` nor ``replay`` was selected.
        MissingRequiredArgument: The selected mode's ``INPUT`` is absent.
        InvalidNumber: A numeric option is malformed or out of range.
        InvalidFormat: ``--size`` is not ``WIDTHxHEIGHT``.
        InvalidEnumValue: ``--save`` is not ``yaml`` or ``json``.
        SchemaError: The selected subcommand has no configuration mode, an
            option's ``dest`` is not a configuration field, or the values do
            not form a valid configuration.

    Example::

        >>> config = build(parse(["show", "scene.yaml"]))
        >>> config.mode
        ShowMode(kind='show', queue_depth=1, input_path='scene.yaml')
    """
    root_path = (schema.name,)
    _check_dests(schema, Config, exclude={"mode"})
    fields = convert_values(schema, raw, root_path)

    if raw.subcommand is None:
        raise MissingSubcommand([sub.name for sub in schema.subcommands], command=root_path)

    sub = schema.find_subcommand(raw.subcommand.command)
    if sub is None:
        raise UnknownArgument(raw.subcommand.command, command=root_path)
    mode_model = _MODE_MODELS.get(sub.name)
    if mode_model is None:
        raise SchemaError(f"Subcommand '{sub.name}' has no configuration mode")

    _check_dests(sub, mode_model, exclude={"kind"})
    mode_fields = convert_values(sub, raw.subcommand, root_path + (sub.name,))
    logger.debug("Building %s configuration", sub.name)
    try:
        return Config(mode=mode_model(**mode_fields), **fields)
    except ValidationError as exc:
        raise SchemaError(
            f"Schema '{schema.name}' does not produce a valid configuration: {exc}"
        ) from exc


def _check_dests(command: CommandSpec, model: type[BaseModel], exclude: set[str]) -> None:
    """Every option of *command* must name a field of *model*."""
    fields = set(model.model_fields) - exclude
    for opt in command.options:
        if opt.dest not in fields:
            raise SchemaError(
                f"Option '{opt.name}' of command '{command.name}' sets '{opt.dest}', "
                f"which is not a field of {model.__name__}"
            )
