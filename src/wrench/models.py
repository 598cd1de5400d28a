"""Canonical Pydantic models shared across all wrench modules.

The models fall into three groups:

**Schema models** -- static, immutable description of the command line:
    :class:`ValueKind`, :class:`OptionSpec` and :class:`CommandSpec`. The
    built-in table lives in :mod:`wrench.args.schema`; alternate tables can be
    loaded from YAML via :mod:`wrench.args.loader`.

**Parser output** -- :class:`RawArgs`, the transient map of raw string values
    produced by :func:`~wrench.args.parser.parse` and consumed by
    :func:`~wrench.args.builder.build`.

**Configuration models** -- the typed, frozen record handed to the renderer
    driver: :class:`SaveFormat`, :class:`WindowSize`, :class:`ShowMode`,
    :class:`ReplayMode` and :class:`Config`.

All models use Pydantic v2. Schema and configuration models are frozen so a
``Config`` cannot be mutated once built.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    PositiveFloat,
    PositiveInt,
    model_validator,
)

HELP_SHORT = "h"
HELP_LONG = "help"
VERSION_SHORT = "V"
VERSION_LONG = "version"

RESERVED_SHORTS = frozenset({HELP_SHORT, VERSION_SHORT})
RESERVED_LONGS = frozenset({HELP_LONG, VERSION_LONG})


# --- Schema ---


class ValueKind(str, enum.Enum):
    """Arity and raw-to-typed coercion rule of an option.

    ``FLAG`` options are presence-only; every other kind consumes exactly one
    value which is coerced by the matching rule in
    :mod:`wrench.args.builder`.
    """

    FLAG = "flag"
    STRING = "string"
    PATH = "path"
    POSITIVE_FLOAT = "positive_float"
    NON_NEGATIVE_FLOAT = "non_negative_float"
    POSITIVE_INT = "positive_int"
    SIZE = "size"
    CHOICE = "choice"


class OptionSpec(BaseModel):
    """One recognised flag, value option, or positional argument.

    Example::

        OptionSpec(
            name="size",
            dest="window_size",
            short="s",
            long="size",
            kind=ValueKind.SIZE,
            value_name="WxH",
            help="Window size, specified as widthxheight (e.g. 1024x768), in pixels",
        )
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unique key within the command scope")
    dest: str = Field(description="Attribute of the resulting config record")
    short: Optional[str] = Field(default=None, description="Single-character alias")
    long: Optional[str] = Field(default=None, description="Word alias, without dashes")
    kind: ValueKind = ValueKind.FLAG
    help: str = ""
    required: bool = False
    index: Optional[int] = Field(
        default=None, ge=1, description="1-based position for positionals"
    )
    default: Optional[str] = Field(
        default=None, description="Raw default, coerced like user input"
    )
    choices: tuple[str, ...] = ()
    value_name: Optional[str] = None

    @model_validator(mode="after")
    def _check_shape(self) -> OptionSpec:
        if self.is_positional:
            if self.short is not None or self.long is not None:
                raise ValueError(f"positional '{self.name}' cannot have aliases")
            if self.kind == ValueKind.FLAG:
                raise ValueError(f"positional '{self.name}' must take a value")
        elif self.short is None and self.long is None:
            raise ValueError(f"option '{self.name}' needs a short or long alias")
        if self.short is not None and (len(self.short) != 1 or self.short == "-"):
            raise ValueError(
                f"short alias of '{self.name}' must be one character, got '{self.short}'"
            )
        if self.long is not None and (not self.long or self.long.startswith("-")):
            raise ValueError(f"long alias of '{self.name}' must not start with '-'")
        if self.kind == ValueKind.CHOICE and not self.choices:
            raise ValueError(f"choice option '{self.name}' declares no choices")
        if self.kind == ValueKind.FLAG and self.default is not None:
            raise ValueError(f"flag '{self.name}' cannot have a default value")
        return self

    @property
    def is_positional(self) -> bool:
        return self.index is not None

    @property
    def takes_value(self) -> bool:
        return self.kind != ValueKind.FLAG

    @property
    def metavar(self) -> str:
        """Placeholder shown for the option's value in help and errors."""
        if self.value_name:
            return self.value_name
        if self.kind == ValueKind.CHOICE:
            return "|".join(self.choices)
        return self.name.upper()

    @property
    def display(self) -> str:
        """How the option is referred to in error messages (``--size <WxH>``)."""
        if self.is_positional:
            return f"<{self.metavar}>"
        alias = f"--{self.long}" if self.long else f"-{self.short}"
        if self.takes_value:
            return f"{alias} <{self.metavar}>"
        return alias


class CommandSpec(BaseModel):
    """The root command or one of its subcommands.

    Within a scope, every alias (including the implicit ``-h/--help`` and
    ``-V/--version``) is unique and at most one positional occupies each index.
    A subcommand's options are independent of the root's.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    about: str = ""
    version: Optional[str] = None
    author: Optional[str] = None
    options: tuple[OptionSpec, ...] = ()
    subcommands: tuple[CommandSpec, ...] = ()

    @model_validator(mode="after")
    def _check_unique(self) -> CommandSpec:
        names: set[str] = set()
        shorts: set[str] = set(RESERVED_SHORTS)
        longs: set[str] = set(RESERVED_LONGS)
        indexes: set[int] = set()
        for opt in self.options:
            if opt.name in names:
                raise ValueError(f"duplicate option name '{opt.name}' in '{self.name}'")
            names.add(opt.name)
            if opt.short is not None:
                if opt.short in shorts:
                    raise ValueError(f"duplicate alias '-{opt.short}' in '{self.name}'")
                shorts.add(opt.short)
            if opt.long is not None:
                if opt.long in longs:
                    raise ValueError(f"duplicate alias '--{opt.long}' in '{self.name}'")
                longs.add(opt.long)
            if opt.index is not None:
                if opt.index in indexes:
                    raise ValueError(
                        f"more than one positional at index {opt.index} in '{self.name}'"
                    )
                indexes.add(opt.index)
        sub_names = [sub.name for sub in self.subcommands]
        if len(set(sub_names)) != len(sub_names):
            raise ValueError(f"duplicate subcommand name in '{self.name}'")
        return self

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def find_alias(self, token: str) -> Optional[OptionSpec]:
        """Return the option whose ``--long`` or ``-s`` alias equals *token*."""
        if token.startswith("--"):
            word = token[2:]
            for opt in self.options:
                if opt.long is not None and opt.long == word:
                    return opt
        elif token.startswith("-") and len(token) == 2:
            char = token[1]
            for opt in self.options:
                if opt.short is not None and opt.short == char:
                    return opt
        return None

    def find_positional(self, index: int) -> Optional[OptionSpec]:
        for opt in self.options:
            if opt.index == index:
                return opt
        return None

    def find_option(self, name: str) -> Optional[OptionSpec]:
        for opt in self.options:
            if opt.name == name:
                return opt
        return None

    def find_subcommand(self, name: str) -> Optional[CommandSpec]:
        for sub in self.subcommands:
            if sub.name == name:
                return sub
        return None

    @property
    def positionals(self) -> list[OptionSpec]:
        """Positional arguments ordered by index."""
        return sorted(
            (opt for opt in self.options if opt.is_positional),
            key=lambda opt: opt.index or 0,
        )

    @property
    def flags(self) -> list[OptionSpec]:
        return [opt for opt in self.options if not opt.is_positional and not opt.takes_value]

    @property
    def value_options(self) -> list[OptionSpec]:
        return [opt for opt in self.options if not opt.is_positional and opt.takes_value]


# --- Parser output ---


class RawArgs(BaseModel):
    """Raw values captured for one command scope.

    ``values`` maps option names to their raw string, or to ``True`` for a
    presence-only flag. Options that were not given are absent. When a
    subcommand was selected, its own scope is nested in ``subcommand``.
    """

    command: str
    values: dict[str, Union[bool, str]] = Field(default_factory=dict)
    subcommand: Optional[RawArgs] = None


# --- Configuration ---


class SaveFormat(str, enum.Enum):
    """Serialisation format for saved frames."""

    YAML = "yaml"
    JSON = "json"


class WindowSize(BaseModel):
    """Window dimensions in pixels."""

    model_config = ConfigDict(frozen=True)

    width: PositiveInt
    height: PositiveInt

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class ShowMode(BaseModel):
    """Render frame(s) described by a YAML file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["show"] = "show"
    queue_depth: PositiveInt = Field(
        default=1, description="Frames submitted to the renderer ahead of time"
    )
    input_path: str

    @property
    def aux_dir(self) -> Path:
        """Directory that auxiliary resources (images, fonts) are resolved against.

        Computed lexically from ``input_path``; the filesystem is not touched.
        """
        return Path(self.input_path).parent


class ReplayMode(BaseModel):
    """Replay a binary recording."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["replay"] = "replay"
    reissue_api: bool = False
    skip_uploads: bool = False
    input_path: str

    @property
    def skip_uploads_inert(self) -> bool:
        """``--skip-uploads`` only matters when API messages are reissued."""
        return self.skip_uploads and not self.reissue_api


class Config(BaseModel):
    """Validated configuration handed to the renderer driver.

    Built once per invocation by :func:`~wrench.args.builder.build` and
    immutable thereafter.
    """

    model_config = ConfigDict(frozen=True)

    debug: bool = False
    shaders_path: Optional[str] = None
    rebuild: bool = False
    save_format: Optional[SaveFormat] = None
    subpixel_aa: bool = False
    device_pixel_ratio: Optional[PositiveFloat] = None
    window_size: Optional[WindowSize] = None
    time_limit: Optional[NonNegativeFloat] = None
    vsync: bool = False
    mode: Union[ShowMode, ReplayMode] = Field(discriminator="kind")
