"""Build a click command tree from a CommandSpec.

Every :class:`~wrench.models.OptionSpec` row becomes a click parameter and
every :class:`~wrench.models.CommandSpec` becomes a click command; a spec
with subcommands becomes a :class:`click.Group`. Click does the token
scanning. The generated commands add three things on top of it:

1. **Raw capture** -- parameters take plain strings and record what was
   given on the command line into a :class:`Capture`, so typed coercion
   stays in :mod:`wrench.args.builder`.
2. **Error translation** -- click's usage errors are re-raised as the
   :mod:`wrench.exceptions` taxonomy, naming the scope they were found in.
3. **Help layout** -- ``-h/--help`` and ``-V/--version`` raise
   :class:`~wrench.exceptions.HelpRequested` /
   :class:`~wrench.exceptions.VersionRequested` instead of printing, and
   ``get_help`` renders the clap-style FLAGS / OPTIONS / ARGS / SUBCOMMANDS
   sections through click's :class:`~click.HelpFormatter`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import click
from click.core import ParameterSource
from click.formatting import join_options

from wrench.exceptions import (
    HelpRequested,
    MissingValue,
    MultipleSubcommands,
    ParseError,
    UnknownArgument,
    VersionRequested,
)
from wrench.models import (
    HELP_LONG,
    HELP_SHORT,
    VERSION_LONG,
    VERSION_SHORT,
    CommandSpec,
    OptionSpec,
)

logger = logging.getLogger(__name__)

# Help is rendered at a fixed width so the same schema always gives the same text.
HELP_WIDTH = 200
_INDENT = 4
_GAP = 4

_CONTEXT_SETTINGS: dict[str, Any] = {
    "terminal_width": HELP_WIDTH,
    "max_content_width": HELP_WIDTH,
}


# ---------------------------------------------------------------------------
# Raw value capture
# ---------------------------------------------------------------------------


@dataclass
class Capture:
    """Raw values recorded per command scope while click parses one invocation."""

    scopes: dict[tuple[str, ...], dict[str, Union[bool, str]]] = field(default_factory=dict)

    def enter(self, path: tuple[str, ...]) -> None:
        self.scopes.setdefault(path, {})

    def record(self, path: tuple[str, ...], opt: OptionSpec, value: Union[bool, str]) -> None:
        logger.debug("Matched '%s' in scope '%s'", opt.name, path[-1])
        self.scopes.setdefault(path, {})[opt.name] = value


def _capture_callback(path: tuple[str, ...], opt: OptionSpec) -> Callable[..., Any]:
    def callback(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
        if value is None or param.name is None:
            return value
        if ctx.get_parameter_source(param.name) is not ParameterSource.COMMANDLINE:
            return value
        capture = ctx.find_object(Capture)
        if capture is not None:
            capture.record(path, opt, value)
        return value

    return callback


def _early_exit_callback(
    exc_type: type[Union[HelpRequested, VersionRequested]],
    path: tuple[str, ...],
) -> Callable[..., None]:
    def callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
        if value and not ctx.resilient_parsing:
            raise exc_type(path)

    return callback


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class SchemaOption(click.Option):
    """A click option generated from an :class:`OptionSpec` row."""

    def __init__(self, spec: OptionSpec, path: tuple[str, ...]) -> None:
        decls = []
        if spec.short:
            decls.append(f"-{spec.short}")
        if spec.long:
            decls.append(f"--{spec.long}")
        decls.append(_identifier(spec.name))
        if spec.takes_value:
            super().__init__(
                decls,
                type=click.STRING,
                metavar=f"<{spec.metavar}>",
                help=spec.help,
                expose_value=False,
                callback=_capture_callback(path, spec),
            )
        else:
            super().__init__(
                decls,
                is_flag=True,
                help=spec.help,
                expose_value=False,
                callback=_capture_callback(path, spec),
            )
        self.spec = spec


class SchemaArgument(click.Argument):
    """A click positional generated from an :class:`OptionSpec` row.

    Always optional at the click level; required positionals are enforced by
    the builder so root options are validated first.
    """

    def __init__(self, spec: OptionSpec, path: tuple[str, ...]) -> None:
        super().__init__(
            [_identifier(spec.name)],
            type=click.STRING,
            required=False,
            metavar=f"<{spec.metavar}>",
            expose_value=False,
            callback=_capture_callback(path, spec),
        )
        self.spec = spec


def _identifier(name: str) -> str:
    return name.replace("-", "_")


def _builtin_options(path: tuple[str, ...]) -> list[click.Option]:
    return [
        click.Option(
            [f"-{HELP_SHORT}", f"--{HELP_LONG}"],
            is_flag=True,
            is_eager=True,
            expose_value=False,
            help="Prints help information",
            callback=_early_exit_callback(HelpRequested, path),
        ),
        click.Option(
            [f"-{VERSION_SHORT}", f"--{VERSION_LONG}"],
            is_flag=True,
            is_eager=True,
            expose_value=False,
            help="Prints version information",
            callback=_early_exit_callback(VersionRequested, path),
        ),
    ]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class _ClapFormatter(click.HelpFormatter):
    def __init__(
        self,
        indent_increment: int = _INDENT,
        width: Optional[int] = None,
        max_width: Optional[int] = None,
    ) -> None:
        super().__init__(indent_increment=indent_increment, width=width, max_width=max_width)


class SchemaContext(click.Context):
    formatter_class = _ClapFormatter


class _SchemaCommandMixin:
    """Parsing and help behaviour shared by generated commands and groups."""

    context_class = SchemaContext
    spec: CommandSpec
    path: tuple[str, ...]
    root: CommandSpec
    params: list[click.Parameter]

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        capture = ctx.find_object(Capture)
        if capture is not None:
            capture.enter(self.path)
        literal = args[args.index("--") + 1:] if "--" in args else []
        try:
            rest = super().parse_args(ctx, args)  # type: ignore[misc]
        except click.NoSuchOption as exc:
            raise UnknownArgument(
                exc.option_name, command=self.path, reason=self._hint(exc.option_name)
            ) from exc
        except click.BadOptionUsage as exc:
            raise self._bad_usage(exc) from exc
        except click.UsageError as exc:
            raise ParseError(exc.format_message(), command=self.path) from exc

        if self.spec is not self.root and capture is not None:
            self._reject_second_subcommand(capture, list(ctx.args), literal)
        if not isinstance(self, click.Group) and ctx.args:
            raise UnknownArgument(ctx.args[0], command=self.path)
        return rest

    def _reject_second_subcommand(
        self, capture: Capture, extra: list[str], literal: list[str]
    ) -> None:
        values = capture.scopes.get(self.path, {})
        bare = [values[opt.name] for opt in self.spec.positionals if opt.name in values]
        for token in [*bare, *extra]:
            if not isinstance(token, str) or token in literal:
                continue
            if self.root.find_subcommand(token) is not None:
                raise MultipleSubcommands(self.spec.name, token, command=self.path)

    def _bad_usage(self, exc: click.BadOptionUsage) -> ParseError:
        opt = self.spec.find_alias(exc.option_name)
        if opt is not None and opt.takes_value:
            return MissingValue(opt.name, opt.display, command=self.path)
        return UnknownArgument(
            exc.option_name,
            command=self.path,
            reason=f"'{exc.option_name}' does not take a value",
        )

    def _hint(self, alias: str) -> str:
        """Explain an unknown alias that is valid in the root scope."""
        if self.spec is not self.root and self.root.find_alias(alias) is not None:
            return f"global options must come before the '{self.spec.name}' subcommand"
        return ""

    # ------------------------------------------------------------------ #
    # Help
    # ------------------------------------------------------------------ #

    def collect_usage_pieces(self, ctx: click.Context) -> list[str]:
        pieces = ["[FLAGS]"]
        if self.spec.value_options:
            pieces.append("[OPTIONS]")
        for opt in self.spec.positionals:
            pieces.append(f"<{opt.metavar}>" if opt.required else f"[{opt.metavar}]")
        if self.spec.subcommands:
            pieces.append("<SUBCOMMAND>")
        return pieces

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        self.format_help_text(ctx, formatter)
        self.format_usage(ctx, formatter)
        self.format_options(ctx, formatter)

    def format_help_text(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        if self.spec is self.root:
            header = [self.spec.name]
            if self.spec.version:
                header = [f"{self.spec.name} {self.spec.version}"]
            if self.spec.author:
                header.append(self.spec.author)
        else:
            header = ["-".join(_names(ctx))]
        if self.spec.about:
            header.append(self.spec.about)
        for line in header:
            formatter.write(f"{line}\n")

    def format_usage(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        with formatter.section("USAGE"):
            formatter.write_text(" ".join([*_names(ctx), *self.collect_usage_pieces(ctx)]))

    def format_options(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        flag_rows: list[tuple[str, str]] = []
        option_rows: list[tuple[str, str]] = []
        arg_rows: list[tuple[str, str]] = []
        for param in self.params:
            if isinstance(param, SchemaArgument):
                arg_rows.append((param.metavar or "", param.spec.help))
            elif isinstance(param, SchemaOption) and param.spec.takes_value:
                option_rows.append((_alias_column(param), _option_help(param.spec)))
            elif isinstance(param, click.Option):
                flag_rows.append((_alias_column(param), param.help or ""))

        _write_section(formatter, "FLAGS", flag_rows)
        _write_section(formatter, "OPTIONS", option_rows)
        _write_section(formatter, "ARGS", arg_rows)
        if isinstance(self, click.Group):
            sub_rows = []
            for name in self.list_commands(ctx):
                sub = self.get_command(ctx, name)
                if sub is not None:
                    sub_rows.append((name, sub.help or ""))
            _write_section(formatter, "SUBCOMMANDS", sub_rows)


class SchemaCommand(_SchemaCommandMixin, click.Command):
    """A leaf command generated from a :class:`CommandSpec`."""

    def __init__(self, spec: CommandSpec, path: tuple[str, ...], root: CommandSpec) -> None:
        super().__init__(
            name=spec.name,
            help=spec.about,
            params=_params(spec, path),
            add_help_option=False,
            context_settings={**_CONTEXT_SETTINGS, "allow_extra_args": True},
        )
        self.spec = spec
        self.path = path
        self.root = root


class SchemaGroup(_SchemaCommandMixin, click.Group):
    """A command with subcommands generated from a :class:`CommandSpec`.

    The group callback runs even when no subcommand is given, so the builder
    can validate root options before reporting the missing subcommand.
    """

    def __init__(self, spec: CommandSpec, path: tuple[str, ...], root: CommandSpec) -> None:
        super().__init__(
            name=spec.name,
            help=spec.about,
            params=_params(spec, path),
            add_help_option=False,
            invoke_without_command=True,
            no_args_is_help=False,
            context_settings=dict(_CONTEXT_SETTINGS),
        )
        self.spec = spec
        self.path = path
        self.root = root
        for sub in spec.subcommands:
            self.add_command(_build(sub, path + (sub.name,), root))

    def list_commands(self, ctx: click.Context) -> list[str]:
        return [sub.name for sub in self.spec.subcommands]

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[Optional[str], Optional[click.Command], list[str]]:
        name = args[0]
        command = self.get_command(ctx, name)
        if command is None:
            raise UnknownArgument(name, command=self.path)
        logger.debug("Switching to subcommand scope '%s'", name)
        return name, command, args[1:]


def build_command(schema: CommandSpec) -> Union[SchemaCommand, SchemaGroup]:
    """Generate the click command tree for *schema*.

    Args:
        schema: Root command. Its subcommands become click subcommands.

    Returns:
        A :class:`SchemaGroup` when *schema* declares subcommands, otherwise a
        :class:`SchemaCommand`.
    """
    return _build(schema, (schema.name,), schema)


def _build(
    spec: CommandSpec, path: tuple[str, ...], root: CommandSpec
) -> Union[SchemaCommand, SchemaGroup]:
    if spec.subcommands:
        return SchemaGroup(spec, path, root)
    return SchemaCommand(spec, path, root)


def _params(spec: CommandSpec, path: tuple[str, ...]) -> list[click.Parameter]:
    params: list[click.Parameter] = []
    for opt in spec.options:
        if not opt.is_positional:
            params.append(SchemaOption(opt, path))
    for opt in spec.positionals:
        params.append(SchemaArgument(opt, path))
    params.extend(_builtin_options(path))
    return params


# ---------------------------------------------------------------------------
# Help helpers
# ---------------------------------------------------------------------------


def _names(ctx: click.Context) -> list[str]:
    names: list[str] = []
    node: Optional[click.Context] = ctx
    while node is not None:
        names.insert(0, node.info_name or node.command.name or "")
        node = node.parent
    return names


def _alias_column(param: click.Option) -> str:
    text, _ = join_options(param.opts)
    # Long-only options are indented so their "--" lines up with "-x, --".
    if not any(len(opt) == 2 for opt in param.opts):
        text = f"    {text}"
    if not param.is_flag and param.metavar:
        text = f"{text} {param.metavar}"
    return text


def _option_help(spec: OptionSpec) -> str:
    if spec.choices:
        return f"{spec.help} [possible values: {', '.join(spec.choices)}]"
    return spec.help


def _write_section(
    formatter: click.HelpFormatter, title: str, rows: list[tuple[str, str]]
) -> None:
    if not rows:
        return
    with formatter.section(title):
        formatter.write_dl(rows, col_max=HELP_WIDTH, col_spacing=_GAP)
