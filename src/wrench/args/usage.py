"""Derive help and usage text from an option schema.

Text is rendered by the click commands generated for the schema (see
:mod:`wrench.args.commands`) at a fixed width, so the same schema always
renders the same bytes. Output follows the layout users of clap-based tools
expect::

    wrench 0.1
    Vladimir Vukicevic <vladimir@pobox.com>
    WebRender testing and debugging utility

    USAGE:
        wrench [FLAGS] [OPTIONS] <SUBCOMMAND>

    FLAGS:
        -d, --debug    Enable debug renderer
        ...
"""

from __future__ import annotations

from typing import Optional, Sequence

import click

from wrench.args.commands import build_command
from wrench.args.schema import WRENCH_SCHEMA
from wrench.models import CommandSpec


def format_version(schema: CommandSpec = WRENCH_SCHEMA) -> str:
    """Return ``"<name> <version>"`` (just the name when no version is declared)."""
    if schema.version:
        return f"{schema.name} {schema.version}"
    return schema.name


def format_usage_line(
    schema: CommandSpec = WRENCH_SCHEMA,
    path: Sequence[str] = (),
) -> str:
    """Return the ``USAGE:`` block for the command scope named by *path*.

    Printed under error messages so the user sees the expected shape of the
    invocation without the full help.
    """
    ctx = _context(schema, path)
    return ctx.command.get_usage(ctx)


def format_command_help(
    schema: CommandSpec = WRENCH_SCHEMA,
    path: Sequence[str] = (),
) -> str:
    """Return the full help for one command scope (root when *path* is empty)."""
    ctx = _context(schema, path)
    return ctx.command.get_help(ctx) + "\n"


def format_usage(schema: CommandSpec = WRENCH_SCHEMA) -> str:
    """Render help for the root command followed by every subcommand.

    Args:
        schema: Root command to describe.

    Returns:
        Newline-terminated text listing global options, then each subcommand
        with its own options and positional arguments.
    """
    sections = [format_command_help(schema)]
    for sub in schema.subcommands:
        sections.append(format_command_help(schema, (schema.name, sub.name)))
    return "\n".join(sections)


def _context(schema: CommandSpec, path: Sequence[str]) -> click.Context:
    """Build (without parsing) the click context chain for *path*.

    Unknown trailing names resolve to the deepest scope that exists.
    """
    command: click.Command = build_command(schema)
    ctx = command.context_class(command, info_name=schema.name, **command.context_settings)
    for name in tuple(path)[1:]:
        sub: Optional[click.Command] = None
        if isinstance(command, click.Group):
            sub = command.get_command(ctx, name)
        if sub is None:
            break
        command = sub
        ctx = command.context_class(
            command, parent=ctx, info_name=name, **command.context_settings
        )
    return ctx
