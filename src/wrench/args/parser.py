"""Scan raw command-line tokens against an option schema.

:func:`parse` generates the click command tree for a schema (see
:mod:`wrench.args.commands`), lets click scan the tokens, and returns the
captured :class:`~wrench.models.RawArgs` tree of unconverted string values.

Scanning rules, as the generated commands apply them:

* **global scope** -- the root command's options. The first bare token names
  the subcommand and switches to its scope.
* **subcommand scope** -- the selected subcommand's options and positionals.
  Root options are no longer recognised, and a second subcommand name is
  :class:`~wrench.exceptions.MultipleSubcommands` unless it follows ``--``.
* A value option consumes the next token, even if that token looks like a
  flag. ``--long=value`` and ``-svalue`` supply it inline; bundled short
  flags (``-dr``) are accepted.
* ``--`` ends option parsing; later tokens are positionals.
* ``-h/--help`` and ``-V/--version`` raise
  :class:`~wrench.exceptions.HelpRequested` /
  :class:`~wrench.exceptions.VersionRequested` once the scope they appear in
  has been scanned.
* When an option is repeated the last value wins.

Type coercion and required-argument checks happen later, in
:func:`~wrench.args.builder.build`.
"""

from __future__ import annotations

import logging
from typing import Sequence

from wrench.args.commands import Capture, build_command
from wrench.args.schema import WRENCH_SCHEMA
from wrench.models import CommandSpec, RawArgs

logger = logging.getLogger(__name__)


def parse(tokens: Sequence[str], schema: CommandSpec = WRENCH_SCHEMA) -> RawArgs:
    """Match *tokens* against *schema* and collect raw values.

    Args:
        tokens: The argument list without the program name
            (``sys.argv[1:]``).
        schema: Root command to parse against. Defaults to the built-in
            wrench table.

    Returns:
        The raw values of the root scope, with the selected subcommand's
        values nested under ``subcommand``.

    Raises:
        UnknownArgument: A token matched nothing in the active scope.
        MissingValue: A value option was the last token.
        MultipleSubcommands: A second subcommand name appeared.
        HelpRequested: ``-h``/``--help`` was given.
        VersionRequested: ``-V``/``--version`` was given.

    Example::

        >>> raw = parse(["-s", "1024x768", "show", "scene.yaml"])
        >>> raw.values
        {'size': '1024x768'}
        >>> raw.subcommand.values
        {'INPUT': 'scene.yaml'}
    """
    capture = Capture()
    command = build_command(schema)
    logger.debug("Parsing %d token(s) against '%s'", len(tokens), schema.name)
    with command.make_context(schema.name, list(tokens), obj=capture) as ctx:
        command.invoke(ctx)
    return _to_raw(schema, capture)


def _to_raw(schema: CommandSpec, capture: Capture) -> RawArgs:
    root_path = (schema.name,)
    subcommand = None
    for path, values in capture.scopes.items():
        if len(path) == 2:
            subcommand = RawArgs(command=path[1], values=dict(values))
    return RawArgs(
        command=schema.name,
        values=dict(capture.scopes.get(root_path, {})),
        subcommand=subcommand,
    )
