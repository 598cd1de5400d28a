"""Console-script entry point for wrench.

:func:`main` is declared as the ``wrench`` script in ``pyproject.toml``. It
parses the process's argument list, builds the validated
:class:`~wrench.models.Config`, and hands it to the renderer driver. Help,
version and usage errors are reported here; the parsing layer itself never
prints.

When no driver is supplied the resolved configuration is printed on stdout,
which makes the entry point usable as a dry run::

    $ wrench -s 800x600 show scene.yaml
    {
      "debug": false,
      ...
      "window_size": {"width": 800, "height": 600},
      ...
    }
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, NoReturn, Optional, Sequence

from wrench.args.builder import build
from wrench.args.parser import parse
from wrench.args.schema import WRENCH_SCHEMA
from wrench.args.usage import format_command_help, format_usage_line, format_version
from wrench.exceptions import (
    HelpRequested,
    UsageError,
    VersionRequested,
    WrenchError,
)
from wrench.exit_codes import EXIT_INTERRUPTED, EXIT_SUCCESS
from wrench.models import CommandSpec, Config, ReplayMode
from wrench.output import (
    OutputManager,
    error,
    print_data,
    print_structured,
    set_output,
    suggest,
    usage,
    warning,
)

logger = logging.getLogger(__name__)

Driver = Callable[[Config], Any]


def load_config(argv: Sequence[str], schema: CommandSpec = WRENCH_SCHEMA) -> Config:
    """Parse *argv* and build the configuration, raising on malformed input.

    Args:
        argv: Arguments without the program name.
        schema: Schema to parse against.

    Raises:
        UsageError: Any parse or validation failure.
        HelpRequested: ``--help`` was given.
        VersionRequested: ``--version`` was given.
    """
    return build(parse(argv, schema), schema)


def _cancelled() -> NoReturn:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _report_usage_error(exc: UsageError, schema: CommandSpec) -> None:
    error(str(exc))
    usage("\n" + format_usage_line(schema, exc.command))
    suggest("For more information try --help")


def main(argv: Optional[Sequence[str]] = None, driver: Optional[Driver] = None) -> None:
    """CLI entry point invoked by the ``wrench`` console script.

    Args:
        argv: Arguments without the program name; defaults to
            ``sys.argv[1:]``.
        driver: Callable receiving the built configuration. When omitted the
            configuration is printed to stdout instead.

    Raises:
        SystemExit: On ``--help``/``--version`` (status 0) and on any error
            (status from :mod:`wrench.exit_codes`).
    """
    set_output(OutputManager())
    tokens = list(sys.argv[1:] if argv is None else argv)
    schema = WRENCH_SCHEMA

    try:
        config = load_config(tokens, schema)
    except HelpRequested as exc:
        print_data(format_command_help(schema, exc.command))
        sys.exit(EXIT_SUCCESS)
    except VersionRequested:
        print_data(format_version(schema))
        sys.exit(EXIT_SUCCESS)
    except UsageError as exc:
        _report_usage_error(exc, schema)
        sys.exit(exc.exit_code)
    except WrenchError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        _cancelled()

    if isinstance(config.mode, ReplayMode) and config.mode.skip_uploads_inert:
        warning("--skip-uploads has no effect without --api")

    if driver is None:
        print_structured(config.model_dump(mode="json"))
        return

    logger.debug("Handing %s configuration to driver", config.mode.kind)
    try:
        driver(config)
    except KeyboardInterrupt:
        _cancelled()
