"""Argument schema, parser, config builder and usage formatter.

This sub-package turns the process's argument list into the validated
:class:`~wrench.models.Config` the renderer driver consumes.

Typical usage::

    from wrench.args import build, parse

    config = build(parse(["-s", "1024x768", "show", "scene.yaml"]))

Sub-modules:

* :mod:`~wrench.args.schema` -- the built-in option table.
* :mod:`~wrench.args.loader` -- clap-style YAML schema loading.
* :mod:`~wrench.args.commands` -- click commands generated from a schema.
* :mod:`~wrench.args.parser` -- token scanning into raw values.
* :mod:`~wrench.args.builder` -- coercion and validation into a ``Config``.
* :mod:`~wrench.args.usage` -- help, usage and version text.
"""

from wrench.args.builder import build
from wrench.args.loader import load_schema
from wrench.args.parser import parse
from wrench.args.schema import WRENCH_SCHEMA
from wrench.args.usage import format_usage

__all__ = ["WRENCH_SCHEMA", "build", "format_usage", "load_schema", "parse"]
