"""Load an argument schema from a clap-style YAML definition.

The original wrench declared its command line in an ``args.yaml`` file read
by clap. This module reads the same layout into a
:class:`~wrench.models.CommandSpec` so the generic parser and usage formatter
can drive it::

    name: wrench
    version: "0.1"
    about: WebRender testing and debugging utility
    args:
      - size:
          short: s
          long: size
          help: Window size
          takes_value: true
    subcommands:
      - show:
          about: show frame(s) described by YAML
          args:
            - INPUT:
                help: The input YAML file
                required: true
                index: 1

Recognised per-argument keys are ``short``, ``long``, ``help``,
``takes_value``, ``required``, ``index``, ``default_value``,
``possible_values`` and ``value_name`` (clap's own names), plus two wrench
extensions: ``value_kind`` (a :class:`~wrench.models.ValueKind` value) and
``dest``. Without ``value_kind``, an argument that takes a value is a plain
string, or a ``choice`` when ``possible_values`` is given.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from wrench.exceptions import SchemaError
from wrench.models import CommandSpec, OptionSpec, ValueKind

_ARG_KEYS = frozenset(
    {
        "short",
        "long",
        "help",
        "takes_value",
        "required",
        "index",
        "default_value",
        "possible_values",
        "value_name",
        "value_kind",
        "dest",
    }
)


def load_schema(source: Union[str, Path]) -> CommandSpec:
    """Read a YAML schema file and build the command tree it describes.

    Args:
        source: Path to the YAML file.

    Returns:
        The root :class:`~wrench.models.CommandSpec`.

    Raises:
        SchemaError: If the file is missing, unreadable, not valid YAML, or
            describes an inconsistent schema (e.g. duplicate aliases).
    """
    path = Path(source)
    if not path.is_file():
        raise SchemaError(f"Schema file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Failed to read schema file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML in schema file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaError(
            f"Schema must be a YAML mapping (got "
            f"{type(data).__name__ if data is not None else 'empty document'})"
        )
    return schema_from_dict(data)


def schema_from_dict(data: dict[str, Any]) -> CommandSpec:
    """Build a :class:`~wrench.models.CommandSpec` from an already-parsed mapping.

    Raises:
        SchemaError: If the mapping is malformed or the schema is inconsistent.
    """
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaError("Schema is missing a 'name'")
    return _command_from_dict(name, data, root=True)


def _command_from_dict(name: str, data: dict[str, Any], root: bool) -> CommandSpec:
    options = [_option_from_entry(entry, name) for entry in _entries(data.get("args"), name, "args")]
    subcommands = []
    for entry in _entries(data.get("subcommands"), name, "subcommands"):
        sub_name, body = _single_item(entry, name, "subcommands")
        subcommands.append(_command_from_dict(sub_name, body, root=False))

    version = data.get("version") if root else None
    try:
        return CommandSpec(
            name=name,
            about=str(data.get("about", "")),
            version=str(version) if version is not None else None,
            author=data.get("author") if root else None,
            options=tuple(options),
            subcommands=tuple(subcommands),
        )
    except ValidationError as exc:
        raise SchemaError(f"Invalid command '{name}': {exc}") from exc


def _entries(value: Any, command: str, key: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaError(f"'{key}' of command '{command}' must be a list")
    return value


def _single_item(entry: Any, command: str, key: str) -> tuple[str, dict[str, Any]]:
    """Unwrap clap's ``- name: {...}`` list items."""
    if not isinstance(entry, dict) or len(entry) != 1:
        raise SchemaError(
            f"Each entry under '{key}' of command '{command}' must be a single-key mapping"
        )
    item_name, body = next(iter(entry.items()))
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise SchemaError(f"Entry '{item_name}' of command '{command}' must be a mapping")
    return str(item_name), body


def _option_from_entry(entry: Any, command: str) -> OptionSpec:
    name, body = _single_item(entry, command, "args")
    unknown = set(body) - _ARG_KEYS
    if unknown:
        raise SchemaError(
            f"Unknown keys for argument '{name}' of command '{command}': "
            f"{', '.join(sorted(unknown))}"
        )

    index = body.get("index")
    choices = tuple(str(c) for c in body.get("possible_values") or ())
    takes_value = bool(body.get("takes_value")) or index is not None

    try:
        if "value_kind" in body:
            kind = ValueKind(body["value_kind"])
        elif not takes_value:
            kind = ValueKind.FLAG
        elif choices:
            kind = ValueKind.CHOICE
        else:
            kind = ValueKind.STRING

        default = body.get("default_value")
        return OptionSpec(
            name=name,
            dest=str(body.get("dest") or _default_dest(name)),
            short=body.get("short"),
            long=body.get("long"),
            kind=kind,
            help=str(body.get("help", "")),
            required=bool(body.get("required", False)),
            index=index,
            default=str(default) if default is not None else None,
            choices=choices,
            value_name=body.get("value_name"),
        )
    except (ValidationError, ValueError) as exc:
        raise SchemaError(f"Invalid argument '{name}' of command '{command}': {exc}") from exc


def _default_dest(name: str) -> str:
    return name.lower().replace("-", "_")
