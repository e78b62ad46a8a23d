"""Resolution of ${VAR} references inside raw site-config data.

References are tracked by dotted field path (``ai.api_key``,
``context.repository.topics.0``) so a missing variable can be reported
together with every field that needs it.
"""

import os
import re
from collections.abc import Iterator
from typing import Any

_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}")

ROOT_PATH = "<root>"


def _child(path: str, key: object) -> str:
    return f"{path}.{key}" if path else str(key)


def iter_env_references(data: Any, path: str = "") -> Iterator[tuple[str, str]]:
    """Yield ``(field_path, var_name)`` for every reference in *data*, depth first."""
    if isinstance(data, str):
        for match in _REFERENCE.finditer(data):
            yield path or ROOT_PATH, match.group("name")
    elif isinstance(data, dict):
        for key, value in data.items():
            yield from iter_env_references(value, _child(path, key))
    elif isinstance(data, list):
        for index, item in enumerate(data):
            yield from iter_env_references(item, _child(path, index))


def missing_env_references(data: Any) -> dict[str, list[str]]:
    """Map each unset variable to the field paths that reference it.

    Variables appear in first-reference order; a field is listed once per
    variable even if it references that variable twice.
    """
    missing: dict[str, list[str]] = {}
    for field_path, name in iter_env_references(data):
        if name in os.environ:
            continue
        fields = missing.setdefault(name, [])
        if field_path not in fields:
            fields.append(field_path)
    return missing


def resolve_env_references(data: Any) -> Any:
    """Return a copy of *data* with every ${VAR} replaced by its value.

    Call missing_env_references first; an unset variable raises KeyError here.
    """
    if isinstance(data, str):
        return _REFERENCE.sub(lambda m: os.environ[m.group("name")], data)
    if isinstance(data, dict):
        return {key: resolve_env_references(value) for key, value in data.items()}
    if isinstance(data, list):
        return [resolve_env_references(item) for item in data]
    return data
