"""Dotted-path access to nested documents.

Paths follow Elasticsearch ingest conventions: ``aws.dimensions.FunctionName``
walks nested mappings. A key that itself contains dots (as produced by some
shippers) is honoured at any level, longest key first.
"""

import copy
from collections.abc import Mapping
from typing import Any

from lambdascope.core.errors import FieldMismatchError

_MISSING = object()


def _lookup(node: Any, parts: list[str]) -> Any:
    """Resolve path parts against a node, or return _MISSING."""
    if not parts:
        return node
    if not isinstance(node, Mapping):
        return _MISSING
    # Try the longest literal key first so "service.name" as a flat key wins
    for end in range(len(parts), 0, -1):
        key = ".".join(parts[:end])
        if key in node:
            found = _lookup(node[key], parts[end:])
            if found is not _MISSING:
                return found
    return _MISSING


def has_field(document: Mapping[str, Any], path: str) -> bool:
    """Return True if the path resolves to a value (None counts as absent)."""
    value = _lookup(document, path.split("."))
    return value is not _MISSING and value is not None


def get_field(document: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Return the value at a dotted path, or ``default`` if absent."""
    value = _lookup(document, path.split("."))
    if value is _MISSING or value is None:
        return default
    return value


def set_field(document: Mapping[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a deep copy of the document with ``path`` set to ``value``.

    Intermediate mappings are created as needed.

    Raises:
        FieldMismatchError: If an intermediate value exists but is not a mapping.
    """
    result: dict[str, Any] = copy.deepcopy(dict(document))
    parts = path.split(".")
    node = result
    for index, part in enumerate(parts[:-1]):
        child = node.get(part)
        if child is None:
            child = {}
            node[part] = child
        elif not isinstance(child, dict):
            walked = ".".join(parts[: index + 1])
            raise FieldMismatchError(
                path, f"cannot set through non-object value at {walked!r}"
            )
        node = child
    node[parts[-1]] = copy.deepcopy(value)
    return result
