"""Value normalization and display formatting for difference-tree nodes.

Comparators capture raw values while the tree is built; the helpers here turn
those values into what a reader sees in the result envelope:

- ``create_normalized_values`` turns an absent side of an added/deleted node
  into ``None``.
- ``format_complex_value`` renders containers as compact JSON, truncated.
- ``simplify_complex_value`` renders containers as a short summary such as
  ``[Array(3)]`` or ``{a, b, c...}``.
- ``normalize_string`` collapses whitespace and unifies line endings.
"""

from __future__ import annotations

import datetime as dt
import json
import re
from collections.abc import Mapping
from typing import Any

from json_diff_tree.tree.nodes import DiffStatus
from json_diff_tree.tree.types import MISSING, FieldType, is_empty

__all__ = [
    "create_normalized_values",
    "format_complex_value",
    "normalize_string",
    "regexp_source",
    "simplify_complex_value",
    "to_display_string",
    "truncate_string",
]

# Compiled once at import
_WHITESPACE = re.compile(r"\s+")
_CRLF = re.compile(r"\r\n?")

_FLAG_LETTERS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
    (re.ASCII, "a"),
)


def create_normalized_values(
    old_value: Any, new_value: Any, status: DiffStatus
) -> tuple[Any, Any]:
    """Return the ``(old, new)`` pair to store on a node.

    For ``added`` and ``deleted`` nodes the absent side (``MISSING``) is
    replaced with ``None`` so both sides always appear in the output.  All
    other values pass through untouched.
    """
    if status in (DiffStatus.ADDED, DiffStatus.DELETED):
        return (
            None if old_value is MISSING else old_value,
            None if new_value is MISSING else new_value,
        )
    return old_value, new_value


def normalize_string(value: Any) -> str:
    """Collapse whitespace runs to one space, unify line endings and trim."""
    if not isinstance(value, str):
        return str(value)
    return _WHITESPACE.sub(" ", _CRLF.sub("\n", value)).strip()


def truncate_string(value: Any, max_length: int, suffix: str = "...") -> str:
    """Cut *value* to at most *max_length* characters, ending with *suffix*."""
    text = value if isinstance(value, str) else str(value)
    if len(text) <= max_length:
        return text
    keep = max(max_length - len(suffix), 0)
    return text[:keep] + suffix


def regexp_source(pattern: re.Pattern[Any]) -> str:
    """Render a compiled pattern as ``/source/flags``."""
    flags = "".join(letter for flag, letter in _FLAG_LETTERS if pattern.flags & flag)
    return f"/{pattern.pattern}/{flags}"


def _json_default(value: Any) -> Any:
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return regexp_source(value)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, tuple):
        return list(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return regexp_source(value)
    return str(value)


def format_complex_value(value: Any, max_length: int = 100) -> str:
    """Render *value* as compact JSON truncated to *max_length* characters.

    Containers go through ``json.dumps``; anything that cannot be serialised
    (circular references, unsupported leaf types) renders as ``"[Object]"``.
    Scalars use their JSON-style text (``true``, ``null``, ``undefined``).

    Example::

        format_complex_value({"a": 1})          # '{"a":1}'
        format_complex_value(list(range(60)), 20)  # '[0,1,2,3,4,5,6,7,...'
    """
    if value is None:
        return "null"
    if value is MISSING:
        return "undefined"

    if isinstance(value, (Mapping, list, tuple)):
        try:
            formatted = json.dumps(
                value,
                default=_json_default,
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except Exception:  # noqa: BLE001 - host objects may raise anything
            formatted = "[Object]"
    else:
        formatted = _scalar_text(value)

    return truncate_string(formatted, max_length)


def simplify_complex_value(value: Any, max_length: int = 100) -> Any:
    """Summarise a container: ``[Array(n)]`` or ``{k1, k2, k3...}``.

    Empty values are returned as-is; non-containers fall back to
    ``format_complex_value``.
    """
    if is_empty(value):
        return value
    if isinstance(value, (list, tuple)):
        return f"[Array({len(value)})]"
    if isinstance(value, Mapping):
        keys = [str(k) for k in value]
        suffix = "..." if len(keys) > 3 else ""
        return "{" + ", ".join(keys[:3]) + suffix + "}"
    return format_complex_value(value, max_length)


def to_display_string(value: Any, field_type: FieldType | str) -> str:
    """Render *value* for a human reader according to its type tag."""
    if value is None:
        return "null"
    if value is MISSING:
        return "undefined"
    if isinstance(value, str) and not value:
        return '""'

    match field_type:
        case FieldType.STRING:
            return f'"{value}"'
        case FieldType.NUMBER | FieldType.BOOLEAN:
            return _scalar_text(value)
        case FieldType.ARRAY:
            return f"[Array({len(value)})]"
        case FieldType.OBJECT:
            return f"{{Object({len(value)} keys)}}"
        case _:
            return _scalar_text(value)
