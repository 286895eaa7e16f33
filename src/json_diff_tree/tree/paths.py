"""Path construction and parsing for difference-tree addresses.

Paths use a dotted/bracketed notation rooted at the literal ``"root"``:

- The root node's path is ``"root"``.
- An object property under the root is just its key: ``"name"``.
- Deeper properties are dot-joined: ``"address.city"``.
- Array indices use brackets: ``"[0]"``, ``"items[2].sku"``.

Paths are a pure function of ancestry, so every node in a tree has a unique
path.  All helpers here are deterministic and side-effect free.
"""

from __future__ import annotations

import re

__all__ = [
    "ROOT",
    "build_path",
    "get_last_key",
    "get_parent_path",
    "is_array_index_path",
    "is_valid_path",
    "normalize_path",
    "parse_path",
]

ROOT = "root"

_IDENT = r"[A-Za-z_$][\w$]*"
_INDEX = r"\[\d+\]"
_VALID_PATH = re.compile(
    rf"^(?:{_IDENT}|{_INDEX})(?:\.{_IDENT}|{_INDEX})*$"
)
_LEADING_DOTS = re.compile(r"^\.+")


def _is_root(path: str | None) -> bool:
    return not path or path == ROOT


def build_path(
    parent_path: str | None, key: str | int, is_array_index: bool = False
) -> str:
    """Return the path of *key* under *parent_path*.

    Args:
        parent_path:    Path of the parent node; ``"root"`` or empty for the root.
        key:            Property name or array index.
        is_array_index: Render the segment as ``[key]`` instead of ``.key``.

    Returns:
        ``"key"`` / ``"[key]"`` below the root, otherwise
        ``"parent.key"`` / ``"parent[key]"``.
    """
    if _is_root(parent_path):
        return f"[{key}]" if is_array_index else str(key)
    if is_array_index:
        return f"{parent_path}[{key}]"
    return f"{parent_path}.{key}"


def parse_path(path: str | None) -> list[str | int]:
    """Tokenize *path* into its ordered segments.

    Scans character by character: ``[`` ... ``]`` delimits an index segment
    (nested brackets are kept inside the segment) and ``.`` separates
    property segments outside brackets.  Bracket contents made only of digits
    become ``int``; anything else (e.g. the ``"..."`` ellipsis marker) stays a
    string.

    Example::

        parse_path("items[2].sku")   # ["items", 2, "sku"]
        parse_path("root")           # []
    """
    if _is_root(path):
        return []

    segments: list[str | int] = []
    current: list[str] = []
    depth = 0

    for char in path:
        if char == "[":
            if depth == 0:
                if current:
                    segments.append("".join(current))
                    current = []
            else:
                current.append(char)
            depth += 1
        elif char == "]" and depth > 0:
            depth -= 1
            if depth == 0:
                if current:
                    token = "".join(current)
                    segments.append(int(token) if token.isdigit() else token)
                    current = []
            else:
                current.append(char)
        elif char == "." and depth == 0:
            if current:
                segments.append("".join(current))
                current = []
        else:
            current.append(char)

    if current:
        segments.append("".join(current))
    return segments


def get_last_key(path: str | None) -> str | int:
    """Return the trailing segment of *path* (``"root"`` for the root)."""
    if _is_root(path):
        return ROOT
    segments = parse_path(path)
    if not segments:
        return path  # type: ignore[return-value]
    return segments[-1]


def get_parent_path(path: str | None) -> str:
    """Return the path of the parent node.

    Top-level segments have ``"root"`` as parent; the root itself has ``""``.
    """
    if _is_root(path):
        return ""

    last_dot = path.rfind(".")
    last_bracket = path.rfind("[")
    if last_dot == -1 and last_bracket == -1:
        return ROOT

    split = max(last_dot, last_bracket)
    parent = path[:split]
    return parent or ROOT


def is_array_index_path(path: str | None) -> bool:
    return bool(path) and "[" in path and "]" in path


def is_valid_path(path: object) -> bool:
    """True when *path* uses identifier keys and numeric indices only."""
    if not isinstance(path, str):
        return False
    if path in (ROOT, ""):
        return True
    return _VALID_PATH.match(path) is not None


def normalize_path(path: str | None) -> str:
    """Strip leading dots; empty input normalizes to ``"root"``."""
    if _is_root(path):
        return ROOT
    return _LEADING_DOTS.sub("", path) or ROOT
