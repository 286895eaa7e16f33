"""Post-processing of a finished difference tree.

Runs after status propagation.  Raw values captured by the comparators are
converted into display values, values are stripped from unchanged nodes when
the caller does not want them, and the structure of every node is checked.
"""

from __future__ import annotations

import datetime as dt
import numbers
import re
from typing import TYPE_CHECKING, Any

from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.normalizer import (
    format_complex_value,
    normalize_string,
    regexp_source,
    simplify_complex_value,
)
from json_diff_tree.tree.types import MISSING, FieldType, is_complex_type, is_empty

if TYPE_CHECKING:
    from json_diff_tree.algorithm.config import DiffConfig

__all__ = [
    "cleanup_node",
    "normalize_node_values",
    "post_process_tree",
    "process_node_value",
    "validate_node_structure",
]


def process_node_value(value: Any, config: DiffConfig) -> Any:
    """Return the display form of a single captured value.

    - Empty values (None, MISSING, "") are kept as-is.
    - Strings are whitespace-normalized in ``normalized`` comparison mode.
    - Dates become ISO-8601 strings, patterns become ``/source/flags``.
    - Containers become truncated JSON, or a short summary when
      ``simplify_complex_values`` is set.
    - Other host values are rendered as text.
    """
    if is_empty(value):
        return value
    if isinstance(value, str):
        if config.string_comparison == "normalized":
            return normalize_string(value)
        return value
    if is_complex_type(value):
        if config.simplify_complex_values:
            return simplify_complex_value(value, config.max_string_length)
        return format_complex_value(value, config.max_string_length)
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return regexp_source(value)
    if isinstance(value, numbers.Number):
        return value
    return format_complex_value(value, config.max_string_length)


def normalize_node_values(node: DiffNode, config: DiffConfig) -> DiffNode:
    """Replace the values of *node* and its descendants with display values."""
    for current in node.iter_nodes():
        if current.old_value is not MISSING:
            current.old_value = process_node_value(current.old_value, config)
        if current.new_value is not MISSING:
            current.new_value = process_node_value(current.new_value, config)
    return node


def cleanup_node(node: DiffNode, include_unchanged: bool = True) -> DiffNode:
    """Drop the values of an unchanged node unless *include_unchanged*."""
    if not include_unchanged and node.status == DiffStatus.UNCHANGED:
        node.old_value = MISSING
        node.new_value = MISSING
    return node


def validate_node_structure(node: DiffNode) -> list[str]:
    """Return the structural problems of a single node (empty when valid)."""
    errors: list[str] = []
    if not isinstance(node.path, str):
        errors.append(f"Path must be a string, got {type(node.path).__name__}")
    if node.status not in tuple(DiffStatus):
        errors.append(f"Invalid status: {node.status}")
    if node.field_type not in tuple(FieldType):
        errors.append(f"Invalid field type: {node.field_type}")
    if not isinstance(node.key, (str, int)) or isinstance(node.key, bool):
        errors.append(f"Key must be a string or integer, got {node.key!r}")
    if node.children is not None:
        if not isinstance(node.children, dict):
            errors.append("Children must be a mapping")
        elif not all(isinstance(c, DiffNode) for c in node.children.values()):
            errors.append("Children must be DiffNode instances")
    return errors


def post_process_tree(root: DiffNode, config: DiffConfig) -> list[tuple[str, str]]:
    """Normalize, clean up and validate every node of the tree rooted at *root*.

    Returns:
        ``(path, message)`` pairs for every structural problem found.
    """
    normalize_node_values(root, config)
    problems: list[tuple[str, str]] = []
    for node in root.iter_nodes():
        cleanup_node(node, config.include_unchanged)
        problems.extend((node.path, err) for err in validate_node_structure(node))
    return problems
