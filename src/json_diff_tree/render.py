"""Flatten a difference tree into change records and render an HTML report.

``collect_changes`` walks the tree and keeps the leaf-level changes a reader
cares about (added, deleted and modified leaves; containers and ignored
nodes are skipped).  ``render_html`` turns those records into a small,
self-contained HTML fragment with one block per change.

Field labels map raw property names to display names, e.g.
``{"qty": "Quantity"}``; only the last segment of a path is translated.
"""

from __future__ import annotations

import html
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.types import MISSING, FieldType

__all__ = ["FieldChange", "collect_changes", "render_html"]

_CHANGE_STATUSES = (DiffStatus.ADDED, DiffStatus.DELETED, DiffStatus.MODIFIED)

_STYLE = """<style>
.diff-container {
  font-family: Arial, sans-serif; padding: 15px;
  border: 1px solid #ddd; border-radius: 5px;
}
.diff-item { margin-bottom: 10px; padding: 8px; border-radius: 4px; }
.diff-item.added { background-color: #e6ffed; border-left: 4px solid #28a745; }
.diff-item.deleted { background-color: #ffeef0; border-left: 4px solid #cb2431; }
.diff-item.modified { background-color: #fff8e6; border-left: 4px solid #ffd33d; }
.field-name { font-weight: bold; display: block; margin-bottom: 5px; }
.change-container { display: flex; align-items: center; gap: 10px; margin-top: 5px; }
.old-value {
  color: #cb2431; background-color: #ffeef0; padding: 2px 6px; border-radius: 3px;
}
.new-value {
  color: #28a745; background-color: #e6ffed; padding: 2px 6px; border-radius: 3px;
}
.arrow { color: #666; font-weight: bold; }
.value-label { font-weight: bold; margin-right: 5px; }
</style>"""

_VALUE_BLOCK = (
    '<span class="value"><span class="value-label">{label}:</span> {value}</span>'
)


@dataclass(frozen=True, slots=True)
class FieldChange:
    """One changed leaf.

    Attributes:
        path:       Raw node path, e.g. ``"lines[0].qty"``.
        field:      Path with its last segment translated, e.g.
                    ``"lines[0].Quantity"``.
        field_name: Translated last segment, e.g. ``"Quantity"``.
        change:     ``added``, ``deleted`` or ``modified``.
        old_value:  Display value on the old side (None when absent).
        new_value:  Display value on the new side (None when absent).
    """

    path: str
    field: str
    field_name: str
    change: DiffStatus
    old_value: Any
    new_value: Any


def _translate(node: DiffNode, labels: Mapping[str, str]) -> tuple[str, str]:
    key = node.key
    if isinstance(key, str) and key in labels and node.path.endswith(key):
        label = labels[key]
        return node.path[: len(node.path) - len(key)] + label, label
    return node.path, str(key)


def collect_changes(
    tree: DiffNode | None, field_labels: Mapping[str, str] | None = None
) -> list[FieldChange]:
    """Return the changed leaves of *tree* in depth-first order."""
    if tree is None:
        return []
    labels = field_labels or {}
    changes: list[FieldChange] = []
    for node in tree.iter_nodes():
        if node.children is not None or node.field_type == FieldType.ELLIPSIS:
            continue
        if node.status not in _CHANGE_STATUSES:
            continue
        field, field_name = _translate(node, labels)
        changes.append(
            FieldChange(
                path=node.path,
                field=field,
                field_name=field_name,
                change=node.status,
                old_value=None if node.old_value is MISSING else node.old_value,
                new_value=None if node.new_value is MISSING else node.new_value,
            )
        )
    return changes


def _display(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _render_change(change: FieldChange) -> str:
    field = html.escape(change.field)
    old = html.escape(_display(change.old_value))
    new = html.escape(_display(change.new_value))
    if change.change == DiffStatus.ADDED:
        body = _VALUE_BLOCK.format(label="Added", value=new)
    elif change.change == DiffStatus.DELETED:
        body = _VALUE_BLOCK.format(label="Deleted", value=old)
    else:
        body = (
            '<div class="change-container">'
            f'<span class="old-value">{old}</span>'
            '<span class="arrow">&rarr;</span>'
            f'<span class="new-value">{new}</span>'
            "</div>"
        )
    return (
        f'<div class="diff-item {change.change}">'
        f'<span class="field-name">{field}</span>{body}</div>'
    )


def render_html(
    tree: DiffNode | None, field_labels: Mapping[str, str] | None = None
) -> str:
    """Render the changes of *tree* as an escaped HTML fragment."""
    blocks = "\n".join(_render_change(c) for c in collect_changes(tree, field_labels))
    return f'{_STYLE}\n<div class="diff-container">\n{blocks}\n</div>'
