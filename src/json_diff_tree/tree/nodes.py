"""DiffNode dataclass and DiffStatus StrEnum for the difference tree.

Provides the output data types produced by the comparators and consumed by
status propagation, post-processing, statistics and rendering.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any, Final

from json_diff_tree.tree.types import MISSING, FieldType

__all__ = ["STATUS_PRIORITY", "DiffNode", "DiffStatus", "FieldType"]


class DiffStatus(StrEnum):
    """Change classification of a single node.

    StrEnum values are the lowercased member names:
    - UNCHANGED -> "unchanged"
    - MODIFIED  -> "modified"
    - ADDED     -> "added"   : only present in the new value
    - DELETED   -> "deleted" : only present in the old value
    - IGNORED   -> "ignored" : matched an ignore rule, never counts as a change
    """

    UNCHANGED = auto()
    MODIFIED = auto()
    ADDED = auto()
    DELETED = auto()
    IGNORED = auto()


# ignored < unchanged < deleted == added < modified
STATUS_PRIORITY: Final[dict[DiffStatus, int]] = {
    DiffStatus.IGNORED: 0,
    DiffStatus.UNCHANGED: 1,
    DiffStatus.DELETED: 2,
    DiffStatus.ADDED: 2,
    DiffStatus.MODIFIED: 3,
}


@dataclass(slots=True)
class DiffNode:
    """A node in the difference tree.

    Attributes:
        path:       Dotted/bracketed address, e.g. "root", "a.b", "a[0].c".
        status:     Change classification.  Only container statuses are
                    rewritten, by status propagation.
        field_type: Classified type of the compared values, or one of the
                    synthetic tags MIXED / UNKNOWN / ERROR / ELLIPSIS.
        key:        Last path segment: property name, array index, or "root".
        old_value:  Value on the old side.  ``MISSING`` while the tree is built
                    means the side does not exist; after post-processing it
                    means the value was omitted from the output.
        new_value:  Same as ``old_value`` for the new side.
        children:   Child nodes keyed by property name or "[i]".  None for
                    leaves.  Must not be shared between nodes.
        error:      ``{"message", "stack", "type"}`` for nodes whose comparison
                    raised; None otherwise.
    """

    path: str
    status: DiffStatus
    field_type: FieldType
    key: str | int
    old_value: Any = MISSING
    new_value: Any = MISSING
    children: dict[str, DiffNode] | None = None
    error: dict[str, str] | None = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def iter_nodes(self) -> Iterator[DiffNode]:
        """Yield this node and every descendant, parents before children."""
        yield self
        if self.children:
            for child in self.children.values():
                yield from child.iter_nodes()

    def find(self, path: str) -> DiffNode | None:
        """Return the descendant (or self) whose path equals *path*."""
        for node in self.iter_nodes():
            if node.path == path:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        """Render the node as the JSON-shaped mapping of the result envelope."""
        out: dict[str, Any] = {
            "path": self.path,
            "status": str(self.status),
            "fieldType": str(self.field_type),
            "key": self.key,
        }
        if self.old_value is not MISSING:
            out["oldValue"] = self.old_value
        if self.new_value is not MISSING:
            out["newValue"] = self.new_value
        if self.children is not None:
            out["children"] = {k: c.to_dict() for k, c in self.children.items()}
        if self.error is not None:
            out["error"] = dict(self.error)
        return out
