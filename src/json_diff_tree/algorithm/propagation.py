"""Bottom-up status propagation over a finished difference tree.

After the comparators have built the tree, every container's status is
recomputed from its children, deepest first.  Statuses are ranked by
``STATUS_PRIORITY``:

    ignored (0) < unchanged (1) < deleted == added (2) < modified (3)

The highest-ranked child status wins, with three adjustments:

- ``added`` and ``deleted`` tied at the top combine to ``modified``.
- A container that exists on both sides is never itself added or deleted,
  so a winning ``added`` / ``deleted`` surfaces as ``modified``.
- A container whose children are all ignored reads as ``unchanged``.

Leaves and containers without children keep their own status.
"""

from __future__ import annotations

from collections.abc import Iterable

from json_diff_tree.tree.nodes import STATUS_PRIORITY, DiffNode, DiffStatus

__all__ = [
    "calculate_combined_status",
    "compare_status_priority",
    "get_status_priority",
    "get_valid_statuses",
    "is_valid_status",
    "propagate_children_status",
    "propagate_status_recursively",
    "reset_node_status",
    "should_propagate_status",
]

_PRESENCE_STATUSES = frozenset({DiffStatus.ADDED, DiffStatus.DELETED})


def is_valid_status(status: object) -> bool:
    return status in STATUS_PRIORITY


def get_valid_statuses() -> list[DiffStatus]:
    return list(STATUS_PRIORITY)


def get_status_priority(status: DiffStatus | str) -> int:
    """Rank of *status*; unknown statuses rank with ``ignored`` (0)."""
    return STATUS_PRIORITY.get(status, 0)  # type: ignore[call-overload]


def compare_status_priority(first: DiffStatus | str, second: DiffStatus | str) -> int:
    """Return -1, 0 or 1 as *first* ranks below, equal to or above *second*."""
    a, b = get_status_priority(first), get_status_priority(second)
    return (a > b) - (a < b)


def should_propagate_status(
    current: DiffStatus | str, candidate: DiffStatus | str
) -> bool:
    """True when *candidate* outranks *current*."""
    return get_status_priority(candidate) > get_status_priority(current)


def calculate_combined_status(statuses: Iterable[DiffStatus | str]) -> DiffStatus:
    """Combine child statuses into one.

    Returns the highest-priority status, ``modified`` when ``added`` and
    ``deleted`` tie at the top, and ``unchanged`` for no statuses at all.
    """
    ranked = [DiffStatus(s) for s in statuses if is_valid_status(s)]
    if not ranked:
        return DiffStatus.UNCHANGED

    top = max(get_status_priority(s) for s in ranked)
    leaders = {s for s in ranked if get_status_priority(s) == top}
    if leaders >= _PRESENCE_STATUSES:
        return DiffStatus.MODIFIED
    # Ties other than added/deleted are between equal statuses.
    return next(s for s in ranked if s in leaders)


def propagate_children_status(node: DiffNode) -> DiffStatus:
    """Status implied by the direct children of *node* (its own if none)."""
    if not node.children:
        return node.status
    combined = calculate_combined_status(c.status for c in node.children.values())
    if combined in _PRESENCE_STATUSES and node.status not in _PRESENCE_STATUSES:
        return DiffStatus.MODIFIED
    if combined == DiffStatus.IGNORED:
        return DiffStatus.UNCHANGED
    return combined


def propagate_status_recursively(node: DiffNode) -> DiffNode:
    """Recompute container statuses from the leaves up, in place.

    Returns:
        *node*, for chaining.
    """
    if not node.children:
        return node
    for child in node.children.values():
        propagate_status_recursively(child)
    node.status = propagate_children_status(node)
    return node


def reset_node_status(
    node: DiffNode, default: DiffStatus = DiffStatus.UNCHANGED
) -> DiffNode:
    """Set *node* and every descendant to *default*, in place."""
    for current in node.iter_nodes():
        current.status = default
    return node
