"""Comparison router and the object, array and primitive comparators.

``compare_nodes`` is the single recursive entry point.  It counts the
comparison, applies ignore rules, short-circuits identical leaves, resolves
presence (added / deleted) and type changes, then dispatches by the
classified type of the values:

    object  -> compare_objects    (key union, children per key)
    array   -> compare_arrays     (positional alignment, optional sampling)
    unknown -> ``==``             (tagged ``unknown``)
    other   -> compare_primitives (per-type equality rules)

The comparators recurse back through ``compare_nodes``, so the four functions
form one mutually recursive unit.  Any exception raised while comparing a
node is contained: the node becomes an ``error`` node and the rest of the
tree is still built.

A container node built here carries a provisional status ("has any child
changed?"); status propagation recomputes it from the children afterwards.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from json_diff_tree.algorithm.primitives import compare_by_type
from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.normalizer import create_normalized_values
from json_diff_tree.tree.paths import ROOT, build_path, get_last_key
from json_diff_tree.tree.types import MISSING, FieldType, classify, is_empty

if TYPE_CHECKING:
    from json_diff_tree.engine import ComparisonContext

logger = logging.getLogger(__name__)

__all__ = [
    "ELLIPSIS_KEY",
    "compare_arrays",
    "compare_nodes",
    "compare_objects",
    "compare_primitives",
]

ELLIPSIS_KEY = "[...]"

# Leaf types eligible for the identical-value fast path.
_FAST_PATH_TYPES = frozenset(
    {
        FieldType.STRING,
        FieldType.NUMBER,
        FieldType.BOOLEAN,
        FieldType.NULL,
        FieldType.UNDEFINED,
    }
)

# Child statuses that do not make a container "changed".
_QUIET_STATUSES = frozenset({DiffStatus.UNCHANGED, DiffStatus.IGNORED})


def _make_node(
    path: str,
    status: DiffStatus,
    old_value: Any,
    new_value: Any,
    field_type: FieldType,
    key: str | int,
    children: dict[str, DiffNode] | None = None,
) -> DiffNode:
    old_value, new_value = create_normalized_values(old_value, new_value, status)
    return DiffNode(
        path=path,
        status=status,
        field_type=field_type,
        key=key,
        old_value=old_value,
        new_value=new_value,
        children=children,
    )


def _present_type(old_value: Any, new_value: Any) -> FieldType:
    return classify(new_value if new_value is not MISSING else old_value)


def _presence_node(
    old_value: Any, new_value: Any, path: str, key: str | int
) -> DiffNode | None:
    """Resolve empty sides: unchanged, added, deleted, or None when both present."""
    old_empty, new_empty = is_empty(old_value), is_empty(new_value)
    if old_empty and new_empty:
        field_type = _present_type(old_value, new_value)
        return _make_node(
            path, DiffStatus.UNCHANGED, old_value, new_value, field_type, key
        )
    if old_empty:
        return _make_node(
            path, DiffStatus.ADDED, old_value, new_value, classify(new_value), key
        )
    if new_empty:
        return _make_node(
            path, DiffStatus.DELETED, old_value, new_value, classify(old_value), key
        )
    return None


def _mixed_node(old_value: Any, new_value: Any, path: str, key: str | int) -> DiffNode:
    return _make_node(
        path, DiffStatus.MODIFIED, old_value, new_value, FieldType.MIXED, key
    )


def _ignored_node(
    old_value: Any, new_value: Any, path: str, key: str | int
) -> DiffNode:
    field_type = _present_type(old_value, new_value)
    return _make_node(path, DiffStatus.IGNORED, old_value, new_value, field_type, key)


def _error_node(
    old_value: Any,
    new_value: Any,
    path: str,
    key: str | int,
    exc: Exception,
    ctx: ComparisonContext,
) -> DiffNode:
    logger.warning("Comparison failed at %s: %s: %s", path, type(exc).__name__, exc)
    ctx.record_error(exc, path)
    node = _make_node(
        path, DiffStatus.MODIFIED, old_value, new_value, FieldType.ERROR, key
    )
    node.error = {
        "message": str(exc),
        "stack": "".join(traceback.format_exception(exc)),
        "type": type(exc).__name__,
    }
    return node


def compare_nodes(
    old_value: Any,
    new_value: Any,
    path: str = ROOT,
    ctx: ComparisonContext | None = None,
    key: str | int | None = None,
) -> DiffNode:
    """Compare two values and return the DiffNode for *path*.

    Args:
        old_value: Value from the old snapshot, or ``MISSING``.
        new_value: Value from the new snapshot, or ``MISSING``.
        path:      Address of this node; ``"root"`` for the top level.
        ctx:       Per-call comparison context.  A default context is
                   created when None.
        key:       Node key.  Defaults to the last segment of *path*.

    Returns:
        The node, with children for object/array pairs.  Never raises for
        comparison failures; those produce an ``error`` node.
    """
    if ctx is None:
        from json_diff_tree.engine import ComparisonContext

        ctx = ComparisonContext.create()
    if key is None:
        key = get_last_key(path)

    ctx.count_comparison()
    try:
        if ctx.ignore_rules.matches(path):
            node = _ignored_node(old_value, new_value, path, key)
        else:
            node = _route(old_value, new_value, path, key, ctx)
    except Exception as exc:  # noqa: BLE001 - contained as an error node
        return _error_node(old_value, new_value, path, key, exc, ctx)
    ctx.nodes += 1
    return node


def _route(
    old_value: Any, new_value: Any, path: str, key: str | int, ctx: ComparisonContext
) -> DiffNode:
    old_type, new_type = classify(old_value), classify(new_value)

    # Containers always walk so the tree shape never depends on aliasing.
    if (
        old_type == new_type
        and old_type in _FAST_PATH_TYPES
        and (old_value is new_value or old_value == new_value)
    ):
        return _make_node(
            path, DiffStatus.UNCHANGED, old_value, new_value, old_type, key
        )

    presence = _presence_node(old_value, new_value, path, key)
    if presence is not None:
        return presence

    if old_type != new_type:
        return _mixed_node(old_value, new_value, path, key)

    match old_type:
        case FieldType.OBJECT:
            return compare_objects(old_value, new_value, path, ctx, key=key)
        case FieldType.ARRAY:
            return compare_arrays(old_value, new_value, path, ctx, key=key)
        case FieldType.UNKNOWN:
            equal = bool(old_value == new_value)
            status = DiffStatus.UNCHANGED if equal else DiffStatus.MODIFIED
            return _make_node(
                path, status, old_value, new_value, FieldType.UNKNOWN, key
            )
        case _:
            return compare_primitives(old_value, new_value, path, ctx, key=key)


def compare_objects(
    old_obj: Any,
    new_obj: Any,
    path: str,
    ctx: ComparisonContext,
    key: str | int | None = None,
) -> DiffNode:
    """Compare two mappings key by key.

    Keys are visited in union order: old keys first, then keys only present
    in *new_obj*.  A child whose path matches an ignore rule becomes an
    ``ignored`` node and never marks the object as changed.
    """
    if key is None:
        key = get_last_key(path)

    presence = _presence_node(old_obj, new_obj, path, key)
    if presence is not None:
        return presence
    if not isinstance(old_obj, Mapping) or not isinstance(new_obj, Mapping):
        return _mixed_node(old_obj, new_obj, path, key)

    old_keys = list(old_obj)
    new_keys = list(new_obj)
    old_set, new_set = set(old_keys), set(new_keys)

    children: dict[str, DiffNode] = {}
    changed = False
    for child_key in dict.fromkeys([*old_keys, *new_keys]):
        name = child_key if isinstance(child_key, str) else str(child_key)
        child_path = build_path(path, name)
        old_value = old_obj[child_key] if child_key in old_set else MISSING
        new_value = new_obj[child_key] if child_key in new_set else MISSING

        if ctx.ignore_rules.matches(child_path):
            children[name] = _ignored_node(old_value, new_value, child_path, name)
            continue

        child = compare_nodes(old_value, new_value, child_path, ctx, key=name)
        children[name] = child
        if child.status not in _QUIET_STATUSES:
            changed = True

    status = DiffStatus.MODIFIED if changed else DiffStatus.UNCHANGED
    return _make_node(path, status, old_obj, new_obj, FieldType.OBJECT, key, children)


def compare_arrays(
    old_arr: Any,
    new_arr: Any,
    path: str,
    ctx: ComparisonContext,
    key: str | int | None = None,
) -> DiffNode:
    """Compare two sequences position by position.

    Index ``i`` of the old array is compared with index ``i`` of the new one;
    indices past the end of the shorter array become ``added`` or ``deleted``
    children.  In shallow mode, when ``max_array_size`` is set and either
    array is longer, only the first ``array_sample_size`` indices are
    compared, a length change counts as a change, and a ``"[...]"`` child
    summarises the rest.
    """
    if key is None:
        key = get_last_key(path)

    presence = _presence_node(old_arr, new_arr, path, key)
    if presence is not None:
        return presence
    if not _is_sequence(old_arr) or not _is_sequence(new_arr):
        return _mixed_node(old_arr, new_arr, path, key)

    config = ctx.config
    old_len, new_len = len(old_arr), len(new_arr)
    longest = max(old_len, new_len)
    sampled = config.sampling_enabled and longest > config.max_array_size
    limit = min(config.array_sample_size, longest) if sampled else longest

    children: dict[str, DiffNode] = {}
    changed = sampled and old_len != new_len
    for index in range(limit):
        child_path = build_path(path, index, is_array_index=True)
        old_value = old_arr[index] if index < old_len else MISSING
        new_value = new_arr[index] if index < new_len else MISSING

        child = compare_nodes(old_value, new_value, child_path, ctx, key=index)
        children[f"[{index}]"] = child
        if child.status not in _QUIET_STATUSES:
            changed = True

    if sampled and longest > limit:
        # the unsampled tail carries the length change through propagation
        tail_status = (
            DiffStatus.MODIFIED if old_len != new_len else DiffStatus.UNCHANGED
        )
        children[ELLIPSIS_KEY] = DiffNode(
            path=build_path(path, "...", is_array_index=True),
            status=tail_status,
            field_type=FieldType.ELLIPSIS,
            key=ELLIPSIS_KEY,
            old_value=f"... {max(old_len - limit, 0)} more items",
            new_value=f"... {max(new_len - limit, 0)} more items",
        )

    status = DiffStatus.MODIFIED if changed else DiffStatus.UNCHANGED
    return _make_node(path, status, old_arr, new_arr, FieldType.ARRAY, key, children)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def compare_primitives(
    old_value: Any,
    new_value: Any,
    path: str,
    ctx: ComparisonContext,
    key: str | int | None = None,
) -> DiffNode:
    """Compare two leaf values with the per-type equality rules."""
    if key is None:
        key = get_last_key(path)

    presence = _presence_node(old_value, new_value, path, key)
    if presence is not None:
        return presence

    field_type = classify(old_value)
    if field_type != classify(new_value):
        return _mixed_node(old_value, new_value, path, key)

    equal = compare_by_type(old_value, new_value, field_type, ctx.config)
    status = DiffStatus.UNCHANGED if equal else DiffStatus.MODIFIED
    return _make_node(path, status, old_value, new_value, field_type, key)
