"""Public API functions for json-diff-tree.

This module provides the user-facing entry points: ``diff`` for direct
calls, ``generate_diff_tree`` for the keyed invocation shape
(``{"oldData", "newData", "ignoreFields", "options"}``) and
``validate_inputs``.  Each call creates a fresh ``DiffEngine`` to guarantee
zero shared state between calls.

Input problems raise ``TypeError`` / ``ValueError`` before any comparison
work starts.  Everything after validation is reported inside the returned
``DiffResult``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from json_diff_tree.algorithm.config import DiffConfig, merge_config, validate_config
from json_diff_tree.algorithm.ignore import IgnoreRules
from json_diff_tree.engine import DiffEngine
from json_diff_tree.result import DiffResult

__all__ = ["diff", "generate_diff_tree", "validate_inputs"]

_REQUIRED_KEYS = ("oldData", "newData")


def _check_options(options: Any) -> None:
    if options is None or isinstance(options, DiffConfig):
        return
    if not isinstance(options, Mapping):
        msg = f"options must be a mapping, got {type(options).__name__}"
        raise TypeError(msg)
    errors = validate_config(options)
    if errors:
        msg = "Invalid options: " + "; ".join(errors)
        raise ValueError(msg)


def validate_inputs(params: Any) -> None:
    """Check the keyed invocation shape.

    Args:
        params: Mapping with required ``oldData`` and ``newData`` keys (any
            JSON-like values, ``None`` included) and optional
            ``ignoreFields`` and ``options``.

    Raises:
        TypeError: *params* is not a mapping, ``ignoreFields`` is not a list
            of strings or rule mapping, or ``options`` is not a mapping.
        ValueError: A required key is missing, or an option value is invalid.
    """
    if not isinstance(params, Mapping):
        msg = f"params must be a mapping, got {type(params).__name__}"
        raise TypeError(msg)
    missing = [key for key in _REQUIRED_KEYS if key not in params]
    if missing:
        msg = f"Missing required parameter(s): {', '.join(missing)}"
        raise ValueError(msg)
    IgnoreRules.from_fields(params.get("ignoreFields"))
    _check_options(params.get("options"))


def diff(
    old_data: Any,
    new_data: Any,
    ignore_fields: Any = None,
    options: Mapping[str, Any] | DiffConfig | None = None,
) -> DiffResult:
    """Diff two JSON-like snapshots and return the result envelope.

    Args:
        old_data:      The earlier snapshot.  Any JSON-like value, including
                       top-level primitives and None.
        new_data:      The later snapshot.
        ignore_fields: Paths to ignore.  A list of strings (entries
                       containing ``*`` are globs) or a mapping with
                       ``exact`` / ``patterns`` / ``keys`` lists.
        options:       A DiffConfig, or an options mapping with camelCase or
                       snake_case keys (``maxStringLength``,
                       ``string_comparison``, ...).  Unknown keys are dropped.

    Returns:
        A ``DiffResult``.  ``result.to_dict()`` gives the JSON envelope.

    Raises:
        TypeError, ValueError: Invalid ignore rules or options.
    """
    _check_options(options)
    config = merge_config(options)
    rules = IgnoreRules.from_fields(ignore_fields)
    return DiffEngine(config, rules).generate_diff_tree(old_data, new_data)


def generate_diff_tree(params: Mapping[str, Any]) -> DiffResult:
    """Keyed form of ``diff``.

    Example::

        result = generate_diff_tree(
            {
                "oldData": {"name": "Ada", "age": 36},
                "newData": {"name": "Ada", "age": 37, "city": "London"},
                "ignoreFields": ["meta.*"],
                "options": {"stringComparison": "strict"},
            }
        )
        result.to_dict()["statistics"]
        # {"total": 4, "unchanged": 1, "modified": 2, "added": 1, ...}
    """
    validate_inputs(params)
    return diff(
        params["oldData"],
        params["newData"],
        ignore_fields=params.get("ignoreFields"),
        options=params.get("options"),
    )
