"""Equality rules for leaf values.

Each ``compare_*`` function answers "are these two values of the same type
equal?" under the active configuration.  They never build nodes; the
primitive comparator in ``comparators`` turns the answer into a status.
"""

from __future__ import annotations

import datetime as dt
import math
import re
from typing import TYPE_CHECKING, Any

from json_diff_tree.algorithm.config import StringComparison
from json_diff_tree.tree.normalizer import normalize_string
from json_diff_tree.tree.types import FieldType

if TYPE_CHECKING:
    from json_diff_tree.algorithm.config import DiffConfig

__all__ = [
    "compare_booleans",
    "compare_by_type",
    "compare_dates",
    "compare_numbers",
    "compare_regexps",
    "compare_strings",
]


def compare_strings(
    old: str, new: str, mode: StringComparison | str = StringComparison.NORMALIZED
) -> bool:
    """Compare two strings under *mode*.

    - ``strict``:           exact equality.
    - ``normalized``:       equal after ``normalize_string`` on both sides.
    - ``case-insensitive``: equal after ``str.casefold`` on both sides.
    """
    if old == new:
        return True
    match mode:
        case StringComparison.NORMALIZED:
            return normalize_string(old) == normalize_string(new)
        case StringComparison.CASE_INSENSITIVE:
            return old.casefold() == new.casefold()
        case _:
            return False


def _is_nan(value: Any) -> bool:
    return value != value  # noqa: PLR0124


def _is_infinite(value: Any) -> bool:
    try:
        return math.isinf(value)
    except (TypeError, OverflowError):
        return False


def compare_numbers(old: Any, new: Any, precision: int | None = None) -> bool:
    """Compare two numbers.

    NaN equals NaN and nothing else; infinities are only equal to the same
    infinity.  With *precision* set, finite values are equal when they differ
    by less than ``10 ** -precision``.
    """
    old_nan, new_nan = _is_nan(old), _is_nan(new)
    if old_nan or new_nan:
        return old_nan and new_nan
    if _is_infinite(old) or _is_infinite(new):
        return old == new
    if precision is not None:
        return abs(old - new) < 10**-precision
    return old == new


def compare_booleans(old: bool, new: bool) -> bool:
    return old is new or old == new


def compare_dates(old: dt.date, new: dt.date) -> bool:
    """Compare two dates or datetimes by the instant they denote.

    A plain date is treated as midnight of that day.  A naive datetime never
    equals an aware one.
    """
    if not isinstance(old, dt.date) or not isinstance(new, dt.date):
        return False
    if not isinstance(old, dt.datetime):
        old = dt.datetime.combine(old, dt.time())
    if not isinstance(new, dt.datetime):
        new = dt.datetime.combine(new, dt.time())
    if (old.utcoffset() is None) != (new.utcoffset() is None):
        return False
    return old == new


def compare_regexps(old: re.Pattern[Any], new: re.Pattern[Any]) -> bool:
    """Compiled patterns are equal when source and flags match."""
    if not isinstance(old, re.Pattern) or not isinstance(new, re.Pattern):
        return False
    return old.pattern == new.pattern and old.flags == new.flags


def compare_by_type(
    old: Any, new: Any, field_type: FieldType, config: DiffConfig
) -> bool:
    """Dispatch to the equality rule for *field_type* (``==`` otherwise)."""
    match field_type:
        case FieldType.STRING:
            return compare_strings(old, new, config.string_comparison)
        case FieldType.NUMBER:
            return compare_numbers(old, new, config.number_precision)
        case FieldType.BOOLEAN:
            return compare_booleans(old, new)
        case FieldType.DATE:
            return compare_dates(old, new)
        case FieldType.REGEXP:
            return compare_regexps(old, new)
        case _:
            return bool(old == new)
