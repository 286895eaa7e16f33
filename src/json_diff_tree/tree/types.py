"""Type classifier for JSON-like values.

Every routing decision in the diff engine starts here.  ``classify`` maps a
Python value onto one of the nine value tags of ``FieldType`` (plus
``UNKNOWN`` for open-ended host objects).  Dispatch order matters:

- ``MISSING`` is checked before anything else so an absent side is never
  mistaken for a value.
- ``bool`` MUST be checked before numbers because ``bool`` subclasses
  ``int`` in Python (``isinstance(True, int)`` is True).
- ``str`` is a ``Sequence`` too, so sequences are matched by concrete
  container type rather than by ABC.
"""

from __future__ import annotations

import datetime as dt
import numbers
import re
from collections.abc import Mapping
from enum import StrEnum, auto
from typing import Any, Final

__all__ = [
    "MISSING",
    "FieldType",
    "classify",
    "is_basic_type",
    "is_complex_type",
    "is_empty",
    "is_same_type",
]


class FieldType(StrEnum):
    """Type tag attached to every DiffNode.

    StrEnum values are the lowercased member names:
    - NULL, UNDEFINED, BOOLEAN, NUMBER, STRING, DATE, REGEXP, ARRAY, OBJECT:
      the classified type of the compared values.
    - MIXED:    old and new values have different classified types.
    - UNKNOWN:  a host value outside the JSON-like model.
    - ERROR:    comparing this node raised; see ``DiffNode.error``.
    - ELLIPSIS: synthetic child summarising the unsampled tail of a large array.
    """

    NULL = auto()
    UNDEFINED = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    DATE = auto()
    REGEXP = auto()
    ARRAY = auto()
    OBJECT = auto()
    MIXED = auto()
    UNKNOWN = auto()
    ERROR = auto()
    ELLIPSIS = auto()


class _Missing:
    """Sentinel for a side of a comparison that does not exist.

    JSON has ``null`` but Python has no separate "undefined"; a key present in
    only one snapshot, or an array index past the end of the shorter array,
    is represented by this singleton.  It is falsy and compares equal only to
    itself.
    """

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()

_BASIC_TYPES = frozenset(
    {
        FieldType.STRING,
        FieldType.NUMBER,
        FieldType.BOOLEAN,
        FieldType.NULL,
        FieldType.UNDEFINED,
    }
)
_COMPLEX_TYPES = frozenset({FieldType.OBJECT, FieldType.ARRAY})


def classify(value: Any) -> FieldType:
    """Return the type tag of *value*.

    Args:
        value: Any Python value, including the ``MISSING`` sentinel.

    Returns:
        The matching ``FieldType``.  Values outside the JSON-like model
        (sets, bytes, arbitrary objects) classify as ``FieldType.UNKNOWN``.
    """
    if value is None:
        return FieldType.NULL
    if value is MISSING:
        return FieldType.UNDEFINED
    if isinstance(value, (list, tuple)):
        return FieldType.ARRAY
    # datetime is a subclass of date, one check covers both
    if isinstance(value, dt.date):
        return FieldType.DATE
    if isinstance(value, re.Pattern):
        return FieldType.REGEXP
    if isinstance(value, Mapping):
        return FieldType.OBJECT
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, numbers.Number):
        return FieldType.NUMBER
    if isinstance(value, str):
        return FieldType.STRING
    return FieldType.UNKNOWN


def is_empty(value: Any) -> bool:
    """True for ``None``, ``MISSING`` and the empty string."""
    return value is None or value is MISSING or (isinstance(value, str) and value == "")


def is_basic_type(value: Any) -> bool:
    """True for strings, numbers, booleans, ``None`` and ``MISSING``."""
    return classify(value) in _BASIC_TYPES


def is_complex_type(value: Any) -> bool:
    """True for mappings and sequences (the values that get children)."""
    return classify(value) in _COMPLEX_TYPES


def is_same_type(a: Any, b: Any) -> bool:
    return classify(a) == classify(b)
