"""DiffConfig and option enums for the diff engine.

DiffConfig is a frozen (immutable) dataclass holding the comparison options.
Callers usually pass a plain mapping of options instead; ``merge_config``
overlays such a mapping (camelCase or snake_case keys) on the defaults and
returns a validated DiffConfig.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum, auto
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_OPTIONS",
    "ArrayOptimization",
    "DiffConfig",
    "StringComparison",
    "get_default_config",
    "merge_config",
    "validate_config",
]


class StringComparison(StrEnum):
    """How two strings are judged equal.

    - NORMALIZED:       Equal after collapsing whitespace and line endings.
    - STRICT:           Exact equality.
    - CASE_INSENSITIVE: Equal after Unicode case folding.
    """

    NORMALIZED = "normalized"
    STRICT = "strict"
    CASE_INSENSITIVE = "case-insensitive"


class ArrayOptimization(StrEnum):
    """How much of an array is compared.

    - SHALLOW: Positional comparison; arrays longer than ``max_array_size``
               (when set) are sampled.
    - DEEP:    Positional comparison of every element.
    """

    SHALLOW = auto()
    DEEP = auto()


@dataclass(frozen=True, slots=True)
class DiffConfig:
    """Immutable options for one diff run.

    Attributes:
        max_string_length: Display length of formatted complex values (>= 1).
        array_optimization: ``shallow`` or ``deep``.
        string_comparison: ``normalized``, ``strict`` or ``case-insensitive``.
        include_unchanged: Keep values on unchanged nodes.  When False they
            are stripped during post-processing.
        enable_diagnostics: Report per-node errors and warnings in the result.
        performance_tracking: Measure processing time.
        number_precision: Decimal places for tolerant number comparison, or
            None for exact equality.
        max_array_size: Arrays longer than this are sampled in shallow mode.
            None disables sampling.
        array_sample_size: Leading elements compared when sampling.
        simplify_complex_values: Display containers as ``[Array(n)]`` /
            ``{a, b, c...}`` instead of truncated JSON.
    """

    max_string_length: int = 100
    array_optimization: ArrayOptimization = ArrayOptimization.SHALLOW
    string_comparison: StringComparison = StringComparison.NORMALIZED
    include_unchanged: bool = True
    enable_diagnostics: bool = True
    performance_tracking: bool = True
    number_precision: int | None = None
    max_array_size: int | None = None
    array_sample_size: int = 10
    simplify_complex_values: bool = False

    def __post_init__(self) -> None:
        errors = _check_values({f.name: getattr(self, f.name) for f in fields(self)})
        if errors:
            msg = "Invalid diff configuration: " + "; ".join(errors)
            raise ValueError(msg)
        # Frozen dataclass: coerce plain strings to their enum members.
        object.__setattr__(
            self, "array_optimization", ArrayOptimization(self.array_optimization)
        )
        object.__setattr__(
            self, "string_comparison", StringComparison(self.string_comparison)
        )

    @property
    def sampling_enabled(self) -> bool:
        return (
            self.array_optimization == ArrayOptimization.SHALLOW
            and self.max_array_size is not None
        )

    def to_options(self) -> dict[str, Any]:
        """Return the camelCase option mapping equivalent to this config."""
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


_FIELD_NAMES = tuple(f.name for f in fields(DiffConfig))

# Both spellings resolve to the dataclass field name.
_ALIASES: dict[str, str] = {name: name for name in _FIELD_NAMES} | {
    _camel(name): name for name in _FIELD_NAMES
}

_BOOL_OPTIONS = (
    "include_unchanged",
    "enable_diagnostics",
    "performance_tracking",
    "simplify_complex_values",
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_values(values: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    if not _is_int(values["max_string_length"]) or values["max_string_length"] < 1:
        errors.append("maxStringLength must be a positive integer")

    if values["array_optimization"] not in tuple(ArrayOptimization):
        errors.append('arrayOptimization must be "shallow" or "deep"')

    if values["string_comparison"] not in tuple(StringComparison):
        errors.append(
            'stringComparison must be "normalized", "strict" or "case-insensitive"'
        )

    for name in _BOOL_OPTIONS:
        if not isinstance(values[name], bool):
            errors.append(f"{_camel(name)} must be a boolean")

    precision = values["number_precision"]
    if precision is not None and (not _is_int(precision) or precision < 0):
        errors.append("numberPrecision must be a non-negative integer or None")

    max_size = values["max_array_size"]
    if max_size is not None and (not _is_int(max_size) or max_size < 1):
        errors.append("maxArraySize must be a positive integer or None")

    if not _is_int(values["array_sample_size"]) or values["array_sample_size"] < 1:
        errors.append("arraySampleSize must be a positive integer")

    return errors


DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType(DiffConfig().to_options())


def _resolve(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map recognised option keys to field names, skipping None values."""
    resolved: dict[str, Any] = {}
    for key, value in options.items():
        name = _ALIASES.get(key)
        if name is None:
            logger.debug("Ignoring unknown diff option %r", key)
            continue
        if value is not None:
            resolved[name] = value
    return resolved


def get_default_config() -> DiffConfig:
    """Return a DiffConfig holding every default."""
    return DiffConfig()


def merge_config(options: Mapping[str, Any] | DiffConfig | None = None) -> DiffConfig:
    """Overlay *options* on the defaults and return a validated DiffConfig.

    Args:
        options: A DiffConfig (returned as-is), None (defaults), or a mapping
            whose keys are option names in camelCase (``maxStringLength``)
            or snake_case (``max_string_length``).  Unknown keys and keys
            whose value is None are dropped.

    Raises:
        TypeError: *options* is not a mapping.
        ValueError: A recognised option has an invalid value.
    """
    if options is None:
        return DiffConfig()
    if isinstance(options, DiffConfig):
        return options
    if not isinstance(options, Mapping):
        msg = f"options must be a mapping, got {type(options).__name__}"
        raise TypeError(msg)
    return DiffConfig(**_resolve(options))


def validate_config(options: Mapping[str, Any] | DiffConfig) -> list[str]:
    """Return the validation errors of *options* merged over the defaults.

    An empty list means ``merge_config(options)`` would succeed.
    """
    if isinstance(options, DiffConfig):
        options = options.to_options()
    if not isinstance(options, Mapping):
        return ["options must be a mapping"]
    values = {f.name: f.default for f in fields(DiffConfig)}
    values.update(_resolve(options))
    return _check_values(values)
