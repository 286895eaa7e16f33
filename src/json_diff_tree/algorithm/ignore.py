"""IgnoreRules: decide whether a node path is excluded from comparison.

Rules come in three kinds:

- exact:    the full path, e.g. ``"meta.updatedAt"``.
- patterns: anchored globs where ``*`` matches any run of characters,
            e.g. ``"items[*].sku"`` or ``"audit.*"``.
- keys:     a property name matched against the last path segment only,
            e.g. ``"updatedAt"`` ignores that key at any depth.

Callers may pass a list of strings (entries containing ``*`` are patterns,
the rest exact paths) or a mapping with any of ``exact``, ``patterns`` and
``keys``.  A path is ignored when any rule of any kind matches.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from json_diff_tree.cache import DEFAULT_PATTERN_CACHE, PatternCache
from json_diff_tree.tree.paths import ROOT, get_last_key

__all__ = ["IgnoreRules"]

_RULE_KINDS = ("exact", "patterns", "keys")


def _string_list(value: Any, label: str) -> list[str]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        msg = f"{label} must be a list of strings, got {type(value).__name__}"
        raise TypeError(msg)
    items = list(value)
    for item in items:
        if not isinstance(item, str):
            msg = f"{label} entries must be strings, got {item!r}"
            raise TypeError(msg)
    return items


class IgnoreRules:
    """Compiled set of ignore rules.

    Args:
        exact:    Full paths to ignore.
        patterns: Glob patterns to ignore.
        keys:     Property names to ignore wherever they occur.
        cache:    PatternCache used to compile globs.  Defaults to the shared
                  process-wide cache.
    """

    __slots__ = ("_exact", "_keys", "_patterns", "_compiled")

    def __init__(
        self,
        exact: Iterable[str] = (),
        patterns: Iterable[str] = (),
        keys: Iterable[str] = (),
        cache: PatternCache | None = None,
    ) -> None:
        self._exact = frozenset(exact)
        self._patterns = tuple(dict.fromkeys(patterns))
        self._keys = frozenset(keys)
        pattern_cache = cache if cache is not None else DEFAULT_PATTERN_CACHE
        self._compiled = tuple(pattern_cache.compile(p) for p in self._patterns)

    @classmethod
    def from_fields(
        cls, ignore_fields: Any = None, cache: PatternCache | None = None
    ) -> IgnoreRules:
        """Build rules from the caller-facing ``ignore_fields`` shape.

        Raises:
            TypeError: *ignore_fields* is not None, a list of strings, a
                mapping of rule lists, or an IgnoreRules instance.
            ValueError: A mapping carries a key other than exact, patterns
                or keys.
        """
        if ignore_fields is None:
            return cls(cache=cache)
        if isinstance(ignore_fields, IgnoreRules):
            return ignore_fields
        if isinstance(ignore_fields, Mapping):
            unknown = sorted(str(k) for k in ignore_fields if k not in _RULE_KINDS)
            if unknown:
                msg = f"Unknown ignore rule kinds: {', '.join(unknown)}"
                raise ValueError(msg)
            rules = {
                kind: _string_list(ignore_fields.get(kind, ()), f"ignore_fields.{kind}")
                for kind in _RULE_KINDS
            }
            return cls(
                exact=rules["exact"],
                patterns=rules["patterns"],
                keys=rules["keys"],
                cache=cache,
            )
        entries = _string_list(ignore_fields, "ignore_fields")
        return cls(
            exact=[e for e in entries if "*" not in e],
            patterns=[e for e in entries if "*" in e],
            cache=cache,
        )

    @property
    def exact(self) -> frozenset[str]:
        return self._exact

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    @property
    def keys(self) -> frozenset[str]:
        return self._keys

    def __bool__(self) -> bool:
        return bool(self._exact or self._patterns or self._keys)

    def __repr__(self) -> str:
        return (
            f"IgnoreRules(exact={sorted(self._exact)!r}, "
            f"patterns={list(self._patterns)!r}, keys={sorted(self._keys)!r})"
        )

    def matches(self, path: str) -> bool:
        """True when *path* is ignored by an exact, glob or key rule."""
        if path in self._exact:
            return True
        if any(regex.fullmatch(path) for regex in self._compiled):
            return True
        if self._keys and path != ROOT:
            last = get_last_key(path)
            return isinstance(last, str) and last in self._keys
        return False
