"""PatternCache: LRU-backed cache of compiled ignore-rule globs.

Glob rules such as ``"items[*].updatedAt"`` are translated to anchored
regular expressions the first time they are seen.  The compiled pattern is
kept in an ``LRUCache`` so repeated diffs with the same ignore rules do not
recompile.  Eviction is silent when ``max_size`` is exceeded.

Compilation is pure, so one process-wide instance (``DEFAULT_PATTERN_CACHE``)
is shared between diff runs; access is guarded by a lock.

Example::

    from json_diff_tree.cache import PatternCache

    cache = PatternCache(max_size=64)
    regex = cache.compile("user.*")
    regex.fullmatch("user.password") is not None   # True
    regex.fullmatch("user")                        # None
"""

from __future__ import annotations

import re
import threading

from cachetools import LRUCache

__all__ = ["DEFAULT_PATTERN_CACHE", "PatternCache", "glob_to_regex"]


def glob_to_regex(glob: str) -> str:
    """Translate *glob* into an anchored regular expression.

    ``*`` matches any run of characters (including none and including
    separators); every other character is literal.
    """
    return "^" + ".*".join(re.escape(part) for part in glob.split("*")) + "$"


class PatternCache:
    """LRU cache mapping glob strings to compiled patterns.

    Args:
        max_size: Maximum number of compiled patterns held in memory.
            Defaults to 256.  When exceeded, the least-recently-used entry
            is silently evicted.
    """

    def __init__(self, max_size: int = 256) -> None:
        self._cache: LRUCache[str, re.Pattern[str]] = LRUCache(maxsize=max_size)
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    def __contains__(self, glob: object) -> bool:
        with self._lock:
            return glob in self._cache

    def compile(self, glob: str) -> re.Pattern[str]:
        """Return the compiled pattern for *glob*, compiling on first use."""
        with self._lock:
            pattern = self._cache.get(glob)
            if pattern is None:
                pattern = re.compile(glob_to_regex(glob), re.DOTALL)
                self._cache[glob] = pattern
            return pattern

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


DEFAULT_PATTERN_CACHE = PatternCache()
