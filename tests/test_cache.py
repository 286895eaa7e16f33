"""Unit tests for PatternCache and glob translation.

Tests cover:
- glob_to_regex() anchoring and escaping
- Cache hits (the same compiled pattern is returned on repeat calls)
- LRU eviction (silent eviction at max_size)
- Instance isolation (separate PatternCache instances do not share state)
- Properties (max_size and curr_size return correct values)
"""

from __future__ import annotations

import re
import threading

from json_diff_tree.cache import DEFAULT_PATTERN_CACHE, PatternCache, glob_to_regex

# ---------------------------------------------------------------------------
# glob_to_regex
# ---------------------------------------------------------------------------


class TestGlobToRegex:
    def test_star_becomes_dot_star(self) -> None:
        assert glob_to_regex("a.*") == r"^a\..*$"

    def test_brackets_escaped(self) -> None:
        assert glob_to_regex("items[*]") == r"^items\[.*\]$"

    def test_no_star_is_literal(self) -> None:
        assert re.fullmatch(glob_to_regex("a.b"), "a.b")
        assert not re.fullmatch(glob_to_regex("a.b"), "axb")

    def test_lone_star_matches_everything(self) -> None:
        regex = re.compile(glob_to_regex("*"), re.DOTALL)
        assert regex.fullmatch("")
        assert regex.fullmatch("a.b[0]\nc")


# ---------------------------------------------------------------------------
# PatternCache
# ---------------------------------------------------------------------------


class TestPatternCache:
    def test_compile_returns_cached_pattern(self) -> None:
        cache = PatternCache()
        first = cache.compile("a.*")
        assert cache.compile("a.*") is first
        assert cache.curr_size == 1

    def test_contains(self) -> None:
        cache = PatternCache()
        assert "a.*" not in cache
        cache.compile("a.*")
        assert "a.*" in cache

    def test_lru_eviction(self) -> None:
        cache = PatternCache(max_size=2)
        cache.compile("a*")
        cache.compile("b*")
        cache.compile("a*")  # refresh a*
        cache.compile("c*")  # evicts b*
        assert "a*" in cache
        assert "b*" not in cache
        assert "c*" in cache
        assert cache.curr_size == 2

    def test_properties(self) -> None:
        cache = PatternCache(max_size=8)
        assert cache.max_size == 8
        assert cache.curr_size == 0

    def test_instance_isolation(self) -> None:
        one, two = PatternCache(), PatternCache()
        one.compile("x*")
        assert "x*" not in two

    def test_clear(self) -> None:
        cache = PatternCache()
        cache.compile("x*")
        cache.clear()
        assert cache.curr_size == 0

    def test_default_cache_exists(self) -> None:
        assert isinstance(DEFAULT_PATTERN_CACHE, PatternCache)

    def test_concurrent_compiles_share_one_entry(self) -> None:
        cache = PatternCache()
        results: list[re.Pattern[str]] = []

        def worker() -> None:
            results.append(cache.compile("shared.*"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(p) for p in results}) == 1
        assert cache.curr_size == 1
