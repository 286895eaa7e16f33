"""Tests for the leaf equality rules."""

from __future__ import annotations

import datetime as dt
import math
import re
from decimal import Decimal

import pytest

from json_diff_tree.algorithm.config import DiffConfig, StringComparison
from json_diff_tree.algorithm.primitives import (
    compare_booleans,
    compare_by_type,
    compare_dates,
    compare_numbers,
    compare_regexps,
    compare_strings,
)
from json_diff_tree.tree.types import FieldType

UTC = dt.timezone.utc


class TestCompareStrings:
    def test_identical(self) -> None:
        for mode in StringComparison:
            assert compare_strings("abc", "abc", mode)

    def test_normalized_ignores_whitespace(self) -> None:
        assert compare_strings("a  b\r\n", "a b", StringComparison.NORMALIZED)

    def test_normalized_keeps_case(self) -> None:
        assert not compare_strings("Ada", "ada", StringComparison.NORMALIZED)

    def test_strict(self) -> None:
        assert not compare_strings("a b ", "a b", StringComparison.STRICT)

    def test_case_insensitive(self) -> None:
        assert compare_strings("STRASSE", "straße", "case-insensitive")
        assert not compare_strings("a", "b", "case-insensitive")


class TestCompareNumbers:
    def test_int_float_equal(self) -> None:
        assert compare_numbers(1, 1.0)

    def test_nan(self) -> None:
        assert compare_numbers(math.nan, float("nan"))
        assert not compare_numbers(math.nan, 1.0)

    def test_infinity(self) -> None:
        assert compare_numbers(math.inf, math.inf)
        assert not compare_numbers(math.inf, -math.inf)
        assert not compare_numbers(math.inf, 1e308, precision=2)

    def test_precision(self) -> None:
        assert compare_numbers(1.0001, 1.0002, precision=3)
        assert not compare_numbers(1.01, 1.02, precision=3)

    def test_no_precision_is_exact(self) -> None:
        assert not compare_numbers(0.1 + 0.2, 0.3)

    def test_decimal(self) -> None:
        assert compare_numbers(Decimal("1.10"), Decimal("1.1"))


class TestOtherPrimitives:
    def test_booleans(self) -> None:
        assert compare_booleans(True, True)
        assert not compare_booleans(True, False)

    def test_dates_same_instant(self) -> None:
        a = dt.datetime(2024, 1, 1, 12, tzinfo=UTC)
        b = dt.datetime(2024, 1, 1, 13, tzinfo=dt.timezone(dt.timedelta(hours=1)))
        assert compare_dates(a, b)

    def test_date_equals_midnight(self) -> None:
        assert compare_dates(dt.date(2024, 1, 1), dt.datetime(2024, 1, 1))

    def test_naive_and_aware_differ(self) -> None:
        naive = dt.datetime(2024, 1, 1)
        assert not compare_dates(naive, naive.replace(tzinfo=UTC))

    def test_regexps(self) -> None:
        assert compare_regexps(re.compile("a+"), re.compile("a+"))
        assert not compare_regexps(re.compile("a+"), re.compile("a+", re.I))
        assert not compare_regexps(re.compile("a+"), re.compile("b+"))


class TestCompareByType:
    @pytest.mark.parametrize(
        ("old", "new", "field_type", "expected"),
        [
            (" x ", "x", FieldType.STRING, True),
            (1, 2, FieldType.NUMBER, False),
            (False, False, FieldType.BOOLEAN, True),
            (dt.date(2024, 1, 1), dt.date(2024, 1, 2), FieldType.DATE, False),
            (None, None, FieldType.NULL, True),
        ],
    )
    def test_dispatch(
        self, old: object, new: object, field_type: FieldType, expected: bool
    ) -> None:
        assert compare_by_type(old, new, field_type, DiffConfig()) is expected

    def test_uses_config(self) -> None:
        config = DiffConfig(number_precision=1)
        assert compare_by_type(1.01, 1.02, FieldType.NUMBER, config)
        strict = DiffConfig(string_comparison="strict")  # type: ignore[arg-type]
        assert not compare_by_type(" x ", "x", FieldType.STRING, strict)
