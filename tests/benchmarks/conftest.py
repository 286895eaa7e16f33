"""Deterministic document generators for performance benchmarks.

All generators produce fixed, reproducible documents.  No random values.
Three tiers: 10-key flat, ~100-node nested, ~1000-node nested with arrays.
Each tier provides an "identical" pair and a "changed" pair.
"""

from __future__ import annotations

from typing import Any

import pytest


def generate_flat_object(num_keys: int, prefix: str = "key") -> dict[str, Any]:
    """Generate a flat dict with deterministic string values."""
    return {f"{prefix}_{i}": f"value_{i}" for i in range(num_keys)}


def _make_nested(sections: int, fields: int) -> dict[str, Any]:
    """``sections`` sub-objects of ``fields`` scalar leaves each."""
    return {
        f"section_{i}": {f"field_{i}_{j}": j * i for j in range(fields)}
        for i in range(sections)
    }


def _make_records(count: int) -> dict[str, Any]:
    """Document with an array of ``count`` small records."""
    return {
        "meta": {"version": 1, "source": "bench"},
        "records": [
            {"id": i, "name": f"item-{i}", "tags": ["a", "b"], "active": i % 2 == 0}
            for i in range(count)
        ],
    }


def _changed_records(count: int) -> dict[str, Any]:
    doc = _make_records(count)
    for record in doc["records"][::7]:
        record["name"] = record["name"].upper()
    doc["records"].append({"id": count, "name": "new", "tags": [], "active": True})
    return doc


# --- Fixtures for each size tier ---


@pytest.fixture
def pair_10key_identical() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_flat_object(10), generate_flat_object(10)


@pytest.fixture
def pair_10key_changed() -> tuple[dict[str, Any], dict[str, Any]]:
    """10-key flat pair where every value differs."""
    return generate_flat_object(10), {f"key_{i}": f"other_{i}" for i in range(10)}


@pytest.fixture
def pair_100node_identical() -> tuple[dict[str, Any], dict[str, Any]]:
    """10 sections x 9 leaves."""
    return _make_nested(10, 9), _make_nested(10, 9)


@pytest.fixture
def pair_100node_changed() -> tuple[dict[str, Any], dict[str, Any]]:
    """10 sections x 9 leaves against 10 sections x 8 leaves."""
    return _make_nested(10, 9), _make_nested(10, 8)


@pytest.fixture
def pair_1000node_identical() -> tuple[dict[str, Any], dict[str, Any]]:
    """150 records of 6 nodes each plus metadata."""
    return _make_records(150), _make_records(150)


@pytest.fixture
def pair_1000node_changed() -> tuple[dict[str, Any], dict[str, Any]]:
    """150 records with every 7th name changed and one record appended."""
    return _make_records(150), _changed_records(150)
