"""pytest plugin for json-diff-tree.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
Installing the package (editable installs included) is enough; no conftest.py
changes are needed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from json_diff_tree.api import diff
from json_diff_tree.render import collect_changes


def _describe(result: Any) -> str:
    if not result.success:
        errors = "; ".join(e.message for e in result.diagnostics.errors)
        return f"diff failed: {errors}"
    lines = [
        f"  {change.change} {change.path}: {change.old_value!r} -> {change.new_value!r}"
        for change in collect_changes(result.tree)
    ]
    stats = result.statistics
    header = (
        f"JSON documents differ: modified={stats.modified} "
        f"added={stats.added} deleted={stats.deleted}"
    )
    return "\n".join([header, *lines])


@pytest.fixture(scope="session")
def assert_no_diff() -> Any:
    """Fixture that returns a callable asserting two JSON documents match.

    Session-scoped: the returned callable is stateless and builds a fresh
    engine on each call.

    Usage in tests::

        def test_payload(assert_no_diff):
            assert_no_diff(response.json(), {"id": 1, "name": "Ada"})

        def test_ignores_timestamps(assert_no_diff):
            assert_no_diff(actual, expected, ignore_fields=["*.updatedAt"])

    Returns:
        A callable ``_assert(actual, expected, ignore_fields=None, options=None)``
        that raises ``AssertionError`` listing every changed path.
    """

    def _assert(
        actual: Any,
        expected: Any,
        ignore_fields: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        """Assert that *actual* and *expected* have no differences.

        *expected* is the old side of the comparison, so an extra key in
        *actual* is reported as ``added``.

        Raises:
            AssertionError: The documents differ or the diff failed.
        """
        result = diff(expected, actual, ignore_fields=ignore_fields, options=options)
        if not result.success or result.has_changes:
            raise AssertionError(_describe(result))

    return _assert
