"""Integrations subpackage for json-diff-tree.

Contains the pytest plugin, auto-discovered through the pytest11 entry
point.  It provides the ``assert_no_diff`` fixture.
"""

from __future__ import annotations

__all__: list[str] = []
