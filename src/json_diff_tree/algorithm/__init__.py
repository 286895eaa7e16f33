"""algorithm subpackage: comparison, configuration and status propagation.

Import from this module (not from sub-modules directly) to stay on the
stable public interface.

Example::

    from json_diff_tree.algorithm import DiffConfig, compare_nodes
    from json_diff_tree.engine import ComparisonContext

    ctx = ComparisonContext.create(DiffConfig(string_comparison="strict"))
    node = compare_nodes({"name": "Ada"}, {"name": "Ada "}, ctx=ctx)
    node.status   # DiffStatus.MODIFIED
"""

from __future__ import annotations

from json_diff_tree.algorithm.comparators import (
    compare_arrays,
    compare_nodes,
    compare_objects,
    compare_primitives,
)
from json_diff_tree.algorithm.config import (
    ArrayOptimization,
    DiffConfig,
    StringComparison,
    merge_config,
    validate_config,
)
from json_diff_tree.algorithm.ignore import IgnoreRules
from json_diff_tree.algorithm.propagation import (
    calculate_combined_status,
    propagate_status_recursively,
)

__all__ = [
    "ArrayOptimization",
    "DiffConfig",
    "IgnoreRules",
    "StringComparison",
    "calculate_combined_status",
    "compare_arrays",
    "compare_nodes",
    "compare_objects",
    "compare_primitives",
    "merge_config",
    "propagate_status_recursively",
    "validate_config",
]
