"""json-diff-tree - structural difference trees for JSON documents."""

from __future__ import annotations

from json_diff_tree.algorithm.config import (
    ArrayOptimization,
    DiffConfig,
    StringComparison,
)
from json_diff_tree.api import diff, generate_diff_tree, validate_inputs
from json_diff_tree.engine import DiffEngine
from json_diff_tree.render import FieldChange, collect_changes, render_html
from json_diff_tree.result import DiffResult, DiffStatistics
from json_diff_tree.stats import StatisticsCollector
from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.types import FieldType

__version__: str = "0.1.0"
__all__: list[str] = [
    "ArrayOptimization",
    "DiffConfig",
    "DiffEngine",
    "DiffNode",
    "DiffResult",
    "DiffStatistics",
    "DiffStatus",
    "FieldChange",
    "FieldType",
    "StatisticsCollector",
    "StringComparison",
    "collect_changes",
    "diff",
    "generate_diff_tree",
    "render_html",
    "validate_inputs",
]
