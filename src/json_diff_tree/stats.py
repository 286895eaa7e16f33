"""StatisticsCollector: counts and timing for one diff run.

The collector is fed by the diff engine:

- ``record_comparison`` once per router call while the tree is built,
- ``record_error`` / ``record_warning`` for contained problems,
- ``record_node(root)`` once on the final, propagated tree, which walks
  every node (root included) and counts it by status, type and depth.

Depth analysis uses numpy: the depth histogram is ``np.bincount`` over the
recorded depths and the average depth is their mean.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import numpy as np

from json_diff_tree.result import (
    VALIDATION_WARNING,
    DiagnosticRecord,
    DiffStatistics,
)
from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.types import FieldType

logger = logging.getLogger(__name__)

__all__ = ["StatisticsCollector"]

# Thresholds for get_detailed_report() recommendations
SLOW_PROCESSING_MS = 5000.0
DEEP_NESTING_LEVEL = 10
HIGH_CHANGE_PERCENT = 80.0


class StatisticsCollector:
    """Mutable statistics for a single diff run.

    Satisfies the ``StatisticsRecorder`` Protocol.  One collector may be
    reused across runs; the engine calls ``reset()`` before each run.

    Example::

        collector = StatisticsCollector()
        collector.record_node(tree)
        collector.get_required_statistics()   # DiffStatistics(total=4, ...)
        collector.get_summary()["change_percentage"]
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Clear every counter, timer, diagnostic and custom value."""
        self.total_nodes = 0
        self.total_comparisons = 0
        self.status_counts: dict[str, int] = {str(s): 0 for s in DiffStatus}
        self.type_counts: dict[str, int] = {str(t): 0 for t in FieldType}
        self.max_depth = 0
        self._depths: list[int] = []
        self.errors: list[DiagnosticRecord] = []
        self.warnings: list[DiagnosticRecord] = []
        self.custom: dict[str, Any] = {}
        self.start_time: float | None = None
        self.end_time: float | None = None
        self._perf_start: float | None = None
        self.processing_time = 0.0

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_node(self, node: DiffNode, depth: int = 0) -> None:
        """Count *node* and all of its descendants.

        Args:
            node:  Subtree root.
            depth: Depth of *node*; children are recorded at ``depth + 1``.
        """
        stack = [(node, depth)]
        while stack:
            current, level = stack.pop()
            self.total_nodes += 1
            status = str(current.status)
            if status in self.status_counts:
                self.status_counts[status] += 1
            field_type = str(current.field_type)
            if field_type in self.type_counts:
                self.type_counts[field_type] += 1
            self.max_depth = max(self.max_depth, level)
            self._depths.append(level)
            if current.children:
                stack.extend(
                    (child, level + 1) for child in current.children.values()
                )

    def record_comparison(self) -> None:
        self.total_comparisons += 1

    def record_error(self, error: BaseException | str, path: str = "") -> None:
        if isinstance(error, BaseException):
            record = DiagnosticRecord(type(error).__name__, str(error), path)
        else:
            record = DiagnosticRecord("Error", str(error), path)
        self.errors.append(record)

    def record_warning(self, message: str, path: str = "") -> None:
        self.warnings.append(DiagnosticRecord(VALIDATION_WARNING, message, path))

    def start_timing(self) -> None:
        self.start_time = time.time()
        self._perf_start = time.perf_counter()

    def end_timing(self) -> None:
        self.end_time = time.time()
        if self._perf_start is not None:
            self.processing_time = (time.perf_counter() - self._perf_start) * 1000.0

    def record_custom(self, key: str, value: Any) -> None:
        self.custom[key] = value

    def increment_custom(self, key: str, amount: int | float = 1) -> None:
        self.custom[key] = self.custom.get(key, 0) + amount

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @property
    def total_changes(self) -> int:
        counts = self.status_counts
        return counts["modified"] + counts["added"] + counts["deleted"]

    @property
    def average_depth(self) -> float:
        if not self._depths:
            return 0.0
        return float(np.mean(np.asarray(self._depths, dtype=np.int64)))

    def depth_distribution(self) -> dict[int, int]:
        """Number of recorded nodes at each depth, depths with none omitted."""
        if not self._depths:
            return {}
        counts = np.bincount(np.asarray(self._depths, dtype=np.int64))
        return {
            int(depth): int(count) for depth, count in enumerate(counts) if count
        }

    def change_percentage(self) -> float:
        if self.total_nodes == 0:
            return 0.0
        return round(self.total_changes / self.total_nodes * 100.0, 2)

    def get_required_statistics(self) -> DiffStatistics:
        """The status counts carried by the result envelope."""
        counts = self.status_counts
        return DiffStatistics(
            total=self.total_nodes,
            unchanged=counts["unchanged"],
            modified=counts["modified"],
            added=counts["added"],
            deleted=counts["deleted"],
            ignored=counts["ignored"],
        )

    def get_statistics(self) -> dict[str, Any]:
        """Snapshot of every counter as plain Python values."""
        return {
            "total_nodes": self.total_nodes,
            "total_comparisons": self.total_comparisons,
            "status_counts": dict(self.status_counts),
            "type_counts": dict(self.type_counts),
            "performance": {
                "start_time": self.start_time,
                "end_time": self.end_time,
                "processing_time": self.processing_time,
            },
            "depth": {
                "max_depth": self.max_depth,
                "average_depth": self.average_depth,
                "depth_distribution": self.depth_distribution(),
            },
            "diagnostics": {
                "errors": [r.to_dict() for r in self.errors],
                "warnings": [r.to_dict() for r in self.warnings],
                "error_count": len(self.errors),
                "warning_count": len(self.warnings),
            },
            "custom": dict(self.custom),
        }

    def get_summary(self) -> dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "total_comparisons": self.total_comparisons,
            "total_changes": self.total_changes,
            "change_percentage": self.change_percentage(),
            "processing_time": self.processing_time,
            "max_depth": self.max_depth,
            "average_depth": round(self.average_depth, 2),
            "has_errors": bool(self.errors),
            "has_warnings": bool(self.warnings),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
        }

    def _throughput(self, count: int) -> int:
        if self.processing_time <= 0:
            return 0
        return round(count / self.processing_time * 1000.0)

    def get_detailed_report(self) -> dict[str, Any]:
        """Summary, full breakdowns, throughput and recommendations."""
        stats = self.get_statistics()
        return {
            "summary": self.get_summary(),
            "details": {
                "status_breakdown": stats["status_counts"],
                "type_breakdown": stats["type_counts"],
                "depth_analysis": stats["depth"],
                "performance": {
                    **stats["performance"],
                    "throughput": {
                        "nodes_per_second": self._throughput(self.total_nodes),
                        "comparisons_per_second": self._throughput(
                            self.total_comparisons
                        ),
                    },
                },
                "diagnostics": stats["diagnostics"],
                "custom": stats["custom"],
            },
            "recommendations": self._recommendations(),
        }

    def _recommendations(self) -> list[dict[str, str]]:
        recommendations: list[dict[str, str]] = []
        if self.processing_time > SLOW_PROCESSING_MS:
            recommendations.append(
                {
                    "type": "performance",
                    "message": "Processing time is high. Consider sampling large "
                    "arrays or reducing data size.",
                    "severity": "warning",
                }
            )
        if self.max_depth > DEEP_NESTING_LEVEL:
            recommendations.append(
                {
                    "type": "structure",
                    "message": "Data structure is deeply nested. This may impact "
                    "performance.",
                    "severity": "info",
                }
            )
        if self.errors:
            recommendations.append(
                {
                    "type": "reliability",
                    "message": "Errors were encountered during processing. Check "
                    "diagnostics for details.",
                    "severity": "error",
                }
            )
        if self.change_percentage() > HIGH_CHANGE_PERCENT:
            recommendations.append(
                {
                    "type": "analysis",
                    "message": "High percentage of changes detected. Consider if "
                    "this is expected.",
                    "severity": "info",
                }
            )
        if recommendations:
            logger.debug("Generated %d recommendations", len(recommendations))
        return recommendations
