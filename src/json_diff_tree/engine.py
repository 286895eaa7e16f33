"""DiffEngine: orchestrator that wires the comparators, propagation and statistics.

This is the central wiring layer between the comparison algorithm and the
public API.  ``generate_diff_tree`` runs the whole pipeline for one pair of
snapshots:

1. create a fresh ``ComparisonContext`` and start timing,
2. run the comparison router at ``"root"``,
3. propagate statuses bottom-up,
4. post-process (display values, unchanged-value stripping, structural
   validation; problems become warnings),
5. record the final tree into the statistics recorder,
6. stop timing and return a success ``DiffResult``.

Per-node failures are contained by the router as ``error`` nodes.  Anything
that escapes the pipeline becomes a failure ``DiffResult``; the engine never
raises to its caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from json_diff_tree.algorithm.comparators import compare_nodes
from json_diff_tree.algorithm.config import DiffConfig, merge_config
from json_diff_tree.algorithm.ignore import IgnoreRules
from json_diff_tree.algorithm.propagation import propagate_status_recursively
from json_diff_tree.result import (
    VALIDATION_WARNING,
    DiagnosticRecord,
    Diagnostics,
    DiffResult,
    DiffStatistics,
    ResultMetadata,
)
from json_diff_tree.stats import StatisticsCollector
from json_diff_tree.tree.paths import ROOT
from json_diff_tree.tree.processor import post_process_tree

if TYPE_CHECKING:
    from collections.abc import Mapping

    from json_diff_tree.protocols import StatisticsRecorder

logger = logging.getLogger(__name__)

__all__ = ["ComparisonContext", "DiffEngine"]


@dataclass(slots=True)
class ComparisonContext:
    """Mutable state shared by every comparator during one diff run.

    Attributes:
        config:       Active options.
        ignore_rules: Compiled ignore rules.
        recorder:     Optional statistics recorder notified of comparisons
                      and errors.
        comparisons:  Router calls made so far.
        nodes:        Nodes produced by successful router calls.
        start_time:   Wall-clock start (epoch seconds), set by the engine.
        end_time:     Wall-clock end (epoch seconds), set by the engine.
        errors:       Contained per-node errors.
        warnings:     Structural validation warnings.
    """

    config: DiffConfig = field(default_factory=DiffConfig)
    ignore_rules: IgnoreRules = field(default_factory=IgnoreRules)
    recorder: StatisticsRecorder | None = None
    comparisons: int = 0
    nodes: int = 0
    start_time: float | None = None
    end_time: float | None = None
    errors: list[DiagnosticRecord] = field(default_factory=list)
    warnings: list[DiagnosticRecord] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        config: DiffConfig | Mapping[str, Any] | None = None,
        ignore_fields: Any = None,
        recorder: StatisticsRecorder | None = None,
    ) -> ComparisonContext:
        """Build a context from caller-facing options and ignore rules."""
        return cls(
            config=merge_config(config),
            ignore_rules=IgnoreRules.from_fields(ignore_fields),
            recorder=recorder,
        )

    def count_comparison(self) -> None:
        self.comparisons += 1
        if self.recorder is not None:
            self.recorder.record_comparison()

    def record_error(self, exc: BaseException, path: str) -> None:
        self.errors.append(DiagnosticRecord(type(exc).__name__, str(exc), path))
        if self.recorder is not None:
            self.recorder.record_error(exc, path)

    def record_warning(self, message: str, path: str) -> None:
        self.warnings.append(DiagnosticRecord(VALIDATION_WARNING, message, path))
        if self.recorder is not None:
            self.recorder.record_warning(message, path)


class DiffEngine:
    """Orchestrator for difference-tree generation.

    Each ``generate_diff_tree`` call gets its own ``ComparisonContext``; the
    engine only keeps the most recent one for ``get_errors`` /
    ``get_warnings``.  The statistics recorder is reset at the start of
    every run.

    Example::

        from json_diff_tree.engine import DiffEngine

        engine = DiffEngine(ignore_fields=["meta.*"])
        result = engine.generate_diff_tree({"a": 1}, {"a": 2, "b": 3})
        result.statistics   # DiffStatistics(total=3, modified=2, added=1, ...)
    """

    def __init__(
        self,
        config: DiffConfig | Mapping[str, Any] | None = None,
        ignore_fields: Any = None,
        stats_collector: StatisticsRecorder | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config:          A DiffConfig or an options mapping (camelCase or
                             snake_case keys).  Defaults apply when None.
            ignore_fields:   Ignore rules: a list of paths/globs or a mapping
                             with ``exact`` / ``patterns`` / ``keys``.
            stats_collector: Statistics recorder.  Defaults to a new
                             ``StatisticsCollector``.

        Raises:
            TypeError, ValueError: Invalid options or ignore rules.
        """
        self._config: DiffConfig = merge_config(config)
        self._ignore_rules = IgnoreRules.from_fields(ignore_fields)
        self._stats: StatisticsRecorder = (
            stats_collector if stats_collector is not None else StatisticsCollector()
        )
        self._context: ComparisonContext | None = None

    @property
    def config(self) -> DiffConfig:
        return self._config

    @property
    def stats_collector(self) -> StatisticsRecorder:
        return self._stats

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate_diff_tree(self, old_data: Any, new_data: Any) -> DiffResult:
        """Diff two snapshots and return the result envelope.

        Args:
            old_data: The earlier snapshot (any JSON-like value).
            new_data: The later snapshot.

        Returns:
            A success ``DiffResult``, or a failure ``DiffResult`` when the
            pipeline raised.  Never raises.
        """
        config = self._config
        ctx = ComparisonContext(
            config=config, ignore_rules=self._ignore_rules, recorder=self._stats
        )
        self._context = ctx
        t0 = time.perf_counter()

        try:
            self._stats.reset()
            ctx.start_time = time.time()
            if config.performance_tracking:
                self._stats.start_timing()
            logger.debug(
                "Generating diff tree (options=%s, ignore=%r)",
                config.to_options(),
                self._ignore_rules,
            )

            tree = compare_nodes(old_data, new_data, ROOT, ctx)
            propagate_status_recursively(tree)
            for path, message in post_process_tree(tree, config):
                logger.warning("Invalid node structure at %s: %s", path, message)
                ctx.record_warning(message, path)

            self._stats.record_node(tree)
            if config.performance_tracking:
                self._stats.end_timing()
            ctx.end_time = time.time()
            statistics = self._stats.get_required_statistics()
        except Exception as exc:  # noqa: BLE001 - reported as a failure envelope
            logger.exception("Diff tree generation failed")
            return DiffResult.failure(
                exc,
                processing_time=self._elapsed_ms(t0),
                warnings=ctx.warnings if config.enable_diagnostics else (),
            )

        processing_time = self._elapsed_ms(t0)
        logger.info(
            "Diff complete: %d nodes, %d changed, %d errors in %.2f ms",
            statistics.total,
            statistics.changes,
            len(ctx.errors),
            processing_time,
        )
        return DiffResult(
            success=True,
            tree=tree,
            statistics=statistics,
            metadata=ResultMetadata(processing_time=processing_time),
            diagnostics=self._diagnostics(ctx),
        )

    def get_statistics(self) -> DiffStatistics:
        """Status counts of the most recent run."""
        return self._stats.get_required_statistics()

    def get_errors(self) -> list[DiagnosticRecord]:
        return list(self._context.errors) if self._context is not None else []

    def get_warnings(self) -> list[DiagnosticRecord]:
        return list(self._context.warnings) if self._context is not None else []

    def reset(self) -> None:
        """Forget the most recent run and reset the statistics recorder."""
        self._context = None
        self._stats.reset()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _elapsed_ms(self, t0: float) -> float:
        if not self._config.performance_tracking:
            return 0.0
        return (time.perf_counter() - t0) * 1000.0

    def _diagnostics(self, ctx: ComparisonContext) -> Diagnostics:
        if not self._config.enable_diagnostics:
            return Diagnostics()
        return Diagnostics(errors=tuple(ctx.errors), warnings=tuple(ctx.warnings))
