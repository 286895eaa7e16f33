"""Tests for DiffEngine orchestration and ComparisonContext."""

from __future__ import annotations

import pytest

from json_diff_tree.algorithm.config import DiffConfig
from json_diff_tree.engine import ComparisonContext, DiffEngine
from json_diff_tree.result import PROCESSING_ERROR, DiffStatistics
from json_diff_tree.stats import StatisticsCollector
from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.types import MISSING

# ---------------------------------------------------------------------------
# Recorder doubles
# ---------------------------------------------------------------------------


class FailingCollector(StatisticsCollector):
    """Collector that fails while recording the final tree."""

    def record_node(self, node: DiffNode, depth: int = 0) -> None:
        msg = "statistics backend unavailable"
        raise RuntimeError(msg)


class RecordingCollector(StatisticsCollector):
    """Collector that logs the order of engine calls."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        super().__init__()

    def reset(self) -> None:
        super().reset()
        self.calls.append("reset")

    def start_timing(self) -> None:
        super().start_timing()
        self.calls.append("start_timing")

    def record_node(self, node: DiffNode, depth: int = 0) -> None:
        super().record_node(node, depth)
        self.calls.append("record_node")

    def end_timing(self) -> None:
        super().end_timing()
        self.calls.append("end_timing")


# ---------------------------------------------------------------------------
# ComparisonContext
# ---------------------------------------------------------------------------


class TestComparisonContext:
    def test_create_defaults(self) -> None:
        ctx = ComparisonContext.create()
        assert ctx.config == DiffConfig()
        assert not ctx.ignore_rules
        assert ctx.comparisons == 0

    def test_create_from_options(self) -> None:
        ctx = ComparisonContext.create({"stringComparison": "strict"}, ["a.*"])
        assert ctx.config.string_comparison == "strict"
        assert ctx.ignore_rules.matches("a.b")

    def test_forwards_to_recorder(self) -> None:
        stats = StatisticsCollector()
        ctx = ComparisonContext.create(recorder=stats)
        ctx.count_comparison()
        ctx.record_error(ValueError("x"), "p")
        ctx.record_warning("w", "q")
        assert stats.total_comparisons == 1
        assert len(stats.errors) == 1
        assert len(stats.warnings) == 1
        assert ctx.errors[0].type == "ValueError"
        assert ctx.warnings[0].path == "q"


# ---------------------------------------------------------------------------
# DiffEngine
# ---------------------------------------------------------------------------


class TestDiffEngine:
    def test_end_to_end_statistics(self) -> None:
        result = DiffEngine().generate_diff_tree(
            {"name": "Ada", "age": 36},
            {"name": "Ada", "age": 37, "city": "London"},
        )
        assert result.success
        assert result.statistics == DiffStatistics(
            total=4, unchanged=1, modified=2, added=1
        )
        assert result.tree is not None
        assert result.tree.status == DiffStatus.MODIFIED
        city = result.tree.find("city")
        assert city is not None
        assert (city.old_value, city.new_value) == (None, "London")

    def test_identical_documents(self) -> None:
        result = DiffEngine().generate_diff_tree({"a": [1, 2]}, {"a": [1, 2]})
        assert not result.has_changes
        assert result.statistics.unchanged == 4

    def test_top_level_primitives(self) -> None:
        result = DiffEngine().generate_diff_tree(1, 2)
        assert result.tree is not None
        assert result.tree.status == DiffStatus.MODIFIED
        assert result.statistics.total == 1

    def test_containers_display_as_json(self) -> None:
        result = DiffEngine().generate_diff_tree({"a": 1}, {"a": 2})
        assert result.tree is not None
        assert result.tree.old_value == '{"a":1}'
        assert result.tree.new_value == '{"a":2}'

    def test_exclude_unchanged_values(self) -> None:
        engine = DiffEngine({"includeUnchanged": False})
        result = engine.generate_diff_tree({"a": 1, "b": 1}, {"a": 1, "b": 2})
        assert result.tree is not None
        out = result.tree.to_dict()
        assert "oldValue" not in out["children"]["a"]
        assert out["children"]["b"]["oldValue"] == 1

    def test_ignore_fields(self) -> None:
        engine = DiffEngine(ignore_fields=["meta.*"])
        result = engine.generate_diff_tree(
            {"meta": {"at": 1}, "v": 1}, {"meta": {"at": 2}, "v": 1}
        )
        assert not result.has_changes
        assert result.statistics.ignored == 1

    def test_sampled_length_change_survives_propagation(self) -> None:
        engine = DiffEngine({"maxArraySize": 5, "arraySampleSize": 3})
        result = engine.generate_diff_tree(list(range(20)), list(range(21)))
        assert result.success
        assert result.tree is not None
        assert result.tree.status == DiffStatus.MODIFIED
        assert result.has_changes
        tail = result.tree.find("[...]")
        assert tail is not None
        assert tail.status == DiffStatus.MODIFIED
        # root, three sampled elements, tail
        assert result.statistics == DiffStatistics(
            total=5, unchanged=3, modified=2
        )

    def test_nested_sampled_array_marks_ancestors(self) -> None:
        engine = DiffEngine({"maxArraySize": 5})
        result = engine.generate_diff_tree(
            {"xs": list(range(20))}, {"xs": list(range(19))}
        )
        assert result.tree is not None
        assert result.tree.status == DiffStatus.MODIFIED
        xs = result.tree.find("xs")
        assert xs is not None
        assert xs.status == DiffStatus.MODIFIED
        assert result.statistics == DiffStatistics(
            total=13, unchanged=10, modified=3
        )

    def test_sampled_same_length_stays_unchanged(self) -> None:
        engine = DiffEngine({"maxArraySize": 5, "arraySampleSize": 3})
        result = engine.generate_diff_tree(list(range(20)), [*range(19), 99])
        assert result.tree is not None
        assert result.tree.status == DiffStatus.UNCHANGED
        assert not result.has_changes

    def test_contained_errors_reported(self) -> None:
        class Boom:
            def __eq__(self, other: object) -> bool:
                msg = "no equality"
                raise TypeError(msg)

            __hash__ = object.__hash__

        result = DiffEngine().generate_diff_tree({"x": Boom()}, {"x": Boom()})
        assert result.success
        assert result.diagnostics.has_errors
        assert result.diagnostics.errors[0].path == "x"
        assert result.tree is not None
        node = result.tree.find("x")
        assert node is not None
        assert node.field_type == "error"
        assert result.tree.status == DiffStatus.MODIFIED

    def test_diagnostics_disabled(self) -> None:
        engine = DiffEngine({"enableDiagnostics": False})

        class Boom:
            def __eq__(self, other: object) -> bool:
                raise TypeError

            __hash__ = object.__hash__

        result = engine.generate_diff_tree(Boom(), Boom())
        assert result.success
        assert not result.diagnostics.has_errors
        assert engine.get_errors()

    def test_performance_tracking_disabled(self) -> None:
        result = DiffEngine({"performanceTracking": False}).generate_diff_tree(1, 1)
        assert result.metadata.processing_time == 0.0

    def test_fatal_failure_envelope(self, caplog: pytest.LogCaptureFixture) -> None:
        engine = DiffEngine(stats_collector=FailingCollector())
        with caplog.at_level("ERROR", logger="json_diff_tree"):
            result = engine.generate_diff_tree({"a": 1}, {"a": 2})
        assert result.success is False
        assert result.tree is None
        errors = result.diagnostics.errors
        assert [(e.type, e.message, e.path) for e in errors] == [
            (PROCESSING_ERROR, "statistics backend unavailable", "root")
        ]
        assert "Diff tree generation failed" in caplog.text

    def test_call_order(self) -> None:
        stats = RecordingCollector()
        DiffEngine(stats_collector=stats).generate_diff_tree(1, 2)
        assert stats.calls == [
            "reset",
            "reset",
            "start_timing",
            "record_node",
            "end_timing",
        ]

    def test_runs_do_not_share_state(self) -> None:
        engine = DiffEngine()
        first = engine.generate_diff_tree({"a": 1}, {"a": 2})
        second = engine.generate_diff_tree({"a": 1}, {"a": 1})
        assert first.statistics.modified == 2
        assert second.statistics.modified == 0
        assert engine.get_statistics() == second.statistics

    def test_reset(self) -> None:
        engine = DiffEngine()
        engine.generate_diff_tree(1, 2)
        engine.reset()
        assert engine.get_errors() == []
        assert engine.get_warnings() == []
        assert engine.get_statistics() == DiffStatistics()

    def test_invalid_options_raise_on_construction(self) -> None:
        with pytest.raises(ValueError):
            DiffEngine({"maxStringLength": 0})
        with pytest.raises(TypeError):
            DiffEngine(ignore_fields="a.b")

    def test_properties(self) -> None:
        stats = StatisticsCollector()
        engine = DiffEngine(DiffConfig(max_string_length=5), stats_collector=stats)
        assert engine.config.max_string_length == 5
        assert engine.stats_collector is stats

    def test_missing_side_at_root(self) -> None:
        result = DiffEngine().generate_diff_tree(MISSING, {"a": 1})
        assert result.tree is not None
        assert result.tree.status == DiffStatus.ADDED
        assert result.tree.old_value is None

    def test_success_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("INFO", logger="json_diff_tree"):
            DiffEngine().generate_diff_tree({"a": 1}, {"a": 2})
        assert "Diff complete" in caplog.text


