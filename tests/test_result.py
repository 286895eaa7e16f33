"""Unit tests for the DiffResult envelope and its parts."""

from __future__ import annotations

import re
from dataclasses import FrozenInstanceError

import pytest

from json_diff_tree.result import (
    DIFF_FORMAT_VERSION,
    PROCESSING_ERROR,
    VALIDATION_WARNING,
    DiagnosticRecord,
    Diagnostics,
    DiffResult,
    DiffStatistics,
    ResultMetadata,
    utc_timestamp,
)
from json_diff_tree.tree.nodes import DiffNode, DiffStatus
from json_diff_tree.tree.types import FieldType

_ISO_MS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def _result(status: DiffStatus) -> DiffResult:
    return DiffResult(
        success=True,
        tree=DiffNode("root", status, FieldType.NUMBER, "root", 1, 2),
        statistics=DiffStatistics(total=1),
        metadata=ResultMetadata(),
        diagnostics=Diagnostics(),
    )


class TestTimestamp:
    def test_format(self) -> None:
        assert _ISO_MS.match(utc_timestamp())

    def test_records_get_timestamps(self) -> None:
        record = DiagnosticRecord(VALIDATION_WARNING, "bad", "a")
        assert _ISO_MS.match(record.timestamp)


class TestParts:
    def test_statistics_changes(self) -> None:
        stats = DiffStatistics(total=6, unchanged=1, modified=2, added=2, deleted=1)
        assert stats.changes == 5
        assert stats.to_dict() == {
            "total": 6,
            "unchanged": 1,
            "modified": 2,
            "added": 2,
            "deleted": 1,
            "ignored": 0,
        }

    def test_metadata_camel_case(self) -> None:
        meta = ResultMetadata(processing_time=1.5)
        out = meta.to_dict()
        assert out["version"] == DIFF_FORMAT_VERSION == "1.0.0"
        assert out["processingTime"] == 1.5

    def test_diagnostics_flags(self) -> None:
        empty = Diagnostics()
        assert not empty.has_errors
        assert not empty.has_warnings
        record = DiagnosticRecord("ValueError", "boom", "a.b")
        full = Diagnostics(errors=(record,))
        out = full.to_dict()
        assert out["hasErrors"] is True
        assert out["hasWarnings"] is False
        assert out["errors"][0]["path"] == "a.b"

    def test_records_are_frozen(self) -> None:
        record = DiagnosticRecord("t", "m", "p")
        with pytest.raises(FrozenInstanceError):
            record.message = "x"  # type: ignore[misc]


class TestDiffResult:
    def test_has_changes(self) -> None:
        assert _result(DiffStatus.MODIFIED).has_changes
        assert _result(DiffStatus.ADDED).has_changes
        assert not _result(DiffStatus.UNCHANGED).has_changes
        assert not _result(DiffStatus.IGNORED).has_changes

    def test_to_dict_shape(self) -> None:
        out = _result(DiffStatus.MODIFIED).to_dict()
        assert set(out) == {"success", "tree", "statistics", "metadata", "diagnostics"}
        assert out["tree"]["status"] == "modified"

    def test_failure_envelope(self) -> None:
        warning = DiagnosticRecord(VALIDATION_WARNING, "odd", "x")
        result = DiffResult.failure(
            RuntimeError("exploded"), processing_time=2.0, warnings=[warning]
        )
        assert result.success is False
        assert result.tree is None
        assert result.statistics == DiffStatistics()
        assert not result.has_changes
        assert [(e.type, e.message, e.path) for e in result.diagnostics.errors] == [
            (PROCESSING_ERROR, "exploded", "root")
        ]
        assert result.diagnostics.warnings == (warning,)
        assert result.to_dict()["tree"] is None

    def test_failure_message_falls_back_to_type(self) -> None:
        result = DiffResult.failure(KeyError())
        assert result.diagnostics.errors[0].message == "KeyError"
