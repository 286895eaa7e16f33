"""DiffResult envelope and its parts.

Every diff call returns a ``DiffResult``.  ``to_dict()`` renders the JSON
shape handed to callers::

    {
        "success": bool,
        "tree": {...} | None,
        "statistics": {"total", "unchanged", "modified", ...},
        "metadata": {"version", "timestamp", "processingTime"},
        "diagnostics": {"errors", "warnings", "hasErrors", "hasWarnings"},
    }
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from json_diff_tree.tree.nodes import DiffStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from json_diff_tree.tree.nodes import DiffNode

__all__ = [
    "DIFF_FORMAT_VERSION",
    "PROCESSING_ERROR",
    "VALIDATION_WARNING",
    "DiagnosticRecord",
    "Diagnostics",
    "DiffResult",
    "DiffStatistics",
    "ResultMetadata",
    "utc_timestamp",
]

DIFF_FORMAT_VERSION: Final = "1.0.0"
PROCESSING_ERROR: Final = "PROCESSING_ERROR"
VALIDATION_WARNING: Final = "VALIDATION_WARNING"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z``."""
    now = dt.datetime.now(dt.UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class DiagnosticRecord:
    """One error or warning raised while producing a diff.

    Attributes:
        type:      ``PROCESSING_ERROR`` for fatal failures, the exception class
                   name for contained per-node errors, or
                   ``VALIDATION_WARNING`` for structural warnings.
        message:   Human-readable description.
        path:      Node path the record refers to.
        timestamp: ISO-8601 UTC time the record was created.
    """

    type: str
    message: str
    path: str
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "message": self.message,
            "path": self.path,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class DiffStatistics:
    """Node counts of the final tree, root included."""

    total: int = 0
    unchanged: int = 0
    modified: int = 0
    added: int = 0
    deleted: int = 0
    ignored: int = 0

    @property
    def changes(self) -> int:
        return self.modified + self.added + self.deleted

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "unchanged": self.unchanged,
            "modified": self.modified,
            "added": self.added,
            "deleted": self.deleted,
            "ignored": self.ignored,
        }


@dataclass(frozen=True, slots=True)
class ResultMetadata:
    """Diff-format version, creation time and processing time (ms)."""

    version: str = DIFF_FORMAT_VERSION
    timestamp: str = field(default_factory=utc_timestamp)
    processing_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "processingTime": self.processing_time,
        }


@dataclass(frozen=True, slots=True)
class Diagnostics:
    errors: tuple[DiagnosticRecord, ...] = ()
    warnings: tuple[DiagnosticRecord, ...] = ()

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": [record.to_dict() for record in self.errors],
            "warnings": [record.to_dict() for record in self.warnings],
            "hasErrors": self.has_errors,
            "hasWarnings": self.has_warnings,
        }


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Result of a diff call.

    Attributes:
        success:     False only when the pipeline failed as a whole.
        tree:        Root DiffNode, or None on failure.
        statistics:  Status counts over every node of ``tree``.
        metadata:    Format version, timestamp and processing time.
        diagnostics: Contained errors and structural warnings.
    """

    success: bool
    tree: DiffNode | None
    statistics: DiffStatistics
    metadata: ResultMetadata
    diagnostics: Diagnostics

    @property
    def has_changes(self) -> bool:
        """True when the root node reports any change."""
        if self.tree is None:
            return False
        return self.tree.status not in (DiffStatus.UNCHANGED, DiffStatus.IGNORED)

    @classmethod
    def failure(
        cls,
        exc: BaseException,
        processing_time: float = 0.0,
        warnings: Iterable[DiagnosticRecord] = (),
    ) -> DiffResult:
        """Build the envelope for a pipeline that failed as a whole."""
        record = DiagnosticRecord(
            type=PROCESSING_ERROR,
            message=str(exc) or type(exc).__name__,
            path="root",
        )
        return cls(
            success=False,
            tree=None,
            statistics=DiffStatistics(),
            metadata=ResultMetadata(processing_time=processing_time),
            diagnostics=Diagnostics(errors=(record,), warnings=tuple(warnings)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "tree": self.tree.to_dict() if self.tree is not None else None,
            "statistics": self.statistics.to_dict(),
            "metadata": self.metadata.to_dict(),
            "diagnostics": self.diagnostics.to_dict(),
        }
