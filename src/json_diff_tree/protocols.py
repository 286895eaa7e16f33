"""StatisticsRecorder Protocol: extension point for diff statistics.

The diff engine reports comparisons, errors, warnings, timing and the final
tree to a recorder.  ``StatisticsCollector`` is the bundled implementation;
callers can plug in their own without inheriting from any base class.  Any
class with conformant methods passes ``isinstance`` checks.

Example::

    from json_diff_tree.protocols import StatisticsRecorder
    from json_diff_tree.result import DiffStatistics

    class CountingRecorder:
        def __init__(self):
            self.comparisons = 0

        def record_node(self, node, depth=0): ...
        def record_comparison(self): self.comparisons += 1
        def record_error(self, error, path=""): ...
        def record_warning(self, message, path=""): ...
        def start_timing(self): ...
        def end_timing(self): ...
        def get_required_statistics(self): return DiffStatistics()
        def reset(self): self.comparisons = 0

    assert isinstance(CountingRecorder(), StatisticsRecorder)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from json_diff_tree.result import DiffStatistics
    from json_diff_tree.tree.nodes import DiffNode


@runtime_checkable
class StatisticsRecorder(Protocol):
    """Structural protocol for statistics recorders.

    The engine calls, per diff run and in this order: ``reset``,
    ``start_timing``, ``record_comparison`` / ``record_error`` while the
    tree is built, ``record_warning`` during post-processing,
    ``record_node(root)`` once on the final tree, ``end_timing`` and finally
    ``get_required_statistics``.
    """

    def record_node(self, node: DiffNode, depth: int = 0) -> None: ...

    def record_comparison(self) -> None: ...

    def record_error(self, error: BaseException | str, path: str = "") -> None: ...

    def record_warning(self, message: str, path: str = "") -> None: ...

    def start_timing(self) -> None: ...

    def end_timing(self) -> None: ...

    def get_required_statistics(self) -> DiffStatistics: ...

    def reset(self) -> None: ...
