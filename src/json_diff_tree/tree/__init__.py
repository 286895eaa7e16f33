"""Tree subpackage for difference-tree primitives.

Re-exports the public API for the tree module:
- DiffNode: dataclass representing a node in the difference tree
- DiffStatus: StrEnum of the five change statuses
- FieldType: StrEnum of value type tags
- MISSING: sentinel for a side that does not exist
- classify / build_path / parse_path: type and path helpers
"""

from json_diff_tree.tree.nodes import STATUS_PRIORITY, DiffNode, DiffStatus
from json_diff_tree.tree.paths import build_path, get_last_key, parse_path
from json_diff_tree.tree.types import MISSING, FieldType, classify

__all__ = [
    "MISSING",
    "STATUS_PRIORITY",
    "DiffNode",
    "DiffStatus",
    "FieldType",
    "build_path",
    "classify",
    "get_last_key",
    "parse_path",
]
