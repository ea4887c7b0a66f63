"""
Store system - Hierarchical, permission-gated key-value tree.

This module provides:
- Store: Tree node with read/write/write_entries/entries
- MISSING: Sentinel returned when a path holds nothing
- ValueKind / classify: Tags for value dispatch
- split_path / join_path: Colon-delimited path handling
"""

from .path import SEPARATOR, is_nested, join_path, split_path
from .store import Store
from .values import MISSING, TreeNode, ValueKind, classify

__all__ = [
    "Store",
    "MISSING",
    "TreeNode",
    "ValueKind",
    "classify",
    "SEPARATOR",
    "split_path",
    "join_path",
    "is_nested",
]
