"""
permstore - Permission-gated hierarchical key-value store.

Stores hold primitives, lazily evaluated factories and nested stores under
string keys. Colon-delimited paths ("a:b:c") traverse nested stores, and
every key carries an access permission (none, r, w, rw).
"""

from .errors import DefinitionError, PermissionDenied, StoreError
from .permission import Permission, PermissionRegistry, PermissionTable
from .store import MISSING, Store, ValueKind, classify, join_path, split_path

__version__ = "0.1.0"
__all__ = [
    "Store",
    "MISSING",
    "Permission",
    "PermissionRegistry",
    "PermissionTable",
    "PermissionDenied",
    "StoreError",
    "DefinitionError",
    "ValueKind",
    "classify",
    "split_path",
    "join_path",
]
