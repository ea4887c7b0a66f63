"""
Permission System - Per-key access control for stores.

Provides:
- Permission: Enum of none/r/w/rw access levels
- PermissionTable: Static per-key overrides, built once per store
- PermissionRegistry: Effective permission lookup (override, else default)
"""

from .permission import (
    Permission,
    PermissionLike,
    PermissionRegistry,
    PermissionTable,
    READ_PERMISSIONS,
    WRITE_PERMISSIONS,
)

__all__ = [
    "Permission",
    "PermissionLike",
    "PermissionRegistry",
    "PermissionTable",
    "READ_PERMISSIONS",
    "WRITE_PERMISSIONS",
]
