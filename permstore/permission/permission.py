"""
Permission Registry - Per-key access levels for store entries.

Every key in a store has an effective permission:
1. The explicit entry for that key in the store's permission table
2. Otherwise the store's default policy

Each permission can be:
- none: key can be neither read nor written
- r: key can be read only
- w: key can be written only
- rw: key can be read and written
"""

from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union


class Permission(str, Enum):
    """Access level for a store key."""
    NONE = "none"
    R = "r"
    W = "w"
    RW = "rw"

    @property
    def can_read(self) -> bool:
        """True if this permission grants read access."""
        return self in READ_PERMISSIONS

    @property
    def can_write(self) -> bool:
        """True if this permission grants write access."""
        return self in WRITE_PERMISSIONS

    @classmethod
    def parse(cls, value: Union["Permission", str]) -> "Permission":
        """Parse a permission from its string value.

        Args:
            value: A Permission or one of "none", "r", "w", "rw"

        Returns:
            The matching Permission

        Raises:
            ValueError: If value is not a known permission
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown permission: {value!r}")


READ_PERMISSIONS = frozenset({Permission.R, Permission.RW})
WRITE_PERMISSIONS = frozenset({Permission.W, Permission.RW})

PermissionLike = Union[Permission, str]


class PermissionTable:
    """Completed per-key permission overrides for one store.

    The table is built once from a static mapping and then only consulted.
    Keys absent from the table fall back to the store's default policy.

    Example:
        table = PermissionTable({"secret": "none", "name": "r"})
        table.effective("name", Permission.RW)   # Permission.R
        table.effective("other", Permission.RW)  # Permission.RW
    """

    def __init__(self, entries: Optional[Mapping[str, PermissionLike]] = None):
        self._entries: Dict[str, Permission] = {
            str(key): Permission.parse(value)
            for key, value in (entries or {}).items()
        }

    @classmethod
    def merge(cls, *tables: Optional[Mapping[str, PermissionLike]]) -> "PermissionTable":
        """Build a table from several mappings; later mappings win."""
        merged: Dict[str, PermissionLike] = {}
        for table in tables:
            if table:
                merged.update(table.items())
        return cls(merged)

    def get(self, key: str) -> Optional[Permission]:
        """Explicit override for key, or None."""
        return self._entries.get(key)

    def effective(self, key: str, default: Permission) -> Permission:
        """Effective permission for key given the store's default policy."""
        return self._entries.get(key, default)

    def items(self) -> Iterator[Tuple[str, Permission]]:
        return iter(self._entries.items())

    def to_dict(self) -> Dict[str, str]:
        return {key: permission.value for key, permission in self._entries.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PermissionTable):
            return self._entries == other._entries
        if isinstance(other, Mapping):
            return self == PermissionTable(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"PermissionTable({self.to_dict()!r})"


class PermissionRegistry:
    """Answers read/write eligibility queries for the keys of one store.

    The registry pairs a completed PermissionTable with a default policy.
    The default policy stays mutable; the table is replaced as a whole.
    """

    def __init__(
        self,
        table: Optional[PermissionTable] = None,
        default_policy: PermissionLike = Permission.RW,
    ):
        self.table = table if table is not None else PermissionTable()
        self.default_policy = default_policy

    @property
    def default_policy(self) -> Permission:
        return self._default_policy

    @default_policy.setter
    def default_policy(self, value: PermissionLike) -> None:
        self._default_policy = Permission.parse(value)

    def effective(self, key: str) -> Permission:
        """Effective permission for a key."""
        return self.table.effective(key, self._default_policy)

    def allowed_to_read(self, key: str) -> bool:
        return self.effective(key).can_read

    def allowed_to_write(self, key: str) -> bool:
        return self.effective(key).can_write
