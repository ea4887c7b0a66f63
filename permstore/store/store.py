"""
Store - Permission-gated hierarchical key-value tree.

A Store maps string keys to values: primitives, None, zero-argument
factories, or child stores. Paths like "a:b:c" traverse child stores.
Every key has an effective permission (see permstore.permission) that
gates reads and writes.

Example:
    store = Store(permissions={"secret": "none"})
    store.write("profile:name", "Ada")
    store.read("profile:name")     # "Ada"
    store.read("profile")          # the child Store
    store.entries()                # {"profile": {"name": "Ada"}}
    store.read("secret")           # raises PermissionDenied

Subclasses may declare a static permission table:

    class UserStore(Store):
        PERMISSIONS = {"id": "r", "password": "w"}

Stores are not thread-safe. Hosts sharing a store between threads must
guard the whole tree with one lock.
"""

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from ..errors import PermissionDenied
from ..logger import get_logger
from ..permission import Permission, PermissionLike, PermissionRegistry, PermissionTable
from .path import SEPARATOR, split_path
from .values import MISSING, TreeNode, ValueKind, classify, is_structured, structured_items

_logger = get_logger()


class Store(TreeNode):
    """A node in the permission-gated key-value tree.

    Attributes:
        PERMISSIONS: Class-level per-key overrides shared by every instance
        DEFAULT_POLICY: Class-level default policy for keys without overrides
    """

    PERMISSIONS: ClassVar[Mapping[str, PermissionLike]] = {}
    DEFAULT_POLICY: ClassVar[PermissionLike] = Permission.RW

    def __init__(
        self,
        permissions: Optional[Mapping[str, PermissionLike]] = None,
        default_policy: Optional[PermissionLike] = None,
    ):
        """Create an empty store.

        Args:
            permissions: Per-key overrides; merged over the class PERMISSIONS
            default_policy: Policy for keys without an override
                (default: the class DEFAULT_POLICY, "rw")

        Raises:
            ValueError: If a permission value is unknown
        """
        self._values: Dict[str, Any] = {}
        self._registry = PermissionRegistry(
            PermissionTable.merge(type(self).PERMISSIONS, permissions),
            default_policy if default_policy is not None else type(self).DEFAULT_POLICY,
        )

    # Permission registry

    @property
    def default_policy(self) -> Permission:
        return self._registry.default_policy

    @default_policy.setter
    def default_policy(self, value: PermissionLike) -> None:
        self._registry.default_policy = value

    @property
    def permissions(self) -> PermissionTable:
        return self._registry.table

    @permissions.setter
    def permissions(self, value: Union[PermissionTable, Mapping[str, PermissionLike]]) -> None:
        if not isinstance(value, PermissionTable):
            value = PermissionTable(value)
        self._registry.table = value

    def permission_for(self, key: str) -> Permission:
        """Effective permission for a local key."""
        return self._registry.effective(key)

    def allowed_to_read(self, key: str) -> bool:
        return self._registry.allowed_to_read(key)

    def allowed_to_write(self, key: str) -> bool:
        return self._registry.allowed_to_write(key)

    # Read / write

    def read(self, path: str) -> Any:
        """Read the value at a path.

        Args:
            path: Colon-delimited path

        Returns:
            The stored primitive, None for a stored null, the result of a
            stored factory, a child Store, or MISSING if nothing is there

        Raises:
            PermissionDenied: If the head key of any traversed store is
                not readable
        """
        key, rest = split_path(path)
        if not self.allowed_to_read(key):
            self._deny("read", key)

        value = self._values.get(key, MISSING)
        kind = classify(value)
        _logger.trace("store", "read", {"key": key, "rest": rest, "kind": kind.value})

        if kind is ValueKind.FACTORY:
            result = value()
            if rest and isinstance(result, Store):
                return result.read(rest)
            return result

        if kind is ValueKind.NULL:
            return None

        if kind in (ValueKind.PRIMITIVE, ValueKind.OPAQUE):
            # Leaves cannot be descended into; the rest of the path is ignored.
            return value

        if kind is ValueKind.STORE:
            return value.read(rest) if rest else value

        if rest:
            return Store().read(rest)

        return MISSING

    def write(self, path: str, value: Any) -> Any:
        """Write a value at a path, creating intermediate stores as needed.

        An intermediate key that does not hold a store gets a fresh one
        first; descending through it then requires READ permission on that
        key, not write permission. Mappings and lists are imported into a
        child store at the path.

        Args:
            path: Colon-delimited path
            value: Primitive, None, factory, Store, or mapping/list

        Returns:
            The written value, or the child Store for mapping/list input

        Raises:
            PermissionDenied: With action "read" for a non-readable
                intermediate key, "write" for a non-writable final key
        """
        key, rest = split_path(path)

        if rest:
            child = self._child(key)
            if not self.allowed_to_read(key):
                self._deny("read", key)
            return child.write(rest, value)

        kind = classify(value)
        if kind is ValueKind.STRUCTURED:
            child = self._child(key)
            child.write_entries(value)
            return child

        if not self.allowed_to_write(key):
            self._deny("write", key)

        _logger.trace("store", "write", {"key": key, "kind": kind.value})
        self._values[key] = value
        return value

    # Bulk import / export

    def write_entries(self, entries: Mapping[str, Any]) -> None:
        """Import a nested mapping into the tree.

        Keys are written in iteration order. The import is not atomic: if a
        write is denied, PermissionDenied propagates and every earlier write
        stays applied.

        Raises:
            PermissionDenied: On the first denied key
        """
        _logger.debug("store", "write_entries", {"keys": len(entries)})
        self._write_entries(entries, "")

    def _write_entries(self, entries: Any, prefix: str) -> None:
        for key, value in structured_items(entries):
            path = prefix + key
            if value is None:
                self.write(path, None)
            elif is_structured(value):
                self._write_entries(value, path + SEPARATOR)
            else:
                self.write(path, value)

    def entries(self) -> Dict[str, Any]:
        """Export a permission-filtered deep snapshot of the tree.

        Keys that are not readable are omitted, as are factories and opaque
        objects. Child stores are exported through their own entries(), so
        the result holds only JSON types and no references into the tree.
        """
        result: Dict[str, Any] = {}
        for key, value in self._values.items():
            if not self.allowed_to_read(key):
                continue
            kind = classify(value)
            if not kind.exportable:
                continue
            result[key] = value.entries() if kind is ValueKind.STORE else value
        return result

    # Introspection

    def keys(self) -> List[str]:
        """Local keys in insertion order, regardless of permissions."""
        return list(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(keys={self.keys()!r}, "
            f"default_policy={self.default_policy.value!r})"
        )

    # Internals

    def _child(self, key: str) -> "Store":
        """Child store at key, replacing any non-store value."""
        child = self._values.get(key)
        if not isinstance(child, Store):
            _logger.debug("store", "auto_create", {"key": key, "replaced": key in self._values})
            child = Store()
            self._values[key] = child
        return child

    def _deny(self, action: str, key: str) -> None:
        _logger.warn("permission", "denied", {"action": action, "key": key})
        raise PermissionDenied(action, key)
