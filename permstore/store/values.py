"""
Value Dispatcher - Classification of stored values.

Values held by a store are one of:
- NULL: None, distinct from an absent key
- PRIMITIVE: str, int, float or bool
- OPAQUE: any other non-callable object; read verbatim, never exported
- FACTORY: a zero-argument callable evaluated lazily on read
- STORE: an owned child store

STRUCTURED values (mappings and lists) only appear as write input and are
normalized into child stores, so they are never held in a store.
"""

from enum import Enum
from typing import Any, Iterator, Mapping, Tuple

PRIMITIVE_TYPES = (str, int, float, bool)


class _Missing:
    """Marker for an absent key."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()


class TreeNode:
    """Base class for values that own child entries."""

    __slots__ = ()


class ValueKind(Enum):
    """Tag for a value read from or written to a store."""
    MISSING = "missing"
    NULL = "null"
    PRIMITIVE = "primitive"
    OPAQUE = "opaque"
    FACTORY = "factory"
    STORE = "store"
    STRUCTURED = "structured"

    @property
    def exportable(self) -> bool:
        """True if entries() copies values of this kind into a snapshot."""
        return self in (ValueKind.NULL, ValueKind.PRIMITIVE, ValueKind.STORE)


def classify(value: Any) -> ValueKind:
    """Classify a value for read/write dispatch.

    Args:
        value: A stored value, write input, or MISSING

    Returns:
        The ValueKind tag for the value
    """
    if value is MISSING:
        return ValueKind.MISSING
    if value is None:
        return ValueKind.NULL
    if isinstance(value, TreeNode):
        return ValueKind.STORE
    if isinstance(value, PRIMITIVE_TYPES):
        return ValueKind.PRIMITIVE
    if is_structured(value):
        return ValueKind.STRUCTURED
    if callable(value):
        return ValueKind.FACTORY
    return ValueKind.OPAQUE


def is_structured(value: Any) -> bool:
    """True for plain mappings and sequences that become child stores."""
    return isinstance(value, (Mapping, list, tuple))


def structured_items(value: Any) -> Iterator[Tuple[str, Any]]:
    """Iterate (key, value) pairs of structured input.

    Mappings keep their own keys; lists and tuples use their indices.
    """
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield str(key), item
    else:
        for index, item in enumerate(value):
            yield str(index), item
