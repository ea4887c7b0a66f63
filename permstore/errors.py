"""
Store Errors

Minimal error taxonomy for permission-gated stores.
"""


class StoreError(Exception):
    """Base class for permstore failures."""


class PermissionDenied(StoreError):
    """Raised when a key's effective permission forbids the action.

    Attributes:
        action: "read" or "write"
        key: The key whose permission was checked
    """

    def __init__(self, action: str, key: str):
        self.action = action
        self.key = key
        super().__init__(f"You do not have rights to {action} key {key}")

    def __reduce__(self):
        return (type(self), (self.action, self.key))


class DefinitionError(StoreError, ValueError):
    """Raised when a store definition file is malformed."""
