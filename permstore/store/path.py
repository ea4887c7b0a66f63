"""
Path Resolver - Colon-delimited paths into nested stores.

A path such as "profile:address:city" names the key "profile" in the current
store, then "address" in the store held there, and so on. There is no
escaping: a key cannot contain the separator. Empty segments produced by
leading, trailing or doubled separators are valid empty-string keys.
"""

from typing import Tuple

SEPARATOR = ":"


def split_path(path: str) -> Tuple[str, str]:
    """Split a path into its head key and the remaining path.

    Args:
        path: Colon-delimited path

    Returns:
        Tuple of (key, rest); rest is "" when the path has one segment

    Example:
        split_path("a:b:c")  # ("a", "b:c")
        split_path("a")      # ("a", "")
        split_path(":a")     # ("", "a")
    """
    key, _, rest = str(path).partition(SEPARATOR)
    return key, rest


def join_path(*segments: str) -> str:
    """Join segments into a path."""
    return SEPARATOR.join(str(segment) for segment in segments)


def is_nested(path: str) -> bool:
    """True if the path descends below its head key."""
    return split_path(path)[1] != ""
