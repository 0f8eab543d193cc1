"""
Dictionary utilities for dot-path access into arbitrary records.

Paths are split once into explicit segment lists and walked iteratively.
Reads never create containers; writes create intermediate dictionaries as
needed.
"""

import json
from typing import Any, Dict, Sequence, Tuple, Union

PathLike = Union[str, Sequence[str]]


class _Missing:
    """Marker for a value that is absent from a record (distinct from None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def split_path(path: PathLike, path_separator: str = ".") -> Tuple[str, ...]:
    """
    Split a dot-path into its segments.

    An empty path yields an empty tuple, which addresses nothing.

    Example:
        >>> split_path("address.city")
        ('address', 'city')
        >>> split_path("")
        ()
    """
    if isinstance(path, str):
        if not path:
            return ()
        return tuple(path.split(path_separator))
    return tuple(path)


def get_nested_value(
    data: Any,
    path: PathLike,
    default: Any = MISSING,
    path_separator: str = "."
) -> Any:
    """
    Get a nested value from a record using a path string or segment list.

    Integer-like segments index into lists. A missing intermediate segment
    returns ``default`` rather than raising.

    Args:
        data: Record to read from
        path: Path to the value as a dot-separated string or list of keys
        default: Value to return if the path cannot be resolved
        path_separator: Separator to use if path is a string

    Returns:
        Value at the specified path, or default if not found

    Example:
        >>> get_nested_value({"a": {"b": {"c": 42}}}, "a.b.c")
        42
        >>> get_nested_value({"a": {}}, "a.b.c", default=None) is None
        True
    """
    parts = split_path(path, path_separator)
    if not parts:
        return default

    current = data
    for part in parts:
        if isinstance(current, dict):
            if part not in current:
                return default
            current = current[part]
        elif isinstance(current, (list, tuple)) and part.lstrip("-").isdigit():
            index = int(part)
            if -len(current) <= index < len(current):
                current = current[index]
            else:
                return default
        else:
            return default
    return current


def set_nested_value(
    data: Dict[str, Any],
    path: PathLike,
    value: Any,
    path_separator: str = "."
) -> Dict[str, Any]:
    """
    Set a nested value in a dictionary, creating missing levels.

    A non-dict value sitting on an intermediate segment is replaced by a new
    dictionary. Writing to the same path twice keeps the later value.

    Example:
        >>> set_nested_value({}, "a.b.c", 42)
        {'a': {'b': {'c': 42}}}
    """
    parts = split_path(path, path_separator)
    if not parts:
        raise ValueError("Cannot set a value at an empty path")

    current = data
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child

    current[parts[-1]] = value
    return data


def is_blank(value: Any) -> bool:
    """Return True for absent, None and empty-string values."""
    return value is MISSING or value is None or (isinstance(value, str) and value == "")


def freeze_value(value: Any) -> Any:
    """
    Return a hashable stand-in for ``value``.

    Hashable values are returned as-is, except booleans, which are tagged so
    ``True`` and ``1`` stay distinct keys. Dicts and lists are reduced to
    their canonical JSON text.
    """
    if isinstance(value, bool):
        return (bool, value)
    try:
        hash(value)
        return value
    except TypeError:
        return ("__json__", json.dumps(value, sort_keys=True, default=str))
