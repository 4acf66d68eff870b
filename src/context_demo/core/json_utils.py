"""Helpers for reading values out of decoded Context API JSON payloads."""

from __future__ import annotations

from typing import Any, Optional


def get_path(data: Any, *keys: str) -> Any:
    """Walk nested dicts along *keys*, returning None when any step is missing.

    Examples:
        >>> get_path({"socialInfo": {"author": "Jane"}}, "socialInfo", "author")
        'Jane'
        >>> get_path({"socialInfo": None}, "socialInfo", "author") is None
        True
    """
    value = data
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def get_as_string(data: Any, *keys: str) -> Optional[str]:
    """Return the value at *keys* rendered as a string, or None when absent.

    Scalars keep their JSON spelling (``true``/``false`` for booleans). Nested
    objects and arrays are not flattened and yield None.
    """
    value = get_path(data, *keys)
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["get_path", "get_as_string"]
