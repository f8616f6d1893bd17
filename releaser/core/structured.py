"""Typed accessors for the untyped JSON release configuration.

``json.loads`` hands back plain objects; these helpers validate a value's
shape at the boundary and narrow it for the type checker. Unlike a lenient
lookup, a present value of the wrong type raises ``FieldTypeError`` so the
config loader can report exactly which field is malformed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


class FieldTypeError(ValueError):
    """A JSON field is present but has the wrong type."""

    def __init__(self, key: str, expected: str, value: object) -> None:
        super().__init__(f"'{key}' must be {expected}, got {type(value).__name__}")
        self.key = key


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys (a JSON object)."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str, default: str = "") -> str:
    """Get a string field.

    Missing or null fields yield ``default``. The value is returned as-is
    (no stripping): names and URLs are emitted verbatim into the script.
    """
    value = table.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise FieldTypeError(key, "a string", value)
    return value


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    value = table.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise FieldTypeError(key, "a boolean", value)
    return value


def get_table_list(table: Mapping[str, object], key: str) -> list[StrDict]:
    """Get a list of JSON objects; a missing or null field is an empty list."""
    value = table.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise FieldTypeError(key, "an array", value)
    out: list[StrDict] = []
    for item in cast(ObjList, value):
        entry = as_str_dict(item)
        if entry is None:
            raise FieldTypeError(key, "an array of objects", item)
        out.append(entry)
    return out
