"""Helpers for reading untyped JSON/TOML structures.

Catalog responses and cache files are plain JSON; these helpers validate at
the boundary so the rest of the code works with typed values.

The catalog uses empty strings where it means "no value", so string readers
here normalize ``""`` to ``None``.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, treating empty or whitespace-only strings as missing."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_int(table: Mapping[str, object], key: str, default: int = 0) -> int:
    """Get an integer value; bools and non-numbers yield ``default``."""
    value = table.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def get_float(table: Mapping[str, object], key: str) -> float | None:
    value = table.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    value = table.get(key)
    if isinstance(value, bool):
        return value
    return default


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))


def blank_to_none(data: object) -> object:
    """Recursively replace empty strings with ``None``.

    Used when writing cache files so that "" and null are never both present
    for the same field.
    """
    if isinstance(data, str):
        return data or None
    if isinstance(data, dict):
        d = cast(dict[object, object], data)
        return {k: blank_to_none(v) for k, v in d.items()}
    if isinstance(data, list):
        items = cast(list[object], data)
        return [blank_to_none(v) for v in items]
    return data
