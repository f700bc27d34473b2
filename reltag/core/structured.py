"""Helpers for safely working with dynamic (untyped) structures.

Use these at boundaries where we ingest JSON manifests, TOML tables or values
pulled off a user's Python config module. They validate at runtime and narrow
types for static checkers.
"""

from __future__ import annotations

from typing import TypeGuard, cast

StrDict = dict[str, object]

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def coerce_bool(value: object) -> bool | None:
    """Coerce a config value to bool.

    Accepts real booleans, 0/1 and the usual words ("true", "no", ...).
    Returns None when the value has no sensible boolean reading.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def coerce_str(value: object) -> str | None:
    """Coerce a scalar config value to str; None for containers and None."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool | int | float):
        return str(value)
    return None


def coerce_str_list(value: object) -> list[str] | None:
    """Coerce a config value to a list of strings.

    A lone scalar is wrapped in a list; None becomes an empty list.
    Returns None if any element is not a scalar.
    """
    if value is None:
        return []
    if isinstance(value, list | tuple):
        items = cast(list[object], list(value))
    else:
        items = [value]

    out: list[str] = []
    for item in items:
        s = coerce_str(item)
        if s is None:
            return None
        out.append(s)
    return out
