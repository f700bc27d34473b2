"""Helpers for the conventional "v" prefix on version tags."""

from __future__ import annotations

DEFAULT_PREFIX = "v"


def has_prefix(tag: str, prefix: str = DEFAULT_PREFIX) -> bool:
    return tag.startswith(prefix)


def strip(tag: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Return ``tag`` without a leading ``prefix`` (unchanged if absent)."""
    if prefix and tag.startswith(prefix):
        return tag[len(prefix) :]
    return tag


def prepend(tag: str, prefix: str = DEFAULT_PREFIX) -> str:
    return prefix + tag
