"""Helpers for reading typed values out of environment variables."""

from __future__ import annotations

import shlex

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_bool_env(value: str | None) -> bool | None:
    """None when unset; otherwise True only for 1/true/yes/on (any case)."""
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY


def parse_float_env(value: str | None) -> float | None:
    """Float value, or None when unset, blank or not a number."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_list_env(value: str | None) -> list[str]:
    """Split a command line with shell quoting, e.g. ``DS_TERMINAL='kitty --title "x"'``."""
    return shlex.split(value) if value else []
