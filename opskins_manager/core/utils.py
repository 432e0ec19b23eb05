"""Small utilities."""

from __future__ import annotations

from typing import Any, Optional


def mask_key(key: Optional[str], keep: int = 4) -> str:
    """Hide all but the last ``keep`` characters of a credential."""
    if not key:
        return ""
    if len(key) <= keep:
        return "*" * len(key)
    return "*" * (len(key) - keep) + key[-keep:]


def is_number(x: Any) -> bool:
    # bool is an int subclass but never a meaningful price
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def app_string(appid: int, contextid: int) -> str:
    """Platform notation for a game inventory, e.g. ``730_2``."""
    return f"{appid}_{contextid}"


def to_number(x: Any) -> float | int:
    """Coerce a platform amount (may arrive as a string) to int or float."""
    if is_number(x):
        return x
    value = float(x)
    return int(value) if value.is_integer() else value
