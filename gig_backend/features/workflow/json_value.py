"""
Typed accessors over parsed JSON values.

Workflow files are loosely shaped, so every read returns ``None`` on a
shape mismatch instead of raising. Callers skip the entry when that
happens.
"""

from __future__ import annotations

from typing import Any


def as_int(value: Any) -> int | None:
    # bool is an int subclass; JSON true/false is never a node or link id.
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def as_list(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def get_int(obj: Any, key: str) -> int | None:
    d = as_dict(obj)
    return as_int(d.get(key)) if d is not None else None


def get_str(obj: Any, key: str) -> str | None:
    d = as_dict(obj)
    return as_str(d.get(key)) if d is not None else None


def get_list(obj: Any, key: str) -> list[Any] | None:
    d = as_dict(obj)
    return as_list(d.get(key)) if d is not None else None


def get_dict(obj: Any, key: str) -> dict[str, Any] | None:
    d = as_dict(obj)
    return as_dict(d.get(key)) if d is not None else None


def is_list_of(value: Any, item_type: type | tuple[type, ...]) -> bool:
    """True when ``value`` is a list and every item is an ``item_type``."""
    items = as_list(value)
    if items is None:
        return False
    return all(isinstance(item, item_type) for item in items)
