"""
Canonical default field mappings for fixture entities.

Templates are read-only mappings built once at import time. Callers never
modify them; they merge their own overrides on top with `merge`.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

USER_TEMPLATE: Mapping[str, Any] = MappingProxyType(
    {
        "id": 1,
        "first_name": "first",
        "last_name": "last",
        "username": "user",
    }
)

CHAT_TEMPLATE: Mapping[str, Any] = MappingProxyType(
    {
        "id": 1,
        "first_name": "first",
        "last_name": "last",
        "username": "name",
        "type": "private",
        "all_members_are_administrators": False,
    }
)


def merge(partial: Optional[Mapping[str, Any]], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a new dict holding every key of `defaults`, overridden by `partial`.

    Neither argument is modified.
    """
    merged = dict(defaults)
    if partial:
        merged.update(partial)
    return merged


__all__ = ["USER_TEMPLATE", "CHAT_TEMPLATE", "merge"]
