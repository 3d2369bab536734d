"""
Error taxonomy for the bot fixture harness.

Every error raised on purpose by the harness derives from HarnessError so test
code can catch the whole family at once. Errors that mirror a builtin category
(validation, connectivity) also inherit from that builtin.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class HarnessError(Exception):
    """Base class for all harness errors."""


class ReflectionError(HarnessError):
    """A field (or class path) requested for state injection does not exist."""

    def __init__(self, target: str, field_name: str, reason: str = "no such field") -> None:
        self.target = target
        self.field_name = field_name
        super().__init__(f"{target}.{field_name}: {reason}")


class EntityValidationError(HarnessError, ValueError):
    """Entity construction failed required-field checks."""

    def __init__(self, entity: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        self.entity = entity
        self.errors = errors or []
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in self.errors
        )
        super().__init__(f"Invalid {entity} data" + (f" ({details})" if details else ""))


class PersistenceError(HarnessError):
    """The backing store rejected a write."""


class StorageError(PersistenceError):
    """
    The backing store rejected a fixture reset.

    `table` names the delete that failed; it is None when the deletes went
    through but the commit was refused.
    """

    def __init__(self, table: Optional[str], message: str) -> None:
        self.table = table
        if table is None:
            super().__init__(f"Failed to commit fixture reset: {message}")
        else:
            super().__init__(f"Failed to clear table '{table}': {message}")


class StoreConnectionError(HarnessError, ConnectionError):
    """A connection to the backing store could not be established."""


__all__ = [
    "HarnessError",
    "ReflectionError",
    "EntityValidationError",
    "PersistenceError",
    "StorageError",
    "StoreConnectionError",
]
