"""
Infrastructure package for the bot fixture harness.

Centralizes database connectivity (conninfo composition, scoped connections,
pools) and the PostgreSQL message store. Keep this layer focused on I/O and
resource management, decoupled from the factory and bootstrap logic.
"""

from botharness.infrastructure.abstract import MessageStore
from botharness.infrastructure.database import MessageDatabase
from botharness.infrastructure.db_factory import (
    as_credentials,
    build_conninfo,
    open_pool,
    store_connection,
)

__all__ = [
    "MessageStore",
    "MessageDatabase",
    "as_credentials",
    "build_conninfo",
    "open_pool",
    "store_connection",
]
