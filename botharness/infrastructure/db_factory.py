"""
Database connection factory utilities for the bot fixture harness.

Composes libpq connection strings from StoreCredentials and hands out direct
connections and pools with scoped lifetimes. There is deliberately no retry
here: a failed connection is reported once as StoreConnectionError.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator, Mapping, Optional, Union

import psycopg
from psycopg import Connection
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool, PoolTimeout

from botharness.config import get_settings
from botharness.domain.models import StoreCredentials
from botharness.errors import StoreConnectionError
from botharness.utils.logging import get_logger

log = get_logger(__name__)

CredentialsLike = Union[StoreCredentials, Mapping[str, Any]]
Connector = Callable[[str], Connection]


def as_credentials(credentials: Optional[CredentialsLike] = None) -> StoreCredentials:
    """
    Coerce a mapping into StoreCredentials; None means the configured store.

    Raises
    ------
    pydantic.ValidationError
        If a required field is missing or an unknown key is present.
    """
    if credentials is None:
        return get_settings().credentials()
    if isinstance(credentials, StoreCredentials):
        return credentials
    return StoreCredentials.model_validate(dict(credentials))


def build_conninfo(credentials: Optional[CredentialsLike] = None) -> str:
    """Compose a libpq conninfo string; an absent port is left to libpq."""
    creds = as_credentials(credentials)
    return make_conninfo(
        host=creds.host,
        port=creds.port,
        dbname=creds.database,
        user=creds.user,
        password=creds.password,
    )


@contextmanager
def store_connection(
    credentials: Optional[CredentialsLike] = None,
    connect: Optional[Connector] = None,
) -> Generator[Connection, None, None]:
    """
    Open a dedicated connection and close it on exit, whatever happens.

    Example
    -------
        with store_connection(creds) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")

    Raises
    ------
    StoreConnectionError
        If the connection cannot be established.
    """
    creds = as_credentials(credentials)
    connect = connect or psycopg.connect
    try:
        conn = connect(build_conninfo(creds))
    except psycopg.OperationalError as exc:
        log.error("Cannot connect to %s/%s: %s", creds.host, creds.database, exc)
        raise StoreConnectionError(
            f"cannot connect to {creds.host}/{creds.database}: {exc}"
        ) from exc
    try:
        yield conn
    finally:
        conn.close()


def open_pool(
    credentials: Optional[CredentialsLike] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    timeout: Optional[float] = None,
) -> ConnectionPool:
    """
    Create a connection pool and wait until its first connection is ready.

    Raises
    ------
    StoreConnectionError
        If no connection could be established within `timeout` seconds.
    """
    settings = get_settings()
    creds = as_credentials(credentials)
    pool = ConnectionPool(
        conninfo=build_conninfo(creds),
        min_size=min_size or settings.pool_min_size,
        max_size=max_size or settings.pool_max_size,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=timeout or settings.pool_timeout)
    except PoolTimeout as exc:
        pool.close()
        raise StoreConnectionError(
            f"no connection to {creds.host}/{creds.database} within the pool timeout"
        ) from exc
    return pool


__all__ = [
    "as_credentials",
    "build_conninfo",
    "open_pool",
    "store_connection",
]
