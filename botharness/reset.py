"""
Fixture store reset: delete every fixture row, children before parents.

The reset assumes exclusive access to the store for the duration of the call.
Unlike the bootstrapper it never degrades to a soft failure; a half-cleared
store raises.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional

import psycopg

from botharness.errors import StorageError
from botharness.infrastructure.db_factory import Connector, CredentialsLike, store_connection
from botharness.utils.logging import get_logger

log = get_logger(__name__)


class DeleteStep(NamedTuple):
    table: str
    statement: str


def _delete(table: str) -> DeleteStep:
    return DeleteStep(table, f'DELETE FROM "{table}"')


# Tables that reference others come first.
RESET_PLAN = (
    _delete("conversation"),
    _delete("telegram_update"),
    _delete("chosen_inline_result"),
    _delete("inline_query"),
    _delete("message"),
    _delete("user_chat"),
    _delete("chat"),
    _delete("user"),
)


def reset_all(
    credentials: CredentialsLike,
    *,
    connect: Optional[Connector] = None,
) -> List[str]:
    """
    Empty every fixture table of the store described by `credentials`.

    Parameters
    ----------
    credentials : StoreCredentials or Mapping
        ``host``, ``database``, ``user``, ``password`` and optional ``port``.
    connect : callable, optional
        Connection factory taking a conninfo string (``psycopg.connect`` by
        default).

    Returns
    -------
    list of str
        The tables cleared, in the order they were cleared.

    Raises
    ------
    StoreConnectionError
        If no connection can be established.
    StorageError
        If a delete or the final commit is rejected; nothing is kept in
        that case.
    """
    cleared: List[str] = []
    with store_connection(credentials, connect=connect) as conn:
        with conn.cursor() as cur:
            for step in RESET_PLAN:
                try:
                    cur.execute(step.statement)
                except psycopg.Error as exc:
                    conn.rollback()
                    log.error("Fixture reset failed on table %s: %s", step.table, exc)
                    raise StorageError(step.table, str(exc)) from exc
                cleared.append(step.table)
                log.debug("Cleared table %s", step.table)
        try:
            conn.commit()
        except psycopg.Error as exc:
            conn.rollback()
            log.error("Fixture reset could not be committed: %s", exc)
            raise StorageError(None, str(exc)) from exc
    log.info("Fixture store cleared", extra={"tables": len(cleared)})
    return cleared


__all__ = ["DeleteStep", "RESET_PLAN", "reset_all"]
