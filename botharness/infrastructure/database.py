"""
PostgreSQL message store for fixture data.

Writes users, chats, messages and updates into the tables defined in
`db/init.sql`. Every public call borrows a pooled connection for the duration
of one transaction and gives it back on exit; psycopg errors surface as
PersistenceError.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Optional

import psycopg
from psycopg import Cursor
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from botharness.domain.entities import Chat, Message, Update, User
from botharness.errors import PersistenceError
from botharness.infrastructure.db_factory import CredentialsLike, open_pool
from botharness.utils.logging import get_logger

log = get_logger(__name__)

_UPSERT_USER = """
    INSERT INTO "user" (id, is_bot, username, first_name, last_name, language_code,
                        created_at, updated_at)
    VALUES (%(id)s, %(is_bot)s, %(username)s, %(first_name)s, %(last_name)s,
            %(language_code)s, %(date)s, %(date)s)
    ON CONFLICT (id) DO UPDATE SET
        is_bot = EXCLUDED.is_bot,
        username = EXCLUDED.username,
        first_name = EXCLUDED.first_name,
        last_name = EXCLUDED.last_name,
        language_code = EXCLUDED.language_code,
        updated_at = EXCLUDED.updated_at
"""

_LINK_USER_CHAT = """
    INSERT INTO user_chat (user_id, chat_id) VALUES (%s, %s)
    ON CONFLICT DO NOTHING
"""

_UPSERT_CHAT = """
    INSERT INTO chat (id, type, title, username, first_name, last_name,
                      all_members_are_administrators, created_at, updated_at)
    VALUES (%(id)s, %(type)s, %(title)s, %(username)s, %(first_name)s, %(last_name)s,
            %(all_members_are_administrators)s, %(date)s, %(date)s)
    ON CONFLICT (id) DO UPDATE SET
        type = EXCLUDED.type,
        title = EXCLUDED.title,
        username = EXCLUDED.username,
        first_name = EXCLUDED.first_name,
        last_name = EXCLUDED.last_name,
        all_members_are_administrators = EXCLUDED.all_members_are_administrators,
        updated_at = EXCLUDED.updated_at
"""

_INSERT_MESSAGE = """
    INSERT INTO message (chat_id, id, user_id, date, text, raw)
    VALUES (%s, %s, %s, %s, %s, %s)
    ON CONFLICT (chat_id, id) DO NOTHING
"""

_INSERT_UPDATE = """
    INSERT INTO telegram_update (id, chat_id, message_id)
    VALUES (%s, %s, %s)
    ON CONFLICT (id) DO NOTHING
"""


def _timestamp(unix_seconds: int) -> datetime:
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc)


class MessageDatabase:
    """
    Message store backed by a psycopg ConnectionPool.

    A store built without a pool reports itself as disconnected, which the
    bootstrapper treats as "skip".
    """

    def __init__(self, pool: Optional[ConnectionPool] = None) -> None:
        self._pool = pool

    @classmethod
    def connect(cls, credentials: Optional[CredentialsLike] = None) -> "MessageDatabase":
        """Open a pool against `credentials` (the configured store by default)."""
        return cls(open_pool(credentials))

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    def __enter__(self) -> "MessageDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def is_connected(self) -> bool:
        return self._pool is not None and not self._pool.closed

    @contextmanager
    def _cursor(self) -> Generator[Cursor, None, None]:
        if self._pool is None:
            raise PersistenceError("message store is not connected")
        try:
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    yield cur
        except psycopg.Error as exc:
            log.debug("Store write rejected: %s", exc)
            raise PersistenceError(str(exc)) from exc

    @staticmethod
    def _upsert_chat(cur: Cursor, chat: Chat, date: datetime) -> None:
        cur.execute(
            _UPSERT_CHAT,
            {
                "id": chat.id,
                "type": chat.type,
                "title": chat.title,
                "username": chat.username,
                "first_name": chat.first_name,
                "last_name": chat.last_name,
                "all_members_are_administrators": bool(chat.all_members_are_administrators),
                "date": date,
            },
        )

    @staticmethod
    def _upsert_user(cur: Cursor, user: User, date: datetime, chat: Optional[Chat]) -> None:
        cur.execute(
            _UPSERT_USER,
            {
                "id": user.id,
                "is_bot": bool(user.is_bot),
                "username": user.username,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "language_code": user.language_code,
                "date": date,
            },
        )
        if chat is not None:
            cur.execute(_LINK_USER_CHAT, (user.id, chat.id))

    def insert_chat(self, chat: Chat, date: Optional[datetime] = None) -> bool:
        with self._cursor() as cur:
            self._upsert_chat(cur, chat, date or datetime.now(timezone.utc))
        return True

    def insert_user(
        self,
        user: User,
        date: Optional[datetime] = None,
        chat: Optional[Chat] = None,
    ) -> bool:
        """
        Upsert `user`; link it to `chat` when given.

        The chat row must already exist, otherwise the link violates its
        foreign key and PersistenceError is raised.
        """
        with self._cursor() as cur:
            self._upsert_user(cur, user, date or datetime.now(timezone.utc), chat)
        return True

    def insert_message_request(self, message: Message) -> bool:
        """Persist the chat, the sender (linked to the chat) and the message itself."""
        date = _timestamp(message.date)
        sender = message.from_user
        with self._cursor() as cur:
            self._upsert_chat(cur, message.chat, date)
            if sender is not None:
                self._upsert_user(cur, sender, date, message.chat)
            cur.execute(
                _INSERT_MESSAGE,
                (
                    message.chat.id,
                    message.message_id,
                    sender.id if sender is not None else None,
                    date,
                    message.text,
                    Jsonb(message.raw_data()),
                ),
            )
        return True

    def insert_update_request(self, update: Update) -> bool:
        """Persist the update's message request and the telegram_update row."""
        message = update.payload
        if message is None:
            raise PersistenceError(f"update {update.update_id} carries no message")
        self.insert_message_request(message)
        with self._cursor() as cur:
            cur.execute(_INSERT_UPDATE, (update.update_id, message.chat.id, message.message_id))
        return True


__all__ = ["MessageDatabase"]
