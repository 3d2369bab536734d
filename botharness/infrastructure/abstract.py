"""
Persistence collaborator contract consumed by the conversation bootstrapper.

Any object with these three methods can stand in for the real message store,
which keeps the bootstrapper testable with an in-memory double.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from botharness.domain.entities import Chat, Message, User


@runtime_checkable
class MessageStore(Protocol):
    """
    Minimal write surface of the fixture store.

    Write methods return True on success. They may also return False or
    raise PersistenceError; callers treat both the same way.
    """

    def is_connected(self) -> bool:
        ...

    def insert_message_request(self, message: Message) -> bool:
        """Persist `message` together with its chat and sender."""
        ...

    def insert_user(
        self,
        user: User,
        date: Optional[datetime] = None,
        chat: Optional[Chat] = None,
    ) -> bool:
        """Upsert `user` and, when `chat` is given, link the two."""
        ...


__all__ = ["MessageStore"]
