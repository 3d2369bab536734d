"""
Conversation bootstrapper: persist a linked user/chat/message record set.

Each attempt generates fresh message, user and chat identifiers, builds a
message with them and writes it through a MessageStore in two steps:

1. the message request (chat, sender and message rows);
2. the sender/chat upsert and link.

The steps do not share a transaction. If step 2 fails, the rows from step 1
stay in the store until the next fixture reset.
"""

from __future__ import annotations

from typing import Optional

from botharness.domain.models import BootstrapResult, ConversationIds
from botharness.errors import PersistenceError
from botharness.factory import build_message, random_id
from botharness.infrastructure.abstract import MessageStore
from botharness.utils.logging import get_logger

log = get_logger(__name__)


class ConversationBootstrapper:
    """
    Start fake conversations against a message store.

    Failures never raise: the returned BootstrapResult is falsy and carries
    the reason. Errors other than PersistenceError are not caught.
    """

    def __init__(self, store: MessageStore, bot_username: Optional[str] = None) -> None:
        self.store = store
        self.bot_username = bot_username

    def _abort(self, reason: str) -> BootstrapResult:
        log.warning("Conversation bootstrap aborted: %s", reason)
        return BootstrapResult.aborted(reason)

    def start_conversation(self) -> BootstrapResult:
        if not self.store.is_connected():
            return self._abort("store is not connected")

        ids = ConversationIds(message_id=random_id(), user_id=random_id(), chat_id=random_id())
        message = build_message(
            {"message_id": ids.message_id},
            {"id": ids.user_id},
            {"id": ids.chat_id},
            bot_username=self.bot_username,
        )

        try:
            if not self.store.insert_message_request(message):
                return self._abort(f"message {ids.message_id} was not stored")
            if not self.store.insert_user(message.from_user, None, message.chat):
                return self._abort(f"user {ids.user_id} was not stored")
        except PersistenceError as exc:
            return self._abort(str(exc))

        log.debug(
            "Conversation bootstrapped",
            extra={"message_id": ids.message_id, "user_id": ids.user_id, "chat_id": ids.chat_id},
        )
        return BootstrapResult.persisted(ids)


def start_conversation(store: MessageStore, bot_username: Optional[str] = None) -> BootstrapResult:
    """Shortcut for ``ConversationBootstrapper(store).start_conversation()``."""
    return ConversationBootstrapper(store, bot_username).start_conversation()


__all__ = ["ConversationBootstrapper", "start_conversation"]
