"""
Domain package for the bot fixture harness.

Exports the entity models, the canonical templates and the value objects used
by the factory, the bootstrapper and the store reset.
"""

from botharness.domain.entities import Chat, Entity, Message, Update, User
from botharness.domain.models import (
    BootstrapResult,
    BootstrapState,
    ConversationIds,
    StoreCredentials,
)
from botharness.domain.templates import CHAT_TEMPLATE, USER_TEMPLATE, merge

__all__ = [
    "Entity",
    "User",
    "Chat",
    "Message",
    "Update",
    "BootstrapResult",
    "BootstrapState",
    "ConversationIds",
    "StoreCredentials",
    "CHAT_TEMPLATE",
    "USER_TEMPLATE",
    "merge",
]
