"""
Bot Fixture Harness - test fixtures and state injection for a Telegram bot model.

This package lets tests exercise the bot's entity model and its PostgreSQL
store without a live Telegram connection:

- Entity factories that merge overrides over canonical user/chat templates
- A state injector that forces private fields on objects and classes
- A conversation bootstrapper that persists linked user/chat/message rows
- A fixture store reset that clears every table in dependency order
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from botharness.bootstrap import ConversationBootstrapper, start_conversation
from botharness.config import Settings, get_settings
from botharness.domain import (
    CHAT_TEMPLATE,
    USER_TEMPLATE,
    BootstrapResult,
    BootstrapState,
    Chat,
    ConversationIds,
    Message,
    StoreCredentials,
    Update,
    User,
)
from botharness.errors import (
    EntityValidationError,
    HarnessError,
    PersistenceError,
    ReflectionError,
    StorageError,
    StoreConnectionError,
)
from botharness.factory import (
    build_chat,
    build_command_update,
    build_message,
    build_update,
    build_user,
    fake_audio_payload,
    seed_random,
)
from botharness.injector import (
    get_instance_field,
    get_static_field,
    set_instance_field,
    set_static_field,
)
from botharness.reset import RESET_PLAN, reset_all
from botharness.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Entities and templates
    "User",
    "Chat",
    "Message",
    "Update",
    "USER_TEMPLATE",
    "CHAT_TEMPLATE",
    "StoreCredentials",
    # Factory
    "build_user",
    "build_chat",
    "build_message",
    "build_update",
    "build_command_update",
    "fake_audio_payload",
    "seed_random",
    # State injection
    "set_instance_field",
    "set_static_field",
    "get_instance_field",
    "get_static_field",
    # Bootstrap and reset
    "ConversationBootstrapper",
    "start_conversation",
    "BootstrapResult",
    "BootstrapState",
    "ConversationIds",
    "RESET_PLAN",
    "reset_all",
    # Errors
    "HarnessError",
    "ReflectionError",
    "EntityValidationError",
    "PersistenceError",
    "StorageError",
    "StoreConnectionError",
    # Logging
    "configure_logging",
    "get_logger",
]
