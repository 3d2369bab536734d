"""
Factories for fake Telegram entities.

Every builder merges caller overrides over a canonical template (users, chats)
or over freshly synthesized defaults (messages, updates). Explicit caller
values always win. Identifiers come from a private RNG that can be reseeded
with `seed_random` when a test needs reproducible fixtures.
"""

from __future__ import annotations

import random
import time
from typing import Any, Dict, Mapping, Optional

from botharness.config import get_settings
from botharness.domain.entities import Chat, Message, Update, User
from botharness.domain.templates import CHAT_TEMPLATE, USER_TEMPLATE, merge

MAX_RANDOM_ID = 2**31 - 1
DEFAULT_MESSAGE_TEXT = "dummy"

AUDIO_MIME_TYPES = (
    "audio/ogg",
    "audio/mpeg",
    "audio/vnd.wave",
    "audio/x-ms-wma",
    "audio/basic",
)

_rng = random.Random()


def seed_random(seed: Optional[int]) -> None:
    """Reseed the identifier RNG (None reseeds from system entropy)."""
    _rng.seed(seed)


def random_id() -> int:
    """A random positive identifier, never 0."""
    return _rng.randint(1, MAX_RANDOM_ID)


def _now() -> int:
    return int(time.time())


def _bot_username(bot_username: Optional[str]) -> str:
    return bot_username if bot_username is not None else get_settings().bot_username


def _wire_keys(model: type, partial: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Rename field names in `partial` to their wire aliases (``from_user`` -> ``from``)."""
    if not partial:
        return None
    aliases = {name: field.alias for name, field in model.model_fields.items() if field.alias}
    return {aliases.get(key, key): value for key, value in partial.items()}


def build_user(partial: Optional[Mapping[str, Any]] = None) -> User:
    """Return a fake user; an empty `partial` yields the template verbatim."""
    return User.from_data(merge(partial, USER_TEMPLATE))


def build_chat(partial: Optional[Mapping[str, Any]] = None) -> Chat:
    """Return a fake chat built over the chat template."""
    return Chat.from_data(merge(partial, CHAT_TEMPLATE))


def build_message(
    message_partial: Optional[Mapping[str, Any]] = None,
    user_partial: Optional[Mapping[str, Any]] = None,
    chat_partial: Optional[Mapping[str, Any]] = None,
    bot_username: Optional[str] = None,
) -> Message:
    """
    Return a fake message sent by a template user into a template chat.

    Parameters
    ----------
    message_partial : Mapping, optional
        Message fields; these override every synthesized field, including
        ``message_id``, ``from``, ``chat`` and ``text``. Either the wire key
        ``from`` or the field name ``from_user`` may be used.
    user_partial : Mapping, optional
        Overrides for the sender, merged over the user template.
    chat_partial : Mapping, optional
        Overrides for the chat, merged over the chat template.
    bot_username : str, optional
        Bot identity bound to the message. Defaults to the configured one.
    """
    defaults: Dict[str, Any] = {
        "message_id": random_id(),
        "from": merge(user_partial, USER_TEMPLATE),
        "chat": merge(chat_partial, CHAT_TEMPLATE),
        "date": _now(),
        "text": DEFAULT_MESSAGE_TEXT,
    }
    return Message.from_data(
        merge(_wire_keys(Message, message_partial), defaults), _bot_username(bot_username)
    )


def build_update(
    data: Optional[Mapping[str, Any]] = None,
    bot_username: Optional[str] = None,
) -> Update:
    """
    Wrap `data` in an Update, or synthesize a minimal one when `data` is empty.

    Raises
    ------
    EntityValidationError
        If `data` lacks a required envelope field.
    """
    if not data:
        data = {
            "update_id": random_id(),
            "message": {
                "message_id": random_id(),
                "chat": {"id": random_id()},
                "date": _now(),
            },
        }
    return Update.from_data(data, _bot_username(bot_username))


def build_command_update(command_text: str, bot_username: Optional[str] = None) -> Update:
    """Return an update whose message text is exactly `command_text`."""
    data = {
        "update_id": random_id(),
        "message": {
            "message_id": random_id(),
            "from": dict(USER_TEMPLATE),
            "chat": dict(CHAT_TEMPLATE),
            "date": _now(),
            "text": command_text,
        },
    }
    return build_update(data, bot_username)


def fake_audio_payload() -> Dict[str, Any]:
    """
    Return a fake recorded audio track.

    The duration is ``"<minutes>:<seconds>"`` with each part drawn on its own,
    so seconds may be 60.
    """
    return {
        "file_id": _rng.randint(1, 999),
        "duration": f"{_rng.randint(1, 99)}:{_rng.randint(1, 60)}",
        "performer": "pytest",
        "title": "track from pytest",
        "mime_type": _rng.choice(AUDIO_MIME_TYPES),
        "file_size": _rng.randint(1, 99999),
    }


__all__ = [
    "AUDIO_MIME_TYPES",
    "DEFAULT_MESSAGE_TEXT",
    "MAX_RANDOM_ID",
    "build_chat",
    "build_command_update",
    "build_message",
    "build_update",
    "build_user",
    "fake_audio_payload",
    "random_id",
    "seed_random",
]
