"""
Minimal Telegram entity models consumed by the fixture harness.

Each entity is built from a raw field mapping through `Entity.from_data`, the
same shape the Bot API delivers. Unknown keys are kept so attachments such as
audio survive a round trip through `raw_data()`. A bot username travels
alongside messages and updates; it is only used to decide whether a
``/command@botname`` is addressed to this bot.
"""
from __future__ import annotations

from typing import Any, ClassVar, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, model_validator

from botharness.errors import EntityValidationError

E = TypeVar("E", bound="Entity")


class Entity(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _bot_username: str = PrivateAttr(default="")

    @classmethod
    def from_data(cls: Type[E], data: Mapping[str, Any], bot_username: str = "") -> E:
        """
        Validate `data` and build the entity.

        Raises
        ------
        EntityValidationError
            If a required field is missing or has the wrong type.
        """
        try:
            entity = cls.model_validate(dict(data))
        except ValidationError as exc:
            raise EntityValidationError(cls.__name__, exc.errors(include_url=False)) from exc
        entity.bind_bot_username(bot_username)
        return entity

    def bind_bot_username(self, bot_username: str) -> None:
        self._bot_username = bot_username

    @property
    def bot_username(self) -> str:
        return self._bot_username

    def raw_data(self) -> dict:
        """Field mapping the entity was built from, using wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class User(Entity):
    id: int
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    is_bot: Optional[bool] = None
    language_code: Optional[str] = None


class Chat(Entity):
    id: int
    type: Optional[str] = None
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    all_members_are_administrators: Optional[bool] = None


class Message(Entity):
    COMMAND_PREFIX: ClassVar[str] = "/"

    message_id: int
    from_user: Optional[User] = Field(None, alias="from")
    chat: Chat
    date: int
    text: Optional[str] = None

    @property
    def command(self) -> Optional[str]:
        """
        Lower-cased command name if the text starts with a command.

        ``/start@otherbot`` is not a command for this bot and yields None.
        """
        text = self.text or ""
        if not text.startswith(self.COMMAND_PREFIX):
            return None
        words = text[len(self.COMMAND_PREFIX):].split(maxsplit=1)
        if not words:
            return None
        name, _, addressee = words[0].partition("@")
        if addressee and addressee.lower() != self.bot_username.lower():
            return None
        return name.lower() or None


class Update(Entity):
    PAYLOAD_FIELDS: ClassVar[tuple] = ("message", "edited_message", "channel_post")

    update_id: int
    message: Optional[Message] = None
    edited_message: Optional[Message] = None
    channel_post: Optional[Message] = None

    @model_validator(mode="after")
    def check_single_payload(self) -> "Update":
        present = [name for name in self.PAYLOAD_FIELDS if getattr(self, name) is not None]
        if len(present) != 1:
            raise ValueError(
                f"an update carries exactly one payload, got {len(present)}"
                + (f" ({', '.join(present)})" if present else "")
            )
        return self

    def bind_bot_username(self, bot_username: str) -> None:
        super().bind_bot_username(bot_username)
        payload = self.payload
        if payload is not None:
            payload.bind_bot_username(bot_username)

    @property
    def update_type(self) -> Optional[str]:
        for name in self.PAYLOAD_FIELDS:
            if getattr(self, name) is not None:
                return name
        return None

    @property
    def payload(self) -> Optional[Message]:
        update_type = self.update_type
        return getattr(self, update_type) if update_type else None


__all__ = ["Entity", "User", "Chat", "Message", "Update"]
