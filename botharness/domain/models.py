"""
Value objects shared across the harness.

`StoreCredentials` is the plain connection structure handed to the fixture
reset. `ConversationIds` and `BootstrapResult` describe the outcome of a
conversation bootstrap.
"""
from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field


class StoreCredentials(BaseModel):
    """
    Credentials for a direct connection to the fixture store.

    All fields are required except `port`; there are no defaults.
    """

    host: str = Field(..., description="Database server host.")
    database: str = Field(..., description="Database name.")
    port: Optional[int] = Field(None, description="Server port; libpq default when omitted.")
    user: str = Field(..., description="Login role.")
    password: str = Field(..., description="Login password.")

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }


class ConversationIds(BaseModel):
    """Identifiers generated for a bootstrapped conversation."""

    message_id: int
    user_id: int
    chat_id: int

    model_config = {"frozen": True}


class BootstrapState(str, enum.Enum):
    UNATTEMPTED = "unattempted"
    PERSISTED = "persisted"
    ABORTED = "aborted"


class BootstrapResult(BaseModel):
    """
    Outcome of a single bootstrap attempt.

    Truthy only when the record set was fully persisted, so test code can keep
    writing ``if not result: ...`` while still being able to read `reason`.
    """

    state: BootstrapState
    ids: Optional[ConversationIds] = None
    reason: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def persisted(cls, ids: ConversationIds) -> "BootstrapResult":
        return cls(state=BootstrapState.PERSISTED, ids=ids)

    @classmethod
    def aborted(cls, reason: str) -> "BootstrapResult":
        return cls(state=BootstrapState.ABORTED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.state is BootstrapState.PERSISTED

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    "StoreCredentials",
    "ConversationIds",
    "BootstrapState",
    "BootstrapResult",
]
