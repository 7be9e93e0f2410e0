"""Chat WebSocket envelopes."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from blogcraft.schemas.common import BaseSchema


class JoinEnvelope(BaseSchema):
    """Client request to enter a chatroom under a display name."""

    type: Literal["join"]
    name: str = ""
    chatroom: str = ""
    access_code: str | None = None


class MessageEnvelope(BaseSchema):
    """Client chat message for the joined room."""

    type: Literal["message"]
    text: str = ""
    chatroom: str | None = None


class LeaveEnvelope(BaseSchema):
    """Client request to leave the joined room."""

    type: Literal["leave"]


ClientEnvelope = Annotated[
    JoinEnvelope | MessageEnvelope | LeaveEnvelope,
    Field(discriminator="type"),
]

client_envelope_adapter: TypeAdapter[JoinEnvelope | MessageEnvelope | LeaveEnvelope] = TypeAdapter(
    ClientEnvelope
)


class PresenceEvent(BaseSchema):
    """user_joined / user_left broadcast."""

    type: Literal["user_joined", "user_left"]
    name: str
    chatroom: str
    users: list[str]
    timestamp: datetime


class ChatMessageEvent(BaseSchema):
    """Chat message broadcast."""

    type: Literal["message"] = "message"
    id: str
    name: str
    text: str
    chatroom: str
    timestamp: datetime


class JoinRejectedEvent(BaseSchema):
    """Sent only to a connection whose join was refused."""

    type: Literal["join_rejected"] = "join_rejected"
    name: str
    chatroom: str
    reason: str


class ErrorEvent(BaseSchema):
    """Protocol error sent only to the offending connection."""

    type: Literal["error"] = "error"
    message: str
