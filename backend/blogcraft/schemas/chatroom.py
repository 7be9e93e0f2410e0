"""Chatroom and access code schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator

from blogcraft.schemas.common import BaseSchema, text_field

AccessCodeValue = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_upper=True, pattern=r"^[A-Za-z0-9]{4,32}$"),
]


class ChatroomCreate(BaseSchema):
    """Chatroom creation request. No invitees means an open room."""

    name: text_field(2, 100)
    description: str | None = None
    invited_user_ids: list[UUID] = Field(default_factory=list)


class ChatroomUpdate(BaseSchema):
    """Chatroom update request."""

    name: text_field(2, 100) | None = None
    description: str | None = None
    is_active: bool | None = None
    invited_user_ids: list[UUID] | None = None


class ChatroomResponse(BaseSchema):
    """Chatroom with its live participant names."""

    id: UUID
    name: str
    description: str | None = None
    is_active: bool
    invited_user_ids: list[str] = []
    created_by: UUID | None = None
    online_users: list[str] = []
    created_at: datetime
    updated_at: datetime


class AccessCodeCreate(BaseSchema):
    """Access code creation request. An empty code gets generated."""

    code: AccessCodeValue | None = None
    name: text_field(1, 100)
    description: str | None = None
    chatroom_id: UUID
    expires_at: datetime | None = None
    max_uses: int | None = Field(default=None, ge=1)
    is_active: bool = True

    @field_validator("code", "expires_at", "max_uses", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AccessCodeUpdate(BaseSchema):
    """Access code update request."""

    code: AccessCodeValue | None = None
    name: text_field(1, 100) | None = None
    description: str | None = None
    chatroom_id: UUID | None = None
    expires_at: datetime | None = None
    max_uses: int | None = Field(default=None, ge=1)
    is_active: bool | None = None

    @field_validator("code", "chatroom_id", "expires_at", "max_uses", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AccessCodeResponse(BaseSchema):
    """Access code response."""

    id: UUID
    code: str
    name: str
    description: str | None = None
    chatroom_id: UUID
    chatroom_name: str | None = None
    expires_at: datetime | None = None
    max_uses: int | None = None
    uses_count: int
    is_active: bool
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class RedeemRequest(BaseSchema):
    """Access code redemption request."""

    code: text_field(1, 32)


class RedeemResponse(BaseSchema):
    """Access code redemption result."""

    message: str
    chatroom: ChatroomResponse
