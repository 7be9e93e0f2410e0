"""Chatroom and access code models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogcraft.models.base import BaseModel, UTCDateTime

if TYPE_CHECKING:
    from blogcraft.models.user import User


class Chatroom(BaseModel):
    """Named real-time channel for students.

    An empty invite list means the room is open to every signed-in user.
    Invited ids are stored as strings.
    """

    __tablename__ = "chatrooms"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    invited_user_ids: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def is_open(self) -> bool:
        return not self.invited_user_ids

    def admits(self, user: "User | None") -> bool:
        """Whether a user may enter without presenting an access code."""
        if user is not None and user.is_admin:
            return True
        if self.is_open:
            return user is not None
        return user is not None and str(user.id) in self.invited_user_ids

    def __repr__(self) -> str:
        return f"<Chatroom {self.name}>"


class AccessCode(BaseModel):
    """Redeemable token granting entry to one chatroom."""

    __tablename__ = "access_codes"

    code: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    chatroom_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chatrooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
    )
    max_uses: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    uses_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    chatroom: Mapped["Chatroom"] = relationship(
        "Chatroom",
        lazy="selectin",
    )

    @property
    def chatroom_name(self) -> str | None:
        return self.chatroom.name if self.chatroom is not None else None

    def __repr__(self) -> str:
        return f"<AccessCode {self.code}>"
