"""User model."""

import enum
import uuid

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from blogcraft.models.base import BaseModel


class UserRole(str, enum.Enum):
    """Classroom role of an account (independent of the admin flag)."""

    STUDENT = "student"
    TEACHER = "teacher"


class User(BaseModel):
    """User model - authenticated with email and bcrypt-hashed password."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    username: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    # Store as plain string; valid values are enforced via UserRole.
    role: Mapped[str] = mapped_column(
        String(32),
        default=UserRole.STUDENT.value,
        nullable=False,
    )
    approved: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    teacher_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    @property
    def is_staff(self) -> bool:
        """Admins, and teachers whose account has been approved."""
        return self.is_admin or (self.role == UserRole.TEACHER.value and self.approved)

    def __repr__(self) -> str:
        return f"<User {self.username}>"
