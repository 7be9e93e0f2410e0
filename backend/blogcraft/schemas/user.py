"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import model_validator

from blogcraft.models.user import UserRole
from blogcraft.schemas.common import BaseSchema


class UserResponse(BaseSchema):
    """User response schema (never carries the password hash)."""

    id: UUID
    email: str
    username: str
    name: str
    is_admin: bool
    role: UserRole
    approved: bool
    teacher_id: UUID | None = None
    created_at: datetime


class AuthorSummary(BaseSchema):
    """Author info embedded in posts."""

    id: UUID
    name: str
    username: str


class RoleUpdate(BaseSchema):
    """Admin flag and/or classroom role change."""

    is_admin: bool | None = None
    role: UserRole | None = None

    @model_validator(mode="after")
    def require_change(self) -> "RoleUpdate":
        if self.is_admin is None and self.role is None:
            raise ValueError("Provide isAdmin or role")
        return self


class ApprovalUpdate(BaseSchema):
    """Approve or revoke an account."""

    approved: bool


class TeacherAssignment(BaseSchema):
    """Assign a student to a teacher (null detaches)."""

    teacher_id: UUID | None = None
