"""Authentication schemas."""

from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints

from blogcraft.models.user import UserRole
from blogcraft.schemas.common import BaseSchema, text_field
from blogcraft.schemas.user import UserResponse


class RegisterRequest(BaseSchema):
    """Account registration request."""

    email: Annotated[EmailStr, Field(max_length=100)]
    username: Annotated[
        str,
        StringConstraints(strip_whitespace=True, pattern=r"^[A-Za-z0-9_-]{3,30}$"),
    ]
    name: text_field(1, 100)
    password: Annotated[str, Field(min_length=6, max_length=128)]
    role: UserRole = UserRole.STUDENT


class LoginRequest(BaseSchema):
    """Email/password login request."""

    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=128)]


class AuthResponse(BaseSchema):
    """Authentication response with token."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse
