"""Authentication endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status
from sqlalchemy import select

from blogcraft.api.deps import CurrentUser, DbSession
from blogcraft.core.config import settings
from blogcraft.core.rate_limit import limit_auth_attempts
from blogcraft.core.security import create_access_token, get_password_hash, verify_password
from blogcraft.models.user import User, UserRole
from blogcraft.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from blogcraft.schemas.common import MessageResponse
from blogcraft.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_session(response: Response, user: User) -> AuthResponse:
    """Create an access token, set it as the session cookie and build the body."""
    access_token = create_access_token(
        subject=str(user.id),
        additional_claims={"username": user.username, "is_admin": user.is_admin},
    )
    expires_in = settings.jwt_access_token_expire_minutes * 60
    response.set_cookie(
        key=settings.session_cookie_name,
        value=access_token,
        max_age=expires_in,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return AuthResponse(
        access_token=access_token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse)
async def register(
    data: RegisterRequest,
    request: Request,
    response: Response,
    db: DbSession,
) -> AuthResponse:
    """Create an account and sign it in.

    Students are approved right away; teacher accounts wait for an admin.
    """
    limit_auth_attempts(request)

    email = data.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )

    result = await db.execute(select(User).where(User.username == data.username))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username is already taken",
        )

    user = User(
        email=email,
        username=data.username,
        name=data.name,
        password_hash=get_password_hash(data.password),
        is_admin=False,
        role=data.role.value,
        approved=data.role == UserRole.STUDENT,
    )
    db.add(user)
    await db.flush()
    logger.info(f"Registered {user.role} account {user.username}")

    return _issue_session(response, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    request: Request,
    response: Response,
    db: DbSession,
) -> AuthResponse:
    """Sign in with email and password."""
    limit_auth_attempts(request)

    result = await db.execute(select(User).where(User.email == data.email.lower()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning(f"Failed login for {data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return _issue_session(response, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUser) -> UserResponse:
    """Get current authenticated user."""
    return UserResponse.model_validate(current_user)
