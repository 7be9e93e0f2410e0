"""API dependencies."""

import logging
import uuid
from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogcraft.core.config import settings
from blogcraft.core.database import get_db
from blogcraft.core.security import verify_token
from blogcraft.models.user import User
from blogcraft.services.access_codes import AccessCodeService
from blogcraft.services.blog import BlogService
from blogcraft.services.chat_hub import ChatHub, get_chat_hub

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def resolve_user_from_token(token: str, db: AsyncSession) -> User:
    """Resolve the user an access token belongs to.

    Raises:
        HTTPException(401) for invalid, expired or foreign tokens.
    """
    payload = verify_token(token)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _unauthorized("User not found")
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
    access_token: Annotated[str | None, Cookie(alias=settings.session_cookie_name)] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from the session cookie or a Bearer token."""
    token = credentials.credentials if credentials is not None else access_token
    if not token:
        raise _unauthorized("Authentication required")
    return await resolve_user_from_token(token, db)


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
    access_token: Annotated[str | None, Cookie(alias=settings.session_cookie_name)] = None,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Current user when valid credentials are present, otherwise None."""
    token = credentials.credentials if credentials is not None else access_token
    if not token:
        return None
    try:
        return await resolve_user_from_token(token, db)
    except HTTPException:
        return None


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]


async def require_admin(current_user: CurrentUser) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def require_staff(current_user: CurrentUser) -> User:
    """Admins and approved teachers."""
    if not current_user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher or admin access required",
        )
    return current_user


AdminUser = Annotated[User, Depends(require_admin)]
StaffUser = Annotated[User, Depends(require_staff)]


def get_blog_service() -> BlogService:
    return BlogService()


def get_access_code_service() -> AccessCodeService:
    return AccessCodeService()


BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]
AccessCodeServiceDep = Annotated[AccessCodeService, Depends(get_access_code_service)]
ChatHubDep = Annotated[ChatHub, Depends(get_chat_hub)]
