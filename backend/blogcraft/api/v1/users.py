"""User management endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select

from blogcraft.api.deps import AdminUser, DbSession, StaffUser
from blogcraft.models.user import User, UserRole
from blogcraft.schemas.user import (
    ApprovalUpdate,
    RoleUpdate,
    TeacherAssignment,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_user_or_404(db, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.get("/users", response_model=list[UserResponse])
async def list_users(admin: AdminUser, db: DbSession) -> list[User]:
    """List every account, oldest first."""
    result = await db.execute(select(User).order_by(User.created_at.asc()))
    return list(result.scalars().all())


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: UUID,
    data: RoleUpdate,
    admin: AdminUser,
    db: DbSession,
) -> User:
    """Change a user's admin flag and/or classroom role."""
    user = await _get_user_or_404(db, user_id)

    if data.is_admin is not None:
        if user.id == admin.id and not data.is_admin:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot remove your own admin access",
            )
        user.is_admin = data.is_admin

    if data.role is not None:
        user.role = data.role.value
        if data.role == UserRole.TEACHER:
            user.teacher_id = None

    await db.flush()
    logger.info(f"Updated role of {user.username}: admin={user.is_admin} role={user.role}")
    return user


@router.patch("/users/{user_id}/approval", response_model=UserResponse)
async def update_approval(
    user_id: UUID,
    data: ApprovalUpdate,
    admin: AdminUser,
    db: DbSession,
) -> User:
    """Approve or revoke an account."""
    user = await _get_user_or_404(db, user_id)
    user.approved = data.approved
    await db.flush()
    logger.info(f"Set approval of {user.username} to {user.approved}")
    return user


@router.patch("/users/{user_id}/teacher", response_model=UserResponse)
async def assign_teacher(
    user_id: UUID,
    data: TeacherAssignment,
    admin: AdminUser,
    db: DbSession,
) -> User:
    """Assign a student to an approved teacher, or detach them."""
    user = await _get_user_or_404(db, user_id)
    if user.role != UserRole.STUDENT.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only students can be assigned to a teacher",
        )

    if data.teacher_id is not None:
        teacher = await _get_user_or_404(db, data.teacher_id)
        if teacher.role != UserRole.TEACHER.value or not teacher.approved:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Teacher must be an approved teacher account",
            )

    user.teacher_id = data.teacher_id
    await db.flush()
    return user


@router.get("/teacher/students", response_model=list[UserResponse])
async def list_students(
    staff: StaffUser,
    db: DbSession,
    teacher_id: Annotated[UUID | None, Query(alias="teacherId")] = None,
) -> list[User]:
    """Students assigned to a teacher.

    Teachers only see their own students; admins may pick any teacher with
    ``teacherId`` or list every student when it is omitted.
    """
    query = select(User).where(User.role == UserRole.STUDENT.value)
    if not staff.is_admin:
        if teacher_id is not None and teacher_id != staff.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Teachers can only view their own students",
            )
        query = query.where(User.teacher_id == staff.id)
    elif teacher_id is not None:
        query = query.where(User.teacher_id == teacher_id)

    result = await db.execute(query.order_by(User.name))
    return list(result.scalars().all())
