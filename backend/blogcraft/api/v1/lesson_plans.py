"""Lesson plan endpoints (staff only)."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from blogcraft.api.deps import DbSession, StaffUser
from blogcraft.models.base import utcnow
from blogcraft.models.lesson_plan import LessonPlan
from blogcraft.models.user import User
from blogcraft.schemas.common import MessageResponse
from blogcraft.schemas.lesson_plan import (
    LESSON_PHASES,
    LessonPlanCreate,
    LessonPlanResponse,
    LessonPlanUpdate,
)

router = APIRouter()


async def _get_owned_plan(db, plan_id: UUID, user: User) -> LessonPlan:
    """Plan by id if the caller owns it (admins own everything)."""
    plan = await db.get(LessonPlan, plan_id)
    if plan is None or (plan.owner_id != user.id and not user.is_admin):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson plan not found",
        )
    return plan


@router.get("", response_model=list[LessonPlanResponse])
async def list_lesson_plans(staff: StaffUser, db: DbSession) -> list[LessonPlan]:
    """Teachers list their own plans, admins every plan."""
    query = select(LessonPlan).order_by(LessonPlan.updated_at.desc())
    if not staff.is_admin:
        query = query.where(LessonPlan.owner_id == staff.id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{plan_id}", response_model=LessonPlanResponse)
async def get_lesson_plan(plan_id: UUID, staff: StaffUser, db: DbSession) -> LessonPlan:
    return await _get_owned_plan(db, plan_id, staff)


@router.post("", response_model=LessonPlanResponse)
async def create_lesson_plan(
    data: LessonPlanCreate,
    staff: StaffUser,
    db: DbSession,
) -> LessonPlan:
    values = data.model_dump(exclude=set(LESSON_PHASES))
    phases = {name: getattr(data, name).model_dump(by_alias=True) for name in LESSON_PHASES}
    if not values.get("teacher"):
        values["teacher"] = staff.name

    plan = LessonPlan(owner_id=staff.id, **values, **phases)
    db.add(plan)
    await db.flush()
    return plan


@router.put("/{plan_id}", response_model=LessonPlanResponse)
async def update_lesson_plan(
    plan_id: UUID,
    data: LessonPlanUpdate,
    staff: StaffUser,
    db: DbSession,
) -> LessonPlan:
    plan = await _get_owned_plan(db, plan_id, staff)

    for field in data.model_fields_set:
        value = getattr(data, field)
        if field in LESSON_PHASES:
            if value is not None:
                setattr(plan, field, value.model_dump(by_alias=True))
        elif field == "title":
            if value:
                plan.title = value
        else:
            setattr(plan, field, value)

    plan.updated_at = utcnow()
    await db.flush()
    return plan


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_lesson_plan(plan_id: UUID, staff: StaffUser, db: DbSession) -> MessageResponse:
    plan = await _get_owned_plan(db, plan_id, staff)
    await db.delete(plan)
    await db.flush()
    return MessageResponse(message="Lesson plan deleted successfully")
