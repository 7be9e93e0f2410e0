"""Admin dashboard endpoints: stats, chatrooms and access codes."""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import delete, func, select

from blogcraft.api.deps import (
    AccessCodeServiceDep,
    AdminUser,
    BlogServiceDep,
    ChatHubDep,
    DbSession,
)
from blogcraft.models.base import utcnow
from blogcraft.models.chatroom import AccessCode, Chatroom
from blogcraft.models.user import User
from blogcraft.schemas.admin import AdminStats
from blogcraft.schemas.chatroom import (
    AccessCodeCreate,
    AccessCodeResponse,
    AccessCodeUpdate,
    ChatroomCreate,
    ChatroomResponse,
    ChatroomUpdate,
)
from blogcraft.schemas.common import MessageResponse
from blogcraft.services.chat_hub import ChatHub

logger = logging.getLogger(__name__)

router = APIRouter()


def chatroom_response(chatroom: Chatroom, hub: ChatHub) -> ChatroomResponse:
    """Chatroom with the names currently connected to it."""
    response = ChatroomResponse.model_validate(chatroom)
    response.online_users = hub.online_users(chatroom.id)
    return response


async def _get_chatroom_or_404(db, chatroom_id: UUID) -> Chatroom:
    chatroom = await db.get(Chatroom, chatroom_id)
    if chatroom is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chatroom not found",
        )
    return chatroom


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
    hub: ChatHubDep,
) -> AdminStats:
    """Dashboard counters."""
    post_stats = await blog.post_stats(db)
    total_users = await db.scalar(select(func.count()).select_from(User))
    pending_users = await db.scalar(
        select(func.count()).select_from(User).where(User.approved.is_(False))
    )
    active_chatrooms = await db.scalar(
        select(func.count()).select_from(Chatroom).where(Chatroom.is_active.is_(True))
    )

    return AdminStats(
        **post_stats,
        total_users=total_users or 0,
        pending_users=pending_users or 0,
        active_chatrooms=active_chatrooms or 0,
        online_chat_users=hub.online_count(),
    )


# =============================================================================
# Chatrooms
# =============================================================================


@router.get("/chatrooms", response_model=list[ChatroomResponse])
async def list_chatrooms(admin: AdminUser, db: DbSession, hub: ChatHubDep) -> list[ChatroomResponse]:
    result = await db.execute(select(Chatroom).order_by(Chatroom.created_at.desc()))
    return [chatroom_response(chatroom, hub) for chatroom in result.scalars().all()]


@router.post("/chatrooms", response_model=ChatroomResponse)
async def create_chatroom(
    data: ChatroomCreate,
    admin: AdminUser,
    db: DbSession,
    hub: ChatHubDep,
) -> ChatroomResponse:
    """Create a chatroom. Without invitees it is open to every signed-in user."""
    chatroom = Chatroom(
        name=data.name,
        description=data.description,
        is_active=True,
        invited_user_ids=list(dict.fromkeys(str(user_id) for user_id in data.invited_user_ids)),
        created_by=admin.id,
    )
    db.add(chatroom)
    await db.flush()
    logger.info(f"Created chatroom {chatroom.name} ({chatroom.id})")
    return chatroom_response(chatroom, hub)


@router.put("/chatrooms/{chatroom_id}", response_model=ChatroomResponse)
async def update_chatroom(
    chatroom_id: UUID,
    data: ChatroomUpdate,
    admin: AdminUser,
    db: DbSession,
    hub: ChatHubDep,
) -> ChatroomResponse:
    """Update a chatroom. Deactivating it disconnects everyone inside."""
    chatroom = await _get_chatroom_or_404(db, chatroom_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("name"):
        chatroom.name = changes["name"]
    if "description" in changes:
        chatroom.description = changes["description"]
    if changes.get("invited_user_ids") is not None:
        chatroom.invited_user_ids = list(
            dict.fromkeys(str(user_id) for user_id in changes["invited_user_ids"])
        )
    if changes.get("is_active") is not None:
        chatroom.is_active = changes["is_active"]

    chatroom.updated_at = utcnow()
    await db.flush()

    if not chatroom.is_active:
        await hub.close_room(chatroom.id)
    return chatroom_response(chatroom, hub)


@router.delete("/chatrooms/{chatroom_id}", response_model=MessageResponse)
async def delete_chatroom(
    chatroom_id: UUID,
    admin: AdminUser,
    db: DbSession,
    hub: ChatHubDep,
) -> MessageResponse:
    """Delete a chatroom with its access codes and close its connections."""
    chatroom = await _get_chatroom_or_404(db, chatroom_id)
    await db.execute(delete(AccessCode).where(AccessCode.chatroom_id == chatroom.id))
    await db.delete(chatroom)
    await db.flush()

    await hub.close_room(chatroom_id)
    logger.info(f"Deleted chatroom {chatroom_id}")
    return MessageResponse(message="Chatroom deleted successfully")


# =============================================================================
# Access codes
# =============================================================================


@router.get("/access-codes", response_model=list[AccessCodeResponse])
async def list_access_codes(
    admin: AdminUser,
    db: DbSession,
    codes: AccessCodeServiceDep,
) -> list[AccessCode]:
    return await codes.list_codes(db)


@router.post("/access-codes", response_model=AccessCodeResponse)
async def create_access_code(
    data: AccessCodeCreate,
    admin: AdminUser,
    db: DbSession,
    codes: AccessCodeServiceDep,
) -> AccessCode:
    """Create an access code; a random one is generated when ``code`` is empty."""
    return await codes.create_code(db, data, admin)


@router.put("/access-codes/{code_id}", response_model=AccessCodeResponse)
async def update_access_code(
    code_id: UUID,
    data: AccessCodeUpdate,
    admin: AdminUser,
    db: DbSession,
    codes: AccessCodeServiceDep,
) -> AccessCode:
    access_code = await codes.get_code(db, code_id)
    return await codes.update_code(db, access_code, data.model_dump(exclude_unset=True))


@router.delete("/access-codes/{code_id}", response_model=MessageResponse)
async def delete_access_code(
    code_id: UUID,
    admin: AdminUser,
    db: DbSession,
    codes: AccessCodeServiceDep,
) -> MessageResponse:
    access_code = await codes.get_code(db, code_id)
    await codes.delete_code(db, access_code)
    return MessageResponse(message="Access code deleted successfully")
