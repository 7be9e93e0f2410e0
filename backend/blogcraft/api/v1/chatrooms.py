"""Chatroom endpoints for signed-in users."""

from fastapi import APIRouter
from sqlalchemy import select

from blogcraft.api.deps import AccessCodeServiceDep, ChatHubDep, CurrentUser, DbSession
from blogcraft.api.v1.admin import chatroom_response
from blogcraft.models.chatroom import Chatroom
from blogcraft.schemas.chatroom import ChatroomResponse, RedeemRequest, RedeemResponse

router = APIRouter()


@router.get("", response_model=list[ChatroomResponse])
async def list_available_chatrooms(
    current_user: CurrentUser,
    db: DbSession,
    hub: ChatHubDep,
) -> list[ChatroomResponse]:
    """Active chatrooms the caller may enter."""
    result = await db.execute(
        select(Chatroom)
        .where(Chatroom.is_active.is_(True))
        .order_by(Chatroom.name)
    )
    return [
        chatroom_response(chatroom, hub)
        for chatroom in result.scalars().all()
        if chatroom.admits(current_user)
    ]


@router.post("/redeem", response_model=RedeemResponse)
async def redeem_access_code(
    data: RedeemRequest,
    current_user: CurrentUser,
    db: DbSession,
    hub: ChatHubDep,
    codes: AccessCodeServiceDep,
) -> RedeemResponse:
    """Redeem an access code and gain entry to its chatroom."""
    chatroom = await codes.redeem(db, data.code, current_user)
    return RedeemResponse(
        message="Access code redeemed successfully",
        chatroom=chatroom_response(chatroom, hub),
    )
