"""Chatroom access codes and chat admission."""

import logging
import secrets
import string
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogcraft.models.base import utcnow
from blogcraft.models.chatroom import AccessCode, Chatroom
from blogcraft.models.user import User
from blogcraft.schemas.chatroom import AccessCodeCreate
from blogcraft.services.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
GENERATED_CODE_LENGTH = 6


def generate_code(length: int = GENERATED_CODE_LENGTH) -> str:
    """Random upper-case alphanumeric code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class AccessCodeService:
    """Access code CRUD, redemption and chat admission checks."""

    async def list_codes(self, db: AsyncSession) -> list[AccessCode]:
        result = await db.execute(select(AccessCode).order_by(AccessCode.created_at.desc()))
        return list(result.scalars().all())

    async def get_code(self, db: AsyncSession, code_id: uuid.UUID) -> AccessCode:
        access_code = await db.get(AccessCode, code_id)
        if access_code is None:
            raise NotFoundError("Access code not found")
        return access_code

    async def find_by_code(self, db: AsyncSession, code: str) -> AccessCode | None:
        result = await db.execute(
            select(AccessCode).where(AccessCode.code == code.strip().upper())
        )
        return result.scalar_one_or_none()

    async def _ensure_code_free(
        self,
        db: AsyncSession,
        code: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        query = select(AccessCode.id).where(AccessCode.code == code)
        if exclude_id is not None:
            query = query.where(AccessCode.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError("Access code already exists")

    async def _unused_generated_code(self, db: AsyncSession) -> str:
        while True:
            code = generate_code()
            if await self.find_by_code(db, code) is None:
                return code

    async def _require_chatroom(self, db: AsyncSession, chatroom_id: uuid.UUID) -> Chatroom:
        chatroom = await db.get(Chatroom, chatroom_id)
        if chatroom is None:
            raise ServiceError("Chatroom does not exist")
        return chatroom

    async def create_code(
        self,
        db: AsyncSession,
        data: AccessCodeCreate,
        created_by: User | None,
    ) -> AccessCode:
        await self._require_chatroom(db, data.chatroom_id)

        if data.code:
            await self._ensure_code_free(db, data.code)
            code = data.code
        else:
            code = await self._unused_generated_code(db)

        access_code = AccessCode(
            code=code,
            name=data.name,
            description=data.description,
            chatroom_id=data.chatroom_id,
            expires_at=data.expires_at,
            max_uses=data.max_uses,
            uses_count=0,
            is_active=data.is_active,
            created_by=created_by.id if created_by else None,
        )
        db.add(access_code)
        await db.flush()
        await db.refresh(access_code, attribute_names=["chatroom"])
        logger.info(f"Created access code {access_code.code} for chatroom {data.chatroom_id}")
        return access_code

    async def update_code(
        self,
        db: AsyncSession,
        access_code: AccessCode,
        changes: dict,
    ) -> AccessCode:
        if changes.get("code"):
            await self._ensure_code_free(db, changes["code"], exclude_id=access_code.id)
            access_code.code = changes["code"]
        if changes.get("chatroom_id"):
            await self._require_chatroom(db, changes["chatroom_id"])
            access_code.chatroom_id = changes["chatroom_id"]
        if changes.get("name"):
            access_code.name = changes["name"]
        for field in ("description", "expires_at", "max_uses"):
            if field in changes:
                setattr(access_code, field, changes[field])
        if changes.get("is_active") is not None:
            access_code.is_active = changes["is_active"]

        access_code.updated_at = utcnow()
        await db.flush()
        await db.refresh(access_code, attribute_names=["chatroom"])
        return access_code

    async def delete_code(self, db: AsyncSession, access_code: AccessCode) -> None:
        await db.delete(access_code)
        await db.flush()

    def _check_usable(self, access_code: AccessCode) -> None:
        if not access_code.is_active:
            raise ServiceError("Access code is inactive")
        if access_code.expires_at is not None and access_code.expires_at <= utcnow():
            raise ServiceError("Access code has expired")
        if access_code.max_uses is not None and access_code.uses_count >= access_code.max_uses:
            raise ServiceError("Access code has reached its maximum uses")

    async def redeem(
        self,
        db: AsyncSession,
        code: str,
        user: User | None,
        chatroom_id: uuid.UUID | None = None,
    ) -> Chatroom:
        """Redeem a code and return the chatroom it opens.

        A signed-in user is added to the chatroom's invite list; a repeat
        redemption by an invited user does not count another use. When
        ``chatroom_id`` is given the code must belong to that room.
        """
        access_code = await self.find_by_code(db, code)
        if access_code is None:
            raise NotFoundError("Invalid access code")

        self._check_usable(access_code)

        chatroom = await db.get(Chatroom, access_code.chatroom_id)
        if chatroom is None:
            raise NotFoundError("Invalid access code")
        if chatroom_id is not None and chatroom.id != chatroom_id:
            raise ServiceError("Access code is not valid for this chatroom")
        if not chatroom.is_active:
            raise ServiceError("Chatroom is not active")

        if user is None or chatroom.is_open:
            # Open rooms stay open; only the use is counted
            access_code.uses_count += 1
        else:
            user_key = str(user.id)
            if user_key not in chatroom.invited_user_ids:
                # Reassign so the JSON column registers the change
                chatroom.invited_user_ids = [*chatroom.invited_user_ids, user_key]
                access_code.uses_count += 1

        await db.flush()
        logger.info(
            f"Access code {access_code.code} redeemed for chatroom {chatroom.id} "
            f"by {user.id if user else 'anonymous'}"
        )
        return chatroom

    async def check_join(
        self,
        db: AsyncSession,
        chatroom_id: str,
        user: User | None,
        access_code: str | None = None,
    ) -> Chatroom:
        """Resolve the chatroom a connection asks to join, or raise with the reason."""
        try:
            room_uuid = uuid.UUID(str(chatroom_id))
        except ValueError:
            raise NotFoundError("Chatroom not found")

        chatroom = await db.get(Chatroom, room_uuid)
        if chatroom is None:
            raise NotFoundError("Chatroom not found")
        if not chatroom.is_active:
            raise ServiceError("Chatroom is not active")

        if chatroom.admits(user):
            return chatroom
        if access_code:
            return await self.redeem(db, access_code, user, chatroom_id=chatroom.id)
        if user is None:
            raise PermissionDeniedError("Sign in or provide an access code to join this chatroom")
        raise PermissionDeniedError("You are not invited to this chatroom")
