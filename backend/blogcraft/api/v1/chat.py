"""Chat WebSocket endpoint.

Clients send ``join``, ``message`` and ``leave`` envelopes; membership and
fan-out live in the chat hub.
"""

import json
import logging
import uuid

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from blogcraft.api.deps import resolve_user_from_token
from blogcraft.core.config import settings
from blogcraft.core.database import async_session_maker
from blogcraft.models.user import User
from blogcraft.schemas.chat import (
    JoinEnvelope,
    LeaveEnvelope,
    MessageEnvelope,
    client_envelope_adapter,
)
from blogcraft.services.access_codes import AccessCodeService
from blogcraft.services.chat_hub import ChatConnection, ChatHub, get_chat_hub
from blogcraft.services.errors import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

CLIENT_TYPES = {"join", "message", "leave"}


async def _socket_user(websocket: WebSocket, token: str | None) -> User | None:
    """User from the ``token`` query parameter or the session cookie, if any."""
    token = token or websocket.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    async with async_session_maker() as db:
        try:
            return await resolve_user_from_token(token, db)
        except HTTPException:
            return None


def _room_key(raw: str) -> str:
    """Canonical chatroom id as the hub stores it; non-UUIDs pass through."""
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return raw


async def _handle_join(hub: ChatHub, connection: ChatConnection, envelope: JoinEnvelope) -> None:
    chatroom_id = _room_key(envelope.chatroom.strip())
    name = hub.validate_name(envelope.name)
    if name is None:
        await hub.reject(
            connection,
            envelope.name,
            chatroom_id,
            f"Name must be between 1 and {settings.chat_max_name_length} characters",
        )
        return

    if hub.name_taken(chatroom_id, name, exclude=connection):
        await hub.reject(connection, name, chatroom_id, "Name is already in use in this chatroom")
        return

    async with async_session_maker() as db:
        try:
            chatroom = await AccessCodeService().check_join(
                db, chatroom_id, connection.user, envelope.access_code
            )
            await db.commit()
        except ServiceError as e:
            await db.rollback()
            await hub.reject(connection, name, chatroom_id, e.message)
            return

    await hub.join(connection, str(chatroom.id), name)


async def handle_frame(hub: ChatHub, connection: ChatConnection, raw: str) -> None:
    """Dispatch one client frame."""
    try:
        data = json.loads(raw)
    except ValueError:
        await hub.send_error(connection, "Invalid message format")
        return

    kind = data.get("type") if isinstance(data, dict) else None
    if not isinstance(kind, str) or kind not in CLIENT_TYPES:
        await hub.send_error(connection, f"Unknown message type: {kind}")
        return

    try:
        envelope = client_envelope_adapter.validate_python(data)
    except ValidationError:
        await hub.send_error(connection, "Invalid message format")
        return

    if isinstance(envelope, JoinEnvelope):
        await _handle_join(hub, connection, envelope)
    elif isinstance(envelope, MessageEnvelope):
        chatroom_id = _room_key(envelope.chatroom.strip()) if envelope.chatroom else None
        await hub.send_message(connection, envelope.text, chatroom_id)
    elif isinstance(envelope, LeaveEnvelope):
        await hub.leave(connection)


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket, token: str | None = None) -> None:
    """Chat connection. Auth comes from the session cookie or ``?token=``."""
    await websocket.accept()
    hub = get_chat_hub()
    connection = ChatConnection(websocket=websocket, user=await _socket_user(websocket, token))
    logger.info(f"Chat connection {connection.id} opened")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            if message.get("text") is None:
                await hub.send_error(connection, "Invalid message format")
                continue
            await handle_frame(hub, connection, message["text"])
    except WebSocketDisconnect:
        logger.info(f"Chat connection {connection.id} closed")
    finally:
        await hub.disconnect(connection)
