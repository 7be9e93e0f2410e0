"""In-process chatroom hub for WebSocket connections.

Tracks which connection sits in which chatroom under which display name and
fans events out to room members. Everything runs on one event loop, so a
name check and the insert that follows it happen without an ``await`` in
between and cannot interleave with another join.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel

from blogcraft.core.config import settings
from blogcraft.core.security import sanitize_text
from blogcraft.models.base import utcnow
from blogcraft.models.user import User
from blogcraft.schemas.chat import (
    ChatMessageEvent,
    ErrorEvent,
    JoinRejectedEvent,
    PresenceEvent,
)

logger = logging.getLogger(__name__)


class ChatSocket(Protocol):
    async def send_json(self, data: Any) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


@dataclass(eq=False)
class ChatConnection:
    """One client socket and its current membership."""

    websocket: ChatSocket
    user: User | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    name: str | None = None
    chatroom_id: str | None = None

    @property
    def name_key(self) -> str | None:
        return self.name.casefold() if self.name else None


class ChatHub:
    """Room membership and broadcast for the chat WebSocket.

    rooms maps chatroom id -> {case-folded name -> connection}. A
    connection is a member of at most one room.
    """

    def __init__(self) -> None:
        self.rooms: dict[str, dict[str, ChatConnection]] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def online_users(self, chatroom_id: str | uuid.UUID) -> list[str]:
        room = self.rooms.get(str(chatroom_id), {})
        return [connection.name for connection in room.values() if connection.name]

    def name_taken(
        self,
        chatroom_id: str | uuid.UUID,
        name: str,
        exclude: ChatConnection | None = None,
    ) -> bool:
        holder = self.rooms.get(str(chatroom_id), {}).get(name.casefold())
        return holder is not None and holder is not exclude

    def online_count(self) -> int:
        return sum(len(room) for room in self.rooms.values())

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def _send(self, connection: ChatConnection, event: BaseModel) -> bool:
        try:
            await connection.websocket.send_json(event.model_dump(mode="json", by_alias=True))
            return True
        except Exception as e:
            logger.warning(f"Dropping chat connection {connection.id}: send failed ({e})")
            return False

    async def send_error(self, connection: ChatConnection, message: str) -> None:
        await self._send(connection, ErrorEvent(message=message))

    async def reject(
        self,
        connection: ChatConnection,
        name: str,
        chatroom_id: str,
        reason: str,
    ) -> None:
        logger.warning(f"Rejected chat join of {name!r} to {chatroom_id}: {reason}")
        await self._send(
            connection,
            JoinRejectedEvent(name=name, chatroom=chatroom_id, reason=reason),
        )

    async def broadcast(self, chatroom_id: str, event: BaseModel) -> None:
        """Send to every member; members whose send fails leave the room."""
        room = self.rooms.get(chatroom_id)
        if not room:
            return

        failed = [
            connection
            for connection in list(room.values())
            if not await self._send(connection, event)
        ]
        for connection in failed:
            await self.leave(connection)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def validate_name(self, raw_name: str) -> str | None:
        """Sanitized display name, or None when it is empty or too long."""
        name = sanitize_text(raw_name or "")
        if not name or len(name) > settings.chat_max_name_length:
            return None
        return name

    async def join(self, connection: ChatConnection, chatroom_id: str, name: str) -> bool:
        """Admit ``connection`` to a room under ``name``.

        The caller has already checked the chatroom and the user's access.
        Leaves any current room first. Returns False when the name is taken.
        """
        chatroom_id = str(chatroom_id)
        if connection.chatroom_id is not None:
            await self.leave(connection)

        key = name.casefold()
        if key in self.rooms.get(chatroom_id, {}):
            await self.reject(connection, name, chatroom_id, "Name is already in use in this chatroom")
            return False

        self.rooms.setdefault(chatroom_id, {})[key] = connection
        connection.name = name
        connection.chatroom_id = chatroom_id
        logger.info(f"{name!r} joined chatroom {chatroom_id}")

        await self.broadcast(
            chatroom_id,
            PresenceEvent(
                type="user_joined",
                name=name,
                chatroom=chatroom_id,
                users=self.online_users(chatroom_id),
                timestamp=utcnow(),
            ),
        )
        return True

    async def leave(self, connection: ChatConnection) -> None:
        """Remove a connection from its room and tell the others."""
        chatroom_id = connection.chatroom_id
        name = connection.name
        key = connection.name_key
        connection.chatroom_id = None
        if chatroom_id is None or key is None:
            return

        room = self.rooms.get(chatroom_id)
        if room is None or room.get(key) is not connection:
            return

        del room[key]
        logger.info(f"{name!r} left chatroom {chatroom_id}")
        if not room:
            del self.rooms[chatroom_id]
            return

        await self.broadcast(
            chatroom_id,
            PresenceEvent(
                type="user_left",
                name=name,
                chatroom=chatroom_id,
                users=self.online_users(chatroom_id),
                timestamp=utcnow(),
            ),
        )

    async def disconnect(self, connection: ChatConnection) -> None:
        await self.leave(connection)

    async def send_message(
        self,
        connection: ChatConnection,
        raw_text: str,
        chatroom_id: str | None = None,
    ) -> None:
        """Broadcast a chat message from a joined connection."""
        if connection.chatroom_id is None or connection.name is None:
            await self.send_error(connection, "Join a chatroom before sending messages")
            return
        if chatroom_id and str(chatroom_id) != connection.chatroom_id:
            await self.send_error(connection, "You are not in that chatroom")
            return

        text = sanitize_text(raw_text or "")
        if not text:
            await self.send_error(connection, "Message cannot be empty")
            return
        if len(text) > settings.chat_max_message_length:
            await self.send_error(
                connection,
                f"Message must be at most {settings.chat_max_message_length} characters",
            )
            return

        await self.broadcast(
            connection.chatroom_id,
            ChatMessageEvent(
                id=uuid.uuid4().hex,
                name=connection.name,
                text=text,
                chatroom=connection.chatroom_id,
                timestamp=utcnow(),
            ),
        )

    async def close_room(self, chatroom_id: str | uuid.UUID) -> None:
        """Disconnect everyone in a room (chatroom deactivated or deleted)."""
        room = self.rooms.pop(str(chatroom_id), None)
        if not room:
            return

        logger.info(f"Closing chatroom {chatroom_id} with {len(room)} connection(s)")
        for connection in room.values():
            connection.chatroom_id = None
            try:
                await connection.websocket.close(code=1000)
            except Exception as e:
                logger.debug(f"Closing chat connection {connection.id} failed: {e}")

    def reset(self) -> None:
        self.rooms.clear()


_chat_hub: ChatHub | None = None


def get_chat_hub() -> ChatHub:
    """Get the process-wide chat hub."""
    global _chat_hub
    if _chat_hub is None:
        _chat_hub = ChatHub()
    return _chat_hub
