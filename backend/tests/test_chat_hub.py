"""Tests for the chat hub and the chat WebSocket protocol."""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from blogcraft.api.deps import resolve_user_from_token
from blogcraft.api.v1.chat import handle_frame
from blogcraft.core.config import settings
from blogcraft.core.security import create_access_token
from blogcraft.main import app
from blogcraft.services.chat_hub import ChatConnection, ChatHub
from conftest import register


class FakeSocket:
    """Records what the hub sends; optionally fails every send."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.closed_with: int | None = None
        self.fail = fail

    async def send_json(self, data) -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        self.closed_with = code

    def types(self) -> list[str]:
        return [event["type"] for event in self.sent]


def _connection(fail: bool = False) -> ChatConnection:
    return ChatConnection(websocket=FakeSocket(fail=fail))


class TestMembership:
    """Joining, leaving and display names."""

    @pytest.mark.asyncio
    async def test_join_broadcasts_presence(self):
        hub = ChatHub()
        alice, bob = _connection(), _connection()

        assert await hub.join(alice, "room-1", "Alice")
        assert await hub.join(bob, "room-1", "Bob")

        assert alice.websocket.types() == ["user_joined", "user_joined"]
        assert alice.websocket.sent[1]["users"] == ["Alice", "Bob"]
        assert bob.websocket.sent[0]["name"] == "Bob"
        assert hub.online_users("room-1") == ["Alice", "Bob"]
        assert hub.online_count() == 2

    @pytest.mark.asyncio
    async def test_names_are_unique_per_room_ignoring_case(self):
        hub = ChatHub()
        first, second, elsewhere = _connection(), _connection(), _connection()
        await hub.join(first, "room-1", "Alice")

        accepted = await hub.join(second, "room-1", "ALICE")
        other_room = await hub.join(elsewhere, "room-2", "alice")

        assert accepted is False
        assert second.websocket.sent == [
            {
                "type": "join_rejected",
                "name": "ALICE",
                "chatroom": "room-1",
                "reason": "Name is already in use in this chatroom",
            }
        ]
        assert second.chatroom_id is None
        assert other_room is True
        assert hub.online_users("room-1") == ["Alice"]

    @pytest.mark.asyncio
    async def test_leave_frees_the_name_and_empties_room(self):
        hub = ChatHub()
        alice, bob = _connection(), _connection()
        await hub.join(alice, "room-1", "Alice")
        await hub.join(bob, "room-1", "Bob")

        await hub.leave(bob)

        assert alice.websocket.sent[-1]["type"] == "user_left"
        assert alice.websocket.sent[-1]["users"] == ["Alice"]
        assert not hub.name_taken("room-1", "bob")

        await hub.disconnect(alice)
        assert "room-1" not in hub.rooms

    @pytest.mark.asyncio
    async def test_switching_rooms_leaves_the_old_one(self):
        hub = ChatHub()
        alice, bob = _connection(), _connection()
        await hub.join(alice, "room-1", "Alice")
        await hub.join(bob, "room-1", "Bob")

        await hub.join(bob, "room-2", "Bob")

        assert hub.online_users("room-1") == ["Alice"]
        assert hub.online_users("room-2") == ["Bob"]
        assert bob.chatroom_id == "room-2"

    @pytest.mark.asyncio
    async def test_failed_send_drops_connection(self):
        hub = ChatHub()
        alice, ghost = _connection(), _connection()
        await hub.join(alice, "room-1", "Alice")
        await hub.join(ghost, "room-1", "Ghost")
        ghost.websocket.fail = True

        await hub.send_message(alice, "Anyone there?")

        assert hub.online_users("room-1") == ["Alice"]
        assert alice.websocket.types() == ["user_joined", "user_joined", "message", "user_left"]
        assert alice.websocket.sent[-1]["name"] == "Ghost"

    @pytest.mark.asyncio
    async def test_member_failing_on_join_is_dropped_at_once(self):
        hub = ChatHub()
        alice, ghost = _connection(), _connection(fail=True)
        await hub.join(alice, "room-1", "Alice")

        await hub.join(ghost, "room-1", "Ghost")
        await hub.send_message(alice, "Anyone there?")

        assert alice.websocket.types() == ["user_joined", "user_joined", "user_left", "message"]
        assert hub.online_users("room-1") == ["Alice"]

    @pytest.mark.asyncio
    async def test_close_room_disconnects_members(self):
        hub = ChatHub()
        alice = _connection()
        bob = ChatConnection(websocket=AsyncMock())
        bob.websocket.close.side_effect = RuntimeError("already closed")
        await hub.join(alice, "room-1", "Alice")
        await hub.join(bob, "room-1", "Bob")

        await hub.close_room("room-1")

        assert hub.rooms == {}
        assert alice.websocket.closed_with == 1000
        bob.websocket.close.assert_awaited_once_with(code=1000)
        assert bob.chatroom_id is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("  Alice ", "Alice"),
            ("<b>Bo</b>", "&lt;b&gt;Bo&lt;/b&gt;"),
            ("   ", None),
            ("x" * (settings.chat_max_name_length + 1), None),
        ],
    )
    def test_validate_name(self, raw, expected):
        assert ChatHub().validate_name(raw) == expected


class TestMessages:
    """Chat message broadcast."""

    @pytest.mark.asyncio
    async def test_message_reaches_the_whole_room_escaped(self):
        hub = ChatHub()
        alice, bob, outsider = _connection(), _connection(), _connection()
        await hub.join(alice, "room-1", "Alice")
        await hub.join(bob, "room-1", "Bob")
        await hub.join(outsider, "room-2", "Carol")

        await hub.send_message(alice, " <i>hello</i> ")

        for member in (alice, bob):
            event = member.websocket.sent[-1]
            assert event["type"] == "message"
            assert event["name"] == "Alice"
            assert event["text"] == "&lt;i&gt;hello&lt;/i&gt;"
            assert event["chatroom"] == "room-1"
        assert "message" not in outsider.websocket.types()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "joined,text,chatroom,error",
        [
            (False, "hi", None, "Join a chatroom before sending messages"),
            (True, "hi", "room-9", "You are not in that chatroom"),
            (True, "   ", None, "Message cannot be empty"),
            (
                True,
                "x" * (settings.chat_max_message_length + 1),
                None,
                f"Message must be at most {settings.chat_max_message_length} characters",
            ),
        ],
    )
    async def test_rejected_messages_only_error_the_sender(self, joined, text, chatroom, error):
        hub = ChatHub()
        sender, listener = _connection(), _connection()
        await hub.join(listener, "room-1", "Listener")
        if joined:
            await hub.join(sender, "room-1", "Sender")
        heard_before = len(listener.websocket.sent)

        await hub.send_message(sender, text, chatroom)

        assert sender.websocket.sent[-1] == {"type": "error", "message": error}
        assert len(listener.websocket.sent) == heard_before


async def _room(client, headers, **fields) -> dict:
    response = await client.post(
        "/api/admin/chatrooms", json={"name": "Homeroom", **fields}, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()


async def _signed_in(client, db, username: str) -> tuple[dict, ChatConnection]:
    """Register a student and open a connection authenticated as them."""
    student, _ = await register(client, username)
    user = await resolve_user_from_token(create_access_token(student["id"]), db)
    return student, ChatConnection(websocket=FakeSocket(), user=user)


class TestFrames:
    """Client frames dispatched against the real database."""

    @pytest.mark.asyncio
    async def test_invalid_json_and_unknown_type(self):
        hub = ChatHub()
        connection = _connection()

        await handle_frame(hub, connection, "{not json")
        await handle_frame(hub, connection, json.dumps({"type": "shout"}))

        assert connection.websocket.sent == [
            {"type": "error", "message": "Invalid message format"},
            {"type": "error", "message": "Unknown message type: shout"},
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "frame",
        [
            {"type": ["join"]},
            {"type": {"kind": "join"}},
            ["join"],
            "join",
        ],
    )
    async def test_non_string_type_is_an_error_not_a_crash(self, frame):
        hub = ChatHub()
        connection = _connection()

        await handle_frame(hub, connection, json.dumps(frame))

        assert len(connection.websocket.sent) == 1
        assert connection.websocket.sent[0]["type"] == "error"
        assert connection.websocket.sent[0]["message"].startswith("Unknown message type:")

    @pytest.mark.asyncio
    async def test_join_open_room_and_chat(self, client, admin_headers, db):
        room = await _room(client, admin_headers)
        _, connection = await _signed_in(client, db, "student1")
        hub = ChatHub()

        await handle_frame(
            hub, connection, json.dumps({"type": "join", "name": "Guest", "chatroom": room["id"]})
        )
        await handle_frame(hub, connection, json.dumps({"type": "message", "text": "Hello"}))
        await handle_frame(hub, connection, json.dumps({"type": "leave"}))

        assert connection.websocket.types() == ["user_joined", "message"]
        assert hub.rooms == {}

    @pytest.mark.asyncio
    async def test_unknown_or_inactive_room_is_rejected(self, client, admin_headers, db):
        room = await _room(client, admin_headers)
        await client.put(
            f"/api/admin/chatrooms/{room['id']}", json={"isActive": False}, headers=admin_headers
        )
        _, connection = await _signed_in(client, db, "student1")
        hub = ChatHub()

        await handle_frame(
            hub, connection, json.dumps({"type": "join", "name": "A", "chatroom": "missing"})
        )
        await handle_frame(
            hub, connection, json.dumps({"type": "join", "name": "A", "chatroom": room["id"]})
        )

        reasons = [event["reason"] for event in connection.websocket.sent]
        assert reasons == ["Chatroom not found", "Chatroom is not active"]

    @pytest.mark.asyncio
    async def test_private_room_needs_invite_or_code(self, client, admin_headers, db):
        student, connection = await _signed_in(client, db, "student1")
        room = await _room(
            client,
            admin_headers,
            invitedUserIds=["00000000-0000-0000-0000-000000000001"],
        )
        await client.post(
            "/api/admin/access-codes",
            json={"name": "Invite", "chatroomId": room["id"], "code": "LETMEIN"},
            headers=admin_headers,
        )
        hub = ChatHub()
        join = {"type": "join", "name": "Student", "chatroom": room["id"]}

        await handle_frame(hub, connection, json.dumps(join))
        await handle_frame(hub, connection, json.dumps({**join, "accessCode": "letmein"}))

        assert connection.websocket.sent[0]["reason"] == "You are not invited to this chatroom"
        assert connection.websocket.sent[1]["type"] == "user_joined"
        invited = (await client.get("/api/chatrooms", headers=admin_headers)).json()
        assert student["id"] in invited[0]["invitedUserIds"]

    @pytest.mark.asyncio
    async def test_anonymous_connection_needs_a_code(self, client, admin_headers):
        room = await _room(client, admin_headers)
        await client.post(
            "/api/admin/access-codes",
            json={"name": "Guests", "chatroomId": room["id"], "code": "GUEST1"},
            headers=admin_headers,
        )
        hub = ChatHub()
        connection = _connection()
        join = {"type": "join", "name": "Anon", "chatroom": room["id"]}

        await handle_frame(hub, connection, json.dumps(join))
        await handle_frame(hub, connection, json.dumps({**join, "accessCode": "GUEST1"}))
        codes = (await client.get("/api/admin/access-codes", headers=admin_headers)).json()

        assert connection.websocket.sent[0]["reason"] == (
            "Sign in or provide an access code to join this chatroom"
        )
        assert connection.websocket.sent[1]["type"] == "user_joined"
        assert codes[0]["usesCount"] == 1

    @pytest.mark.asyncio
    async def test_taken_name_is_rejected(self, client, admin_headers, db):
        room = await _room(client, admin_headers)
        hub = ChatHub()
        _, first = await _signed_in(client, db, "student1")
        _, second = await _signed_in(client, db, "student2")
        join = {"type": "join", "name": "Sam", "chatroom": room["id"]}

        await handle_frame(hub, first, json.dumps(join))
        await handle_frame(hub, second, json.dumps({**join, "name": "sam"}))

        assert second.websocket.sent[-1]["type"] == "join_rejected"
        assert hub.online_users(room["id"]) == ["Sam"]

    @pytest.mark.asyncio
    async def test_taken_name_in_any_id_spelling_keeps_code_unused(
        self, client, admin_headers, db
    ):
        room = await _room(client, admin_headers)
        await client.post(
            "/api/admin/access-codes",
            json={"name": "Guests", "chatroomId": room["id"], "code": "GUEST2"},
            headers=admin_headers,
        )
        hub = ChatHub()
        _, first = await _signed_in(client, db, "student1")
        guest = _connection()
        await handle_frame(
            hub, first, json.dumps({"type": "join", "name": "Sam", "chatroom": room["id"]})
        )

        for spelling in (room["id"].upper(), room["id"].replace("-", "")):
            await handle_frame(
                hub,
                guest,
                json.dumps(
                    {"type": "join", "name": "sam", "chatroom": spelling, "accessCode": "GUEST2"}
                ),
            )
        codes = (await client.get("/api/admin/access-codes", headers=admin_headers)).json()

        assert [event["reason"] for event in guest.websocket.sent] == [
            "Name is already in use in this chatroom",
            "Name is already in use in this chatroom",
        ]
        assert {event["chatroom"] for event in guest.websocket.sent} == {room["id"]}
        assert codes[0]["usesCount"] == 0
        assert hub.online_users(room["id"]) == ["Sam"]

    @pytest.mark.asyncio
    async def test_upper_case_room_id_joins_the_same_room(self, client, admin_headers, db):
        room = await _room(client, admin_headers)
        hub = ChatHub()
        _, first = await _signed_in(client, db, "student1")
        _, second = await _signed_in(client, db, "student2")

        await handle_frame(
            hub, first, json.dumps({"type": "join", "name": "Ann", "chatroom": room["id"]})
        )
        await handle_frame(
            hub,
            second,
            json.dumps({"type": "join", "name": "Ben", "chatroom": room["id"].upper()}),
        )
        await handle_frame(
            hub,
            second,
            json.dumps({"type": "message", "text": "hi", "chatroom": room["id"].upper()}),
        )

        assert hub.online_users(room["id"]) == ["Ann", "Ben"]
        assert first.websocket.sent[-1]["type"] == "message"


class TestSocketEndpoint:
    """The /ws route itself."""

    def test_protocol_errors_over_websocket(self):
        with TestClient(app).websocket_connect("/ws") as websocket:
            websocket.send_text("not json")
            assert websocket.receive_json() == {
                "type": "error",
                "message": "Invalid message format",
            }
            websocket.send_text(json.dumps({"type": "message", "text": "hi"}))
            assert websocket.receive_json() == {
                "type": "error",
                "message": "Join a chatroom before sending messages",
            }

    def test_binary_frame_gets_error_and_connection_survives(self):
        with TestClient(app).websocket_connect("/ws") as websocket:
            websocket.send_bytes(b'{"type":"leave"}')
            assert websocket.receive_json() == {
                "type": "error",
                "message": "Invalid message format",
            }
            websocket.send_text(json.dumps({"type": ["join"]}))
            assert websocket.receive_json() == {
                "type": "error",
                "message": "Unknown message type: ['join']",
            }
