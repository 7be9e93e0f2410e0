"""Tests for the admin dashboard: stats, chatrooms and access codes."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from blogcraft.services.access_codes import CODE_ALPHABET, GENERATED_CODE_LENGTH, generate_code
from blogcraft.services.chat_hub import ChatConnection, get_chat_hub
from conftest import register


async def _chatroom(client, headers, **fields) -> dict:
    payload = {"name": "Homeroom"}
    payload.update(fields)
    response = await client.post("/api/admin/chatrooms", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


async def _access_code(client, headers, chatroom_id: str, **fields) -> dict:
    payload = {"name": "Invite", "chatroomId": chatroom_id}
    payload.update(fields)
    response = await client.post("/api/admin/access-codes", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestStats:
    """GET /api/admin/stats."""

    @pytest.mark.asyncio
    async def test_stats_reflect_seed_data(self, client, admin_headers):
        response = await client.get("/api/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "totalPosts": 2,
            "draftPosts": 0,
            "totalComments": 0,
            "pendingComments": 0,
            "totalViews": 156 + 89,
            "totalUsers": 1,
            "pendingUsers": 0,
            "totalCategories": 3,
            "activeChatrooms": 0,
            "onlineChatUsers": 0,
        }

    @pytest.mark.asyncio
    async def test_stats_count_drafts_pending_users_and_rooms(self, client, admin_headers):
        await client.post(
            "/api/posts",
            json={"title": "Draft post", "content": "Draft content for stats."},
            headers=admin_headers,
        )
        await register(client, "teacher1", role="teacher")
        await _chatroom(client, admin_headers)

        stats = (await client.get("/api/admin/stats", headers=admin_headers)).json()

        assert stats["totalPosts"] == 2
        assert stats["draftPosts"] == 1
        assert stats["pendingUsers"] == 1
        assert stats["totalUsers"] == 2
        assert stats["activeChatrooms"] == 1

    @pytest.mark.asyncio
    async def test_stats_require_admin(self, client):
        _, headers = await register(client, "student1")

        response = await client.get("/api/admin/stats", headers=headers)

        assert response.status_code == 403


class TestChatrooms:
    """Chatroom administration and the student listing."""

    @pytest.mark.asyncio
    async def test_create_open_room(self, client, admin_headers):
        room = await _chatroom(client, admin_headers, description="Everyone welcome")

        assert room["isActive"] is True
        assert room["invitedUserIds"] == []
        assert room["onlineUsers"] == []

    @pytest.mark.asyncio
    async def test_name_is_validated(self, client, admin_headers):
        response = await client.post(
            "/api/admin/chatrooms", json={"name": "x"}, headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_students_see_open_and_invited_rooms(self, client, admin_headers):
        student, headers = await register(client, "student1")
        await _chatroom(client, admin_headers, name="Open room")
        await _chatroom(client, admin_headers, name="Invited room", invitedUserIds=[student["id"]])
        await _chatroom(
            client,
            admin_headers,
            name="Private room",
            invitedUserIds=["00000000-0000-0000-0000-000000000001"],
        )
        inactive = await _chatroom(client, admin_headers, name="Closed room")
        await client.put(
            f"/api/admin/chatrooms/{inactive['id']}",
            json={"isActive": False},
            headers=admin_headers,
        )

        response = await client.get("/api/chatrooms", headers=headers)
        as_admin = await client.get("/api/chatrooms", headers=admin_headers)

        assert [room["name"] for room in response.json()] == ["Invited room", "Open room"]
        assert len(as_admin.json()) == 3

    @pytest.mark.asyncio
    async def test_listing_requires_sign_in(self, client):
        response = await client.get("/api/chatrooms")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_delete_room_removes_its_codes(self, client, admin_headers):
        room = await _chatroom(client, admin_headers)
        await _access_code(client, admin_headers, room["id"])

        response = await client.delete(f"/api/admin/chatrooms/{room['id']}", headers=admin_headers)
        codes = await client.get("/api/admin/access-codes", headers=admin_headers)

        assert response.status_code == 200
        assert codes.json() == []

    @pytest.mark.asyncio
    async def test_deactivating_room_closes_its_connections(self, client, admin_headers):
        room = await _chatroom(client, admin_headers)
        member = ChatConnection(websocket=AsyncMock())
        await get_chat_hub().join(member, room["id"], "Sam")

        response = await client.put(
            f"/api/admin/chatrooms/{room['id']}", json={"isActive": False}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["onlineUsers"] == []
        member.websocket.close.assert_awaited_once_with(code=1000)
        assert member.chatroom_id is None
        assert get_chat_hub().rooms == {}

    @pytest.mark.asyncio
    async def test_deleting_room_closes_its_connections(self, client, admin_headers):
        room = await _chatroom(client, admin_headers)
        other = await _chatroom(client, admin_headers, name="Study hall")
        member = ChatConnection(websocket=AsyncMock())
        bystander = ChatConnection(websocket=AsyncMock())
        await get_chat_hub().join(member, room["id"], "Sam")
        await get_chat_hub().join(bystander, other["id"], "Kim")

        response = await client.delete(f"/api/admin/chatrooms/{room['id']}", headers=admin_headers)

        assert response.status_code == 200
        member.websocket.close.assert_awaited_once_with(code=1000)
        bystander.websocket.close.assert_not_awaited()
        assert list(get_chat_hub().rooms) == [other["id"]]

    @pytest.mark.asyncio
    async def test_update_missing_room_is_404(self, client, admin_headers):
        response = await client.put(
            "/api/admin/chatrooms/00000000-0000-0000-0000-000000000000",
            json={"name": "Ghost room"},
            headers=admin_headers,
        )

        assert response.status_code == 404


class TestAccessCodes:
    """Access code administration."""

    def test_generated_codes_use_the_code_alphabet(self):
        for _ in range(50):
            code = generate_code()
            assert len(code) == GENERATED_CODE_LENGTH
            assert set(code) <= set(CODE_ALPHABET)

    @pytest.mark.asyncio
    async def test_empty_code_is_generated(self, client, admin_headers):
        room = await _chatroom(client, admin_headers)

        code = await _access_code(client, admin_headers, room["id"], code="")

        assert len(code["code"]) == GENERATED_CODE_LENGTH
        assert code["code"].isupper() or code["code"].isdigit()
        assert code["chatroomName"] == "Homeroom"
        assert code["usesCount"] == 0

    @pytest.mark.asyncio
    async def test_code_is_stored_upper_case_and_unique(self, client, admin_headers):
        room = await _chatroom(client, admin_headers)

        code = await _access_code(client, admin_headers, room["id"], code="math101")
        duplicate = await client.post(
            "/api/admin/access-codes",
            json={"name": "Again", "chatroomId": room["id"], "code": "MATH101"},
            headers=admin_headers,
        )

        assert code["code"] == "MATH101"
        assert duplicate.status_code == 400
        assert duplicate.json() == {"message": "Access code already exists"}

    @pytest.mark.asyncio
    async def test_chatroom_must_exist(self, client, admin_headers):
        response = await client.post(
            "/api/admin/access-codes",
            json={"name": "Orphan", "chatroomId": "00000000-0000-0000-0000-000000000000"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_and_delete_code(self, client, admin_headers):
        room = await _chatroom(client, admin_headers)
        code = await _access_code(client, admin_headers, room["id"])

        updated = await client.put(
            f"/api/admin/access-codes/{code['id']}",
            json={"isActive": False, "maxUses": 5},
            headers=admin_headers,
        )
        deleted = await client.delete(
            f"/api/admin/access-codes/{code['id']}", headers=admin_headers
        )

        assert updated.json()["isActive"] is False
        assert updated.json()["maxUses"] == 5
        assert deleted.status_code == 200


class TestRedeem:
    """POST /api/chatrooms/redeem."""

    @pytest.mark.asyncio
    async def test_redeem_invites_user_once(self, client, admin_headers):
        student, headers = await register(client, "student1")
        room = await _chatroom(
            client,
            admin_headers,
            invitedUserIds=["00000000-0000-0000-0000-000000000001"],
        )
        code = await _access_code(client, admin_headers, room["id"], code="JOINME")

        first = await client.post(
            "/api/chatrooms/redeem", json={"code": "joinme"}, headers=headers
        )
        second = await client.post(
            "/api/chatrooms/redeem", json={"code": "JOINME"}, headers=headers
        )
        codes = (await client.get("/api/admin/access-codes", headers=admin_headers)).json()
        rooms = (await client.get("/api/chatrooms", headers=headers)).json()

        assert first.status_code == 200
        assert student["id"] in first.json()["chatroom"]["invitedUserIds"]
        assert second.status_code == 200
        assert [c["usesCount"] for c in codes if c["id"] == code["id"]] == [1]
        assert [r["id"] for r in rooms] == [room["id"]]

    @pytest.mark.asyncio
    async def test_unknown_code_is_404(self, client):
        _, headers = await register(client, "student1")

        response = await client.post(
            "/api/chatrooms/redeem", json={"code": "NOPE99"}, headers=headers
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Invalid access code"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields,message",
        [
            ({"isActive": False}, "Access code is inactive"),
            (
                {"expiresAt": (datetime.now(UTC) - timedelta(days=1)).isoformat()},
                "Access code has expired",
            ),
        ],
    )
    async def test_unusable_codes_are_400(self, client, admin_headers, fields, message):
        _, headers = await register(client, "student1")
        room = await _chatroom(client, admin_headers)
        await _access_code(client, admin_headers, room["id"], code="BADCODE", **fields)

        response = await client.post(
            "/api/chatrooms/redeem", json={"code": "BADCODE"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json() == {"message": message}

    @pytest.mark.asyncio
    async def test_max_uses_is_enforced(self, client, admin_headers):
        _, first_headers = await register(client, "student1")
        _, second_headers = await register(client, "student2")
        room = await _chatroom(
            client,
            admin_headers,
            invitedUserIds=["00000000-0000-0000-0000-000000000001"],
        )
        await _access_code(client, admin_headers, room["id"], code="ONCEONLY", maxUses=1)

        first = await client.post(
            "/api/chatrooms/redeem", json={"code": "ONCEONLY"}, headers=first_headers
        )
        second = await client.post(
            "/api/chatrooms/redeem", json={"code": "ONCEONLY"}, headers=second_headers
        )

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json() == {"message": "Access code has reached its maximum uses"}

    @pytest.mark.asyncio
    async def test_inactive_chatroom_is_400(self, client, admin_headers):
        _, headers = await register(client, "student1")
        room = await _chatroom(client, admin_headers)
        await _access_code(client, admin_headers, room["id"], code="SLEEPY")
        await client.put(
            f"/api/admin/chatrooms/{room['id']}",
            json={"isActive": False},
            headers=admin_headers,
        )

        response = await client.post(
            "/api/chatrooms/redeem", json={"code": "SLEEPY"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Chatroom is not active"}
