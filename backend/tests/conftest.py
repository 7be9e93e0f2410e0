"""Shared fixtures: a freshly seeded in-memory database per test and an API client."""

import os

# Must be set before blogcraft reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "development"
os.environ["SEED_SAMPLE_DATA"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blogcraft.core.config import settings  # noqa: E402
from blogcraft.core.database import async_session_maker, drop_db  # noqa: E402
from blogcraft.core.rate_limit import reset_rate_limits  # noqa: E402
from blogcraft.main import app, prepare_database  # noqa: E402
from blogcraft.services.chat_hub import get_chat_hub  # noqa: E402


@pytest_asyncio.fixture(autouse=True)
async def fresh_database() -> AsyncGenerator[None, None]:
    """Every test starts from the seeded state with empty limiters and chat rooms."""
    await drop_db()
    await prepare_database()
    reset_rate_limits()
    get_chat_hub().reset()
    yield
    get_chat_hub().reset()


@pytest_asyncio.fixture
async def db():
    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    """Log in and return Bearer headers. The session cookie is dropped so
    requests without headers stay anonymous."""
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return bearer(response.json()["accessToken"])


async def register(
    client: AsyncClient,
    username: str,
    role: str = "student",
    password: str = "secret123",
) -> tuple[dict[str, Any], dict[str, str]]:
    """Register an account and return (user, Bearer headers)."""
    response = await client.post(
        "/api/auth/register",
        json={
            "email": f"{username}@example.com",
            "username": username,
            "name": username.title(),
            "password": password,
            "role": role,
        },
    )
    assert response.status_code == 200, response.text
    client.cookies.clear()
    body = response.json()
    return body["user"], bearer(body["accessToken"])


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    return await login(client, settings.admin_email, settings.admin_password)


@pytest_asyncio.fixture
async def approved_teacher(
    client: AsyncClient,
    admin_headers: dict[str, str],
) -> tuple[dict[str, Any], dict[str, str]]:
    """A teacher account that an admin has approved."""
    user, headers = await register(client, "teacher1", role="teacher")
    response = await client.patch(
        f"/api/users/{user['id']}/approval",
        json={"approved": True},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    return response.json(), headers
