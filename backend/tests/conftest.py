"""Shared fixtures: an isolated SQLite store and an in-process HTTP client."""

from datetime import timedelta
from typing import Any, Dict
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update

from main import create_app
from piazza.core.config import Settings
from piazza.db.models.post import Post
from piazza.db.session import Database
from piazza.posts.lifecycle import utcnow


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        JWT_SECRET_KEY="test-secret",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'piazza.db'}",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def database(settings):
    db = Database.from_settings(settings)
    await db.connect(create_tables=True)
    yield db
    await db.dispose()


@pytest.fixture
def app(settings, database):
    application = create_app(settings)
    # ASGITransport does not run the lifespan, so attach the store directly
    application.state.db = database
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def register(client: AsyncClient, name: str, email: str, password: str = "secret") -> Dict[str, Any]:
    r = await client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    data = r.json()
    return {
        "id": data["user"]["id"],
        "name": name,
        "token": data["token"],
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


async def create_post(client: AsyncClient, user: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
    payload = {"title": "A title", "body": "Some body", "topics": ["Tech"]}
    payload.update(fields)
    r = await client.post("/api/posts", json=payload, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["post"]


async def expire_post(database: Database, post_id: str, seconds_ago: int = 60) -> None:
    """Move a post's deadline into the past."""
    async with database.sessionmaker() as session:
        await session.execute(
            update(Post)
            .where(Post.id == UUID(post_id))
            .values(expires_at=utcnow() - timedelta(seconds=seconds_ago))
        )
        await session.commit()


@pytest.fixture
async def alice(client):
    return await register(client, "Alice", "alice@piazza.io")


@pytest.fixture
async def bob(client):
    return await register(client, "Bob", "bob@piazza.io")


@pytest.fixture
async def carol(client):
    return await register(client, "Carol", "carol@piazza.io")
