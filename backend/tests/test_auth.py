"""Tests for registration, login and bearer-token handling."""

from datetime import timedelta
from uuid import uuid4

from piazza.core.security import create_access_token, decode_access_token


async def test_register_returns_token_and_user(client) -> None:
    r = await client.post(
        "/api/auth/register",
        json={"name": "Dana", "email": "Dana@Piazza.io", "password": "pw"},
    )

    assert r.status_code == 201
    data = r.json()
    assert data["message"] == "User registered successfully"
    assert data["user"]["email"] == "dana@piazza.io"
    assert data["user"]["name"] == "Dana"
    assert data["token"]


async def test_register_duplicate_email_conflicts(client, alice) -> None:
    r = await client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "ALICE@piazza.io", "password": "pw"},
    )

    assert r.status_code == 409
    assert r.json()["error"] == "Conflict"


async def test_register_requires_fields(client) -> None:
    r = await client.post("/api/auth/register", json={"email": "x@piazza.io", "password": "pw"})
    assert r.status_code == 400
    assert r.json()["error"] == "ValidationError"


async def test_login_and_me(client, alice) -> None:
    r = await client.post("/api/auth/login", json={"email": "alice@piazza.io", "password": "secret"})
    assert r.status_code == 200
    token = r.json()["token"]

    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json() == {"id": alice["id"], "name": "Alice", "email": "alice@piazza.io"}


async def test_login_failures_share_one_message(client, alice) -> None:
    wrong_password = await client.post("/api/auth/login", json={"email": "alice@piazza.io", "password": "nope"})
    unknown_user = await client.post("/api/auth/login", json={"email": "who@piazza.io", "password": "secret"})

    for r in (wrong_password, unknown_user):
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid credentials"


async def test_bearer_token_is_required(client, settings, alice) -> None:
    assert (await client.get("/api/auth/me")).status_code == 401

    r = await client.get("/api/auth/me", headers={"Authorization": f"Token {alice['token']}"})
    assert r.status_code == 401

    expired = create_access_token(uuid4(), "ghost@piazza.io", settings, expires_delta=timedelta(minutes=-1))
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"


async def test_token_for_deleted_user_is_rejected(client, settings) -> None:
    token = create_access_token(uuid4(), "ghost@piazza.io", settings)

    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert r.status_code == 401


def test_token_round_trips_identity(settings) -> None:
    user_id = uuid4()
    identity = decode_access_token(create_access_token(user_id, "eve@piazza.io", settings), settings)

    assert identity.user_id == user_id
    assert identity.email == "eve@piazza.io"


async def test_health(client) -> None:
    assert (await client.get("/health")).json() == {"status": "ok"}
    assert (await client.get("/")).status_code == 200
