from __future__ import annotations

from sqlalchemy import func, select

from peerlearn.core.security import decode_access_token
from peerlearn.models.user import User


async def signup(client, email="dana@example.com", password="s3cret-pass", full_name="Dana Park"):
    return await client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "full_name": full_name},
    )


async def test_signup_returns_token_for_new_user(client, session):
    resp = await signup(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "dana@example.com"
    assert body["user"]["full_name"] == "Dana Park"
    assert str(decode_access_token(body["token"])) == body["user_id"] == body["user"]["id"]

    user = await session.scalar(select(User).where(User.email == "dana@example.com"))
    assert user.hashed_password != "s3cret-pass"


async def test_signin_and_me(client):
    await signup(client, email="Dana@Example.com")

    resp = await client.post("/api/auth/signin", json={"email": "dana@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    token = resp.json()["token"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "dana@example.com"
    assert me.json()["full_name"] == "Dana Park"


async def test_signin_with_bad_credentials_is_unauthorized(client):
    await signup(client)

    wrong_password = await client.post("/api/auth/signin", json={"email": "dana@example.com", "password": "nope"})
    unknown_email = await client.post("/api/auth/signin", json={"email": "nobody@example.com", "password": "nope"})

    for resp in (wrong_password, unknown_email):
        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthorized"
        assert resp.json()["message"] == "invalid_credentials"


async def test_duplicate_email_is_a_conflict(client, session):
    assert (await signup(client)).status_code == 201

    resp = await signup(client, email="DANA@example.com", full_name="Someone Else")

    assert resp.status_code == 409
    assert resp.json() == {"error": "conflict", "message": "Duplicate entry", "detail": None, "type": "Conflict"}
    assert await session.scalar(select(func.count(User.id))) == 1


async def test_signup_requires_all_fields(client):
    resp = await client.post("/api/auth/signup", json={"email": "dana@example.com", "password": "x"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_argument"

    resp = await signup(client, email="not-an-email")
    assert resp.status_code == 400


async def test_me_requires_a_token(client):
    assert (await client.get("/api/auth/me")).status_code == 401


async def test_signout_is_stateless(client):
    resp = await client.post("/api/auth/signout")
    assert resp.json() == {"ok": True}
