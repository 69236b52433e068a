"""
tests.test_auth_api

Backend login/identity contract as consumed by the client session layer.
"""

from __future__ import annotations

import pytest

from procurement_gateway.api.app import create_app

# Seeded by the `settings` fixture in conftest.py.
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"


async def _login(client, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD):
    return await client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.mark.asyncio
async def test_login_returns_token_and_camelcase_user(settings, serve) -> None:
    async with serve(create_app(settings=settings)) as client:
        r = await _login(client)
        assert r.status_code == 200
        body = r.json()
        assert body["token"]
        assert body["user"]["email"] == ADMIN_EMAIL
        assert body["user"]["role"] == "admin"
        assert body["user"]["firstName"] == "Admin"
        assert isinstance(body["user"]["id"], int)
        assert "password_hash" not in body["user"]


@pytest.mark.asyncio
async def test_login_rejects_missing_fields_and_bad_password(settings, serve) -> None:
    async with serve(create_app(settings=settings)) as client:
        r = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
        assert r.status_code == 400
        assert r.json() == {"message": "Email and password required"}

        r = await _login(client, password="wrong")
        assert r.status_code == 401
        assert r.json() == {"message": "Invalid credentials"}

        r = await _login(client, email="nobody@example.com")
        assert r.status_code == 401


@pytest.mark.asyncio
async def test_unparseable_login_body_uses_message_shape(settings, serve) -> None:
    async with serve(create_app(settings=settings)) as client:
        r = await client.post(
            "/api/auth/login", content=b"email=a&password=b", headers={"Content-Type": "application/json"}
        )

    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Invalid request"
    assert "detail" not in body
    assert body["errors"]


@pytest.mark.asyncio
async def test_me_requires_valid_bearer(settings, serve) -> None:
    async with serve(create_app(settings=settings)) as client:
        r = await client.get("/api/auth/me")
        assert r.status_code == 401

        r = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401

        token = (await _login(client)).json()["token"]
        r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        assert r.json()["email"] == ADMIN_EMAIL


@pytest.mark.asyncio
async def test_users_group_is_admin_only(settings, serve) -> None:
    async with serve(create_app(settings=settings)) as client:
        admin = {"Authorization": f"Bearer {(await _login(client)).json()['token']}"}

        r = await client.post(
            "/api/users",
            headers=admin,
            json={
                "firstName": "Pat",
                "lastName": "Buyer",
                "email": "pat@example.com",
                "password": "pw-123456",
                "role": "purchasingOfficer",
            },
        )
        assert r.status_code == 201
        assert r.json()["role"] == "purchasingOfficer"

        r = await client.post(
            "/api/users",
            headers=admin,
            json={"firstName": "P", "lastName": "B", "email": "pat@example.com", "password": "x"},
        )
        assert r.status_code == 400
        assert r.json() == {"message": "Email already exists"}

        r = await client.get("/api/users", headers=admin)
        assert r.status_code == 200
        assert {u["email"] for u in r.json()} == {ADMIN_EMAIL, "pat@example.com"}

        officer_token = (await _login(client, "pat@example.com", "pw-123456")).json()["token"]
        r = await client.get("/api/users", headers={"Authorization": f"Bearer {officer_token}"})
        assert r.status_code == 403
