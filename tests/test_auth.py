"""Tests for authentication endpoints."""

import pytest
from app.services.auth import hash_password, verify_password, create_access_token, decode_access_token
from app.models.user import User
from sqlalchemy import select


def test_password_hashing():
    """Password hashing should be one-way and verifiable."""
    password = "supersecret123"
    hashed = hash_password(password)

    # Hashed password should be different from plain text
    assert hashed != password

    # Should verify correctly
    assert verify_password(password, hashed) is True

    # Wrong password should fail
    assert verify_password("wrongpassword", hashed) is False


def test_access_token_round_trip():
    token = create_access_token(data={"sub": "abc", "role": "provider"})
    payload = decode_access_token(token)

    assert payload["sub"] == "abc"
    assert payload["role"] == "provider"
    assert decode_access_token(token + "x") is None


@pytest.mark.asyncio
async def test_register_creates_user(client, db):
    """Registration should store the user and return a token."""
    resp = await client.post("/api/v1/auth/register", json={
        "name": "Pat Provider",
        "email": "pat@example.com",
        "password": "testpass123",
        "role": "provider",
    })

    assert resp.status_code == 201
    data = resp.json()
    assert data["tokenType"] == "bearer"
    assert data["accessToken"]
    assert data["user"]["role"] == "provider"

    result = await db.execute(select(User).where(User.email == "pat@example.com"))
    user = result.scalar_one_or_none()
    assert user is not None
    assert user.role == "provider"
    assert user.hashed_password != "testpass123"


@pytest.mark.asyncio
async def test_register_defaults_to_user_role(client):
    resp = await client.post("/api/v1/auth/register", json={
        "name": "Uma User",
        "email": "uma@example.com",
        "password": "testpass123",
    })

    assert resp.status_code == 201
    assert resp.json()["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_register_duplicate_email_fails(client, db):
    """Registering the same email twice should fail with 409."""
    user_data = {
        "name": "Dup",
        "email": "duplicate@example.com",
        "password": "testpass123",
    }

    # First registration succeeds
    resp1 = await client.post("/api/v1/auth/register", json=user_data)
    assert resp1.status_code == 201

    # Second registration fails
    resp2 = await client.post("/api/v1/auth/register", json=user_data)
    assert resp2.status_code == 409
    assert "already registered" in resp2.json()["detail"].lower()


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"name": "Short", "email": "short@example.com", "password": "123"},
    {"name": "Bad", "email": "not-an-email", "password": "testpass123"},
    {"name": "Admin", "email": "admin@example.com", "password": "testpass123", "role": "admin"},
])
async def test_register_rejects_invalid_payload(client, payload):
    resp = await client.post("/api/v1/auth/register", json=payload)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_login(client, customer):
    """Login should return a token for valid credentials."""
    resp = await client.post("/api/v1/auth/login", json={
        "email": "customer@example.com",
        "password": "testpass123"
    })

    assert resp.status_code == 200
    data = resp.json()
    assert "accessToken" in data
    assert data["user"]["email"] == "customer@example.com"


@pytest.mark.asyncio
async def test_login_with_invalid_credentials(client, customer):
    """Login should fail with wrong password."""
    resp = await client.post("/api/v1/auth/login", json={
        "email": "customer@example.com",
        "password": "wrongpass"
    })

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_disabled_account(client, db, customer):
    customer.is_active = False
    await db.commit()

    resp = await client.post("/api/v1/auth/login", json={
        "email": "customer@example.com",
        "password": "testpass123"
    })
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_protected_endpoint_requires_auth(client, db):
    """Protected endpoints should reject requests without a token."""
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_protected_endpoint_rejects_bad_token(client):
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_protected_endpoint_with_valid_token(client, customer):
    """Protected endpoints should work with a valid token."""
    login = await client.post("/api/v1/auth/login", json={
        "email": "customer@example.com",
        "password": "testpass123"
    })
    token = login.json()["accessToken"]

    resp = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {token}"}
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == "customer@example.com"
    assert data["name"] == "Casey Customer"
