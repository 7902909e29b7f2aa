from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from config import ApplicationConfig
from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_register_creates_user_and_sets_cookies(client: AsyncClient, test_data, notifier):
    """Register

    Given a new email address
    When I register
    Then the account is created with a lowercased email
    And both auth cookies are set httpOnly with SameSite=lax
    And a welcome email is queued
    """
    payload = test_data.get_copy("register_user")

    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True

    user = body["data"]["user"]
    assert exclude_keys(user, {"id", "createdAt", "updatedAt"}) == {
        "email": "operative@zerogrid.io",
        "name": "Ada Operative",
    }
    assert "password" not in user
    assert set(body["data"]["tokens"]) == {"accessToken", "refreshToken"}

    cookies = response.headers.get_list("set-cookie")
    access = next(c for c in cookies if c.startswith("accessToken="))
    refresh = next(c for c in cookies if c.startswith("refreshToken="))
    for cookie in (access, refresh):
        assert "httponly" in cookie.lower()
        assert "samesite=lax" in cookie.lower()
        assert "path=/" in cookie.lower()
    assert f"Max-Age={ApplicationConfig.JWT_ACCESS_EXPIRY}" in access
    assert f"Max-Age={ApplicationConfig.JWT_REFRESH_EXPIRY}" in refresh

    welcome = notifier.of_kind("welcome")
    assert len(welcome) == 1
    assert welcome[0].to == "operative@zerogrid.io"


@pytest.mark.asyncio
async def test_register_carries_rate_limit_headers(client: AsyncClient, test_data):
    response = await client.post("/auth/register", json=test_data.get_copy("register_user"))

    assert response.headers["X-RateLimit-Limit"] == "100"
    assert response.headers["X-RateLimit-Remaining"] == "99"
    reset_at = datetime.fromisoformat(response.headers["X-RateLimit-Reset"].replace("Z", "+00:00"))
    assert timedelta(minutes=14) < reset_at - datetime.now(timezone.utc) <= timedelta(minutes=15)


@pytest.mark.asyncio
async def test_register_duplicate_email_any_case(client: AsyncClient, test_data):
    """Emails are unique case-insensitively"""
    payload = test_data.get_copy("register_user")
    first = await client.post("/auth/register", json=payload)
    assert first.status_code == 201

    payload["email"] = payload["email"].upper()
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "error": "User with this email already exists",
        "code": "EMAIL_ALREADY_EXISTS",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"email": "nope"}, "Invalid email format"),
        ({"password": "12345"}, "Password must be at least 6 characters"),
        ({"name": "A"}, "Name must be at least 2 characters"),
    ],
)
async def test_register_rejects_invalid_input(client: AsyncClient, test_data, overrides, message):
    payload = test_data.get_copy("register_user")
    payload.update(overrides)

    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": message, "code": "VALIDATION_FAILED"}


@pytest.mark.asyncio
async def test_register_rejects_non_object_body(client: AsyncClient):
    response = await client.post("/auth/register", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_register_and_login_with_long_password(client: AsyncClient, test_data):
    """Passwords past bcrypt's 72-byte input limit are accepted and work for login"""
    payload = test_data.get_copy("register_user")
    payload["password"] = "p" * 80

    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 201

    login = await client.post(
        "/auth/login", json={"email": payload["email"], "password": payload["password"]}
    )
    assert login.status_code == 200
