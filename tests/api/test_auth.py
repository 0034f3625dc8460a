"""API tests for auth: login, single session, force logout, check-session, refresh, profile."""

import pytest
from httpx import AsyncClient

from app.core.limiter import CHECK_SESSION_LIMIT, limiter
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.models import User

PASSWORD = "Secret123!"
EMAIL = "staff@example.com"


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def test_login_returns_token_user_and_session(client: AsyncClient, make_user) -> None:
    """Login returns a bearer token plus the user and the session it opened."""
    await make_user(EMAIL, name="Staff Member")
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": EMAIL, "password": PASSWORD, "device_name": "Laptop"},
        headers={"User-Agent": "pytest-agent"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0
    assert data["user"]["email"] == EMAIL
    assert data["user"]["role"] == "sdm"
    assert "hashed_password" not in data["user"]
    assert data["session"]["device_name"] == "Laptop"
    assert data["session"]["user_agent"] == "pytest-agent"


async def test_login_accepts_username(client: AsyncClient, make_user) -> None:
    """The email field also matches the username."""
    await make_user(EMAIL, username="staff01")
    response = await client.post(
        "/api/v1/auth/login", json={"email": "staff01", "password": PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["username"] == "staff01"


async def test_login_default_device_name(client: AsyncClient, make_user) -> None:
    """Without device_name the session is recorded as an unknown device."""
    await make_user(EMAIL)
    response = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD}
    )
    assert response.json()["data"]["session"]["device_name"] == "Unknown device"


async def test_login_wrong_password_returns_401(client: AsyncClient, make_user) -> None:
    """Wrong password is rejected with 401 and the error envelope."""
    await make_user(EMAIL)
    response = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": "Wrong123!"}
    )
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["message"]


async def test_login_unknown_user_returns_401(client: AsyncClient) -> None:
    """Unknown identifier gets the same 401 as a wrong password."""
    response = await client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
    )
    assert response.status_code == 401


async def test_login_inactive_user_returns_403(client: AsyncClient, make_user) -> None:
    """Correct credentials of a disabled account are refused with 403."""
    await make_user(EMAIL, is_active=False)
    response = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD}
    )
    assert response.status_code == 403
    assert response.json()["success"] is False


async def test_login_missing_fields_returns_422(client: AsyncClient) -> None:
    """Missing password yields field-keyed validation errors."""
    response = await client.post("/api/v1/auth/login", json={"email": EMAIL})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert "password" in body["errors"]


async def test_second_login_conflicts_without_force(client: AsyncClient, make_user, login) -> None:
    """A second device gets 409 with the existing session's details."""
    await make_user(EMAIL)
    await login(EMAIL, device_name="Office PC")
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": EMAIL, "password": PASSWORD, "device_name": "Phone"},
    )
    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["requires_force_logout"] is True
    assert body["existing_session"]["device_name"] == "Office PC"
    assert body["existing_session"]["last_activity"]


async def test_conflicting_login_keeps_first_session(client: AsyncClient, make_user, login) -> None:
    """A refused login does not disturb the session that already exists."""
    await make_user(EMAIL)
    token = await login(EMAIL)
    await client.post("/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD})
    response = await client.get("/api/v1/auth/me", headers=_auth(token))
    assert response.status_code == 200


async def test_force_logout_takes_over_session(client: AsyncClient, make_user, login) -> None:
    """force_logout ends the old session: old token 401, new token works."""
    await make_user(EMAIL)
    old_token = await login(EMAIL, device_name="Office PC")
    new_token = await login(EMAIL, device_name="Phone", force_logout=True)

    old = await client.get("/api/v1/auth/me", headers=_auth(old_token))
    assert old.status_code == 401
    assert old.headers["www-authenticate"] == "Bearer"

    new = await client.get("/api/v1/auth/me", headers=_auth(new_token))
    assert new.status_code == 200

    check = await client.post("/api/v1/auth/check-session", headers=_auth(new_token))
    assert check.json()["data"]["session"]["device_name"] == "Phone"


async def test_force_logout_without_existing_session_logs_in(
    client: AsyncClient, make_user
) -> None:
    """force_logout with no session to end is a normal login."""
    await make_user(EMAIL)
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": EMAIL, "password": PASSWORD, "force_logout": True},
    )
    assert response.status_code == 200


async def test_me_requires_token(client: AsyncClient) -> None:
    """Protected route without Authorization returns 401."""
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_me_rejects_garbage_token(client: AsyncClient) -> None:
    """A token that does not decode is rejected."""
    response = await client.get("/api/v1/auth/me", headers=_auth("not-a-jwt"))
    assert response.status_code == 401


async def test_me_includes_unit(client: AsyncClient, make_unit, make_user, login) -> None:
    """GET /auth/me returns the user with the unit it belongs to."""
    unit = await make_unit("BAKORDIK", role="unit", name="Bakordik")
    await make_user(EMAIL, unit=unit)
    token = await login(EMAIL)
    response = await client.get("/api/v1/auth/me", headers=_auth(token))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "unit"
    assert data["unit_id"] == unit.id
    assert data["unit"]["code"] == "BAKORDIK"


async def test_me_unassigned_user_has_no_unit(client: AsyncClient, make_user, login) -> None:
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.get("/api/v1/auth/me", headers=_auth(token))
    assert response.json()["data"]["unit"] is None


async def test_deactivated_user_token_stops_working(
    client: AsyncClient, make_user, login
) -> None:
    """A token is only honoured while its user is active."""
    user = await make_user(EMAIL)
    token = await login(EMAIL)
    async with get_session_factory()() as session, session.begin():
        row = await session.get(User, user.id)
        row.is_active = False
    response = await client.get("/api/v1/auth/me", headers=_auth(token))
    assert response.status_code == 401


async def test_logout_revokes_token(client: AsyncClient, make_user, login) -> None:
    """After logout the same token is rejected and a new login needs no force."""
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.post("/api/v1/auth/logout", headers=_auth(token))
    assert response.status_code == 200
    assert response.json()["success"] is True

    me = await client.get("/api/v1/auth/me", headers=_auth(token))
    assert me.status_code == 401

    relogin = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD}
    )
    assert relogin.status_code == 200


async def test_check_session_valid(client: AsyncClient, make_user, login) -> None:
    """check-session reports a live session with user and device."""
    await make_user(EMAIL)
    token = await login(EMAIL, device_name="Laptop")
    response = await client.post("/api/v1/auth/check-session", headers=_auth(token))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["valid"] is True
    assert data["user"]["email"] == EMAIL
    assert data["session"]["device_name"] == "Laptop"


async def test_check_session_without_token(client: AsyncClient) -> None:
    """No token is an answer, not an error: valid is false."""
    response = await client.post("/api/v1/auth/check-session")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["valid"] is False
    assert data["user"] is None


async def test_check_session_after_takeover(client: AsyncClient, make_user, login) -> None:
    """The replaced device learns its session is gone."""
    await make_user(EMAIL)
    old_token = await login(EMAIL)
    await login(EMAIL, force_logout=True)
    response = await client.post("/api/v1/auth/check-session", headers=_auth(old_token))
    assert response.status_code == 200
    assert response.json()["data"]["valid"] is False


async def test_refresh_rotates_token(client: AsyncClient, make_user, login) -> None:
    """Refresh issues a new token on the same session and retires the old one."""
    await make_user(EMAIL)
    token = await login(EMAIL, device_name="Laptop")
    response = await client.post("/api/v1/auth/refresh", headers=_auth(token))
    assert response.status_code == 200
    new_token = response.json()["data"]["token"]
    assert new_token != token

    assert (await client.get("/api/v1/auth/me", headers=_auth(token))).status_code == 401
    check = await client.post("/api/v1/auth/check-session", headers=_auth(new_token))
    data = check.json()["data"]
    assert data["valid"] is True
    assert data["session"]["device_name"] == "Laptop"


async def test_failed_logins_lock_out_identifier(client: AsyncClient, make_user) -> None:
    """Five failures lock the identifier; even the right password is refused."""
    await make_user(EMAIL)
    for _ in range(5):
        response = await client.post(
            "/api/v1/auth/login", json={"email": EMAIL, "password": "Wrong123!"}
        )
        assert response.status_code == 401
    response = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD}
    )
    assert response.status_code == 422
    body = response.json()
    assert "Too many login attempts" in body["message"]
    assert "email" in body["errors"]


async def test_successful_login_clears_failures(client: AsyncClient, make_user, login) -> None:
    """A success resets the failure count for that identifier."""
    await make_user(EMAIL)
    for _ in range(4):
        await client.post("/api/v1/auth/login", json={"email": EMAIL, "password": "Wrong123!"})
    token = await login(EMAIL)
    await client.post("/api/v1/auth/logout", headers=_auth(token))
    for _ in range(4):
        await client.post("/api/v1/auth/login", json={"email": EMAIL, "password": "Wrong123!"})
    response = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD}
    )
    assert response.status_code == 200


async def test_check_session_rate_limited(client: AsyncClient) -> None:
    """check-session is throttled per client address."""
    limit = int(CHECK_SESSION_LIMIT.split("/")[0])
    limiter.enabled = True
    try:
        for _ in range(limit):
            response = await client.post("/api/v1/auth/check-session")
            assert response.status_code == 200
        response = await client.post("/api/v1/auth/check-session")
        assert response.status_code == 429
        assert response.json()["success"] is False
    finally:
        limiter.enabled = False


# ---- profile ----


async def test_update_profile(client: AsyncClient, make_user, login) -> None:
    """PUT /auth/profile updates name, email and phone."""
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.put(
        "/api/v1/auth/profile",
        json={"name": "New Name", "email": "new@example.com", "phone": "0812345"},
        headers=_auth(token),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "New Name"
    assert data["email"] == "new@example.com"
    assert data["phone"] == "0812345"


async def test_update_profile_email_taken(client: AsyncClient, make_user, login) -> None:
    """Another user's email is rejected under the email field."""
    await make_user(EMAIL)
    await make_user("other@example.com")
    token = await login(EMAIL)
    response = await client.put(
        "/api/v1/auth/profile",
        json={"name": "Staff", "email": "other@example.com"},
        headers=_auth(token),
    )
    assert response.status_code == 422
    assert "email" in response.json()["errors"]


async def test_update_profile_keeps_own_email(client: AsyncClient, make_user, login) -> None:
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.put(
        "/api/v1/auth/profile",
        json={"name": "Renamed", "email": EMAIL},
        headers=_auth(token),
    )
    assert response.status_code == 200


async def test_update_profile_without_phone_keeps_it(
    client: AsyncClient, make_user, login
) -> None:
    await make_user(EMAIL)
    token = await login(EMAIL)
    await client.put(
        "/api/v1/auth/profile",
        json={"name": "Staff", "email": EMAIL, "phone": "0812345"},
        headers=_auth(token),
    )
    response = await client.put(
        "/api/v1/auth/profile",
        json={"name": "Renamed", "email": EMAIL},
        headers=_auth(token),
    )
    assert response.status_code == 200
    assert response.json()["data"]["phone"] == "0812345"

    cleared = await client.put(
        "/api/v1/auth/profile",
        json={"name": "Renamed", "email": EMAIL, "phone": ""},
        headers=_auth(token),
    )
    assert cleared.json()["data"]["phone"] is None


async def test_change_password(client: AsyncClient, make_user, login) -> None:
    """A changed password works for the next login; the old one does not."""
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.put(
        "/api/v1/auth/change-password",
        json={
            "current_password": PASSWORD,
            "new_password": "Changed456$",
            "new_password_confirmation": "Changed456$",
        },
        headers=_auth(token),
    )
    assert response.status_code == 200
    await client.post("/api/v1/auth/logout", headers=_auth(token))

    old = await client.post("/api/v1/auth/login", json={"email": EMAIL, "password": PASSWORD})
    assert old.status_code == 401
    new = await client.post(
        "/api/v1/auth/login", json={"email": EMAIL, "password": "Changed456$"}
    )
    assert new.status_code == 200


async def test_change_password_wrong_current(client: AsyncClient, make_user, login) -> None:
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.put(
        "/api/v1/auth/change-password",
        json={
            "current_password": "Wrong123!",
            "new_password": "Changed456$",
            "new_password_confirmation": "Changed456$",
        },
        headers=_auth(token),
    )
    assert response.status_code == 422
    assert "current_password" in response.json()["errors"]


@pytest.mark.parametrize(
    ("new_password", "confirmation", "field"),
    [
        ("short1!", "short1!", "new_password"),
        ("alllowercase1!", "alllowercase1!", "new_password"),
        ("Changed456$", "Different456$", "new_password_confirmation"),
    ],
)
async def test_change_password_rules(
    client: AsyncClient, make_user, login, new_password: str, confirmation: str, field: str
) -> None:
    """Length, character classes and confirmation are enforced per field."""
    await make_user(EMAIL)
    token = await login(EMAIL)
    response = await client.put(
        "/api/v1/auth/change-password",
        json={
            "current_password": PASSWORD,
            "new_password": new_password,
            "new_password_confirmation": confirmation,
        },
        headers=_auth(token),
    )
    assert response.status_code == 422
    assert field in response.json()["errors"]
