"""Unit tests for SessionService with mocked repositories (no database)."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.application.dtos.session import DeviceContext
from app.application.services.session_service import (
    MAX_SESSION_INSERT_ATTEMPTS,
    SessionService,
)
from app.core.limiter import LoginAttemptTracker
from app.domain.exceptions import (
    AccountInactiveException,
    AuthenticationException,
    InvalidCredentialsException,
    SessionConflictException,
    TooManyAttemptsException,
)
from app.infrastructure.security.jwt import IssuedToken

NOW = datetime(2024, 5, 1, 8, 0, tzinfo=UTC)
DEVICE = DeviceContext(device_name="Laptop", ip_address="10.0.0.1", user_agent="ua")


def _user(**overrides):
    values = dict(
        id=1,
        name="Staff",
        email="staff@example.com",
        username=None,
        employee_id=None,
        phone=None,
        role="sdm",
        unit_id=None,
        assigned_at=None,
        is_active=True,
        avatar=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _session_row(token_id: str = "tok-1", device_name: str = "Office PC"):
    return SimpleNamespace(
        token_id=token_id,
        device_name=device_name,
        ip_address="10.0.0.9",
        user_agent="other",
        last_activity=NOW,
    )


def _integrity_error() -> IntegrityError:
    return IntegrityError("INSERT INTO active_sessions", {}, Exception("UNIQUE"))


@pytest.fixture
def user_repo():
    repo = MagicMock()
    repo.authenticate = AsyncMock(return_value=_user())
    repo.get_by_id = AsyncMock(return_value=_user())
    return repo


@pytest.fixture
def session_repo():
    repo = MagicMock()
    repo.get_by_user_id = AsyncMock(return_value=None)
    repo.get_for_token = AsyncMock(return_value=_session_row())
    repo.insert = AsyncMock(
        side_effect=lambda **kw: _session_row(kw["token_id"], kw["device_name"])
    )
    repo.delete_for_user = AsyncMock(return_value=1)
    repo.rotate_token = AsyncMock()
    return repo


@pytest.fixture
def token_issuer():
    issuer = MagicMock()
    counter = iter(range(1, 100))

    def _issue(user_id: int) -> IssuedToken:
        n = next(counter)
        return IssuedToken(token=f"jwt-{n}", token_id=f"tok-{n}", expires_in=3600)

    issuer.issue.side_effect = _issue
    issuer.decode.return_value = (1, "tok-old")
    return issuer


@pytest.fixture
def service(user_repo, session_repo, token_issuer) -> SessionService:
    return SessionService(
        user_repo=user_repo,
        session_repo=session_repo,
        token_issuer=token_issuer,
        login_attempts=LoginAttemptTracker(max_attempts=3, window_seconds=60),
    )


async def test_login_creates_session(service: SessionService, session_repo) -> None:
    result = await service.login("staff@example.com", "pw", False, DEVICE)
    assert result.token.token == "jwt-1"
    assert result.session.device_name == "Laptop"
    assert session_repo.insert.await_args.kwargs["token_id"] == "tok-1"
    session_repo.delete_for_user.assert_not_awaited()


async def test_login_conflict_without_force(service: SessionService, session_repo) -> None:
    """An existing session is reported and left in place."""
    session_repo.get_by_user_id.return_value = _session_row()
    with pytest.raises(SessionConflictException) as exc_info:
        await service.login("staff@example.com", "pw", False, DEVICE)
    assert exc_info.value.details["existing_session"]["device_name"] == "Office PC"
    session_repo.delete_for_user.assert_not_awaited()
    session_repo.insert.assert_not_awaited()


async def test_login_force_replaces_session(service: SessionService, session_repo) -> None:
    session_repo.get_by_user_id.return_value = _session_row()
    result = await service.login("staff@example.com", "pw", True, DEVICE)
    session_repo.delete_for_user.assert_awaited_once_with(1)
    assert result.session.device_name == "Laptop"


async def test_login_race_reports_conflict(service: SessionService, session_repo) -> None:
    """Losing the insert race re-reads the winner and reports it."""
    session_repo.get_by_user_id.side_effect = [None, _session_row(device_name="Phone")]
    session_repo.insert.side_effect = _integrity_error()
    with pytest.raises(SessionConflictException) as exc_info:
        await service.login("staff@example.com", "pw", False, DEVICE)
    assert exc_info.value.details["existing_session"]["device_name"] == "Phone"


async def test_login_race_with_force_retries(service: SessionService, session_repo) -> None:
    """With force_logout the loser ends the winner's session and inserts again."""
    winner = _session_row(device_name="Phone")
    session_repo.get_by_user_id.side_effect = [None, winner]
    session_repo.insert.side_effect = [
        _integrity_error(),
        _session_row("tok-2", "Laptop"),
    ]
    result = await service.login("staff@example.com", "pw", True, DEVICE)
    assert result.token.token == "jwt-2"
    session_repo.delete_for_user.assert_awaited_once_with(1)


async def test_login_gives_up_after_repeated_races(
    service: SessionService, session_repo
) -> None:
    session_repo.insert.side_effect = _integrity_error()
    with pytest.raises(IntegrityError):
        await service.login("staff@example.com", "pw", True, DEVICE)
    assert session_repo.insert.await_count == MAX_SESSION_INSERT_ATTEMPTS


async def test_login_invalid_credentials_counts_failure(
    service: SessionService, user_repo
) -> None:
    user_repo.authenticate.return_value = None
    for _ in range(3):
        with pytest.raises(InvalidCredentialsException):
            await service.login("staff@example.com", "bad", False, DEVICE)
    with pytest.raises(TooManyAttemptsException):
        await service.login("staff@example.com", "bad", False, DEVICE)


async def test_login_inactive_user(service: SessionService, user_repo, session_repo) -> None:
    user_repo.authenticate.return_value = _user(is_active=False)
    with pytest.raises(AccountInactiveException):
        await service.login("staff@example.com", "pw", False, DEVICE)
    session_repo.insert.assert_not_awaited()


async def test_authenticate_accepts_live_session(service: SessionService) -> None:
    current = await service.authenticate("jwt-1")
    assert current.id == 1
    assert current.token_id == "tok-old"


async def test_authenticate_rejects_replaced_token(
    service: SessionService, session_repo
) -> None:
    session_repo.get_for_token.return_value = None
    with pytest.raises(AuthenticationException):
        await service.authenticate("jwt-1")


async def test_authenticate_rejects_undecodable_token(
    service: SessionService, token_issuer
) -> None:
    token_issuer.decode.side_effect = ValueError("bad")
    with pytest.raises(AuthenticationException):
        await service.authenticate("garbage")


async def test_authenticate_rejects_inactive_user(service: SessionService, user_repo) -> None:
    user_repo.get_by_id.return_value = _user(is_active=False)
    with pytest.raises(AuthenticationException):
        await service.authenticate("jwt-1")


async def test_check_session_never_raises(service: SessionService, token_issuer) -> None:
    assert (await service.check_session(None)).valid is False
    token_issuer.decode.side_effect = ValueError("bad")
    assert (await service.check_session("garbage")).valid is False


async def test_check_session_does_not_touch_session(
    service: SessionService, session_repo
) -> None:
    result = await service.check_session("jwt-1")
    assert result.valid is True
    session_repo.rotate_token.assert_not_awaited()
    session_repo.delete_for_user.assert_not_awaited()


async def test_refresh_rotates_token_id(service: SessionService, session_repo) -> None:
    current = await service.authenticate("jwt-1")
    token = await service.refresh(current)
    assert token.token == "jwt-1"
    session_repo.get_for_token.assert_awaited_with(1, "tok-old")
    _, new_token_id, _ = session_repo.rotate_token.await_args.args
    assert new_token_id == "tok-1"


async def test_logout_deletes_session(service: SessionService, session_repo) -> None:
    current = await service.authenticate("jwt-1")
    await service.logout(current)
    session_repo.delete_for_user.assert_awaited_once_with(1)
