"""DTOs for session (login, refresh, check) use cases."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.application.dtos.user import UserResult
from app.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class DeviceContext:
    """Client details recorded on a new session."""

    device_name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class SessionInfo:
    """Read-model of an ActiveSession row (token id is never exposed)."""

    device_name: str | None
    ip_address: str | None
    user_agent: str | None
    last_activity: datetime | None


def session_to_info(s: Any) -> SessionInfo:
    return SessionInfo(
        device_name=s.device_name,
        ip_address=s.ip_address,
        user_agent=s.user_agent,
        last_activity=ensure_utc(s.last_activity),
    )


@dataclass(frozen=True)
class TokenResult:
    """Bearer credential handed to the client."""

    token: str
    token_type: str
    expires_in: int


@dataclass(frozen=True)
class LoginResult:
    """Successful login: credential, profile and the session it opened."""

    user: UserResult
    token: TokenResult
    session: SessionInfo


@dataclass(frozen=True)
class SessionCheckResult:
    """Outcome of a read-only session probe."""

    valid: bool
    user: UserResult | None = None
    session: SessionInfo | None = None
