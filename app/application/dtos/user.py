"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class UserResult:
    """User read-model (profile, chart members, admin results). No password."""

    id: int
    name: str
    email: str
    username: str | None
    employee_id: str | None
    phone: str | None
    role: str
    unit_id: int | None
    assigned_at: datetime | None
    is_active: bool
    avatar: str | None


def user_to_result(u: Any) -> UserResult:
    """Map a user entity to UserResult."""
    return UserResult(
        id=u.id,
        name=u.name,
        email=u.email,
        username=u.username,
        employee_id=u.employee_id,
        phone=u.phone,
        role=u.role,
        unit_id=u.unit_id,
        assigned_at=ensure_utc(u.assigned_at),
        is_active=u.is_active,
        avatar=u.avatar,
    )


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller behind a bearer token: the user plus the token id it presented."""

    user: UserResult
    token_id: str

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role
