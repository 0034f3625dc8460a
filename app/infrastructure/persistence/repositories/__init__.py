"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.active_session_repo import (
    ActiveSessionRepository,
)
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.password_reset_otp_repo import (
    PasswordResetOTPRepository,
)
from app.infrastructure.persistence.repositories.unit_repo import UnitRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "ActiveSessionRepository",
    "BaseRepository",
    "PasswordResetOTPRepository",
    "UnitRepository",
    "UserRepository",
]
