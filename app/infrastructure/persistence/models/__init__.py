"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.active_session import ActiveSession
from app.infrastructure.persistence.models.mixins import (
    IntegerIdMixin,
    OrgChartModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.password_reset_otp import PasswordResetOTP
from app.infrastructure.persistence.models.unit import Unit
from app.infrastructure.persistence.models.user import User

__all__ = [
    "ActiveSession",
    "PasswordResetOTP",
    "Unit",
    "User",
    "IntegerIdMixin",
    "OrgChartModel",
    "TimestampMixin",
]
