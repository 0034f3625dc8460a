"""One-time password for the forgot-password flow. Keyed by email, not user id."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import OrgChartModel


class PasswordResetOTP(OrgChartModel, Base):
    """6-digit reset code. Valid while is_verified is false and expires_at is in the future."""

    __tablename__ = "password_reset_otps"

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    otp: Mapped[str] = mapped_column(String(6), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
