"""Password reset OTP store: create, verify, redeem, purge per email."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.password_reset_otp import PasswordResetOTP
from app.infrastructure.persistence.repositories.base import BaseRepository


class PasswordResetOTPRepository(BaseRepository[PasswordResetOTP]):
    """OTP rows for the forgot-password flow."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PasswordResetOTP)

    async def add(self, email: str, otp: str, expires_at: datetime) -> PasswordResetOTP:
        return await self.create(
            PasswordResetOTP(
                email=email, otp=otp, expires_at=expires_at, is_verified=False
            )
        )

    async def find_pending(
        self, email: str, otp: str, now: datetime
    ) -> PasswordResetOTP | None:
        """Newest unverified, unexpired row for email/otp."""
        result = await self.db.execute(
            select(PasswordResetOTP)
            .where(PasswordResetOTP.email == email)
            .where(PasswordResetOTP.otp == otp)
            .where(PasswordResetOTP.is_verified.is_(False))
            .where(PasswordResetOTP.expires_at > now)
            .order_by(PasswordResetOTP.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_verified(
        self, email: str, otp: str, now: datetime
    ) -> PasswordResetOTP | None:
        """Newest verified, unexpired row for email/otp (ready to redeem)."""
        result = await self.db.execute(
            select(PasswordResetOTP)
            .where(PasswordResetOTP.email == email)
            .where(PasswordResetOTP.otp == otp)
            .where(PasswordResetOTP.is_verified.is_(True))
            .where(PasswordResetOTP.expires_at > now)
            .order_by(PasswordResetOTP.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def mark_verified(self, row: PasswordResetOTP) -> PasswordResetOTP:
        row.is_verified = True
        return await self.update(row)

    async def delete_for_email(self, email: str) -> int:
        result = await self.db.execute(
            delete(PasswordResetOTP)
            .where(PasswordResetOTP.email == email)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
