"""Forgot-password flow: email a one-time code, verify it, then set a new password."""

from __future__ import annotations

from datetime import timedelta

from app.application.interfaces.repositories import (
    IActiveSessionRepository,
    IPasswordResetOTPRepository,
    IUserRepository,
)
from app.application.interfaces.services import IEmailSender
from app.domain.exceptions import ValidationException
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_otp

logger = get_logger(__name__)

OTP_TEMPLATE = "password_reset_otp"


class PasswordResetService:
    """request → verify → reset. Each step runs in the caller's transaction."""

    def __init__(
        self,
        user_repo: IUserRepository,
        otp_repo: IPasswordResetOTPRepository,
        session_repo: IActiveSessionRepository,
        email_sender: IEmailSender,
        ttl_minutes: int = 10,
        app_name: str = "orgchart",
    ) -> None:
        self.user_repo = user_repo
        self.otp_repo = otp_repo
        self.session_repo = session_repo
        self.email_sender = email_sender
        self.ttl_minutes = ttl_minutes
        self.app_name = app_name

    async def request(self, email: str) -> None:
        """Create an OTP for a registered email and send it.

        Raises:
            ValidationException: No user has this email.
            EmailDeliveryException: Mail backend failed (transaction rolls back).
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise ValidationException(
                "We could not find a user with that email address.", field="email"
            )
        otp = generate_otp()
        expires_at = utc_now() + timedelta(minutes=self.ttl_minutes)
        await self.otp_repo.add(email, otp, expires_at)
        await self.email_sender.send(
            OTP_TEMPLATE,
            email,
            {
                "user_name": user.name,
                "otp": otp,
                "ttl_minutes": self.ttl_minutes,
                "app_name": self.app_name,
            },
        )
        logger.info("Password reset OTP issued for user_id=%s", user.id)

    async def verify(self, email: str, otp: str) -> None:
        """Mark the matching unverified, unexpired OTP as verified.

        Raises:
            ValidationException: No such pending OTP (wrong, expired, or already used).
        """
        row = await self.otp_repo.find_pending(email, otp, utc_now())
        if row is None:
            raise ValidationException("The OTP code is invalid or has expired.", field="otp")
        await self.otp_repo.mark_verified(row)

    async def reset(self, email: str, otp: str, password: str) -> None:
        """Set a new password using a verified OTP.

        Deletes every OTP row for the email and ends the user's session, so
        all devices must log in again with the new password.

        Raises:
            ValidationException: OTP not verified/expired, or email unknown.
        """
        row = await self.otp_repo.find_verified(email, otp, utc_now())
        if row is None:
            raise ValidationException(
                "The OTP code has not been verified or has expired.", field="otp"
            )
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise ValidationException(
                "We could not find a user with that email address.", field="email"
            )
        await self.user_repo.update_password(user, password)
        await self.otp_repo.delete_for_email(email)
        await self.session_repo.delete_for_user(user.id)
        logger.info("Password reset completed for user_id=%s", user.id)
