"""Email sender factory: creates log-only or SMTP sender from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.infrastructure.external.email.protocols import EmailSender
from app.infrastructure.external.email.senders import LogOnlyEmailSender, SmtpEmailSender
from app.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from app.core.config import Settings

logger = get_logger(__name__)


class EmailSenderFactory:
    """Factory for email sender instances based on configuration."""

    @staticmethod
    def create_sender(settings: "Settings | None" = None) -> EmailSender:
        """Create email sender from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            LogOnlyEmailSender or SmtpEmailSender.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from app.core.config import get_settings

        s = settings or get_settings()
        backend = s.mail_backend.lower()

        if backend == "log":
            return LogOnlyEmailSender()
        if backend == "smtp":
            if not s.smtp_host:
                raise ValueError("SMTP_HOST required for smtp mail backend")
            logger.debug("Creating SmtpEmailSender for %s:%s", s.smtp_host, s.smtp_port)
            return SmtpEmailSender(
                host=s.smtp_host,
                port=s.smtp_port,
                username=s.smtp_username,
                password=(
                    s.smtp_password.get_secret_value() if s.smtp_password else None
                ),
                use_tls=s.smtp_use_tls,
                from_address=s.mail_from,
                from_name=s.mail_from_name,
                timeout_seconds=s.smtp_timeout_seconds,
            )
        raise ValueError(f"Unknown mail backend: {backend}. Supported: 'log', 'smtp'")
