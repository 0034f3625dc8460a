"""Email senders: log-only (development) and SMTP."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any

from app.domain.exceptions import EmailDeliveryException
from app.infrastructure.external.email.templates import EmailTemplateRenderer
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyEmailSender:
    """EmailSender implementation that logs instead of sending email.

    Use when no SMTP is configured. The rendered body (which may contain an
    OTP) is logged at DEBUG only.
    """

    def __init__(self, renderer: EmailTemplateRenderer | None = None) -> None:
        self._renderer = renderer or EmailTemplateRenderer()

    async def send(
        self,
        template: str,
        recipient: str,
        variables: dict[str, Any],
    ) -> None:
        """Render and log the message; no actual email sent."""
        message = self._renderer.render(template, recipient, variables)
        logger.info(
            "Email: would send %r to %s (subject=%r)",
            template,
            recipient,
            message.subject[:80],
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Email body (first 500 chars): %s", message.text_body[:500])


class SmtpEmailSender:
    """EmailSender implementation over SMTP (STARTTLS optional).

    smtplib is blocking; each send runs in a worker thread.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        use_tls: bool,
        from_address: str,
        from_name: str,
        timeout_seconds: int = 30,
        renderer: EmailTemplateRenderer | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._from = formataddr((from_name, from_address))
        self._timeout = timeout_seconds
        self._renderer = renderer or EmailTemplateRenderer()

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username and self._password:
                smtp.login(self._username, self._password)
            smtp.send_message(message)

    async def send(
        self,
        template: str,
        recipient: str,
        variables: dict[str, Any],
    ) -> None:
        """Render and deliver. Raises EmailDeliveryException on SMTP or socket failure."""
        rendered = self._renderer.render(template, recipient, variables)
        message = EmailMessage()
        message["Subject"] = rendered.subject
        message["From"] = self._from
        message["To"] = rendered.recipient
        message.set_content(rendered.text_body)
        if rendered.html_body:
            message.add_alternative(rendered.html_body, subtype="html")
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery of %r to %s failed: %s", template, recipient, e)
            raise EmailDeliveryException(recipient, str(e)) from e
        logger.info("Email %r sent to %s", template, recipient)
