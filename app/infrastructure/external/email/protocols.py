"""Outgoing email protocol and message structure (backend-agnostic)."""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class OutgoingEmail:
    """Rendered message ready for delivery."""

    recipient: str
    subject: str
    text_body: str
    html_body: str | None = None


class EmailSender(Protocol):
    """Email delivery interface (DIP). Implementations: LogOnlyEmailSender, SmtpEmailSender."""

    async def send(
        self,
        template: str,
        recipient: str,
        variables: dict[str, Any],
    ) -> None:
        """Render template with variables and deliver to recipient.

        Raises:
            EmailDeliveryException: If the backend could not deliver.
        """
        ...
