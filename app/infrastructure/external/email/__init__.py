"""Email delivery: protocol, templates, senders, factory."""

from app.infrastructure.external.email.factory import EmailSenderFactory
from app.infrastructure.external.email.protocols import EmailSender, OutgoingEmail
from app.infrastructure.external.email.senders import LogOnlyEmailSender, SmtpEmailSender
from app.infrastructure.external.email.templates import EmailTemplateRenderer

__all__ = [
    "EmailSender",
    "EmailSenderFactory",
    "EmailTemplateRenderer",
    "LogOnlyEmailSender",
    "OutgoingEmail",
    "SmtpEmailSender",
]
