"""Unit tests for email templates, senders and factory."""

import smtplib

import pytest
from jinja2 import UndefinedError

from app.core.config import get_settings
from app.domain.exceptions import EmailDeliveryException
from app.infrastructure.external.email import (
    EmailSenderFactory,
    EmailTemplateRenderer,
    LogOnlyEmailSender,
    SmtpEmailSender,
)

VARIABLES = {"user_name": "Staff", "otp": "123456", "ttl_minutes": 10, "app_name": "orgchart"}


def test_reset_template_renders_code_and_expiry() -> None:
    message = EmailTemplateRenderer().render("password_reset_otp", "a@example.com", VARIABLES)
    assert message.recipient == "a@example.com"
    assert message.subject == "Password Reset OTP - orgchart"
    assert "123456" in message.text_body
    assert "10 minutes" in message.text_body
    assert "123456" in message.html_body


def test_html_body_escapes_variables() -> None:
    message = EmailTemplateRenderer().render(
        "password_reset_otp", "a@example.com", {**VARIABLES, "user_name": "<b>x</b>"}
    )
    assert "<b>x</b>" not in message.html_body
    assert "&lt;b&gt;" in message.html_body


def test_unknown_template_raises() -> None:
    with pytest.raises(KeyError):
        EmailTemplateRenderer().render("nope", "a@example.com", {})


def test_missing_variable_raises() -> None:
    with pytest.raises(UndefinedError):
        EmailTemplateRenderer().render("password_reset_otp", "a@example.com", {"otp": "1"})


async def test_log_only_sender_does_not_fail() -> None:
    await LogOnlyEmailSender().send("password_reset_otp", "a@example.com", VARIABLES)


class _FakeSMTP:
    instances: list["_FakeSMTP"] = []

    def __init__(self, host: str, port: int, timeout: int) -> None:
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in: tuple[str, str] | None = None
        self.messages: list = []
        _FakeSMTP.instances.append(self)

    def __enter__(self) -> "_FakeSMTP":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def starttls(self) -> None:
        self.started_tls = True

    def login(self, username: str, password: str) -> None:
        self.logged_in = (username, password)

    def send_message(self, message) -> None:
        self.messages.append(message)


def _smtp_sender() -> SmtpEmailSender:
    return SmtpEmailSender(
        host="smtp.example.com",
        port=587,
        username="mailer",
        password="secret",
        use_tls=True,
        from_address="no-reply@example.com",
        from_name="Org Chart",
    )


async def test_smtp_sender_delivers(monkeypatch: pytest.MonkeyPatch) -> None:
    _FakeSMTP.instances.clear()
    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)
    await _smtp_sender().send("password_reset_otp", "a@example.com", VARIABLES)
    smtp = _FakeSMTP.instances[-1]
    assert smtp.started_tls is True
    assert smtp.logged_in == ("mailer", "secret")
    message = smtp.messages[0]
    assert message["To"] == "a@example.com"
    assert message["Subject"] == "Password Reset OTP - orgchart"
    assert "Org Chart" in message["From"]


async def test_smtp_failure_raises_delivery_exception(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(smtplib, "SMTP", _refuse)
    with pytest.raises(EmailDeliveryException) as exc_info:
        await _smtp_sender().send("password_reset_otp", "a@example.com", VARIABLES)
    assert "refused" in exc_info.value.reason


def test_factory_log_backend() -> None:
    assert isinstance(EmailSenderFactory.create_sender(get_settings()), LogOnlyEmailSender)


def test_factory_smtp_backend() -> None:
    settings = get_settings().model_copy(
        update={"mail_backend": "smtp", "smtp_host": "smtp.example.com"}
    )
    assert isinstance(EmailSenderFactory.create_sender(settings), SmtpEmailSender)


def test_factory_unknown_backend() -> None:
    settings = get_settings().model_copy(update={"mail_backend": "pigeon"})
    with pytest.raises(ValueError):
        EmailSenderFactory.create_sender(settings)
