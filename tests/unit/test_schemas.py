"""Unit tests for request schema validation (app.schemas)."""

import pytest
from pydantic import ValidationError

from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordResetConfirmRequest,
    PasswordResetVerifyRequest,
)
from app.schemas.org_chart import UnitWriteRequest, UserCreateRequest, UserUpdateRequest


def _error_fields(exc: ValidationError) -> set[str]:
    return {str(e["loc"][0]) for e in exc.errors()}


def test_login_defaults() -> None:
    body = LoginRequest(email="staff", password="secret1")
    assert body.force_logout is False
    assert body.device_name is None


@pytest.mark.parametrize(
    "password",
    ["Secret123!", "aB3@aaaa", "Zz9#zzzzzz"],
)
def test_strong_passwords_accepted(password: str) -> None:
    ChangePasswordRequest(
        current_password="old",
        new_password=password,
        new_password_confirmation=password,
    )


@pytest.mark.parametrize(
    "password",
    ["secret123!", "SECRET123!", "Secret!!!!", "Secret1234", "S3c!"],
)
def test_weak_passwords_rejected(password: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        ChangePasswordRequest(
            current_password="old",
            new_password=password,
            new_password_confirmation=password,
        )
    assert _error_fields(exc_info.value) == {"new_password"}


def test_confirmation_mismatch_is_reported_on_confirmation() -> None:
    with pytest.raises(ValidationError) as exc_info:
        PasswordResetConfirmRequest(
            email="a@example.com",
            otp="123456",
            password="Secret123!",
            password_confirmation="Secret123?",
        )
    assert _error_fields(exc_info.value) == {"password_confirmation"}


@pytest.mark.parametrize("otp", ["12345", "1234567", "12a456", ""])
def test_otp_must_be_six_digits(otp: str) -> None:
    with pytest.raises(ValidationError):
        PasswordResetVerifyRequest(email="a@example.com", otp=otp)


def test_unit_write_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError) as exc_info:
        UnitWriteRequest(code="X", name="X", type="faculty", role="unit")
    assert _error_fields(exc_info.value) == {"type"}


def test_unit_write_defaults_active() -> None:
    assert UnitWriteRequest(code="X", name="X", type="unit", role="unit").is_active is True


def test_user_create_requires_matching_confirmation() -> None:
    with pytest.raises(ValidationError) as exc_info:
        UserCreateRequest(
            name="A",
            email="a@example.com",
            password="password1",
            password_confirmation="password2",
        )
    assert _error_fields(exc_info.value) == {"password_confirmation"}


def test_user_update_password_optional() -> None:
    body = UserUpdateRequest(name="A", email="a@example.com", password="")
    assert body.password == ""


def test_user_update_short_password_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        UserUpdateRequest(
            name="A", email="a@example.com", password="short", password_confirmation="short"
        )
    assert "password" in _error_fields(exc_info.value)


def test_blank_identifiers_become_none() -> None:
    body = UserCreateRequest(
        name="A",
        email="a@example.com",
        username="",
        employee_id="   ",
        phone="",
        password="password1",
        password_confirmation="password1",
    )
    assert (body.username, body.employee_id, body.phone) == (None, None, None)


def test_user_update_dump_skips_omitted_fields() -> None:
    body = UserUpdateRequest(name="A", email="a@example.com")
    assert body.model_dump(exclude_unset=True) == {"name": "A", "email": "a@example.com"}
