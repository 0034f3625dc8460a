"""Auth API schemas: login, session, profile, password change and reset."""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from app.schemas.common import blank_to_none
from app.schemas.user import UserResponse

# At least one lower, one upper, one digit and one of @$!%*#?&.
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*#?&]).+$")
PASSWORD_RULE_MESSAGE = (
    "The password must contain an uppercase letter, a lowercase letter, "
    "a number and a special character (@$!%*#?&)."
)


class LoginRequest(BaseModel):
    """Request body for login. email accepts an email address or a username."""

    email: str = Field(..., min_length=1, max_length=255, description="Email or username")
    password: str = Field(..., min_length=6)
    device_name: str | None = Field(default=None, max_length=255)
    force_logout: bool = Field(
        default=False, description="End the other device's session instead of failing"
    )


class TokenResponse(BaseModel):
    """Bearer token and its lifetime in seconds."""

    token: str
    token_type: str = "bearer"
    expires_in: int


class SessionResponse(BaseModel):
    """Device details of an active session."""

    device_name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    last_activity: datetime | None = None


class LoginResponse(TokenResponse):
    """Successful login payload."""

    user: UserResponse
    session: SessionResponse


class SessionCheckResponse(BaseModel):
    """Result of POST /auth/check-session."""

    valid: bool
    user: UserResponse | None = None
    session: SessionResponse | None = None


class ProfileUpdateRequest(BaseModel):
    """Request body for PUT /auth/profile."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=20)

    @field_validator("phone", mode="before")
    @classmethod
    def blank_phone_to_none(cls, v: object) -> object:
        return blank_to_none(v)


class ChangePasswordRequest(BaseModel):
    """Request body for PUT /auth/change-password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)
    new_password_confirmation: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(PASSWORD_RULE_MESSAGE)
        return v

    @field_validator("new_password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "new_password" in info.data and v != info.data["new_password"]:
            raise ValueError("The new password confirmation does not match.")
        return v


class PasswordResetRequest(BaseModel):
    """Request body for POST /auth/password/reset/request."""

    email: EmailStr


class PasswordResetVerifyRequest(BaseModel):
    """Request body for POST /auth/password/reset/verify."""

    email: EmailStr
    otp: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")


class PasswordResetConfirmRequest(PasswordResetVerifyRequest):
    """Request body for POST /auth/password/reset."""

    password: str = Field(..., min_length=8)
    password_confirmation: str

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(PASSWORD_RULE_MESSAGE)
        return v

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("The password confirmation does not match.")
        return v
