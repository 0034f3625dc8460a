"""Pydantic request/response schemas for the API."""

from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    PasswordResetVerifyRequest,
    ProfileUpdateRequest,
    SessionCheckResponse,
    SessionResponse,
    TokenResponse,
)
from app.schemas.common import DataResponse, ErrorResponse, MessageResponse
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.org_chart import (
    AssignUserRequest,
    OrgChartResponse,
    UnitDeleteResponse,
    UnitNodeResponse,
    UnitWriteRequest,
    UserCreateRequest,
    UserUpdateRequest,
)
from app.schemas.user import ProfileResponse, UnitResponse, UserResponse

__all__ = [
    "AssignUserRequest",
    "ChangePasswordRequest",
    "DataResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "OrgChartResponse",
    "PasswordResetConfirmRequest",
    "PasswordResetRequest",
    "PasswordResetVerifyRequest",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ReadinessResponse",
    "SessionCheckResponse",
    "SessionResponse",
    "TokenResponse",
    "UnitDeleteResponse",
    "UnitNodeResponse",
    "UnitResponse",
    "UnitWriteRequest",
    "UserCreateRequest",
    "UserResponse",
    "UserUpdateRequest",
]
