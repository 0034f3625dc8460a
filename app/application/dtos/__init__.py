"""Application DTOs (no ORM dependency)."""

from app.application.dtos.org_chart import (
    OrgChartResult,
    UnitNode,
    UnitResult,
    unit_to_result,
)
from app.application.dtos.session import (
    DeviceContext,
    LoginResult,
    SessionCheckResult,
    SessionInfo,
    TokenResult,
    session_to_info,
)
from app.application.dtos.user import AuthenticatedUser, UserResult, user_to_result

__all__ = [
    "AuthenticatedUser",
    "DeviceContext",
    "LoginResult",
    "OrgChartResult",
    "SessionCheckResult",
    "SessionInfo",
    "TokenResult",
    "UnitNode",
    "UnitResult",
    "UserResult",
    "session_to_info",
    "unit_to_result",
    "user_to_result",
]
