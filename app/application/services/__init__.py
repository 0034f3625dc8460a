"""Application services: sessions, password reset, profile, org chart."""

from app.application.services.org_chart_service import OrgChartService
from app.application.services.password_reset_service import PasswordResetService
from app.application.services.profile_service import ProfileService
from app.application.services.session_service import SessionService

__all__ = [
    "OrgChartService",
    "PasswordResetService",
    "ProfileService",
    "SessionService",
]
