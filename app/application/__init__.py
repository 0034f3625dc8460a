"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repos, storage, mail, tokens).
"""

from app.application.services import (
    OrgChartService,
    PasswordResetService,
    ProfileService,
    SessionService,
)

__all__ = [
    "OrgChartService",
    "PasswordResetService",
    "ProfileService",
    "SessionService",
]
