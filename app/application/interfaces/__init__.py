"""Application ports: repository and collaborator protocols."""

from app.application.interfaces.repositories import (
    IActiveSessionRepository,
    IPasswordResetOTPRepository,
    IUnitRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    IEmailSender,
    ILoginAttemptTracker,
    IPasswordHasher,
    IStorageService,
    ITokenIssuer,
)

__all__ = [
    "IActiveSessionRepository",
    "IEmailSender",
    "ILoginAttemptTracker",
    "IPasswordHasher",
    "IPasswordResetOTPRepository",
    "IStorageService",
    "ITokenIssuer",
    "IUnitRepository",
    "IUserRepository",
]
