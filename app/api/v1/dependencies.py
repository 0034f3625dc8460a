"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the DB session and application services.
All services are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.

Every service for one request shares the session from
get_db_transactional, so the auth gate and the endpoint run in one
transaction (commit on success, rollback on error).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import AuthenticatedUser
from app.application.interfaces.services import IEmailSender, IStorageService
from app.application.services import (
    OrgChartService,
    PasswordResetService,
    ProfileService,
    SessionService,
)
from app.core.config import get_settings
from app.core.limiter import login_attempts
from app.domain.enums import UserRole
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.external.email.factory import EmailSenderFactory
from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.persistence.database import get_db_transactional
from app.infrastructure.persistence.repositories import (
    ActiveSessionRepository,
    PasswordResetOTPRepository,
    UnitRepository,
    UserRepository,
)
from app.infrastructure.security.jwt import TokenIssuer
from app.infrastructure.security.password import PasswordHasher

_http_bearer = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db_transactional)]


def get_storage() -> IStorageService:
    """File storage for avatars (composition root; overridden in tests)."""
    return StorageFactory.create_storage_service(get_settings())


def get_email_sender() -> IEmailSender:
    """Outgoing mail backend (composition root; overridden in tests)."""
    return EmailSenderFactory.create_sender(get_settings())


def get_session_service(db: DbSession) -> SessionService:
    return SessionService(
        user_repo=UserRepository(db),
        session_repo=ActiveSessionRepository(db),
        token_issuer=TokenIssuer(),
        login_attempts=login_attempts,
    )


def get_password_reset_service(
    db: DbSession,
    email_sender: Annotated[IEmailSender, Depends(get_email_sender)],
) -> PasswordResetService:
    settings = get_settings()
    return PasswordResetService(
        user_repo=UserRepository(db),
        otp_repo=PasswordResetOTPRepository(db),
        session_repo=ActiveSessionRepository(db),
        email_sender=email_sender,
        ttl_minutes=settings.otp_ttl_minutes,
        app_name=settings.app_name,
    )


def get_profile_service(
    db: DbSession,
    storage: Annotated[IStorageService, Depends(get_storage)],
) -> ProfileService:
    settings = get_settings()
    return ProfileService(
        user_repo=UserRepository(db),
        unit_repo=UnitRepository(db),
        storage=storage,
        hasher=PasswordHasher(),
        avatar_max_bytes=settings.avatar_max_bytes,
        avatar_max_width=settings.avatar_max_width,
        avatar_max_height=settings.avatar_max_height,
    )


def get_org_chart_service(
    db: DbSession,
    storage: Annotated[IStorageService, Depends(get_storage)],
) -> OrgChartService:
    return OrgChartService(
        unit_repo=UnitRepository(db),
        user_repo=UserRepository(db),
        storage=storage,
        hasher=PasswordHasher(),
    )


async def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Raw bearer token from the Authorization header, if any."""
    return credentials.credentials if credentials else None


async def get_current_user(
    token: Annotated[str | None, Depends(get_bearer_token)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> AuthenticatedUser:
    """Return the caller; 401 unless the token belongs to a live session of an active user."""
    if not token:
        raise AuthenticationException("Not authenticated")
    return await session_service.authenticate(token)


def require_roles(*roles: UserRole):
    """Dependency factory: require an authenticated user holding one of roles."""
    allowed = [r.value for r in roles]

    async def _require(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if current_user.role not in allowed:
            raise AuthorizationException(
                required_roles=allowed,
                your_role=current_user.role,
            )
        return current_user

    return _require


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
