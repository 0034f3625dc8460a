"""Session authority: login with single-session enforcement, logout, refresh, probes.

Each user has at most one ActiveSession row. A login that finds one either
fails with SessionConflictException (so the client can ask for confirmation)
or, with force_logout, replaces it. The unique key on active_sessions.user_id
serializes concurrent logins: the loser's insert fails and the flow re-reads
the winner's row and resolves the conflict again.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from app.application.dtos.session import (
    DeviceContext,
    LoginResult,
    SessionCheckResult,
    TokenResult,
    session_to_info,
)
from app.application.dtos.user import AuthenticatedUser, user_to_result
from app.application.interfaces.repositories import (
    IActiveSessionRepository,
    IUserRepository,
)
from app.application.interfaces.services import ILoginAttemptTracker, ITokenIssuer
from app.domain.exceptions import (
    AccountInactiveException,
    AuthenticationException,
    InvalidCredentialsException,
    SessionConflictException,
)
from app.shared.context import set_current_user_id
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

# Attempts at inserting the session row before giving up on a login race.
MAX_SESSION_INSERT_ATTEMPTS = 3


class SessionService:
    """Login, logout, refresh, check_session and bearer authentication."""

    def __init__(
        self,
        user_repo: IUserRepository,
        session_repo: IActiveSessionRepository,
        token_issuer: ITokenIssuer,
        login_attempts: ILoginAttemptTracker,
    ) -> None:
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.token_issuer = token_issuer
        self.login_attempts = login_attempts

    async def login(
        self,
        identifier: str,
        password: str,
        force_logout: bool,
        device: DeviceContext,
    ) -> LoginResult:
        """Verify credentials and open the user's single session.

        Args:
            identifier: Email or username.
            password: Plaintext password.
            force_logout: End an existing session instead of reporting it.
            device: Device name, IP and user agent to record.

        Returns:
            LoginResult with the new token, profile and session info.

        Raises:
            TooManyAttemptsException: Identifier is locked out after repeated failures.
            InvalidCredentialsException: Unknown identifier or wrong password.
            AccountInactiveException: Credentials match a disabled account.
            SessionConflictException: Another session exists and force_logout is False.
        """
        self.login_attempts.check(identifier)
        user = await self.user_repo.authenticate(identifier, password)
        if user is None:
            self.login_attempts.hit(identifier)
            logger.warning("Failed login for identifier=%r", identifier)
            raise InvalidCredentialsException()
        if not user.is_active:
            logger.warning("Login refused for inactive user_id=%s", user.id)
            raise AccountInactiveException()

        for attempt in range(MAX_SESSION_INSERT_ATTEMPTS):
            existing = await self.session_repo.get_by_user_id(user.id)
            if existing is not None:
                if not force_logout:
                    raise SessionConflictException(
                        existing.device_name,
                        existing.ip_address,
                        existing.last_activity,
                    )
                await self.session_repo.delete_for_user(user.id)
                logger.info(
                    "Session takeover for user_id=%s (previous device=%r, ip=%s)",
                    user.id,
                    existing.device_name,
                    existing.ip_address,
                )

            issued = self.token_issuer.issue(user.id)
            try:
                session = await self.session_repo.insert(
                    user_id=user.id,
                    token_id=issued.token_id,
                    device_name=device.device_name,
                    ip_address=device.ip_address,
                    user_agent=device.user_agent,
                    now=utc_now(),
                )
            except IntegrityError:
                if attempt == MAX_SESSION_INSERT_ATTEMPTS - 1:
                    raise
                logger.info(
                    "Concurrent login for user_id=%s won the session insert; re-checking",
                    user.id,
                )
                continue

            self.login_attempts.clear(identifier)
            logger.info("User user_id=%s logged in (device=%r)", user.id, device.device_name)
            return LoginResult(
                user=user_to_result(user),
                token=TokenResult(
                    token=issued.token,
                    token_type=issued.token_type,
                    expires_in=issued.expires_in,
                ),
                session=session_to_info(session),
            )
        raise RuntimeError("login exhausted session insert attempts")  # unreachable

    async def logout(self, current: AuthenticatedUser) -> None:
        """End the caller's session. Deleting an already-absent row is not an error."""
        removed = await self.session_repo.delete_for_user(current.id)
        logger.info("User user_id=%s logged out (rows=%d)", current.id, removed)

    async def refresh(self, current: AuthenticatedUser) -> TokenResult:
        """Replace the presented token with a new one on the same session row."""
        session = await self.session_repo.get_for_token(current.id, current.token_id)
        if session is None:
            raise AuthenticationException("Session has ended. Please log in again.")
        issued = self.token_issuer.issue(current.id)
        await self.session_repo.rotate_token(session, issued.token_id, utc_now())
        return TokenResult(
            token=issued.token,
            token_type=issued.token_type,
            expires_in=issued.expires_in,
        )

    async def check_session(self, token: str | None) -> SessionCheckResult:
        """Report whether token still belongs to a live session. Never mutates."""
        if not token:
            return SessionCheckResult(valid=False)
        try:
            user_id, token_id = self.token_issuer.decode(token)
        except ValueError:
            return SessionCheckResult(valid=False)
        session = await self.session_repo.get_for_token(user_id, token_id)
        if session is None:
            return SessionCheckResult(valid=False)
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            return SessionCheckResult(valid=False)
        return SessionCheckResult(
            valid=True,
            user=user_to_result(user),
            session=session_to_info(session),
        )

    async def authenticate(self, token: str) -> AuthenticatedUser:
        """Resolve a bearer token to its user.

        The token must decode, its token id must be the one on the user's
        session row, and the user must be active.

        Raises:
            AuthenticationException: Token invalid, session ended, or user unusable.
        """
        try:
            user_id, token_id = self.token_issuer.decode(token)
        except ValueError as e:
            raise AuthenticationException("Invalid or expired token") from e
        session = await self.session_repo.get_for_token(user_id, token_id)
        if session is None:
            raise AuthenticationException("Session has ended. Please log in again.")
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationException("Account is not available")
        set_current_user_id(user.id)
        return AuthenticatedUser(user=user_to_result(user), token_id=token_id)
