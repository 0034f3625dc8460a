"""JWT token creation and verification for authentication.

Every token carries sub (user id as string) and jti (the token id stored on
the user's ActiveSession row). A token is only honoured while its jti is the
one recorded for the user, so ending or rotating the session revokes it.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.generators import generate_cuid


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (e.g. sub, jti).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta is not None:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode["exp"] = expire
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp, sub and jti. Raises ValueError if the token is
    invalid, expired, or missing required claims.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True, "require_jti": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if "sub" not in payload or "jti" not in payload:
        raise ValueError("Token missing required claim: sub/jti")
    return payload


@dataclass(frozen=True)
class IssuedToken:
    """A freshly issued bearer credential."""

    token: str
    token_id: str
    expires_in: int
    token_type: str = "bearer"


class TokenIssuer:
    """Issues bearer tokens bound to a session token id (jti)."""

    def issue(self, user_id: int) -> IssuedToken:
        """Issue a token for user_id with a new random token id."""
        settings = get_settings()
        token_id = generate_cuid()
        token = create_access_token({"sub": str(user_id), "jti": token_id})
        return IssuedToken(
            token=token,
            token_id=token_id,
            expires_in=settings.access_token_expire_minutes * 60,
        )

    def decode(self, token: str) -> tuple[int, str]:
        """Return (user_id, token_id) from a valid token. Raises ValueError otherwise."""
        payload = verify_token(token)
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise ValueError("Token subject is not a user id") from e
        return user_id, str(payload["jti"])
