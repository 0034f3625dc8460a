"""Security: JWT issuing and password hashing."""

from app.infrastructure.security.jwt import (
    IssuedToken,
    TokenIssuer,
    create_access_token,
    verify_token,
)
from app.infrastructure.security.password import (
    PasswordHasher,
    get_password_hash,
    verify_password,
)

__all__ = [
    "IssuedToken",
    "PasswordHasher",
    "TokenIssuer",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
