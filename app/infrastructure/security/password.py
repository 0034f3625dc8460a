"""Password hashing (bcrypt with SHA-256 pre-hash).

Bcrypt truncates inputs at 72 bytes; pre-hashing with SHA-256 yields a fixed-length
input so long passwords are not silently truncated. Work factor comes from
settings.bcrypt_rounds (tests run with a low value).
"""

import base64
import hashlib

import bcrypt

from app.core.config import get_settings


def _prehash(password: str) -> bytes:
    """SHA-256 pre-hash to avoid bcrypt's 72-byte truncation."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password."""
    try:
        result = bcrypt.checkpw(
            _prehash(plain_password),
            hashed_password.encode("utf-8"),
        )
        return bool(result)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Return bcrypt hash of password (SHA-256 pre-hashed before bcrypt)."""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    hashed = bcrypt.hashpw(_prehash(password), salt)
    return hashed.decode("utf-8")


class PasswordHasher:
    """Hash/verify pair handed to application services."""

    def hash(self, plaintext: str) -> str:
        return get_password_hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        return verify_password(plaintext, digest)
