"""Create an administrator account.

Usage:
    python -m scripts.create_admin <email> <name> [password]
If password is omitted, a random one is printed.
All imports use app.*.
"""

import asyncio
import secrets
import sys

from app.core.config import get_settings
from app.domain.enums import UserRole
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.models import User
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security.password import get_password_hash


async def main() -> None:
    """Create an active admin user (no unit; admins are never assigned)."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.create_admin <email> <name> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    name = sys.argv[2]
    password = sys.argv[3] if len(sys.argv) > 3 else secrets.token_urlsafe(12)

    get_settings()
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            async with session.begin():
                user_repo = UserRepository(session)
                if await user_repo.get_by_email(email):
                    print(f"User already exists: {email}", file=sys.stderr)
                    sys.exit(1)
                hashed = await asyncio.to_thread(get_password_hash, password)
                user = await user_repo.create(
                    User(
                        name=name,
                        email=email,
                        hashed_password=hashed,
                        role=UserRole.ADMIN.value,
                        is_active=True,
                    )
                )
                print(f"Created admin: {user.id} ({email})")
                print(f"Password: {password}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
