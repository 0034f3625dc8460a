"""Reset a user's password and end their active session.

Usage:
    python -m scripts.reset_password <email> <new_password>
All imports use app.*.
"""

import asyncio
import sys

from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import (
    ActiveSessionRepository,
    UserRepository,
)


async def main() -> None:
    """Reset password for the user with email."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.reset_password <email> <new_password>",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    new_password = sys.argv[2]

    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            async with session.begin():
                user_repo = UserRepository(session)
                user = await user_repo.get_by_email(email)
                if not user:
                    print(f"User not found: {email}", file=sys.stderr)
                    sys.exit(1)
                await user_repo.update_password(user, new_password)
                await ActiveSessionRepository(session).delete_for_user(user.id)
                print(f"Password reset for user {user.id} ({email}); session ended")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
