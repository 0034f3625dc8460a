"""User repository: lookups, uniqueness checks, credential check, unit membership bulk writes."""

from __future__ import annotations

import asyncio

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import DEFAULT_ROLE, UserRole
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.security.password import get_password_hash, verify_password

# Lazy dummy hash for constant-time comparison when user is not found (timing-attack mitigation).
# Computed on first use in a thread to avoid blocking the event loop at import.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


_UNIQUE_FIELDS: tuple[tuple[str, str], ...] = (
    ("email", "The email has already been taken."),
    ("username", "The username has already been taken."),
    ("employee_id", "The employee id has already been taken."),
)


class UserRepository(BaseRepository[User]):
    """User repository. Authenticate, uniqueness checks, role/unit bulk updates."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_login(self, identifier: str) -> User | None:
        """Return the user whose email or username equals identifier."""
        result = await self.db.execute(
            select(User)
            .where(or_(User.email == identifier, User.username == identifier))
            .order_by(User.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def authenticate(self, identifier: str, password: str) -> User | None:
        """Return the user if identifier exists and password matches; else None.

        Does not check is_active; the caller distinguishes inactive accounts.
        Runs a dummy verify for unknown identifiers so timing does not reveal them.
        """
        user = await self.get_by_login(identifier)
        if not user:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return user

    async def find_unique_conflicts(
        self,
        values: dict[str, str | None],
        exclude_id: int | None = None,
    ) -> dict[str, list[str]]:
        """Return field -> messages for email/username/employee_id already used by another row."""
        errors: dict[str, list[str]] = {}
        for field, message in _UNIQUE_FIELDS:
            value = values.get(field)
            if not value:
                continue
            column = getattr(User, field)
            stmt = select(User.id).where(column == value)
            if exclude_id is not None:
                stmt = stmt.where(User.id != exclude_id)
            result = await self.db.execute(stmt.limit(1))
            if result.scalar_one_or_none() is not None:
                errors[field] = [message]
        return errors

    async def list_by_unit_ids(self, unit_ids: list[int]) -> list[User]:
        """Return users assigned to any of unit_ids, ordered by name."""
        if not unit_ids:
            return []
        result = await self.db.execute(
            select(User).where(User.unit_id.in_(unit_ids)).order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def list_unassigned(self) -> list[User]:
        """Active, non-admin users with no unit (chart sidebar)."""
        result = await self.db.execute(
            select(User)
            .where(
                User.unit_id.is_(None),
                User.is_active.is_(True),
                User.role != UserRole.ADMIN.value,
            )
            .order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def set_role_for_unit(self, unit_id: int, role: str) -> int:
        """Bulk-set role on every user assigned to unit_id. Returns affected row count."""
        result = await self.db.execute(
            update(User)
            .where(User.unit_id == unit_id)
            .values(role=role)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def unassign_all_in_unit(self, unit_id: int) -> int:
        """Detach every member of unit_id and reset their role. Returns affected row count."""
        result = await self.db.execute(
            update(User)
            .where(User.unit_id == unit_id)
            .values(unit_id=None, assigned_at=None, role=DEFAULT_ROLE.value)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def update_password(self, user: User, new_password: str) -> User:
        user.hashed_password = await asyncio.to_thread(get_password_hash, new_password)
        return await self.update(user)
