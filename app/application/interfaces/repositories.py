"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Entities are returned as mapped objects; services read and mutate their
attributes and hand them back to update().
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, Protocol


class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_by_id(self, entity_id: int) -> Any | None: ...

    async def get_by_email(self, email: str) -> Any | None: ...

    async def authenticate(self, identifier: str, password: str) -> Any | None:
        """Return the user for email-or-username if password matches; else None."""

    async def find_unique_conflicts(
        self, values: dict[str, str | None], exclude_id: int | None = None
    ) -> dict[str, list[str]]:
        """Return field -> messages for values already used by another user."""

    async def list_by_unit_ids(self, unit_ids: list[int]) -> list[Any]: ...

    async def list_unassigned(self) -> list[Any]: ...

    async def set_role_for_unit(self, unit_id: int, role: str) -> int: ...

    async def unassign_all_in_unit(self, unit_id: int) -> int: ...

    async def update_password(self, user: Any, new_password: str) -> Any: ...

    async def create(self, obj: Any) -> Any: ...

    async def update(self, obj: Any) -> Any: ...

    async def delete(self, obj: Any) -> None: ...

    def after_commit(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Run callback only after the surrounding transaction commits."""


class IUnitRepository(Protocol):
    """Protocol for unit repository (DIP)."""

    async def get_by_id(self, entity_id: int) -> Any | None: ...

    async def code_exists(self, code: str, exclude_id: int | None = None) -> bool: ...

    async def count_children(self, unit_id: int) -> int: ...

    async def parent_map(self) -> dict[int, int | None]: ...

    async def list_active(self) -> list[Any]: ...

    async def list_by_ids(self, unit_ids: list[int]) -> list[Any]: ...

    async def create(self, obj: Any) -> Any: ...

    async def update(self, obj: Any) -> Any: ...

    async def delete(self, obj: Any) -> None: ...


class IActiveSessionRepository(Protocol):
    """Protocol for the per-user session store (DIP)."""

    async def get_by_user_id(self, user_id: int) -> Any | None: ...

    async def get_for_token(self, user_id: int, token_id: str) -> Any | None: ...

    async def insert(
        self,
        user_id: int,
        token_id: str,
        device_name: str | None,
        ip_address: str | None,
        user_agent: str | None,
        now: datetime,
    ) -> Any:
        """Insert the session row; raises IntegrityError if user_id already has one."""

    async def delete_for_user(self, user_id: int) -> int: ...

    async def rotate_token(self, session: Any, token_id: str, now: datetime) -> Any: ...


class IPasswordResetOTPRepository(Protocol):
    """Protocol for OTP store (DIP)."""

    async def add(self, email: str, otp: str, expires_at: datetime) -> Any: ...

    async def find_pending(self, email: str, otp: str, now: datetime) -> Any | None: ...

    async def find_verified(self, email: str, otp: str, now: datetime) -> Any | None: ...

    async def mark_verified(self, row: Any) -> Any: ...

    async def delete_for_email(self, email: str) -> int: ...
