"""Profile service: the caller's own profile, password and avatar."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Any

from app.application.dtos.org_chart import UnitResult, unit_to_result
from app.application.dtos.user import UserResult, user_to_result
from app.application.interfaces.repositories import IUnitRepository, IUserRepository
from app.application.interfaces.services import IPasswordHasher, IStorageService
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.services.image_inspector import inspect_image
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

AVATAR_DIR = "avatars"
ALLOWED_AVATAR_TYPES = "jpeg, jpg, png, gif"
_PROFILE_FIELDS = ("name", "email", "phone")


class ProfileService:
    """Read/update the current user; change password; upload/delete avatar."""

    def __init__(
        self,
        user_repo: IUserRepository,
        unit_repo: IUnitRepository,
        storage: IStorageService,
        hasher: IPasswordHasher,
        avatar_max_bytes: int = 2 * 1024 * 1024,
        avatar_max_width: int = 2000,
        avatar_max_height: int = 2000,
    ) -> None:
        self._user_repo = user_repo
        self._unit_repo = unit_repo
        self._storage = storage
        self._hasher = hasher
        self._avatar_max_bytes = avatar_max_bytes
        self._avatar_max_width = avatar_max_width
        self._avatar_max_height = avatar_max_height

    async def _get_user(self, user_id: int):
        user = await self._user_repo.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def get_profile(self, user_id: int) -> tuple[UserResult, UnitResult | None]:
        """The user plus the unit it is assigned to, if any."""
        user = await self._get_user(user_id)
        unit = None
        if user.unit_id is not None:
            unit = await self._unit_repo.get_by_id(user.unit_id)
        return user_to_result(user), unit_to_result(unit) if unit else None

    async def update_profile(self, user_id: int, changes: dict[str, Any]) -> UserResult:
        """Apply name, email and phone from changes; absent keys are left alone.

        Email must not belong to another user.
        """
        user = await self._get_user(user_id)
        errors = await self._user_repo.find_unique_conflicts(
            {"email": changes.get("email")}, exclude_id=user.id
        )
        if errors:
            raise ValidationException("The given data was invalid.", errors=errors)
        for key in _PROFILE_FIELDS:
            if key in changes:
                setattr(user, key, changes[key])
        updated = await self._user_repo.update(user)
        return user_to_result(updated)

    async def change_password(
        self, user_id: int, current_password: str, new_password: str
    ) -> None:
        """Replace the password after checking the current one.

        Raises:
            ValidationException: current_password does not match.
        """
        user = await self._get_user(user_id)
        matches = await asyncio.to_thread(
            self._hasher.verify, current_password, user.hashed_password
        )
        if not matches:
            raise ValidationException(
                "The current password is incorrect.", field="current_password"
            )
        user.hashed_password = await asyncio.to_thread(self._hasher.hash, new_password)
        await self._user_repo.update(user)
        logger.info("Password changed for user_id=%s", user.id)

    async def upload_avatar(self, user_id: int, data: bytes) -> UserResult:
        """Store a new avatar image; the previous file is deleted after commit.

        Accepts JPEG, PNG or GIF up to the configured size and pixel bounds.

        Raises:
            ValidationException: Empty, too large, wrong type, or too many pixels.
        """
        if not data:
            raise ValidationException("The avatar field is required.", field="avatar")
        if len(data) > self._avatar_max_bytes:
            raise ValidationException(
                f"The avatar may not be greater than {self._avatar_max_bytes // 1024} kilobytes.",
                field="avatar",
            )
        info = inspect_image(data)
        if info is None:
            raise ValidationException(
                f"The avatar must be a file of type: {ALLOWED_AVATAR_TYPES}.", field="avatar"
            )
        if info.width > self._avatar_max_width or info.height > self._avatar_max_height:
            raise ValidationException(
                f"The avatar may not exceed {self._avatar_max_width}x{self._avatar_max_height} pixels.",
                field="avatar",
            )

        user = await self._get_user(user_id)
        previous = user.avatar
        path = await self._storage.put(f"{AVATAR_DIR}/{generate_cuid()}.{info.extension}", data)
        user.avatar = path
        updated = await self._user_repo.update(user)
        if previous and previous != path:
            self._user_repo.after_commit(partial(self._storage.delete, previous))
        logger.info("Avatar updated for user_id=%s", user.id)
        return user_to_result(updated)

    async def delete_avatar(self, user_id: int) -> UserResult:
        """Clear the avatar; the file is removed after commit. No avatar is not an error."""
        user = await self._get_user(user_id)
        if user.avatar:
            self._user_repo.after_commit(partial(self._storage.delete, user.avatar))
            user.avatar = None
            user = await self._user_repo.update(user)
        return user_to_result(user)
