"""Org chart service: unit tree maintenance and user membership.

Invariant kept by every write here: a user's role equals the role of the
unit it is assigned to, or sdm when unassigned. assign_user is the one path
that derives a single user's role from a unit; update_unit's bulk member
update is the only other writer, used when a unit's own role changes.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Any

from app.application.dtos.org_chart import (
    OrgChartResult,
    UnitNode,
    UnitResult,
    unit_to_result,
)
from app.application.dtos.user import UserResult, user_to_result
from app.application.interfaces.repositories import IUnitRepository, IUserRepository
from app.application.interfaces.services import IPasswordHasher, IStorageService
from app.domain import unit_tree
from app.domain.enums import DEFAULT_ROLE, UserRole
from app.domain.exceptions import (
    HasChildrenException,
    ProtectedAccountException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.persistence.models.unit import Unit
from app.infrastructure.persistence.models.user import User
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

_UNIT_FIELDS = (
    "code",
    "name",
    "type",
    "role",
    "parent_unit_id",
    "description",
    "position_x",
    "position_y",
    "is_active",
)
_USER_UPDATE_FIELDS = ("name", "username", "email", "phone", "employee_id")


class OrgChartService:
    """Chart read side plus unit and user administration."""

    def __init__(
        self,
        unit_repo: IUnitRepository,
        user_repo: IUserRepository,
        storage: IStorageService,
        hasher: IPasswordHasher,
    ) -> None:
        self.unit_repo = unit_repo
        self.user_repo = user_repo
        self.storage = storage
        self.hasher = hasher

    # ---- read side ----

    async def get_chart(self) -> OrgChartResult:
        """Active units as a forest (children ordered by type, name) with members.

        A unit whose parent is inactive or missing is shown as a root.
        """
        units = await self.unit_repo.list_active()
        members = await self.user_repo.list_by_unit_ids([u.id for u in units])
        users_by_unit: dict[int, list[UserResult]] = {}
        for member in members:
            users_by_unit.setdefault(member.unit_id, []).append(user_to_result(member))

        nodes = {
            u.id: UnitNode(unit=unit_to_result(u), users=users_by_unit.get(u.id, []))
            for u in units
        }
        parent_of = {u.id: u.parent_unit_id for u in units}
        children_of = unit_tree.children_index(parent_of)
        order = {u.id: i for i, u in enumerate(units)}

        for unit_id, node in nodes.items():
            for child_id in sorted(children_of.get(unit_id, []), key=order.__getitem__):
                node.children.append(nodes[child_id])
        roots = [
            nodes[u.id]
            for u in units
            if u.parent_unit_id is None or u.parent_unit_id not in nodes
        ]

        unassigned = await self.user_repo.list_unassigned()
        return OrgChartResult(
            units=roots,
            unassigned_users=[user_to_result(u) for u in unassigned],
        )

    async def _get_unit(self, unit_id: int) -> Unit:
        unit = await self.unit_repo.get_by_id(unit_id)
        if unit is None:
            raise ResourceNotFoundException("unit", unit_id)
        return unit

    async def get_descendants(self, unit_id: int) -> list[UnitResult]:
        """Every unit below unit_id (any depth, active or not), depth-first."""
        await self._get_unit(unit_id)
        parent_of = await self.unit_repo.parent_map()
        ids = unit_tree.descendant_ids(unit_id, unit_tree.children_index(parent_of))
        return await self._units_in_order(ids)

    async def get_ancestors(self, unit_id: int) -> list[UnitResult]:
        """Units from unit_id's parent up to its root, nearest first."""
        await self._get_unit(unit_id)
        parent_of = await self.unit_repo.parent_map()
        ids = unit_tree.ancestor_ids(unit_id, parent_of)
        return await self._units_in_order(ids)

    async def _units_in_order(self, ids: list[int]) -> list[UnitResult]:
        by_id = {u.id: u for u in await self.unit_repo.list_by_ids(ids)}
        return [unit_to_result(by_id[i]) for i in ids if i in by_id]

    # ---- units ----

    async def _validate_unit(
        self,
        values: dict[str, Any],
        unit_id: int | None = None,
    ) -> None:
        """Check code uniqueness and parent rules; raise one ValidationException with all errors."""
        errors: dict[str, list[str]] = {}
        code = values.get("code")
        if code is not None and await self.unit_repo.code_exists(code, exclude_id=unit_id):
            errors["code"] = ["The code has already been taken."]
        if "parent_unit_id" in values and values["parent_unit_id"] is not None:
            parent_id = values["parent_unit_id"]
            if unit_id is not None and parent_id == unit_id:
                errors["parent_unit_id"] = ["A unit cannot be its own parent."]
            elif await self.unit_repo.get_by_id(parent_id) is None:
                errors["parent_unit_id"] = ["The selected parent unit is invalid."]
            elif unit_id is not None:
                parent_of = await self.unit_repo.parent_map()
                if unit_tree.would_create_cycle(unit_id, parent_id, parent_of):
                    errors["parent_unit_id"] = [
                        "A unit cannot be moved under one of its own descendants."
                    ]
        if errors:
            raise ValidationException("The given data was invalid.", errors=errors)

    async def create_unit(self, values: dict[str, Any]) -> UnitResult:
        """Create a unit from validated request values."""
        await self._validate_unit(values)
        unit = Unit(**{k: v for k, v in values.items() if k in _UNIT_FIELDS})
        created = await self.unit_repo.create(unit)
        logger.info("Unit created id=%s code=%r", created.id, created.code)
        return unit_to_result(created)

    async def update_unit(self, unit_id: int, changes: dict[str, Any]) -> UnitResult:
        """Apply changes; a role change is pushed to every current member.

        All checks run before any mutation, so a rejected update leaves the
        unit and its members untouched.
        """
        unit = await self._get_unit(unit_id)
        await self._validate_unit(changes, unit_id=unit.id)
        old_role = unit.role
        for key, value in changes.items():
            if key in _UNIT_FIELDS:
                setattr(unit, key, value)
        updated = await self.unit_repo.update(unit)
        if updated.role != old_role:
            count = await self.user_repo.set_role_for_unit(updated.id, updated.role)
            logger.info(
                "Unit id=%s role %s -> %s propagated to %d member(s)",
                updated.id,
                old_role,
                updated.role,
                count,
            )
        return unit_to_result(updated)

    async def delete_unit(self, unit_id: int) -> int:
        """Unassign all members, then delete the unit. Returns members released.

        Raises:
            HasChildrenException: The unit still has child units.
        """
        unit = await self._get_unit(unit_id)
        child_count = await self.unit_repo.count_children(unit.id)
        if child_count > 0:
            raise HasChildrenException(unit.id, child_count)
        released = await self.user_repo.unassign_all_in_unit(unit.id)
        await self.unit_repo.delete(unit)
        logger.info("Unit deleted id=%s; %d member(s) unassigned", unit_id, released)
        return released

    # ---- users ----

    async def _get_user(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def create_user(self, values: dict[str, Any]) -> UserResult:
        """Create an unassigned sdm user.

        Raises:
            ValidationException: email, username or employee_id already taken.
        """
        errors = await self.user_repo.find_unique_conflicts(values)
        if errors:
            raise ValidationException("The given data was invalid.", errors=errors)
        hashed = await asyncio.to_thread(self.hasher.hash, values["password"])
        user = User(
            name=values["name"],
            email=values["email"],
            username=values.get("username"),
            employee_id=values.get("employee_id"),
            phone=values.get("phone"),
            hashed_password=hashed,
            role=DEFAULT_ROLE.value,
            unit_id=None,
            assigned_at=None,
            is_active=True,
        )
        created = await self.user_repo.create(user)
        logger.info("User created id=%s", created.id)
        return user_to_result(created)

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> UserResult:
        """Update identity fields and, if given and non-empty, the password.

        Raises:
            ProtectedAccountException: The user is an admin.
            ValidationException: A unique field collides with another user.
        """
        user = await self._get_user(user_id)
        if user.role == UserRole.ADMIN.value:
            raise ProtectedAccountException("updated")
        errors = await self.user_repo.find_unique_conflicts(changes, exclude_id=user.id)
        if errors:
            raise ValidationException("The given data was invalid.", errors=errors)
        for key in _USER_UPDATE_FIELDS:
            if key in changes:
                setattr(user, key, changes[key])
        password = changes.get("password")
        if password:
            user.hashed_password = await asyncio.to_thread(self.hasher.hash, password)
        updated = await self.user_repo.update(user)
        return user_to_result(updated)

    async def assign_user(
        self,
        user_id: int,
        unit_id: int | None,
        position_x: int | None = None,
        position_y: int | None = None,
    ) -> UserResult:
        """Move a user into a unit (taking its role) or out of any unit (sdm).

        position_x/position_y, when given with a unit, are stored on that unit.

        Raises:
            ProtectedAccountException: The user is an admin.
            ValidationException: unit_id does not exist.
        """
        user = await self._get_user(user_id)
        if user.role == UserRole.ADMIN.value:
            raise ProtectedAccountException("assigned to a unit")
        if unit_id is None:
            user.unit_id = None
            user.role = DEFAULT_ROLE.value
            user.assigned_at = None
        else:
            unit = await self.unit_repo.get_by_id(unit_id)
            if unit is None:
                raise ValidationException("The selected unit is invalid.", field="unit_id")
            user.unit_id = unit.id
            user.role = unit.role
            user.assigned_at = utc_now()
            if position_x is not None or position_y is not None:
                if position_x is not None:
                    unit.position_x = position_x
                if position_y is not None:
                    unit.position_y = position_y
                await self.unit_repo.update(unit)
        updated = await self.user_repo.update(user)
        logger.info("User id=%s assigned to unit_id=%s", updated.id, updated.unit_id)
        return user_to_result(updated)

    async def delete_user(self, user_id: int) -> None:
        """Detach from its unit and delete the user; its avatar file goes after commit.

        Raises:
            ProtectedAccountException: The user is an admin.
        """
        user = await self._get_user(user_id)
        if user.role == UserRole.ADMIN.value:
            raise ProtectedAccountException("deleted")
        user.unit_id = None
        user.assigned_at = None
        await self.user_repo.update(user)
        if user.avatar:
            self.user_repo.after_commit(partial(self.storage.delete, user.avatar))
        await self.user_repo.delete(user)
        logger.info("User deleted id=%s", user_id)
