"""Unit repository: code uniqueness, child counts, and hierarchy snapshots."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.unit import Unit
from app.infrastructure.persistence.repositories.base import BaseRepository


class UnitRepository(BaseRepository[Unit]):
    """Unit repository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Unit)

    async def get_by_code(self, code: str) -> Unit | None:
        result = await self.db.execute(select(Unit).where(Unit.code == code))
        return result.scalar_one_or_none()

    async def code_exists(self, code: str, exclude_id: int | None = None) -> bool:
        stmt = select(Unit.id).where(Unit.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Unit.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def count_children(self, unit_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Unit).where(Unit.parent_unit_id == unit_id)
        )
        return int(result.scalar_one())

    async def parent_map(self) -> dict[int, int | None]:
        """Return unit_id -> parent_unit_id for every unit (active or not)."""
        result = await self.db.execute(select(Unit.id, Unit.parent_unit_id))
        return {row.id: row.parent_unit_id for row in result}

    async def list_active(self) -> list[Unit]:
        """Active units ordered by type then name (chart display order)."""
        result = await self.db.execute(
            select(Unit)
            .where(Unit.is_active.is_(True))
            .order_by(Unit.type, Unit.name, Unit.id)
        )
        return list(result.scalars().all())

    async def list_by_ids(self, unit_ids: list[int]) -> list[Unit]:
        if not unit_ids:
            return []
        result = await self.db.execute(select(Unit).where(Unit.id.in_(unit_ids)))
        return list(result.scalars().all())
