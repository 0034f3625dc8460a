"""Base repository: generic CRUD over one ORM model."""

from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import AFTER_COMMIT_KEY, Base


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id, get_all, create, update and delete.

    Writes flush but never commit; the request's transaction (see
    get_db_transactional) decides the outcome.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Return records with pagination."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).order_by(model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and return it with server defaults loaded."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self.db.flush()

    def after_commit(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Queue callback to run once the request transaction has committed."""
        self.db.info.setdefault(AFTER_COMMIT_KEY, []).append(callback)
