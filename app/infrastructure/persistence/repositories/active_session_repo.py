"""Active session store. The unique key on user_id is the single-session guard."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.active_session import ActiveSession
from app.infrastructure.persistence.repositories.base import BaseRepository


class ActiveSessionRepository(BaseRepository[ActiveSession]):
    """Create, look up, refresh and end the per-user session row."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ActiveSession)

    async def get_by_user_id(self, user_id: int) -> ActiveSession | None:
        result = await self.db.execute(
            select(ActiveSession).where(ActiveSession.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_for_token(self, user_id: int, token_id: str) -> ActiveSession | None:
        """Return the session only if it is the user's live session for token_id."""
        result = await self.db.execute(
            select(ActiveSession).where(
                ActiveSession.user_id == user_id,
                ActiveSession.token_id == token_id,
            )
        )
        return result.scalar_one_or_none()

    async def insert(
        self,
        user_id: int,
        token_id: str,
        device_name: str | None,
        ip_address: str | None,
        user_agent: str | None,
        now: datetime,
    ) -> ActiveSession:
        """Insert inside a savepoint.

        Raises sqlalchemy.exc.IntegrityError when a concurrent login already
        inserted the row for user_id; only the savepoint is rolled back, the
        outer transaction stays usable.
        """
        row = ActiveSession(
            user_id=user_id,
            token_id=token_id,
            device_name=device_name,
            ip_address=ip_address,
            user_agent=user_agent,
            last_activity=now,
        )
        async with self.db.begin_nested():
            self.db.add(row)
            await self.db.flush()
        await self.db.refresh(row)
        return row

    async def delete_for_user(self, user_id: int) -> int:
        """Delete the user's session row(s). Returns number of rows removed."""
        result = await self.db.execute(
            delete(ActiveSession)
            .where(ActiveSession.user_id == user_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def rotate_token(
        self, session: ActiveSession, token_id: str, now: datetime
    ) -> ActiveSession:
        """Bind the same row to a new token id and bump last_activity."""
        session.token_id = token_id
        session.last_activity = now
        return await self.update(session)
