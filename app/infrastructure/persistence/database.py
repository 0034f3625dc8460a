"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (DATABASE_AUTO_CREATE=true creates
tables at startup for local development). PostgreSQL via asyncpg in
production; SQLite via aiosqlite for local runs and tests.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.
"""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _configure_sqlite(sync_engine: Any) -> None:
    """Enable foreign keys and explicit BEGIN on SQLite connections.

    pysqlite's implicit transaction handling breaks SAVEPOINT; taking over
    BEGIN makes begin_nested() behave like on PostgreSQL. Foreign keys are
    off by default in SQLite, so ON DELETE SET NULL/CASCADE need the pragma.
    """

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if settings.is_sqlite:
        engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
        )
        _configure_sqlite(engine.sync_engine)
    else:
        pool_size = settings.db_pool_size if settings.db_pool_size is not None else 10
        max_overflow = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 20
        )
        engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=3600,
        )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
    logger.info("Database engine created (sqlite=%s)", settings.is_sqlite)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory, creating the engine if needed."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


async def create_all() -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    import app.infrastructure.persistence.models  # noqa: F401  (register tables)

    _ensure_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all() -> None:
    """Drop all tables (tests)."""
    import app.infrastructure.persistence.models  # noqa: F401

    _ensure_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """Dispose the engine and forget the session factory (shutdown, test teardown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        yield session


AFTER_COMMIT_KEY = "after_commit"


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    The authentication gate and the endpoint resolve this dependency once
    per request, so both run inside the same transaction.

    Callbacks queued in session.info[AFTER_COMMIT_KEY] (see
    BaseRepository.after_commit) run only once the commit succeeded; a
    rolled-back request drops them.
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            yield session
        for callback in session.info.pop(AFTER_COMMIT_KEY, []):
            try:
                await callback()
            except Exception:
                logger.warning("Post-commit cleanup failed", exc_info=True)
