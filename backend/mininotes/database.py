"""
Mini Notes Backend — Database Engine & Session Factory
========================================================

What:  Async SQLAlchemy engine construction, session factory and ORM base.
Why:   Centralizes all database connection logic for the SQL key-value store.
How:   `build_engine()` creates an async engine with pooling from settings;
       `build_session_factory()` wraps it for per-operation sessions.
Who:   Called by the storage factory at app creation; the engine is disposed
       in the FastAPI lifespan.

Architecture Decision:
    The engine is built by a function instead of at module import so that
    running with STORAGE_BACKEND=memory (tests, local demos) never loads a
    database driver or opens a pool.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from mininotes.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object so alembic autogenerate and
    `create_all` see every table.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine described by `settings`.

    SQLite URLs (used by tests and single-user setups) get no pool sizing
    arguments; their pool class does not accept them.
    """
    kwargs = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory with expire_on_commit=False.

    Without it, reading a row attribute after commit triggers a lazy reload
    outside the session context.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables registered on `Base` (idempotent)."""
    # Importing registers KVEntry on Base.metadata
    from mininotes.models import kv_entry  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection. Called once at shutdown."""
    await engine.dispose()
