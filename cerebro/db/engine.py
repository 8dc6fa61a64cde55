"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cerebro.core.settings import DatabaseSettings


class _EngineHolder:
    """Lazy singleton for the async engine and session factory."""

    settings: DatabaseSettings | None = None
    engine: AsyncEngine | None = None
    factory: async_sessionmaker[AsyncSession] | None = None


_holder = _EngineHolder()


def configure_database(settings: DatabaseSettings) -> None:
    """Record connection settings; the engine is created on first use."""
    _holder.settings = settings
    _holder.engine = None
    _holder.factory = None


def _get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Lazily create the async session factory."""
    if _holder.factory is None:
        db = _holder.settings or DatabaseSettings()
        if db.is_sqlite:
            engine = create_async_engine(db.async_url)
        else:
            engine = create_async_engine(
                db.async_url,
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
            )
        _holder.engine = engine
        _holder.factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _holder.factory


async def dispose_engine() -> None:
    if _holder.engine is not None:
        await _holder.engine.dispose()
    _holder.engine = None
    _holder.factory = None


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One session, one transaction: commit on success, roll back on error."""
    factory = _get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an async database session."""
    async with session_scope() as session:
        yield session
