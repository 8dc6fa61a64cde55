"""Shared test fixtures for Cerebro."""

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cerebro.core.app import create_app
from cerebro.core.settings import AuthSettings, DatabaseSettings
from cerebro.crypto.password import hash_password
from cerebro.db.base import BaseEntity
from cerebro.db.engine import get_session
from cerebro.db.models_user import UserEntity

BASE_URL = "https://tasks.example.com"
ADMIN_API_TOKEN = "admin-test-token"
USER_ID = "user-1"
USERNAME = "blue-falcon-123"
PASSWORD = "correct-horse-battery"


@pytest.fixture
def settings() -> AuthSettings:
    """Explicit settings so tests never depend on the environment."""
    return AuthSettings(
        base_url=BASE_URL,
        allowed_redirect_domains="claude.ai",
        admin_api_token=ADMIN_API_TOKEN,
        superadmin_email="root@example.com",
    )


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Create an in-memory SQLite async session for tests."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _rec) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def app(settings: AuthSettings, db_session: AsyncSession) -> FastAPI:
    """Application wired to the test session."""
    application = create_app(
        settings, DatabaseSettings(url="sqlite+aiosqlite://")
    )

    async def _override_session() -> AsyncIterator[AsyncSession]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    application.dependency_overrides[get_session] = _override_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Create an httpx test client with DB session override."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def user(db_session: AsyncSession) -> UserEntity:
    """Insert a confirmed, enabled user with a known password."""
    entity = UserEntity(
        id=USER_ID,
        name="Test User",
        email="user@example.com",
        username=USERNAME,
        password_hash=hash_password(PASSWORD),
        role="member",
        confirmed=True,
        disabled=False,
    )
    db_session.add(entity)
    await db_session.commit()
    return entity
