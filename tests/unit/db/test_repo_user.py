"""Tests for user repository operations."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.core.settings import AuthSettings
from cerebro.crypto.password import hash_password, verify_password
from cerebro.db.models_user import ROLE_ADMIN, UserEntity
from cerebro.db.repo_user import (
    UserCreateData,
    create_user,
    get_user_by_email,
    get_user_by_id,
    seed_superadmin,
    unique_username,
    verify_credentials,
)


async def _seed_user(
    session: AsyncSession,
    *,
    user_id: str = "test-id-001",
    username: str = "amber-otter-101",
    email: str = "alice@example.com",
    password: str = "secret123",
    confirmed: bool = True,
    disabled: bool = False,
) -> UserEntity:
    """Insert a test user directly into the session."""
    user = UserEntity(
        id=user_id,
        name="Alice",
        email=email,
        username=username,
        password_hash=hash_password(password),
        confirmed=confirmed,
        disabled=disabled,
        login_count=0,
    )
    session.add(user)
    await session.flush()
    return user


class TestGetUserByEmail:
    """Tests for get_user_by_email."""

    @pytest.mark.asyncio
    async def test_returns_user_when_found(self, db_session: AsyncSession) -> None:
        await _seed_user(db_session)
        result = await get_user_by_email(db_session, "alice@example.com")
        assert result is not None
        assert result.username == "amber-otter-101"

    @pytest.mark.asyncio
    async def test_case_insensitive_lookup(self, db_session: AsyncSession) -> None:
        await _seed_user(db_session)
        assert await get_user_by_email(db_session, "ALICE@EXAMPLE.COM") is not None

    @pytest.mark.asyncio
    async def test_returns_none_when_not_found(self, db_session: AsyncSession) -> None:
        assert await get_user_by_email(db_session, "nobody@example.com") is None


class TestCreateUser:
    """Tests for create_user."""

    @pytest.mark.asyncio
    async def test_hashes_password(self, db_session: AsyncSession) -> None:
        user = await create_user(
            db_session,
            UserCreateData(
                name="Bob",
                email="Bob@Example.com",
                username="quiet-heron-202",
                password="hunter22",
            ),
        )
        assert user.password_hash != "hunter22"
        assert verify_password("hunter22", user.password_hash) is True
        assert user.email == "bob@example.com"

        found = await get_user_by_id(db_session, user.id)
        assert found is not None
        assert found.username == "quiet-heron-202"

    @pytest.mark.asyncio
    async def test_unique_username_avoids_taken(
        self, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await _seed_user(db_session, username="taken-name-100")
        draws = iter(["taken-name-100", "free-name-200"])
        monkeypatch.setattr(
            "cerebro.db.repo_user.generate_username", lambda: next(draws)
        )
        assert await unique_username(db_session) == "free-name-200"


class TestVerifyCredentials:
    """Tests for verify_credentials."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self, db_session: AsyncSession) -> None:
        await _seed_user(db_session)
        user = await verify_credentials(db_session, "amber-otter-101", "secret123")
        assert user is not None
        assert user.login_count == 1
        assert user.last_login is not None

    @pytest.mark.asyncio
    async def test_wrong_password(self, db_session: AsyncSession) -> None:
        await _seed_user(db_session)
        assert await verify_credentials(db_session, "amber-otter-101", "nope") is None

    @pytest.mark.asyncio
    async def test_unknown_username(self, db_session: AsyncSession) -> None:
        assert await verify_credentials(db_session, "ghost-user-999", "x") is None

    @pytest.mark.asyncio
    async def test_disabled_user_rejected(self, db_session: AsyncSession) -> None:
        await _seed_user(db_session, disabled=True)
        result = await verify_credentials(db_session, "amber-otter-101", "secret123")
        assert result is None

    @pytest.mark.asyncio
    async def test_unconfirmed_user_rejected(self, db_session: AsyncSession) -> None:
        await _seed_user(db_session, confirmed=False)
        result = await verify_credentials(db_session, "amber-otter-101", "secret123")
        assert result is None


class TestSeedSuperadmin:
    """Tests for seed_superadmin."""

    @pytest.mark.asyncio
    async def test_creates_admin_once(self, db_session: AsyncSession) -> None:
        settings = AuthSettings(
            superadmin_email="root@example.com",
            superadmin_initial_password="bootstrap-pass",
        )
        first = await seed_superadmin(db_session, settings)
        assert first is not None
        assert first.role == ROLE_ADMIN
        assert verify_password("bootstrap-pass", first.password_hash)

        assert await seed_superadmin(db_session, settings) is None

    @pytest.mark.asyncio
    async def test_noop_without_password(self, db_session: AsyncSession) -> None:
        settings = AuthSettings(
            superadmin_email="root@example.com", superadmin_initial_password=""
        )
        assert await seed_superadmin(db_session, settings) is None
