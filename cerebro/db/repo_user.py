"""User repository for database CRUD operations."""

import logging
from datetime import UTC, datetime

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.core.settings import AuthSettings
from cerebro.core.usernames import generate_username
from cerebro.crypto.password import (
    hash_password,
    password_needs_rehash,
    verify_password,
)
from cerebro.crypto.tokens import generate_id
from cerebro.db.models_user import ROLE_ADMIN, ROLE_MEMBER, UserEntity

logger = logging.getLogger(__name__)

USERNAME_ATTEMPTS = 50


class UserCreateData(BaseModel):
    """Parameters for creating a user."""

    name: str
    username: str
    password: str
    email: str | None = None
    role: str = ROLE_MEMBER
    confirmed: bool = True
    created_by: str | None = None


async def get_user_by_id(session: AsyncSession, user_id: str) -> UserEntity | None:
    """Look up a user by primary key."""
    stmt = select(UserEntity).where(UserEntity.id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> UserEntity | None:
    """Look up a user by email address (case-insensitive)."""
    stmt = select(UserEntity).where(UserEntity.email == email.lower())
    result = await session.execute(stmt)
    return result.scalars().first()


async def get_user_by_username(
    session: AsyncSession, username: str
) -> UserEntity | None:
    stmt = select(UserEntity).where(UserEntity.username == username)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def unique_username(session: AsyncSession) -> str:
    """Draw generated usernames until one is not taken."""
    for _ in range(USERNAME_ATTEMPTS):
        candidate = generate_username()
        if await get_user_by_username(session, candidate) is None:
            return candidate
    raise RuntimeError("could not find a free username")


async def create_user(session: AsyncSession, data: UserCreateData) -> UserEntity:
    """Insert a new user with a hashed password."""
    user = UserEntity(
        id=generate_id(),
        name=data.name,
        email=data.email.lower() if data.email else None,
        username=data.username,
        password_hash=hash_password(data.password),
        role=data.role,
        confirmed=data.confirmed,
        disabled=False,
        created_by=data.created_by,
        login_count=0,
    )
    session.add(user)
    await session.flush()
    return user


async def set_user_disabled(
    session: AsyncSession, user: UserEntity, *, disabled: bool
) -> UserEntity:
    user.disabled = disabled
    await session.flush()
    return user


async def verify_credentials(
    session: AsyncSession, username: str, password: str
) -> UserEntity | None:
    """Authenticate a confirmed, enabled user by username and password."""
    stmt = select(UserEntity).where(
        UserEntity.username == username,
        UserEntity.confirmed.is_(True),
        UserEntity.disabled.is_(False),
    )
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    if password_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("Upgraded password hash for %s", user.username)
    user.login_count = (user.login_count or 0) + 1
    user.last_login = datetime.now(UTC)
    await session.flush()
    return user


async def seed_superadmin(
    session: AsyncSession, settings: AuthSettings
) -> UserEntity | None:
    """Create the configured superadmin on first start. Returns it if created."""
    email = settings.superadmin_email
    password = settings.superadmin_initial_password
    if not email or not password:
        return None
    if await get_user_by_email(session, email) is not None:
        return None

    username = await unique_username(session)
    user = await create_user(
        session,
        UserCreateData(
            name="Superadmin",
            email=email,
            username=username,
            password=password,
            role=ROLE_ADMIN,
        ),
    )
    logger.warning(
        "Superadmin created with username %s; change the initial password",
        username,
    )
    return user
