"""Repository for authorization codes and token pairs.

Expiry is enforced in every lookup; rows past their expiry are never
returned even if ``purge_expired`` has not removed them yet.
"""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.db.models_oauth import AuthorizationCodeEntity, OAuthTokenEntity
from cerebro.db.models_user import UserEntity


async def insert_auth_code(
    session: AsyncSession, entity: AuthorizationCodeEntity
) -> AuthorizationCodeEntity:
    session.add(entity)
    await session.flush()
    return entity


async def get_auth_code(
    session: AsyncSession, code: str
) -> AuthorizationCodeEntity | None:
    """Look up a code regardless of state (for diagnostics)."""
    stmt = (
        select(AuthorizationCodeEntity)
        .where(AuthorizationCodeEntity.code == code)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_redeemable_code(
    session: AsyncSession, code: str, now: datetime
) -> AuthorizationCodeEntity | None:
    """Return the code only if it is unused and unexpired."""
    stmt = select(AuthorizationCodeEntity).where(
        AuthorizationCodeEntity.code == code,
        AuthorizationCodeEntity.used.is_(False),
        AuthorizationCodeEntity.expires_at > now,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def mark_code_used(session: AsyncSession, code: str) -> bool:
    """Flip ``used`` if still unset. False means another request won."""
    stmt = (
        update(AuthorizationCodeEntity)
        .where(
            AuthorizationCodeEntity.code == code,
            AuthorizationCodeEntity.used.is_(False),
        )
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount == 1


async def insert_token_pair(
    session: AsyncSession, entity: OAuthTokenEntity
) -> OAuthTokenEntity:
    session.add(entity)
    await session.flush()
    return entity


async def get_token_by_refresh_hash(
    session: AsyncSession, refresh_hash: str, now: datetime
) -> OAuthTokenEntity | None:
    stmt = select(OAuthTokenEntity).where(
        OAuthTokenEntity.refresh_token_hash == refresh_hash,
        OAuthTokenEntity.refresh_expires_at > now,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_active_token_with_user(
    session: AsyncSession, access_hash: str, now: datetime
) -> tuple[OAuthTokenEntity, UserEntity] | None:
    """Join an unexpired access token with its owner."""
    stmt = (
        select(OAuthTokenEntity, UserEntity)
        .join(UserEntity, UserEntity.id == OAuthTokenEntity.user_id)
        .where(
            OAuthTokenEntity.access_token_hash == access_hash,
            OAuthTokenEntity.expires_at > now,
        )
    )
    result = await session.execute(stmt)
    row = result.one_or_none()
    if row is None:
        return None
    return row[0], row[1]


async def get_token_for_user(
    session: AsyncSession, user_id: str
) -> OAuthTokenEntity | None:
    stmt = (
        select(OAuthTokenEntity)
        .where(OAuthTokenEntity.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def touch_last_used(
    session: AsyncSession, access_hash: str, now: datetime
) -> None:
    stmt = (
        update(OAuthTokenEntity)
        .where(OAuthTokenEntity.access_token_hash == access_hash)
        .values(last_used_at=now)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)


async def delete_token_by_refresh_hash(
    session: AsyncSession, refresh_hash: str
) -> bool:
    """Delete one pair by refresh hash. False if it was already gone."""
    stmt = (
        delete(OAuthTokenEntity)
        .where(OAuthTokenEntity.refresh_token_hash == refresh_hash)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount == 1


async def delete_token_by_hash(session: AsyncSession, token_hash: str) -> int:
    """Delete the pair whose access or refresh hash matches."""
    stmt = (
        delete(OAuthTokenEntity)
        .where(
            (OAuthTokenEntity.access_token_hash == token_hash)
            | (OAuthTokenEntity.refresh_token_hash == token_hash)
        )
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount


async def delete_tokens_for_user(session: AsyncSession, user_id: str) -> int:
    stmt = (
        delete(OAuthTokenEntity)
        .where(OAuthTokenEntity.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount


async def delete_all_tokens(session: AsyncSession) -> int:
    stmt = delete(OAuthTokenEntity).execution_options(synchronize_session=False)
    result = await session.execute(stmt)
    return result.rowcount


async def purge_expired(session: AsyncSession, now: datetime) -> tuple[int, int]:
    """Delete expired codes and pairs whose refresh token has expired.

    Returns ``(codes_deleted, tokens_deleted)``.
    """
    codes = await session.execute(
        delete(AuthorizationCodeEntity)
        .where(AuthorizationCodeEntity.expires_at <= now)
        .execution_options(synchronize_session=False)
    )
    tokens = await session.execute(
        delete(OAuthTokenEntity)
        .where(OAuthTokenEntity.refresh_expires_at <= now)
        .execution_options(synchronize_session=False)
    )
    return codes.rowcount, tokens.rowcount
