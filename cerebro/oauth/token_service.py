"""OAuth token issuance, refresh, validation and revocation."""

import logging
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.core.logging_config import token_prefix
from cerebro.core.settings import ACCESS_TOKEN_TTL_DEFAULT, REFRESH_TOKEN_TTL_DEFAULT
from cerebro.crypto.tokens import generate_token, hash_token
from cerebro.db.models_oauth import DEFAULT_SCOPE, OAuthTokenEntity
from cerebro.db.models_user import UserEntity
from cerebro.db.repo_oauth import (
    delete_token_by_hash,
    delete_token_by_refresh_hash,
    delete_tokens_for_user,
    get_active_token_with_user,
    get_token_by_refresh_hash,
    insert_token_pair,
    touch_last_used,
)
from cerebro.oauth.types import TokenResponse

logger = logging.getLogger(__name__)


class TokenIssuanceParams(BaseModel):
    """Bundled parameters for minting a token pair."""

    user_id: str
    agent_label: str | None = None
    access_ttl: int = ACCESS_TOKEN_TTL_DEFAULT
    refresh_ttl: int = REFRESH_TOKEN_TTL_DEFAULT


async def issue_tokens(
    session: AsyncSession, params: TokenIssuanceParams
) -> TokenResponse | None:
    """Replace the user's token pair with a freshly minted one.

    Returns None when a concurrent exchange for the same user inserted its
    pair first; that pair remains the user's only session.
    """
    revoked = await delete_tokens_for_user(session, params.user_id)
    if revoked:
        logger.info("Revoked previous agent session for user_id=%s", params.user_id)

    access = generate_token()
    refresh = generate_token()
    now = datetime.now(UTC)
    entity = OAuthTokenEntity(
        access_token_hash=hash_token(access),
        refresh_token_hash=hash_token(refresh),
        user_id=params.user_id,
        agent_label=params.agent_label or None,
        scope=DEFAULT_SCOPE,
        expires_at=now + timedelta(seconds=params.access_ttl),
        refresh_expires_at=now + timedelta(seconds=params.refresh_ttl),
    )
    try:
        async with session.begin_nested():
            await insert_token_pair(session, entity)
    except IntegrityError:
        logger.warning(
            "Concurrent token issuance for user_id=%s, keeping the other pair",
            params.user_id,
        )
        return None
    logger.info(
        "Issued token %s for user_id=%s agent_label=%s",
        token_prefix(access),
        params.user_id,
        entity.agent_label,
    )

    return TokenResponse(
        access_token=access,
        token_type="Bearer",
        expires_in=params.access_ttl,
        refresh_token=refresh,
        scope=DEFAULT_SCOPE,
    )


async def refresh_tokens(
    session: AsyncSession,
    refresh_token: str,
    *,
    access_ttl: int = ACCESS_TOKEN_TTL_DEFAULT,
    refresh_ttl: int = REFRESH_TOKEN_TTL_DEFAULT,
) -> TokenResponse | None:
    """Rotate a refresh token into a new pair. None if it is unknown or spent."""
    token_hash = hash_token(refresh_token)
    entity = await get_token_by_refresh_hash(session, token_hash, datetime.now(UTC))
    if entity is None:
        logger.info("Refresh failed: token %s not found", token_prefix(refresh_token))
        return None

    params = TokenIssuanceParams(
        user_id=entity.user_id,
        agent_label=entity.agent_label,
        access_ttl=access_ttl,
        refresh_ttl=refresh_ttl,
    )
    if not await delete_token_by_refresh_hash(session, token_hash):
        logger.warning("Refresh failed: token rotated concurrently")
        return None

    logger.info("Refreshing token for user_id=%s", params.user_id)
    return await issue_tokens(session, params)


async def authenticate_access_token(
    session: AsyncSession, token: str
) -> tuple[OAuthTokenEntity, UserEntity] | None:
    """Resolve a bearer token to its pair and an enabled, confirmed owner."""
    token_hash = hash_token(token)
    now = datetime.now(UTC)
    found = await get_active_token_with_user(session, token_hash, now)
    if found is None:
        logger.info("Bearer rejected: token %s invalid or expired", token_prefix(token))
        return None

    entity, user = found
    if user.disabled:
        logger.info("Bearer rejected: user %s is disabled", user.username)
        return None
    if not user.confirmed:
        logger.info("Bearer rejected: user %s is not confirmed", user.username)
        return None

    # savepoint: a failed update must not abort the request's transaction
    try:
        async with session.begin_nested():
            await touch_last_used(session, token_hash, now)
    except SQLAlchemyError:
        logger.warning("Could not record last_used_at", exc_info=True)
    return entity, user


async def revoke_token(session: AsyncSession, *, token: str) -> bool:
    """Delete the pair matching an access or refresh token.

    Returns whether a pair was removed. Unknown tokens are not an error.
    """
    deleted = await delete_token_by_hash(session, hash_token(token))
    if deleted:
        logger.info("Revoked token %s", token_prefix(token))
    return deleted > 0


async def revoke_user_tokens(session: AsyncSession, user_id: str) -> int:
    return await delete_tokens_for_user(session, user_id)
