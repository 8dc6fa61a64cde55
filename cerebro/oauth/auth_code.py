"""Authorization code creation and redemption with PKCE."""

import logging
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.core.settings import AUTH_CODE_TTL_DEFAULT
from cerebro.crypto.tokens import generate_token
from cerebro.db.models_oauth import AuthorizationCodeEntity
from cerebro.db.repo_oauth import (
    get_auth_code,
    get_redeemable_code,
    insert_auth_code,
    mark_code_used,
)
from cerebro.oauth.pkce import verify_code_challenge

logger = logging.getLogger(__name__)


class AuthCodeParams(BaseModel):
    """Parameters for creating an authorization code."""

    user_id: str
    code_challenge: str
    redirect_uri: str | None = None
    agent_label: str | None = None
    ttl_seconds: int = AUTH_CODE_TTL_DEFAULT


def generate_code() -> str:
    """Generate a cryptographically random authorization code."""
    return generate_token()


async def create_authorization_code(
    session: AsyncSession, params: AuthCodeParams
) -> str:
    """Create and store a new authorization code."""
    code = generate_code()
    entity = AuthorizationCodeEntity(
        code=code,
        user_id=params.user_id,
        code_challenge=params.code_challenge,
        redirect_uri=params.redirect_uri,
        agent_label=params.agent_label or None,
        expires_at=datetime.now(UTC) + timedelta(seconds=params.ttl_seconds),
        used=False,
    )
    await insert_auth_code(session, entity)
    return code


async def _log_lookup_miss(session: AsyncSession, code: str) -> None:
    existing = await get_auth_code(session, code)
    if existing is None:
        logger.info("Code exchange failed: code not found")
    elif existing.used:
        logger.info("Code exchange failed: code already used")
    else:
        logger.info("Code exchange failed: code expired at %s", existing.expires_at)


async def redeem_authorization_code(
    session: AsyncSession,
    *,
    code: str,
    redirect_uri: str | None,
    code_verifier: str,
    now: datetime | None = None,
) -> AuthorizationCodeEntity | None:
    """Redeem an auth code. Returns None if it cannot be redeemed.

    The caller only learns success or failure; the reason is logged.
    """
    now = now or datetime.now(UTC)
    entity = await get_redeemable_code(session, code, now)
    if entity is None:
        await _log_lookup_miss(session, code)
        return None

    if entity.redirect_uri and redirect_uri != entity.redirect_uri:
        logger.info("Code exchange failed: redirect_uri mismatch")
        return None

    if not verify_code_challenge(code_verifier, entity.code_challenge):
        logger.info("Code exchange failed: PKCE verification failed")
        return None

    if not await mark_code_used(session, code):
        logger.warning("Code exchange failed: code redeemed concurrently")
        return None
    return entity
