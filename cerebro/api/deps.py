"""FastAPI dependencies: settings, rate limiting, bearer and admin auth."""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.api.errors import BearerAuthError, RateLimitExceededError
from cerebro.core.rate_limit import RateLimiter
from cerebro.core.settings import AuthSettings
from cerebro.db.engine import get_session
from cerebro.oauth.discovery import www_authenticate_challenge
from cerebro.oauth.token_service import authenticate_access_token
from cerebro.oauth.types import AuthenticatedPrincipal

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> AuthSettings:
    """Settings built by ``create_app`` for this application instance."""
    return request.app.state.settings


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def client_address(request: Request) -> str:
    """Peer address; rewritten from X-Forwarded-For only for trusted proxies."""
    if request.client is not None:
        return request.client.host
    return "unknown"


Settings = Annotated[AuthSettings, Depends(get_settings)]
DbSession = Annotated[AsyncSession, Depends(get_session)]
BearerCredentials = Annotated[
    HTTPAuthorizationCredentials | None, Depends(_security)
]


async def enforce_rate_limit(
    request: Request,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Reject the request with 429 once the caller's budget is spent."""
    key = client_address(request)
    decision = limiter.check(key)
    if not decision.allowed:
        logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
        raise RateLimitExceededError(decision.headers())


async def require_principal(
    request: Request,
    credentials: BearerCredentials,
    db: DbSession,
    settings: Settings,
) -> AuthenticatedPrincipal:
    """Bearer auth gate for protected routes."""
    challenge = www_authenticate_challenge(settings)
    if credentials is None:
        logger.info("%s %s: no bearer token", request.method, request.url.path)
        raise BearerAuthError(challenge)

    found = await authenticate_access_token(db, credentials.credentials)
    if found is None:
        raise BearerAuthError(challenge)

    token, user = found
    is_superadmin = bool(
        settings.superadmin_email
        and user.email
        and user.email.lower() == settings.superadmin_email.lower()
    )
    return AuthenticatedPrincipal(
        user_id=user.id,
        username=user.username,
        name=user.name,
        email=user.email,
        role=user.role,
        agent_label=token.agent_label or user.username,
        is_superadmin=is_superadmin,
    )


async def require_admin_token(
    credentials: BearerCredentials,
    settings: Settings,
) -> str:
    """Verify the static admin API token."""
    expected = settings.admin_api_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    if credentials is None or not secrets.compare_digest(
        credentials.credentials.encode(), expected.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return credentials.credentials


Principal = Annotated[AuthenticatedPrincipal, Depends(require_principal)]
AdminToken = Annotated[str, Depends(require_admin_token)]
RateLimited = Depends(enforce_rate_limit)
