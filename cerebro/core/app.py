"""FastAPI application factory for the Cerebro OAuth server."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from cerebro.api.errors import register_exception_handlers
from cerebro.api.router_admin import router as admin_router
from cerebro.api.router_health import router as health_router
from cerebro.api.router_me import router as me_router
from cerebro.core.logging_config import configure_logging
from cerebro.core.rate_limit import RateLimiter
from cerebro.core.settings import AuthSettings, DatabaseSettings
from cerebro.db.engine import configure_database, dispose_engine, session_scope
from cerebro.db.repo_oauth import purge_expired
from cerebro.db.repo_user import seed_superadmin
from cerebro.oauth.routes_authorize import router as authorize_router
from cerebro.oauth.routes_discovery import router as discovery_router
from cerebro.oauth.routes_register import router as register_router
from cerebro.oauth.routes_revoke import router as revoke_router
from cerebro.oauth.routes_token import router as token_router

logger = logging.getLogger(__name__)


async def _startup(settings: AuthSettings) -> None:
    """Seed the superadmin and drop rows that expired while we were down."""
    async with session_scope() as session:
        await seed_superadmin(session, settings)
        codes, tokens = await purge_expired(session, datetime.now(UTC))
    if codes or tokens:
        logger.info("Purged %d expired code(s) and %d token pair(s)", codes, tokens)


async def _log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %d (%.0fms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


def create_app(
    settings: AuthSettings | None = None,
    db_settings: DatabaseSettings | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = settings or AuthSettings()
    configure_logging(settings.log_level)
    configure_database(db_settings or DatabaseSettings())

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await _startup(settings)
        logger.info(
            "OAuth discovery: %s/.well-known/oauth-authorization-server",
            settings.base_url,
        )
        yield
        await dispose_engine()

    app = FastAPI(
        title="Cerebro",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    origins = settings.get_cors_origin_list()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "Accept", "Mcp-Session-Id"],
            expose_headers=["Mcp-Session-Id"],
        )
    app.middleware("http")(_log_requests)
    proxies = settings.get_trusted_proxy_list()
    if proxies:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=proxies)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(discovery_router)
    app.include_router(register_router)
    app.include_router(authorize_router)
    app.include_router(token_router)
    app.include_router(revoke_router)
    app.include_router(me_router)
    app.include_router(admin_router)

    return app
