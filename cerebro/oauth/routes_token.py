"""OAuth token endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from cerebro.api.deps import DbSession, RateLimited, Settings
from cerebro.core.settings import AuthSettings
from cerebro.oauth.auth_code import redeem_authorization_code
from cerebro.oauth.token_service import (
    TokenIssuanceParams,
    issue_tokens,
    refresh_tokens,
)
from cerebro.oauth.types import TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter()

HTTP_BAD_REQUEST = 400


class _TokenForm(BaseModel):
    """Bundle form fields for the token endpoint."""

    grant_type: str = ""
    code: str | None = None
    redirect_uri: str | None = None
    client_id: str | None = None
    code_verifier: str | None = None
    refresh_token: str | None = None


def _error(code: str) -> JSONResponse:
    return JSONResponse(
        {"error": code},
        status_code=HTTP_BAD_REQUEST,
        headers={"Cache-Control": "no-store"},
    )


@router.post("/oauth/token", response_model=None, dependencies=[RateLimited])
async def token_endpoint(
    response: Response,
    db: DbSession,
    settings: Settings,
    form: Annotated[_TokenForm, Form()],
) -> TokenResponse | JSONResponse:
    """POST /oauth/token -- exchange auth code or refresh token."""
    logger.info(
        "Token request grant_type=%s client_id=%s", form.grant_type, form.client_id
    )
    response.headers["Cache-Control"] = "no-store"

    if form.grant_type == "authorization_code":
        return await _handle_auth_code(db, settings, form)
    if form.grant_type == "refresh_token":
        return await _handle_refresh(db, settings, form)

    logger.info("Unsupported grant_type: %s", form.grant_type)
    return _error("unsupported_grant_type")


async def _handle_auth_code(
    db: AsyncSession,
    settings: AuthSettings,
    form: _TokenForm,
) -> TokenResponse | JSONResponse:
    """Handle grant_type=authorization_code."""
    if not form.code or not form.code_verifier:
        return _error("invalid_request")

    auth_code = await redeem_authorization_code(
        db,
        code=form.code,
        redirect_uri=form.redirect_uri,
        code_verifier=form.code_verifier,
    )
    if auth_code is None:
        return _error("invalid_grant")

    params = TokenIssuanceParams(
        user_id=auth_code.user_id,
        agent_label=auth_code.agent_label,
        access_ttl=settings.access_token_ttl,
        refresh_ttl=settings.refresh_token_ttl,
    )
    result = await issue_tokens(db, params)
    if result is None:
        return _error("invalid_grant")
    return result


async def _handle_refresh(
    db: AsyncSession,
    settings: AuthSettings,
    form: _TokenForm,
) -> TokenResponse | JSONResponse:
    """Handle grant_type=refresh_token."""
    if not form.refresh_token:
        return _error("invalid_request")

    result = await refresh_tokens(
        db,
        form.refresh_token,
        access_ttl=settings.access_token_ttl,
        refresh_ttl=settings.refresh_token_ttl,
    )
    if result is None:
        return _error("invalid_grant")
    return result
