"""Dynamic client registration endpoint."""

import json
import logging

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from cerebro.api.deps import Settings
from cerebro.oauth.registration import InvalidRedirectUriError, register_client

logger = logging.getLogger(__name__)

router = APIRouter()

HTTP_CREATED = 201
HTTP_BAD_REQUEST = 400


@router.post("/oauth/register")
async def register(request: Request, settings: Settings) -> JSONResponse:
    """POST /oauth/register -- RFC 7591 registration for public clients."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = {}
    if not isinstance(body, dict):
        body = {}

    try:
        client = register_client(body, settings.get_allowed_redirect_domains())
    except InvalidRedirectUriError as exc:
        logger.info(
            "Registration rejected, invalid redirect_uris: %s",
            ", ".join(exc.rejected),
        )
        return JSONResponse(
            {
                "error": "invalid_redirect_uri",
                "error_description": str(exc),
            },
            status_code=HTTP_BAD_REQUEST,
        )

    return JSONResponse(
        client.model_dump(exclude_none=True), status_code=HTTP_CREATED
    )
