"""OAuth token revocation endpoint."""

from typing import Annotated

from fastapi import APIRouter, Form
from starlette.responses import JSONResponse

from cerebro.api.deps import DbSession
from cerebro.oauth.token_service import revoke_token

router = APIRouter()

HTTP_BAD_REQUEST = 400


@router.post("/oauth/revoke")
async def revoke(
    db: DbSession,
    token: Annotated[str, Form()] = "",
) -> JSONResponse:
    """POST /oauth/revoke -- revoke a token pair (idempotent per RFC 7009)."""
    if not token:
        return JSONResponse(
            {"error": "invalid_request"}, status_code=HTTP_BAD_REQUEST
        )
    await revoke_token(db, token=token)
    return JSONResponse({}, status_code=200)
