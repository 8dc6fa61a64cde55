"""Exceptions raised by request dependencies and their HTTP rendering."""

from fastapi import FastAPI, Request, status
from starlette.responses import JSONResponse, PlainTextResponse, Response


class BearerAuthError(Exception):
    """Any bearer token rejection. Rendered identically whatever the cause."""

    def __init__(self, challenge: str) -> None:
        super().__init__("unauthorized")
        self.challenge = challenge


class RateLimitExceededError(Exception):
    """Client address exceeded the request budget for the current window."""

    def __init__(self, headers: dict[str, str]) -> None:
        super().__init__("Too many requests")
        self.headers = headers


async def _bearer_auth_handler(_request: Request, exc: Exception) -> Response:
    assert isinstance(exc, BearerAuthError)
    return JSONResponse(
        {"error": "unauthorized"},
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": exc.challenge},
    )


async def _rate_limit_handler(_request: Request, exc: Exception) -> Response:
    assert isinstance(exc, RateLimitExceededError)
    return PlainTextResponse(
        "Too many requests",
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BearerAuthError, _bearer_auth_handler)
    app.add_exception_handler(RateLimitExceededError, _rate_limit_handler)
