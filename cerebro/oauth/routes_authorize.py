"""OAuth authorization endpoint: sign-in form and code issuance."""

import logging
from typing import Annotated
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, Form, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from pydantic import BaseModel

from cerebro.api.deps import DbSession, RateLimited, Settings
from cerebro.core.settings import AuthSettings
from cerebro.db.repo_user import verify_credentials
from cerebro.oauth.auth_code import AuthCodeParams, create_authorization_code
from cerebro.oauth.login_page import LoginFormState, render_login_page
from cerebro.oauth.redirect_policy import is_allowed_redirect_uri

logger = logging.getLogger(__name__)

router = APIRouter()

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FOUND = 302

LOGIN_FAILED_MESSAGE = "Invalid username or password."


class _AuthQuery(BaseModel):
    """Bundle query params for the authorize endpoint."""

    response_type: str = ""
    client_id: str = ""
    redirect_uri: str = ""
    code_challenge: str = ""
    code_challenge_method: str = ""
    state: str = ""


class _AuthForm(BaseModel):
    """Bundle form fields posted by the sign-in page."""

    username: str = ""
    password: str = ""
    client_id: str = ""
    redirect_uri: str = ""
    code_challenge: str = ""
    code_challenge_method: str = ""
    state: str = ""
    agent_label: str = ""


def _resolve_redirect_uri(requested: str, settings: AuthSettings) -> str | None:
    """Fall back to the default callback; None if the target is not allowed."""
    resolved = requested or settings.default_redirect_uri
    if not is_allowed_redirect_uri(resolved, settings.get_allowed_redirect_domains()):
        logger.info("Authorize rejected, invalid redirect_uri: %s", resolved)
        return None
    return resolved


def _validate_pkce_params(code_challenge: str, method: str) -> str | None:
    """Return an error message if the PKCE parameters are unusable."""
    if not code_challenge:
        return "Invalid request"
    if method and method != "S256":
        return "Invalid request: only S256 is supported"
    return None


def _with_query(uri: str, params: dict[str, str]) -> str:
    """Append params to a URI while keeping its existing query."""
    parts = urlsplit(uri)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


@router.get("/oauth/authorize", response_model=None)
async def authorize_form(
    q: Annotated[_AuthQuery, Query()],
    settings: Settings,
) -> HTMLResponse | PlainTextResponse:
    """GET /oauth/authorize -- render the sign-in form."""
    if q.response_type != "code":
        return PlainTextResponse("Invalid request", status_code=HTTP_BAD_REQUEST)
    error = _validate_pkce_params(q.code_challenge, q.code_challenge_method)
    if error is not None:
        return PlainTextResponse(error, status_code=HTTP_BAD_REQUEST)
    if _resolve_redirect_uri(q.redirect_uri, settings) is None:
        return PlainTextResponse(
            "Invalid redirect_uri", status_code=HTTP_BAD_REQUEST
        )

    form = LoginFormState(
        client_id=q.client_id,
        redirect_uri=q.redirect_uri,
        code_challenge=q.code_challenge,
        code_challenge_method=q.code_challenge_method or "S256",
        state=q.state,
    )
    return HTMLResponse(render_login_page(form))


@router.post(
    "/oauth/authorize", response_model=None, dependencies=[RateLimited]
)
async def authorize_submit(
    form: Annotated[_AuthForm, Form()],
    db: DbSession,
    settings: Settings,
) -> HTMLResponse | PlainTextResponse | RedirectResponse:
    """POST /oauth/authorize -- check credentials and issue a code."""
    error = _validate_pkce_params(form.code_challenge, form.code_challenge_method)
    if error is not None:
        return PlainTextResponse(error, status_code=HTTP_BAD_REQUEST)

    user = await verify_credentials(db, form.username, form.password)
    if user is None:
        logger.info("Sign-in failed for username %r", form.username)
        state = LoginFormState(
            client_id=form.client_id,
            redirect_uri=form.redirect_uri,
            code_challenge=form.code_challenge,
            code_challenge_method=form.code_challenge_method or "S256",
            state=form.state,
            username=form.username,
            agent_label=form.agent_label,
        )
        return HTMLResponse(
            render_login_page(state, error=LOGIN_FAILED_MESSAGE),
            status_code=HTTP_UNAUTHORIZED,
        )

    redirect_uri = _resolve_redirect_uri(form.redirect_uri, settings)
    if redirect_uri is None:
        return PlainTextResponse(
            "Invalid redirect_uri", status_code=HTTP_BAD_REQUEST
        )

    code = await create_authorization_code(
        db,
        AuthCodeParams(
            user_id=user.id,
            code_challenge=form.code_challenge,
            redirect_uri=redirect_uri,
            agent_label=form.agent_label.strip() or None,
            ttl_seconds=settings.auth_code_ttl,
        ),
    )

    redir_params = {"code": code}
    if form.state:
        redir_params["state"] = form.state
    parts = urlsplit(redirect_uri)
    logger.info(
        "Sign-in succeeded for %s, redirecting to %s://%s%s",
        user.username,
        parts.scheme,
        parts.netloc,
        parts.path,
    )
    return RedirectResponse(
        url=_with_query(redirect_uri, redir_params),
        status_code=HTTP_FOUND,
    )
