"""Dynamic Client Registration (RFC 7591) for public PKCE clients.

Registrations are not stored. Authorization is bound to the resource
owner's login rather than to a client record, so the issued ``client_id``
only identifies the client in logs.
"""

import logging
import time
from collections.abc import Iterable, Mapping
from typing import Any

import uuid_utils

from cerebro.oauth.redirect_policy import is_allowed_redirect_uri
from cerebro.oauth.types import ClientRegistrationResponse

logger = logging.getLogger(__name__)

ECHOED_FIELDS = ("client_name", "client_uri", "logo_uri", "scope")


class InvalidRedirectUriError(ValueError):
    """One or more requested redirect URIs fall outside the allow-list."""

    def __init__(self, rejected: list[str]) -> None:
        super().__init__("redirect_uris must use HTTPS on an allowed domain")
        self.rejected = rejected


def generate_client_id() -> str:
    return f"mcp-{uuid_utils.uuid4()}"


def register_client(
    body: Mapping[str, Any], allowed_domains: Iterable[str]
) -> ClientRegistrationResponse:
    """Validate a registration request and build the client metadata."""
    domains = list(allowed_domains)
    raw_uris = body.get("redirect_uris")
    requested = raw_uris if isinstance(raw_uris, list) else []

    rejected = [
        str(uri)
        for uri in requested
        if not isinstance(uri, str) or not is_allowed_redirect_uri(uri, domains)
    ]
    if rejected:
        raise InvalidRedirectUriError(rejected)

    echoed = {
        name: body[name] for name in ECHOED_FIELDS if isinstance(body.get(name), str)
    }
    response = ClientRegistrationResponse(
        client_id=generate_client_id(),
        client_id_issued_at=int(time.time()),
        redirect_uris=list(requested),
        **echoed,
    )
    logger.info(
        "Registered client %s (%s)",
        response.client_id,
        response.client_name or "unnamed",
    )
    return response
