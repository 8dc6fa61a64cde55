"""OAuth metadata documents (RFC 8414 and RFC 9728)."""

from pydantic import BaseModel

from cerebro.core.settings import AuthSettings
from cerebro.oauth.types import GRANT_TYPES, RESPONSE_TYPES


class AuthorizationServerMetadata(BaseModel):
    """.well-known/oauth-authorization-server response."""

    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    registration_endpoint: str
    revocation_endpoint: str
    response_types_supported: list[str]
    grant_types_supported: list[str]
    code_challenge_methods_supported: list[str]
    token_endpoint_auth_methods_supported: list[str]
    scopes_supported: list[str]


class ProtectedResourceMetadata(BaseModel):
    """.well-known/oauth-protected-resource response."""

    resource: str
    authorization_servers: list[str]
    bearer_methods_supported: list[str]


def build_authorization_server_metadata(
    settings: AuthSettings,
) -> AuthorizationServerMetadata:
    """Build the authorization server metadata from settings."""
    issuer = settings.base_url
    return AuthorizationServerMetadata(
        issuer=issuer,
        authorization_endpoint=f"{issuer}/oauth/authorize",
        token_endpoint=f"{issuer}/oauth/token",
        registration_endpoint=f"{issuer}/oauth/register",
        revocation_endpoint=f"{issuer}/oauth/revoke",
        response_types_supported=list(RESPONSE_TYPES),
        grant_types_supported=list(GRANT_TYPES),
        code_challenge_methods_supported=["S256"],
        token_endpoint_auth_methods_supported=["none"],
        scopes_supported=["read", "write"],
    )


def build_protected_resource_metadata(
    settings: AuthSettings,
) -> ProtectedResourceMetadata:
    base = settings.base_url
    return ProtectedResourceMetadata(
        resource=base,
        authorization_servers=[base],
        bearer_methods_supported=["header"],
    )


def www_authenticate_challenge(settings: AuthSettings) -> str:
    """``WWW-Authenticate`` value pointing clients at resource metadata."""
    base = settings.base_url
    return (
        f'Bearer realm="{base}", '
        f'resource_metadata="{base}/.well-known/oauth-protected-resource"'
    )
