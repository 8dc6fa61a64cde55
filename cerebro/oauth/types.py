"""Type definitions for OAuth token, registration and principal data."""

from pydantic import BaseModel, Field

from cerebro.db.models_oauth import DEFAULT_SCOPE

GRANT_TYPES = ["authorization_code", "refresh_token"]
RESPONSE_TYPES = ["code"]


class TokenResponse(BaseModel):
    """OAuth token endpoint response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_token: str
    scope: str = DEFAULT_SCOPE


class ClientRegistrationResponse(BaseModel):
    """RFC 7591 registration response for a public client."""

    client_id: str
    client_id_issued_at: int
    client_secret_expires_at: int = 0
    redirect_uris: list[str] = Field(default_factory=list)
    grant_types: list[str] = Field(default_factory=lambda: list(GRANT_TYPES))
    response_types: list[str] = Field(default_factory=lambda: list(RESPONSE_TYPES))
    token_endpoint_auth_method: str = "none"
    client_name: str | None = None
    client_uri: str | None = None
    logo_uri: str | None = None
    scope: str | None = None


class AuthenticatedPrincipal(BaseModel):
    """Identity attached to a request that presented a valid bearer token."""

    user_id: str
    username: str
    name: str
    email: str | None = None
    role: str
    agent_label: str
    is_superadmin: bool = False
