"""Pydantic schemas for the principal and admin APIs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from cerebro.db.models_user import ROLE_ADMIN, ROLE_MEMBER


class MeResponse(BaseModel):
    """Authenticated principal as seen by the calling agent."""

    id: str
    username: str
    name: str
    email: str | None = None
    role: str
    agent_label: str
    is_superadmin: bool


class UserSummary(BaseModel):
    """Public view of an account (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str | None = None
    username: str
    role: str
    confirmed: bool
    disabled: bool


class CreateUserPayload(BaseModel):
    """Request body for POST /admin/api/users."""

    name: str
    email: EmailStr | None = None
    role: str = ROLE_MEMBER

    def normalized_role(self) -> str:
        return ROLE_ADMIN if self.role == ROLE_ADMIN else ROLE_MEMBER


class CreatedUserResponse(BaseModel):
    """New account plus its one-time credentials."""

    user: UserSummary
    username: str
    password: str


class AgentSession(BaseModel):
    """Metadata of a user's live token pair; the tokens themselves are hashed."""

    model_config = ConfigDict(from_attributes=True)

    agent_label: str | None = None
    scope: str
    last_used_at: datetime | None = None
    expires_at: datetime
    created_at: datetime | None = None


class AgentSessionEnvelope(BaseModel):
    """Wraps a session lookup: {token: ... | null}."""

    token: AgentSession | None = None


class RevokedCount(BaseModel):
    revoked: int
