"""SQLAlchemy models for authorization codes and issued token pairs."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cerebro.db.base import BaseEntity

DEFAULT_SCOPE = "read write"


class AuthorizationCodeEntity(BaseEntity):
    """Single-use authorization code for the auth code flow."""

    __tablename__ = "auth_codes"

    code: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(48), ForeignKey("users.id"), nullable=False
    )
    code_challenge: Mapped[str] = mapped_column(String(128), nullable=False)
    redirect_uri: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    agent_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class OAuthTokenEntity(BaseEntity):
    """Access and refresh token pair held by one agent session.

    Tokens are stored as SHA-256 hashes; the raw values only ever leave the
    server in the token endpoint response. ``user_id`` is unique because an
    account has at most one live agent session.
    """

    __tablename__ = "oauth_tokens"

    access_token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    refresh_token_hash: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(48), ForeignKey("users.id"), unique=True, nullable=False
    )
    agent_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    scope: Mapped[str] = mapped_column(
        String(255), nullable=False, default=DEFAULT_SCOPE
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    refresh_expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
