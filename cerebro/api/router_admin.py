"""Admin API for account lifecycle and agent session revocation."""

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.api.deps import AdminToken, DbSession
from cerebro.api.schemas import (
    AgentSession,
    AgentSessionEnvelope,
    CreatedUserResponse,
    CreateUserPayload,
    RevokedCount,
    UserSummary,
)
from cerebro.core.usernames import generate_password
from cerebro.db.models_user import UserEntity
from cerebro.db.repo_oauth import delete_all_tokens, get_token_for_user
from cerebro.db.repo_user import (
    UserCreateData,
    create_user,
    get_user_by_id,
    set_user_disabled,
    unique_username,
)
from cerebro.oauth.token_service import revoke_user_tokens

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/api", tags=["admin"])


async def _load_user(db: AsyncSession, user_id: str) -> UserEntity:
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return user


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: CreateUserPayload,
    db: DbSession,
    _token: AdminToken,
) -> CreatedUserResponse:
    """POST /admin/api/users -- create an account with generated credentials."""
    username = await unique_username(db)
    password = generate_password()
    user = await create_user(
        db,
        UserCreateData(
            name=payload.name,
            email=payload.email,
            username=username,
            password=password,
            role=payload.normalized_role(),
        ),
    )
    logger.info("Created user %s (%s)", user.id, username)
    return CreatedUserResponse(
        user=UserSummary.model_validate(user),
        username=username,
        password=password,
    )


@router.get("/users/{user_id}/token")
async def get_agent_session(
    user_id: str,
    db: DbSession,
    _token: AdminToken,
) -> AgentSessionEnvelope:
    """GET /admin/api/users/{id}/token -- current agent session, if any."""
    await _load_user(db, user_id)
    token = await get_token_for_user(db, user_id)
    if token is None:
        return AgentSessionEnvelope(token=None)
    return AgentSessionEnvelope(token=AgentSession.model_validate(token))


@router.delete("/users/{user_id}/token")
async def revoke_agent_session(
    user_id: str,
    db: DbSession,
    _token: AdminToken,
) -> RevokedCount:
    """DELETE /admin/api/users/{id}/token -- revoke the user's token pair."""
    await _load_user(db, user_id)
    revoked = await revoke_user_tokens(db, user_id)
    logger.info("Admin revoked %d token pair(s) for user %s", revoked, user_id)
    return RevokedCount(revoked=revoked)


@router.post("/users/{user_id}/disable")
async def disable_account(
    user_id: str,
    db: DbSession,
    _token: AdminToken,
) -> UserSummary:
    """POST /admin/api/users/{id}/disable -- block sign-in and revoke tokens."""
    user = await _load_user(db, user_id)
    await set_user_disabled(db, user, disabled=True)
    await revoke_user_tokens(db, user_id)
    logger.info("Disabled user %s", user_id)
    return UserSummary.model_validate(user)


@router.post("/users/{user_id}/enable")
async def enable_account(
    user_id: str,
    db: DbSession,
    _token: AdminToken,
) -> UserSummary:
    """POST /admin/api/users/{id}/enable -- allow sign-in again."""
    user = await _load_user(db, user_id)
    await set_user_disabled(db, user, disabled=False)
    logger.info("Enabled user %s", user_id)
    return UserSummary.model_validate(user)


@router.delete("/tokens")
async def revoke_all_agent_sessions(
    db: DbSession,
    _token: AdminToken,
) -> RevokedCount:
    """DELETE /admin/api/tokens -- revoke every token pair."""
    revoked = await delete_all_tokens(db)
    logger.warning("Admin revoked all %d token pair(s)", revoked)
    return RevokedCount(revoked=revoked)
