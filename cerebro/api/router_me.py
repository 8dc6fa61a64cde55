"""Endpoints for the agent holding a bearer token."""

from fastapi import APIRouter

from cerebro.api.deps import Principal
from cerebro.api.schemas import MeResponse

router = APIRouter(prefix="/api", tags=["agent"])


@router.get("/me")
async def me(principal: Principal) -> MeResponse:
    """GET /api/me -- identity behind the presented access token."""
    return MeResponse(
        id=principal.user_id,
        username=principal.username,
        name=principal.name,
        email=principal.email,
        role=principal.role,
        agent_label=principal.agent_label,
        is_superadmin=principal.is_superadmin,
    )
