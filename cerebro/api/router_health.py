"""Liveness check."""

from datetime import UTC, datetime

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    ok: bool
    ts: str


@router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse(ok=True, ts=datetime.now(UTC).isoformat())
