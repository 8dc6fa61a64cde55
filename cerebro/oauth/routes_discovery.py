"""OAuth discovery endpoints."""

from fastapi import APIRouter

from cerebro.api.deps import Settings
from cerebro.oauth.discovery import (
    AuthorizationServerMetadata,
    ProtectedResourceMetadata,
    build_authorization_server_metadata,
    build_protected_resource_metadata,
)

router = APIRouter()


@router.get("/.well-known/oauth-authorization-server")
async def authorization_server_metadata(
    settings: Settings,
) -> AuthorizationServerMetadata:
    """OAuth 2.0 Authorization Server Metadata (RFC 8414)."""
    return build_authorization_server_metadata(settings)


@router.get("/.well-known/oauth-protected-resource")
async def protected_resource_metadata(
    settings: Settings,
) -> ProtectedResourceMetadata:
    """OAuth 2.0 Protected Resource Metadata (RFC 9728)."""
    return build_protected_resource_metadata(settings)


@router.get("/.well-known/oauth-protected-resource/{resource_path:path}")
async def protected_resource_metadata_for_path(
    resource_path: str,
    settings: Settings,
) -> ProtectedResourceMetadata:
    """Path-suffixed variant requested by MCP connectors (e.g. ``/mcp/sse``)."""
    return build_protected_resource_metadata(settings)
