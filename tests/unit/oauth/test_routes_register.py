"""Tests for POST /oauth/register."""

import pytest
from httpx import AsyncClient


class TestRegister:
    """Tests for dynamic client registration over HTTP."""

    async def test_registers_client(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/oauth/register",
            json={"redirect_uris": ["https://claude.ai/cb"], "client_name": "Claude"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["client_id"].startswith("mcp-")
        assert data["redirect_uris"] == ["https://claude.ai/cb"]
        assert data["client_name"] == "Claude"
        assert data["token_endpoint_auth_method"] == "none"
        assert "client_secret" not in data

    @pytest.mark.parametrize(
        "uri", ["https://claude.ai/x", "https://staging.claude.ai/x"]
    )
    async def test_allowed_redirects(self, client: AsyncClient, uri: str) -> None:
        resp = await client.post("/oauth/register", json={"redirect_uris": [uri]})
        assert resp.status_code == 201

    @pytest.mark.parametrize(
        "uri",
        ["http://claude.ai/x", "https://claude.ai.evil.com/x", "https://evil.com/x"],
    )
    async def test_rejected_redirects(self, client: AsyncClient, uri: str) -> None:
        resp = await client.post("/oauth/register", json={"redirect_uris": [uri]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_redirect_uri"

    async def test_malformed_body_treated_as_empty(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/oauth/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 201
        assert resp.json()["redirect_uris"] == []

    async def test_non_object_body_treated_as_empty(self, client: AsyncClient) -> None:
        resp = await client.post("/oauth/register", json=["https://evil.com/x"])
        assert resp.status_code == 201
