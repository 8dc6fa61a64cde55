"""Tests for dynamic client registration."""

import pytest

from cerebro.oauth.registration import InvalidRedirectUriError, register_client

DOMAINS = ["claude.ai"]


class TestRegisterClient:
    """Tests for register_client."""

    def test_issues_prefixed_client_id(self) -> None:
        result = register_client({"redirect_uris": ["https://claude.ai/cb"]}, DOMAINS)
        assert result.client_id.startswith("mcp-")
        assert result.redirect_uris == ["https://claude.ai/cb"]
        assert result.token_endpoint_auth_method == "none"
        assert result.client_secret_expires_at == 0

    def test_each_registration_gets_new_id(self) -> None:
        first = register_client({}, DOMAINS)
        second = register_client({}, DOMAINS)
        assert first.client_id != second.client_id

    def test_empty_body_allowed(self) -> None:
        result = register_client({}, DOMAINS)
        assert result.redirect_uris == []
        assert result.grant_types == ["authorization_code", "refresh_token"]
        assert result.response_types == ["code"]

    def test_subdomain_accepted(self) -> None:
        result = register_client(
            {"redirect_uris": ["https://staging.claude.ai/x"]}, DOMAINS
        )
        assert result.redirect_uris == ["https://staging.claude.ai/x"]

    @pytest.mark.parametrize(
        "uri",
        ["http://claude.ai/x", "https://claude.ai.evil.com/x", "https://evil.com/x"],
    )
    def test_disallowed_uri_rejected(self, uri: str) -> None:
        with pytest.raises(InvalidRedirectUriError) as exc_info:
            register_client({"redirect_uris": ["https://claude.ai/ok", uri]}, DOMAINS)
        assert exc_info.value.rejected == [uri]

    def test_non_string_uri_rejected(self) -> None:
        with pytest.raises(InvalidRedirectUriError):
            register_client({"redirect_uris": [42]}, DOMAINS)

    def test_echoes_string_metadata_only(self) -> None:
        result = register_client(
            {"client_name": "Claude", "client_uri": 7, "scope": "read write"},
            DOMAINS,
        )
        assert result.client_name == "Claude"
        assert result.client_uri is None
        assert result.scope == "read write"
