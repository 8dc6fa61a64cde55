"""Tests for POST /oauth/revoke."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.db.models_user import UserEntity
from cerebro.oauth.token_service import TokenIssuanceParams, issue_tokens


class TestRevokeEndpoint:
    """Tests for the revocation endpoint."""

    async def test_revokes_access_token(
        self, client: AsyncClient, db_session: AsyncSession, user: UserEntity
    ) -> None:
        issued = await issue_tokens(db_session, TokenIssuanceParams(user_id=user.id))
        await db_session.commit()
        headers = {"Authorization": f"Bearer {issued.access_token}"}
        assert (await client.get("/api/me", headers=headers)).status_code == 200

        resp = await client.post("/oauth/revoke", data={"token": issued.access_token})
        assert resp.status_code == 200
        assert resp.json() == {}
        assert (await client.get("/api/me", headers=headers)).status_code == 401

    async def test_revoking_refresh_token_kills_pair(
        self, client: AsyncClient, db_session: AsyncSession, user: UserEntity
    ) -> None:
        issued = await issue_tokens(db_session, TokenIssuanceParams(user_id=user.id))
        await db_session.commit()

        await client.post("/oauth/revoke", data={"token": issued.refresh_token})
        resp = await client.post(
            "/oauth/token",
            data={"grant_type": "refresh_token", "refresh_token": issued.refresh_token},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid_grant"}

    async def test_unknown_token_returns_200(self, client: AsyncClient) -> None:
        resp = await client.post("/oauth/revoke", data={"token": "unknown"})
        assert resp.status_code == 200

    async def test_missing_token(self, client: AsyncClient) -> None:
        resp = await client.post("/oauth/revoke", data={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid_request"}
