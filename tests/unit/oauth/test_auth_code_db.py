"""Tests for authorization code DB operations (create + redeem)."""

import hashlib
from base64 import urlsafe_b64encode
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cerebro.db.models_user import UserEntity
from cerebro.db.repo_oauth import get_auth_code
from cerebro.oauth.auth_code import (
    AuthCodeParams,
    create_authorization_code,
    redeem_authorization_code,
)

REDIRECT_URI = "https://claude.ai/api/mcp/auth_callback"
VERIFIER = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"


def _make_challenge(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


async def _issue(session: AsyncSession, user: UserEntity, **overrides: object) -> str:
    params = {
        "user_id": user.id,
        "code_challenge": _make_challenge(VERIFIER),
        "redirect_uri": REDIRECT_URI,
        "agent_label": "Work agent",
    }
    params.update(overrides)
    return await create_authorization_code(session, AuthCodeParams(**params))


class TestCreateAuthorizationCode:
    """Tests for create_authorization_code."""

    async def test_creates_code(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        code = await _issue(db_session, user)
        assert len(code) >= 43

        stored = await get_auth_code(db_session, code)
        assert stored is not None
        assert stored.used is False
        assert stored.agent_label == "Work agent"
        assert stored.redirect_uri == REDIRECT_URI

    async def test_codes_are_unique(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        codes = {await _issue(db_session, user) for _ in range(5)}
        assert len(codes) == 5


class TestRedeemAuthorizationCode:
    """Tests for redeem_authorization_code."""

    async def test_valid_redemption(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        code = await _issue(db_session, user)
        entity = await redeem_authorization_code(
            db_session, code=code, redirect_uri=REDIRECT_URI, code_verifier=VERIFIER
        )
        assert entity is not None
        assert entity.user_id == user.id

        stored = await get_auth_code(db_session, code)
        assert stored is not None
        assert stored.used is True

    async def test_second_redemption_fails(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        code = await _issue(db_session, user)
        first = await redeem_authorization_code(
            db_session, code=code, redirect_uri=REDIRECT_URI, code_verifier=VERIFIER
        )
        second = await redeem_authorization_code(
            db_session, code=code, redirect_uri=REDIRECT_URI, code_verifier=VERIFIER
        )
        assert first is not None
        assert second is None

    async def test_expired_code(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        code = await _issue(db_session, user)
        later = datetime.now(UTC) + timedelta(minutes=5, seconds=1)
        result = await redeem_authorization_code(
            db_session,
            code=code,
            redirect_uri=REDIRECT_URI,
            code_verifier=VERIFIER,
            now=later,
        )
        assert result is None

    async def test_unknown_code(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        result = await redeem_authorization_code(
            db_session, code="nope", redirect_uri=REDIRECT_URI, code_verifier=VERIFIER
        )
        assert result is None

    async def test_wrong_verifier(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        code = await _issue(db_session, user)
        result = await redeem_authorization_code(
            db_session,
            code=code,
            redirect_uri=REDIRECT_URI,
            code_verifier=VERIFIER[:-1] + "Y",
        )
        assert result is None

    @pytest.mark.parametrize(
        "redirect_uri", [None, "https://claude.ai/other", REDIRECT_URI + "/"]
    )
    async def test_redirect_uri_must_match(
        self, db_session: AsyncSession, user: UserEntity, redirect_uri: str | None
    ) -> None:
        code = await _issue(db_session, user)
        result = await redeem_authorization_code(
            db_session, code=code, redirect_uri=redirect_uri, code_verifier=VERIFIER
        )
        assert result is None

    async def test_failed_verification_does_not_consume_code(
        self, db_session: AsyncSession, user: UserEntity
    ) -> None:
        code = await _issue(db_session, user)
        await redeem_authorization_code(
            db_session, code=code, redirect_uri=REDIRECT_URI, code_verifier="wrong"
        )
        result = await redeem_authorization_code(
            db_session, code=code, redirect_uri=REDIRECT_URI, code_verifier=VERIFIER
        )
        assert result is not None
