"""Unit tests for SessionService."""

from datetime import timedelta

import pytest

from relay.domain.error import AuthenticationFailed
from relay.domain.service import SessionService
from tests.factories import make_session_token
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestVerify:
    """Tests for SessionService.verify."""

    @pytest.mark.asyncio
    async def test_returns_account_email_and_requested_username(self, unit_env):
        service = await unit_env.get(SessionService)
        token = make_session_token("u1", email="a@x.com", username="artist1")

        session = service.verify(token)

        assert session.account_id == "u1"
        assert session.email == "a@x.com"
        assert session.requested_username == "artist1"

    @pytest.mark.asyncio
    async def test_requested_username_is_optional(self, unit_env):
        service = await unit_env.get(SessionService)

        session = service.verify(make_session_token("u1", email="a@x.com"))

        assert session.requested_username is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token_fails(self, unit_env, token):
        service = await unit_env.get(SessionService)

        with pytest.raises(AuthenticationFailed):
            service.verify(token)

    @pytest.mark.asyncio
    async def test_expired_token_fails(self, unit_env):
        service = await unit_env.get(SessionService)
        token = make_session_token("u1", expires_in=timedelta(minutes=-5))

        with pytest.raises(AuthenticationFailed):
            service.verify(token)
