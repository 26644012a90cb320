"""End-to-end tests for the identity bridge endpoints."""

from datetime import timedelta

import httpx
import pytest
import pytest_asyncio

from relay.domain.service import HomeserverClient
from relay.domain.value import HomeserverFailure
from relay.interface.api.app import create_app
from tests.di import build_test_container
from tests.factories import make_session_token, make_test_settings

PROVISION_KEY = "provision-key"


@pytest.fixture
def settings():
    """Test settings."""
    return make_test_settings()


@pytest_asyncio.fixture
async def container(settings):
    container = build_test_container(settings=settings)
    yield container
    await container.close()


@pytest_asyncio.fixture
async def client(settings, container):
    """HTTP client bound to the app through ASGI transport."""
    app = create_app(settings=settings, container=container)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def homeserver(container):
    """The in-memory homeserver behind the app."""
    return await container.get(HomeserverClient)


async def _provision(client, account_id="u1", email="a@x.com", username="artist1"):
    return await client.post(
        "/identity/provision",
        json={"account_id": account_id, "email": email, "username": username},
    )


def _bearer(account_id="u1", **claims) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_session_token(account_id, **claims)}"}


class TestHealth:
    """End-to-end tests for the health endpoint."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["server_name"] == "example.org"


class TestProvisionEndpoint:
    """End-to-end tests for POST /identity/provision."""

    @pytest.mark.asyncio
    async def test_provision_returns_messaging_id(self, client):
        response = await _provision(client)

        assert response.status_code == 200
        assert response.json() == {"messaging_id": "@artist1:example.org"}

    @pytest.mark.asyncio
    async def test_provision_twice_returns_same_identity(self, client):
        first = await _provision(client)
        second = await _provision(client)

        assert second.status_code == 200
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_resync_without_username_keeps_identity(self, client):
        await _provision(client, email="bob@x.com")

        response = await client.post(
            "/identity/provision", json={"account_id": "u1", "email": "bob@x.com"}
        )

        assert response.status_code == 200
        assert response.json() == {"messaging_id": "@artist1:example.org"}

    @pytest.mark.asyncio
    async def test_missing_email_is_bad_request(self, client):
        response = await client.post("/identity/provision", json={"account_id": "u1"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    @pytest.mark.asyncio
    async def test_invalid_username_is_bad_request(self, client, homeserver):
        response = await _provision(client, username="!!")

        assert response.status_code == 400
        assert homeserver.register_calls == []

    @pytest.mark.asyncio
    async def test_username_owned_by_other_account_conflicts(self, client):
        await _provision(client, account_id="u1")

        response = await _provision(client, account_id="u2", email="b@x.com")

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_unavailable_homeserver_is_retryable(self, client, homeserver):
        homeserver.register_failure = HomeserverFailure(
            status_code=503, error="Service Unavailable"
        )

        response = await _provision(client)

        assert response.status_code == 500
        assert response.json()["detail"]["retryable"] is True

    @pytest.mark.asyncio
    async def test_refused_registration_is_not_retryable(self, client, homeserver):
        homeserver.register_failure = HomeserverFailure(
            status_code=400, errcode="M_INVALID_USERNAME", error="Invalid username"
        )

        response = await _provision(client)

        assert response.status_code == 500
        assert response.json()["detail"]["retryable"] is False


class TestGuardedProvisionEndpoint:
    """End-to-end tests for the provision endpoint with a provision key."""

    @pytest.fixture
    def settings(self):
        settings = make_test_settings()
        settings.auth.provision_token = PROVISION_KEY
        return settings

    @pytest.mark.asyncio
    async def test_missing_key_is_unauthorized(self, client, homeserver):
        response = await _provision(client)

        assert response.status_code == 401
        assert homeserver.register_calls == []

    @pytest.mark.asyncio
    async def test_wrong_key_is_unauthorized(self, client):
        response = await client.post(
            "/identity/provision",
            json={"account_id": "u1", "email": "a@x.com", "username": "artist1"},
            headers={"X-Provision-Token": "guess"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_matching_key_provisions(self, client):
        response = await client.post(
            "/identity/provision",
            json={"account_id": "u1", "email": "a@x.com", "username": "artist1"},
            headers={"X-Provision-Token": PROVISION_KEY},
        )

        assert response.status_code == 200
        assert response.json() == {"messaging_id": "@artist1:example.org"}


class TestTokenEndpoint:
    """End-to-end tests for GET /identity/token."""

    @pytest.mark.asyncio
    async def test_session_cookie_is_exchanged(self, client):
        await _provision(client)
        token = make_session_token("u1", email="a@x.com")

        response = await client.get(
            "/identity/token", headers={"Cookie": f"sb-access-token={token}"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "@artist1:example.org"
        assert data["access_token"]
        assert data["device_id"]

    @pytest.mark.asyncio
    async def test_bearer_token_is_exchanged(self, client):
        await _provision(client)

        response = await client.get("/identity/token", headers=_bearer())

        assert response.status_code == 200
        assert response.json()["user_id"] == "@artist1:example.org"

    @pytest.mark.asyncio
    async def test_no_session_is_unauthorized(self, client):
        response = await client.get("/identity/token")

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized: No active session"

    @pytest.mark.asyncio
    async def test_expired_session_is_unauthorized(self, client):
        response = await client.get(
            "/identity/token", headers=_bearer(expires_in=timedelta(minutes=-5))
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_first_exchange_provisions(self, client):
        response = await client.get(
            "/identity/token", headers=_bearer(email="carol@x.com", username="carol")
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == "@carol:example.org"

    @pytest.mark.asyncio
    async def test_unprovisionable_account_is_not_found(self, client):
        response = await client.get("/identity/token", headers=_bearer())

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rejected_login_is_bad_gateway(self, client, homeserver):
        await _provision(client)
        homeserver.login_failure = HomeserverFailure(
            status_code=403, errcode="M_FORBIDDEN", error="Invalid password"
        )

        response = await client.get("/identity/token", headers=_bearer())

        assert response.status_code == 502
