"""Matrix homeserver client implementation.

Talks to the Synapse admin registration API (shared-secret registration),
the client-server login API and the admin password reset API.
"""

from typing import Any
from urllib.parse import quote, urlparse

import httpx
import logfire

from relay.domain.service.homeserver_service import HomeserverClient
from relay.domain.value import (
    HomeserverFailure,
    LoginOutcome,
    LoginSucceeded,
    PasswordReset,
    RegisterCreated,
    RegisterOutcome,
    RegisterUserInUse,
    ResetOutcome,
)
from relay.domain.value.homeserver import USER_IN_USE
from relay.util.error import ConfigurationError

from .signing import sign_registration

REGISTER_PATH = "/_synapse/admin/v1/register"
LOGIN_PATH = "/_matrix/client/v3/login"
RESET_PASSWORD_PATH = "/_synapse/admin/v1/reset_password/{user_id}"

PROXY_BYPASS_HEADER = "ngrok-skip-browser-warning"


class MatrixHomeserverClient(HomeserverClient):
    """Base class for Matrix homeserver clients.

    Provides type distinction for dependency injection.
    """

    pass


def _failure_from_response(response: httpx.Response) -> HomeserverFailure:
    """Build a failure outcome from an error response.

    Bodies that are not JSON (proxy interstitials, gateway pages) keep the
    status code and fall back to the reason phrase.
    """
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    return HomeserverFailure(
        status_code=response.status_code,
        errcode=data.get("errcode"),
        error=data.get("error") or response.reason_phrase or "Unknown error",
    )


def _network_failure(e: httpx.HTTPError) -> HomeserverFailure:
    return HomeserverFailure(status_code=None, error=f"Homeserver unreachable: {e}")


def _json_object(response: httpx.Response) -> dict[str, Any]:
    """Parse a success body, raising ValueError unless it is a JSON object."""
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def _malformed_failure(response: httpx.Response, path: str) -> HomeserverFailure:
    logfire.error(
        "Malformed homeserver response", path=path, status_code=response.status_code
    )
    return HomeserverFailure(
        status_code=response.status_code, error="Malformed homeserver response"
    )


class RealMatrixHomeserverClient(MatrixHomeserverClient):
    """Matrix homeserver client over HTTP."""

    def __init__(
        self,
        homeserver_url: str,
        server_name: str,
        shared_secret: str | None,
        admin_access_token: str | None = None,
        timeout: float = 10.0,
        device_display_name: str = "Web Client",
        proxy_bypass_hosts: list[str] | None = None,
    ) -> None:
        """Initialize Matrix homeserver client.

        Args:
            homeserver_url: Homeserver base URL without trailing slash
            server_name: Domain part of user IDs on this homeserver
            shared_secret: Registration shared secret
            admin_access_token: Admin token for password resets (optional)
            timeout: Timeout in seconds for every request
            device_display_name: Display name of devices created by login
            proxy_bypass_hosts: Host patterns that need the proxy bypass header
        """
        self.homeserver_url = homeserver_url.rstrip("/")
        self.server_name = server_name
        self.shared_secret = shared_secret
        self.admin_access_token = admin_access_token
        self.timeout = timeout
        self.device_display_name = device_display_name

        host = urlparse(self.homeserver_url).hostname or ""
        self._headers: dict[str, str] = {}
        if any(pattern in host for pattern in proxy_bypass_hosts or []):
            self._headers[PROXY_BYPASS_HEADER] = "true"

    @property
    def supports_password_reset(self) -> bool:
        return bool(self.admin_access_token)

    async def register(self, localpart: str, password: str) -> RegisterOutcome:
        """Register a non-admin account with a signed request.

        Args:
            localpart: Localpart to register
            password: Password for the new account

        Returns:
            Created, user-in-use or failure outcome

        Raises:
            ConfigurationError: If the shared secret is not configured
        """
        if not self.shared_secret:
            logfire.error(
                "Registration shared secret missing, cannot register",
                localpart=localpart,
            )
            raise ConfigurationError("Registration shared secret is not configured")

        url = f"{self.homeserver_url}{REGISTER_PATH}"
        user_id = f"@{localpart}:{self.server_name}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                nonce_response = await client.get(url, headers=self._headers)
                if not nonce_response.is_success:
                    failure = _failure_from_response(nonce_response)
                    logfire.error(
                        "Registration nonce fetch failed",
                        status_code=failure.status_code,
                        error=failure.error,
                    )
                    return failure

                try:
                    nonce = _json_object(nonce_response)["nonce"]
                except (ValueError, KeyError):
                    return _malformed_failure(nonce_response, REGISTER_PATH)

                body = {
                    "nonce": nonce,
                    "username": localpart,
                    "password": password,
                    "mac": sign_registration(
                        nonce, localpart, password, self.shared_secret
                    ),
                    "admin": False,
                }
                response = await client.post(url, json=body, headers=self._headers)

        except httpx.HTTPError as e:
            logfire.error("Registration HTTP error", localpart=localpart, error=str(e))
            return _network_failure(e)

        if response.is_success:
            try:
                data = _json_object(response)
            except ValueError:
                return _malformed_failure(response, REGISTER_PATH)
            return RegisterCreated(user_id=data.get("user_id") or user_id)

        failure = _failure_from_response(response)
        if failure.errcode == USER_IN_USE:
            return RegisterUserInUse(user_id=user_id)
        return failure

    async def login(self, user_id: str, password: str) -> LoginOutcome:
        """Log in with the password flow.

        Args:
            user_id: Fully qualified messaging ID
            password: Account password

        Returns:
            Session or failure outcome
        """
        body = {
            "type": "m.login.password",
            "identifier": {"type": "m.id.user", "user": user_id},
            "password": password,
            "initial_device_display_name": self.device_display_name,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.homeserver_url}{LOGIN_PATH}",
                    json=body,
                    headers=self._headers,
                )
        except httpx.HTTPError as e:
            logfire.error("Login HTTP error", user_id=user_id, error=str(e))
            return _network_failure(e)

        if not response.is_success:
            return _failure_from_response(response)

        try:
            data = _json_object(response)
            return LoginSucceeded(
                access_token=data["access_token"],
                device_id=data["device_id"],
                user_id=data.get("user_id") or user_id,
            )
        except (ValueError, KeyError):
            return _malformed_failure(response, LOGIN_PATH)

    async def reset_password(self, user_id: str, password: str) -> ResetOutcome:
        """Reset a password through the admin API, keeping existing devices.

        Args:
            user_id: Fully qualified messaging ID
            password: New password

        Returns:
            Reset or failure outcome

        Raises:
            ConfigurationError: If no admin access token is configured
        """
        if not self.admin_access_token:
            raise ConfigurationError("Admin access token is not configured")

        path = RESET_PASSWORD_PATH.format(user_id=quote(user_id, safe=""))
        headers = {
            **self._headers,
            "Authorization": f"Bearer {self.admin_access_token}",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.homeserver_url}{path}",
                    json={"new_password": password, "logout_devices": False},
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logfire.error("Password reset HTTP error", user_id=user_id, error=str(e))
            return _network_failure(e)

        if not response.is_success:
            return _failure_from_response(response)
        return PasswordReset()


class MockMatrixHomeserverClient(MatrixHomeserverClient):
    """In-memory homeserver for testing.

    Keeps registered accounts and their passwords so registration, login and
    reset behave like a real homeserver. While a ``*_failure`` attribute is
    set, every matching call returns it.
    """

    def __init__(
        self,
        server_name: str = "localhost",
        supports_password_reset: bool = True,
        shared_secret: str | None = "mock-shared-secret",
    ) -> None:
        self.server_name = server_name
        self.shared_secret = shared_secret
        self._supports_password_reset = supports_password_reset
        self.users: dict[str, str] = {}
        self.register_failure: HomeserverFailure | None = None
        self.login_failure: HomeserverFailure | None = None
        self.reset_failure: HomeserverFailure | None = None
        self.register_calls: list[str] = []
        self.login_calls: list[str] = []
        self.reset_calls: list[str] = []

    @property
    def supports_password_reset(self) -> bool:
        return self._supports_password_reset

    def add_user(self, user_id: str, password: str) -> None:
        """Seed an account that exists on the homeserver."""
        self.users[user_id] = password

    async def register(self, localpart: str, password: str) -> RegisterOutcome:
        if not self.shared_secret:
            raise ConfigurationError("Registration shared secret is not configured")
        self.register_calls.append(localpart)
        if self.register_failure:
            return self.register_failure

        user_id = f"@{localpart}:{self.server_name}"
        if user_id in self.users:
            return RegisterUserInUse(user_id=user_id)
        self.users[user_id] = password
        return RegisterCreated(user_id=user_id)

    async def login(self, user_id: str, password: str) -> LoginOutcome:
        self.login_calls.append(user_id)
        if self.login_failure:
            return self.login_failure

        if self.users.get(user_id) != password:
            return HomeserverFailure(
                status_code=403, errcode="M_FORBIDDEN", error="Invalid password"
            )
        return LoginSucceeded(
            access_token=f"syt_mock_{len(self.login_calls)}",
            device_id=f"MOCKDEVICE{len(self.login_calls)}",
            user_id=user_id,
        )

    async def reset_password(self, user_id: str, password: str) -> ResetOutcome:
        self.reset_calls.append(user_id)
        if not self._supports_password_reset:
            raise ConfigurationError("Admin access token is not configured")
        if self.reset_failure:
            return self.reset_failure

        if user_id not in self.users:
            return HomeserverFailure(
                status_code=404, errcode="M_NOT_FOUND", error="User not found"
            )
        self.users[user_id] = password
        return PasswordReset()
