"""Messaging homeserver domain service."""

from dataclasses import dataclass

import logfire

from relay.domain.error import RegistrationError, UpstreamAuthError
from relay.domain.model import SessionToken
from relay.domain.value import (
    HomeserverFailure,
    Localpart,
    LoginOutcome,
    LoginSucceeded,
    MatrixUserId,
    RegisterCreated,
    RegisterOutcome,
    RegisterUserInUse,
    ResetOutcome,
)

from .base import Service


class HomeserverClient:
    """Generic homeserver client interface.

    Implementations translate HTTP responses into tagged outcomes and never
    raise for homeserver-side failures.
    """

    # Whether reset_password can be used (needs an admin access token)
    supports_password_reset: bool = False

    async def register(self, localpart: str, password: str) -> RegisterOutcome:
        """Register a non-admin account through the shared-secret admin endpoint.

        Args:
            localpart: Localpart to register
            password: Password for the new account

        Returns:
            Created, user-in-use or failure outcome
        """
        raise NotImplementedError

    async def login(self, user_id: str, password: str) -> LoginOutcome:
        """Log in with a password.

        Args:
            user_id: Fully qualified messaging ID
            password: Account password

        Returns:
            Session or failure outcome
        """
        raise NotImplementedError

    async def reset_password(self, user_id: str, password: str) -> ResetOutcome:
        """Set a new password through the admin API.

        Args:
            user_id: Fully qualified messaging ID
            password: New password

        Returns:
            Reset or failure outcome
        """
        raise NotImplementedError


@dataclass
class RegistrationResult:
    """Result of an idempotent registration."""

    created: bool
    messaging_id: MatrixUserId


class HomeserverService(Service):
    """Domain service for registration, login and staleness checks.

    Wraps a HomeserverClient and turns its failure outcomes into domain
    errors. Never retries: registration nonces are single use.
    """

    def __init__(self, client: HomeserverClient, server_name: str) -> None:
        """Initialize homeserver service.

        Args:
            client: Homeserver client implementation
            server_name: Current production domain for identities
        """
        self.client = client
        self.server_name = server_name

    @property
    def can_reset_passwords(self) -> bool:
        """Whether already-registered identities can get a new password."""
        return self.client.supports_password_reset

    def build_messaging_id(self, localpart: Localpart) -> MatrixUserId:
        """Build an identity on the current domain."""
        return MatrixUserId.build(localpart, self.server_name)

    def is_stale(self, messaging_id: MatrixUserId) -> bool:
        """Check whether an identity points at a domain no longer in use.

        Any domain other than the current server name is stale, including
        placeholders such as ``localhost`` used before the production domain
        was configured.

        Args:
            messaging_id: Stored messaging identity

        Returns:
            True if the identity must be re-provisioned
        """
        return messaging_id.domain != self.server_name

    async def register(self, localpart: Localpart, secret: str) -> RegistrationResult:
        """Register a localpart, treating "already in use" as success.

        Args:
            localpart: Localpart to register
            secret: Generated password

        Returns:
            Registration result (created=False when the account already existed)

        Raises:
            RegistrationError: If the homeserver rejects registration
            ConfigurationError: If the shared secret is missing
        """
        messaging_id = self.build_messaging_id(localpart)
        with logfire.span(
            "homeserver_service.register", messaging_id=messaging_id.root
        ):
            outcome = await self.client.register(localpart.root, secret)

            if isinstance(outcome, RegisterCreated):
                logfire.info("Messaging identity registered", messaging_id=messaging_id.root)
                return RegistrationResult(created=True, messaging_id=messaging_id)

            if isinstance(outcome, RegisterUserInUse):
                logfire.info(
                    "Messaging identity already registered",
                    messaging_id=messaging_id.root,
                )
                return RegistrationResult(created=False, messaging_id=messaging_id)

            logfire.error(
                "Registration rejected",
                messaging_id=messaging_id.root,
                status_code=outcome.status_code,
                errcode=outcome.errcode,
                error=outcome.error,
                retryable=outcome.retryable,
            )
            raise RegistrationError(
                localpart=localpart.root,
                error=outcome.error,
                errcode=outcome.errcode,
                status_code=outcome.status_code,
                retryable=outcome.retryable,
            )

    async def reset_password(self, messaging_id: MatrixUserId, secret: str) -> None:
        """Give an existing identity a new password.

        Args:
            messaging_id: Identity to update
            secret: New password

        Raises:
            RegistrationError: If the reset is rejected
        """
        with logfire.span(
            "homeserver_service.reset_password", messaging_id=messaging_id.root
        ):
            outcome = await self.client.reset_password(messaging_id.root, secret)
            if isinstance(outcome, HomeserverFailure):
                logfire.error(
                    "Password reset rejected",
                    messaging_id=messaging_id.root,
                    status_code=outcome.status_code,
                    errcode=outcome.errcode,
                    error=outcome.error,
                )
                raise RegistrationError(
                    localpart=messaging_id.localpart,
                    error=outcome.error,
                    errcode=outcome.errcode,
                    status_code=outcome.status_code,
                    retryable=outcome.retryable,
                )
            logfire.info("Password reset", messaging_id=messaging_id.root)

    async def login(self, messaging_id: MatrixUserId, secret: str) -> SessionToken:
        """Exchange stored credentials for a homeserver session.

        Args:
            messaging_id: Stored messaging identity
            secret: Stored password

        Returns:
            Session token

        Raises:
            UpstreamAuthError: If the homeserver rejects the login
        """
        with logfire.span("homeserver_service.login", messaging_id=messaging_id.root):
            outcome = await self.client.login(messaging_id.root, secret)

            if isinstance(outcome, LoginSucceeded):
                logfire.info("Homeserver login succeeded", messaging_id=outcome.user_id)
                return SessionToken(
                    access_token=outcome.access_token,
                    device_id=outcome.device_id,
                    messaging_id=MatrixUserId(outcome.user_id),
                )

            logfire.warn(
                "Homeserver login rejected",
                messaging_id=messaging_id.root,
                status_code=outcome.status_code,
                errcode=outcome.errcode,
                error=outcome.error,
            )
            raise UpstreamAuthError(
                messaging_id=messaging_id.root,
                error=outcome.error,
                errcode=outcome.errcode,
                retryable=outcome.retryable,
            )
