"""Provision identity use case."""

import logfire
from pydantic import BaseModel

from relay.application.usecase.base import BaseUseCase
from relay.domain.error import (
    InvalidUsername,
    ProvisioningFailed,
    RegistrationError,
    UsernameConflict,
    UsernameTaken,
)
from relay.domain.service import HomeserverService, IdentityService
from relay.domain.value import AccountId, Localpart, MatrixUserId, sanitize_localpart
from relay.util.secret import generate_secret


class ProvisionRequest(BaseModel):
    """Provision request.

    ``username`` is the one chosen at sign-up; the email local part is the
    fallback when it is absent.
    """

    account_id: str
    email: str | None = None
    username: str | None = None


class ProvisionResponse(BaseModel):
    """Provision response."""

    messaging_id: str


def resolve_localpart(requested_username: str | None, email: str | None) -> Localpart:
    """Derive the localpart for a new identity.

    A non-blank requested username always wins; the email local part is used
    only when none was requested. Either source is sanitized first.

    Args:
        requested_username: Username chosen by the user (optional)
        email: Account email (optional)

    Returns:
        Valid localpart

    Raises:
        InvalidUsername: If no valid localpart can be derived
    """
    if requested_username and requested_username.strip():
        source = requested_username
    elif email and email.strip():
        source = email.split("@", 1)[0]
    else:
        raise InvalidUsername("", "a username or email is required")

    candidate = sanitize_localpart(source)
    try:
        return Localpart(candidate)
    except ValueError:
        raise InvalidUsername(
            candidate or source, "must be at least 3 allowed characters"
        )


class ProvisionIdentityUseCase(BaseUseCase):
    """Use case for provisioning a messaging identity for an account.

    Idempotent: re-running for the same account converges on one identity
    record and one credential record.
    """

    def __init__(
        self,
        homeserver_service: HomeserverService,
        identity_service: IdentityService,
    ) -> None:
        """Initialize provision use case.

        Args:
            homeserver_service: Homeserver domain service
            identity_service: Identity store domain service
        """
        self.homeserver_service = homeserver_service
        self.identity_service = identity_service

    async def execute(self, request: ProvisionRequest) -> ProvisionResponse:
        """Execute provisioning.

        Steps:
        1. Resolve the localpart (stored username when none is requested)
        2. Fail fast if another account owns the username
        3. Generate a secret and register (already-in-use is success)
        4. Reconcile the password of an already-registered identity
        5. Upsert identity record, then credential record

        Args:
            request: Provision request

        Returns:
            Provisioned messaging identity

        Raises:
            InvalidUsername: If no valid localpart can be derived
            UsernameTaken: If another account owns the username
            ProvisioningFailed: If registration fails (nothing is stored)
            ConfigurationError: If the registration shared secret is missing
        """
        account_id = AccountId(request.account_id)
        requested = request.username
        if not (requested and requested.strip()):
            # Only an explicit username renames; a bare resync keeps the stored one
            existing = await self.identity_service.get_identity(account_id)
            if existing:
                requested = existing.username.root
        localpart = resolve_localpart(requested, request.email)

        with logfire.span(
            "provision_identity", account_id=account_id, localpart=localpart.root
        ):
            owner = await self.identity_service.find_owner(localpart)
            if owner is not None and owner != account_id:
                logfire.warn(
                    "Username owned by another account",
                    account_id=account_id,
                    username=localpart.root,
                )
                raise UsernameTaken(localpart.root)

            secret = generate_secret()
            try:
                result = await self.homeserver_service.register(localpart, secret)
            except RegistrationError as e:
                raise ProvisioningFailed(
                    "Identity auto-provisioning failed", retryable=e.retryable
                ) from e

            if not result.created:
                secret = await self._reconcile_password(
                    account_id, result.messaging_id, secret, linked=owner is not None
                )

            try:
                await self.identity_service.upsert_identity(
                    account_id, result.messaging_id, localpart
                )
            except UsernameConflict as e:
                # Lost a race for the username; the registration stays an orphan
                logfire.warn(
                    "Username claimed concurrently",
                    account_id=account_id,
                    username=localpart.root,
                )
                raise UsernameTaken(localpart.root) from e

            await self.identity_service.upsert_credential(account_id, secret)

            logfire.info(
                "Identity provisioned",
                account_id=account_id,
                messaging_id=result.messaging_id.root,
                created=result.created,
            )
            return ProvisionResponse(messaging_id=result.messaging_id.root)

    async def _reconcile_password(
        self,
        account_id: AccountId,
        messaging_id: MatrixUserId,
        secret: str,
        linked: bool,
    ) -> str:
        """Pick the secret to store for an identity that was already registered.

        With password reset available the homeserver is moved to the new
        secret. Otherwise a stored secret is kept, since the new one was never
        accepted by the homeserver.

        Args:
            account_id: Account being provisioned
            messaging_id: Already-registered identity
            secret: Newly generated secret
            linked: Whether the username is already linked to this account

        Returns:
            Secret to store

        Raises:
            ProvisioningFailed: If the password reset fails
        """
        if self.homeserver_service.can_reset_passwords:
            try:
                await self.homeserver_service.reset_password(messaging_id, secret)
            except RegistrationError as e:
                raise ProvisioningFailed(
                    "Identity password reconciliation failed", retryable=e.retryable
                ) from e
            return secret

        existing = await self.identity_service.get_credential(account_id)
        if linked and existing:
            logfire.info(
                "Keeping stored secret for registered identity",
                account_id=account_id,
                messaging_id=messaging_id.root,
            )
            return existing.secret

        logfire.warn(
            "Identity already registered and password reset unavailable; "
            "stored secret may not match",
            account_id=account_id,
            messaging_id=messaging_id.root,
            linked=linked,
        )
        return secret
