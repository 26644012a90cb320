"""Identity store domain service."""

from datetime import datetime, timezone

import logfire

from relay.domain.model import CredentialRecord, IdentityRecord
from relay.domain.repository import CredentialRepository, IdentityRepository
from relay.domain.value import AccountId, Localpart, MatrixUserId

from .base import Service


class IdentityService(Service):
    """Domain service for identity and credential records."""

    def __init__(
        self,
        identity_repository: IdentityRepository,
        credential_repository: CredentialRepository,
    ) -> None:
        """Initialize identity service.

        Args:
            identity_repository: Identity record repository
            credential_repository: Credential record repository
        """
        self.identity_repository = identity_repository
        self.credential_repository = credential_repository

    async def get_identity(self, account_id: AccountId) -> IdentityRecord | None:
        """Get the identity linked to an account.

        Args:
            account_id: External account ID

        Returns:
            Identity if found, None otherwise
        """
        with logfire.span("identity_service.get_identity", account_id=account_id):
            identity = await self.identity_repository.find_by_account_id(account_id)
            if identity:
                logfire.info(
                    "Identity found",
                    account_id=account_id,
                    messaging_id=identity.messaging_id.root,
                )
            else:
                logfire.warn("Identity not found", account_id=account_id)
            return identity

    async def get_credential(self, account_id: AccountId) -> CredentialRecord | None:
        """Get the stored credential for an account.

        Args:
            account_id: External account ID

        Returns:
            Credential if found, None otherwise
        """
        with logfire.span("identity_service.get_credential", account_id=account_id):
            credential = await self.credential_repository.find_by_account_id(
                account_id
            )
            if not credential:
                logfire.warn("Credential not found", account_id=account_id)
            return credential

    async def find_owner(self, username: Localpart) -> AccountId | None:
        """Get the account that owns a username.

        Args:
            username: Username to look up

        Returns:
            Owning account ID, or None if unclaimed
        """
        identity = await self.identity_repository.find_by_username(username)
        return identity.account_id if identity else None

    async def upsert_identity(
        self,
        account_id: AccountId,
        messaging_id: MatrixUserId,
        username: Localpart,
    ) -> IdentityRecord:
        """Link an account to a messaging identity (insert or update in place).

        Args:
            account_id: External account ID
            messaging_id: Provisioned messaging identity
            username: Public username (the localpart)

        Returns:
            Stored identity

        Raises:
            UsernameConflict: If another account owns the username
        """
        with logfire.span(
            "identity_service.upsert_identity",
            account_id=account_id,
            messaging_id=messaging_id.root,
            username=username.root,
        ):
            now = datetime.now(timezone.utc)
            existing = await self.identity_repository.find_by_account_id(account_id)
            identity = IdentityRecord(
                account_id=account_id,
                messaging_id=messaging_id,
                username=username,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            saved = await self.identity_repository.upsert(identity)
            logfire.info(
                "Identity linked",
                account_id=account_id,
                messaging_id=saved.messaging_id.root,
                migrated=bool(existing and existing.messaging_id != messaging_id),
            )
            return saved

    async def upsert_credential(
        self, account_id: AccountId, secret: str
    ) -> CredentialRecord:
        """Store the homeserver password for an account (insert or replace).

        Args:
            account_id: External account ID
            secret: Generated homeserver password

        Returns:
            Stored credential
        """
        with logfire.span("identity_service.upsert_credential", account_id=account_id):
            saved = await self.credential_repository.upsert(
                CredentialRecord(
                    account_id=account_id,
                    secret=secret,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            logfire.info("Credential stored", account_id=account_id)
            return saved
