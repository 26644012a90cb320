"""In-memory identity repository for testing."""

from typing import Optional

from relay.domain.error import UsernameConflict
from relay.domain.model.identity import IdentityRecord
from relay.domain.repository.identity import IdentityRepository
from relay.domain.value import AccountId, Localpart


class InMemoryIdentityRepository(IdentityRepository):
    """In-memory implementation of IdentityRepository for testing.

    Mirrors the unique constraint on ``username``.
    """

    def __init__(self) -> None:
        self._identities: dict[AccountId, IdentityRecord] = {}

    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[IdentityRecord]:
        """Find identity by account ID."""
        return self._identities.get(account_id)

    async def find_by_username(self, username: Localpart) -> Optional[IdentityRecord]:
        """Find identity by username."""
        for identity in self._identities.values():
            if identity.username == username:
                return identity
        return None

    async def upsert(self, identity: IdentityRecord) -> IdentityRecord:
        """Insert or update identity keyed by account ID."""
        for existing in self._identities.values():
            if (
                existing.username == identity.username
                and existing.account_id != identity.account_id
            ):
                raise UsernameConflict(identity.username.root)

        self._identities[identity.account_id] = identity
        return identity
