"""Identity record repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from relay.domain.model.identity import IdentityRecord
from relay.domain.value import AccountId, Localpart


class IdentityRepository(ABC):
    """Repository for IdentityRecord entity.

    Implementations must enforce username uniqueness in storage itself
    (unique constraint), not with a read-then-write in application code.
    """

    @abstractmethod
    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[IdentityRecord]:
        """Find the identity linked to an account.

        Args:
            account_id: External account ID

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: Localpart) -> Optional[IdentityRecord]:
        """Find the identity owning a username.

        Args:
            username: Username to look up

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def upsert(self, identity: IdentityRecord) -> IdentityRecord:
        """Insert or update the identity keyed by account ID.

        Args:
            identity: The identity to store

        Returns:
            The stored identity

        Raises:
            UsernameConflict: If a different account owns the username
        """
        pass
