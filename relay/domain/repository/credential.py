"""Credential record repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from relay.domain.model.credential import CredentialRecord
from relay.domain.value import AccountId


class CredentialRepository(ABC):
    """Repository for CredentialRecord entity."""

    @abstractmethod
    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[CredentialRecord]:
        """Find the stored credential for an account.

        Args:
            account_id: External account ID

        Returns:
            The credential if found, None otherwise
        """
        pass

    @abstractmethod
    async def upsert(self, credential: CredentialRecord) -> CredentialRecord:
        """Insert or replace the credential keyed by account ID.

        Args:
            credential: The credential to store

        Returns:
            The stored credential
        """
        pass
