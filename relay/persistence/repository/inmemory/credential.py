"""In-memory credential repository for testing."""

from typing import Optional

from relay.domain.model.credential import CredentialRecord
from relay.domain.repository.credential import CredentialRepository
from relay.domain.value import AccountId


class InMemoryCredentialRepository(CredentialRepository):
    """In-memory implementation of CredentialRepository for testing."""

    def __init__(self) -> None:
        self._credentials: dict[AccountId, CredentialRecord] = {}

    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[CredentialRecord]:
        """Find credential by account ID."""
        return self._credentials.get(account_id)

    async def upsert(self, credential: CredentialRecord) -> CredentialRecord:
        """Insert or replace credential."""
        self._credentials[credential.account_id] = credential
        return credential
