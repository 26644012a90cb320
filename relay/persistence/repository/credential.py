"""Credential record repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from relay.domain.model.credential import CredentialRecord
from relay.domain.repository.credential import CredentialRepository
from relay.domain.value import AccountId
from relay.persistence.mappers import credential_to_dict, row_to_credential
from relay.persistence.tables import messaging_credentials_table


class PostgresCredentialRepository(CredentialRepository):
    """PostgreSQL implementation of CredentialRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[CredentialRecord]:
        stmt = select(messaging_credentials_table).where(
            messaging_credentials_table.c.account_id == account_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_credential(dict(row))

    async def upsert(self, credential: CredentialRecord) -> CredentialRecord:
        values = credential_to_dict(credential)
        stmt = insert(messaging_credentials_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[messaging_credentials_table.c.account_id],
            set_={
                "secret": stmt.excluded.secret,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return credential
