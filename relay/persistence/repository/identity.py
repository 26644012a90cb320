"""Identity record repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from relay.domain.error import UsernameConflict
from relay.domain.model.identity import IdentityRecord
from relay.domain.repository.identity import IdentityRepository
from relay.domain.value import AccountId, Localpart
from relay.persistence.mappers import identity_to_dict, row_to_identity
from relay.persistence.tables import (
    USERNAME_UNIQUE_CONSTRAINT,
    messaging_identities_table,
)


class PostgresIdentityRepository(IdentityRepository):
    """PostgreSQL implementation of IdentityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[IdentityRecord]:
        stmt = select(messaging_identities_table).where(
            messaging_identities_table.c.account_id == account_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity(dict(row))

    async def find_by_username(self, username: Localpart) -> Optional[IdentityRecord]:
        stmt = select(messaging_identities_table).where(
            messaging_identities_table.c.username == username.root
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity(dict(row))

    async def upsert(self, identity: IdentityRecord) -> IdentityRecord:
        """Insert or update the identity in one statement.

        Runs inside a savepoint so a unique violation on ``username`` leaves
        the request transaction usable.

        Args:
            identity: The identity to store

        Returns:
            The stored identity

        Raises:
            UsernameConflict: If a different account owns the username
        """
        values = identity_to_dict(identity)
        stmt = insert(messaging_identities_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[messaging_identities_table.c.account_id],
            set_={
                "messaging_id": stmt.excluded.messaging_id,
                "username": stmt.excluded.username,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(messaging_identities_table)

        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
                row = result.mappings().one()
        except IntegrityError as e:
            if USERNAME_UNIQUE_CONSTRAINT in str(e.orig):
                raise UsernameConflict(identity.username.root) from e
            raise

        return row_to_identity(dict(row))
