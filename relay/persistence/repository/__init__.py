"""PostgreSQL repository implementations."""

from relay.persistence.repository.credential import PostgresCredentialRepository
from relay.persistence.repository.identity import PostgresIdentityRepository

__all__ = [
    "PostgresCredentialRepository",
    "PostgresIdentityRepository",
]
