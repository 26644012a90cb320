"""Repository interfaces for the identity bridge.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from relay.domain.repository.credential import CredentialRepository
from relay.domain.repository.identity import IdentityRepository

__all__ = [
    "CredentialRepository",
    "IdentityRepository",
]
