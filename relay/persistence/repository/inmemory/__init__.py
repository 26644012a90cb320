"""In-memory repository implementations for testing."""

from .credential import InMemoryCredentialRepository
from .identity import InMemoryIdentityRepository

__all__ = [
    "InMemoryCredentialRepository",
    "InMemoryIdentityRepository",
]
