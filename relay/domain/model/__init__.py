"""Domain model entities for the identity bridge."""

from relay.domain.model.credential import CredentialRecord
from relay.domain.model.identity import IdentityRecord
from relay.domain.model.session import SessionToken

__all__ = [
    "CredentialRecord",
    "IdentityRecord",
    "SessionToken",
]
