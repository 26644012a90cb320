"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand.
"""

from typing import Any, Dict

from relay.domain.model import CredentialRecord, IdentityRecord
from relay.domain.value import AccountId, Localpart, MatrixUserId


def row_to_identity(row: Dict[str, Any]) -> IdentityRecord:
    """Convert database row to IdentityRecord domain model.

    Args:
        row: Database row as dict

    Returns:
        IdentityRecord domain model
    """
    return IdentityRecord(
        account_id=AccountId(row["account_id"]),
        messaging_id=MatrixUserId(row["messaging_id"]),
        username=Localpart(row["username"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def identity_to_dict(identity: IdentityRecord) -> Dict[str, Any]:
    """Convert IdentityRecord domain model to database dict."""
    return identity.model_dump()


def row_to_credential(row: Dict[str, Any]) -> CredentialRecord:
    """Convert database row to CredentialRecord domain model."""
    return CredentialRecord(
        account_id=AccountId(row["account_id"]),
        secret=row["secret"],
        updated_at=row["updated_at"],
    )


def credential_to_dict(credential: CredentialRecord) -> Dict[str, Any]:
    """Convert CredentialRecord domain model to database dict."""
    return credential.model_dump()
