"""Credential record entity."""

from datetime import datetime

from pydantic import Field

from relay.domain.model.common import DomainModel
from relay.domain.value import AccountId


class CredentialRecord(DomainModel):
    """Generated homeserver password for an account's messaging identity.

    Stored apart from the identity record so that it can live behind a
    narrower database grant. Only ever used server-side to mint tokens.
    """

    account_id: AccountId
    secret: str = Field(repr=False)
    updated_at: datetime = Field(default_factory=datetime.now)
