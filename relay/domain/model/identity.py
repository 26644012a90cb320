"""Identity record entity.

Links an external account to its provisioned messaging identity.
"""

from datetime import datetime

from pydantic import Field

from relay.domain.model.common import DomainModel
from relay.domain.value import AccountId, Localpart, MatrixUserId


class IdentityRecord(DomainModel):
    """Mapping of an external account to a messaging identity.

    One record per account. ``username`` is unique across all records and
    always equals the localpart of ``messaging_id`` at provisioning time.
    Updated in place on domain migration or username change; never deleted
    by the bridge.
    """

    account_id: AccountId
    messaging_id: MatrixUserId
    username: Localpart
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
