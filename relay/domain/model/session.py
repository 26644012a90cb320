"""Messaging session issued by the homeserver."""

from relay.domain.model.common import DomainModel
from relay.domain.value import MatrixUserId


class SessionToken(DomainModel):
    """Short-lived homeserver session.

    Not persisted; expiry and revocation are up to the homeserver.
    """

    access_token: str
    device_id: str
    messaging_id: MatrixUserId
