"""Shared-secret registration signing.

The homeserver's admin registration endpoint authenticates requests with an
HMAC-SHA1 over the nonce and the account fields, separated by NUL bytes.
The byte layout is a wire contract and must not change.
"""

import hashlib
import hmac

from relay.util.error import ConfigurationError

ADMIN_FLAG = "notadmin"


def sign_registration(
    nonce: str, localpart: str, secret: str, shared_key: str | None
) -> str:
    """Compute the registration MAC.

    Args:
        nonce: Single-use nonce from the registration endpoint
        localpart: Localpart being registered
        secret: Password of the new account
        shared_key: Registration shared secret configured on the homeserver

    Returns:
        Lowercase hex HMAC-SHA1 digest

    Raises:
        ConfigurationError: If the shared key is not configured
    """
    if not shared_key:
        raise ConfigurationError("Registration shared secret is not configured")

    message = b"\x00".join(
        part.encode("utf-8") for part in (nonce, localpart, secret, ADMIN_FLAG)
    )
    return hmac.new(shared_key.encode("utf-8"), message, hashlib.sha1).hexdigest()
