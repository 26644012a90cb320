"""Credential generation for provisioned messaging identities."""

import secrets

SECRET_BYTES = 16


def generate_secret() -> str:
    """Generate a password for a messaging identity.

    Uses the ``secrets`` CSPRNG. The result is a password, not a display
    token: it is stored server-side and used to log in on the user's behalf.

    Returns:
        32 lowercase hex characters (16 random bytes)

    Example:
        >>> len(generate_secret())
        32
    """
    return secrets.token_hex(SECRET_BYTES)
