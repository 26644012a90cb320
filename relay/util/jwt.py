"""Session token verification.

The external auth provider issues HS256 JWTs signed with the project secret.
We only verify them; issuing is the provider's job.
"""

from datetime import datetime
from typing import Any

import jwt
from pydantic import BaseModel

from relay.config import AuthSettings


class SessionClaims(BaseModel):
    """Verified session token payload."""

    sub: str  # Account ID
    email: str | None = None
    exp: datetime
    user_metadata: dict[str, Any] = {}


class JWTError(Exception):
    """JWT-related error."""

    pass


def verify_session_token(token: str, settings: AuthSettings) -> SessionClaims:
    """Verify and decode a session token.

    Args:
        token: JWT from the auth provider
        settings: Authentication settings

    Returns:
        Token claims if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.session_jwt_secret,
            algorithms=[settings.session_jwt_algorithm],
            audience=settings.session_audience,
            options={"require": ["sub", "exp"]},
        )
        return SessionClaims(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
