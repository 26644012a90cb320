"""External session domain service."""

from dataclasses import dataclass

import logfire

from relay.config import AuthSettings
from relay.domain.error import AuthenticationFailed
from relay.domain.value import AccountId
from relay.util.jwt import JWTError, verify_session_token

from .base import Service


@dataclass
class VerifiedSession:
    """Account data carried by a verified session.

    Stands in for the auth provider's account lookup: the session token
    already holds the email and the username chosen at sign-up.
    """

    account_id: AccountId
    email: str | None
    requested_username: str | None


class SessionService(Service):
    """Domain service for verifying external auth sessions."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize session service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def verify(self, token: str | None) -> VerifiedSession:
        """Verify a session token from the auth provider.

        Args:
            token: Access token from cookie or Authorization header

        Returns:
            Verified session

        Raises:
            AuthenticationFailed: If the token is missing, invalid or expired
        """
        if not token:
            raise AuthenticationFailed("No active session")

        with logfire.span("session_service.verify"):
            try:
                claims = verify_session_token(token, self.auth_settings)
            except JWTError as e:
                logfire.info("Session rejected", error=str(e))
                raise AuthenticationFailed(str(e)) from e

            requested = claims.user_metadata.get("username")
            logfire.info("Session verified", account_id=claims.sub)
            return VerifiedSession(
                account_id=AccountId(claims.sub),
                email=claims.email,
                requested_username=requested if isinstance(requested, str) else None,
            )
