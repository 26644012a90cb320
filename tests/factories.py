"""Settings and session token factories for tests."""

from datetime import datetime, timedelta, timezone

import jwt

from relay.config import AuthSettings, MatrixSettings, Settings

TEST_JWT_SECRET = "test-session-secret-with-enough-bytes-for-hs256"
TEST_HOMESERVER_URL = "https://matrix.example.org"
TEST_SERVER_NAME = "example.org"


def make_test_settings(**matrix_overrides) -> Settings:
    """Build settings pointing at a fake homeserver on example.org.

    Args:
        **matrix_overrides: Fields overriding the default matrix settings

    Returns:
        Test settings
    """
    matrix = {
        "homeserver_url": TEST_HOMESERVER_URL,
        "server_name": TEST_SERVER_NAME,
        "registration_shared_secret": "test-shared-secret",
        "admin_access_token": "test-admin-token",
        **matrix_overrides,
    }
    return Settings(
        environment="test",
        auth=AuthSettings(session_jwt_secret=TEST_JWT_SECRET),
        matrix=MatrixSettings(**matrix),
    )


def make_session_token(
    account_id: str,
    email: str | None = None,
    username: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
) -> str:
    """Mint a session token the way the auth provider does."""
    payload = {
        "sub": account_id,
        "aud": audience,
        "exp": datetime.now(timezone.utc) + expires_in,
        "user_metadata": {"username": username} if username else {},
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, secret, algorithm="HS256")
