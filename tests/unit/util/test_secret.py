"""Unit tests for credential generation."""

import re

from relay.util.secret import generate_secret

SECRET_FORMAT = re.compile(r"^[0-9a-f]{32}$")


class TestGenerateSecret:
    """Tests for generate_secret."""

    def test_secrets_are_32_lowercase_hex_characters(self):
        """Every secret should be 32 lowercase hex characters."""
        for _ in range(100):
            assert SECRET_FORMAT.match(generate_secret())

    def test_10000_secrets_are_distinct(self):
        """Secrets should not repeat."""
        secrets = [generate_secret() for _ in range(10_000)]

        assert len(set(secrets)) == 10_000
        assert all(SECRET_FORMAT.match(s) for s in secrets)
