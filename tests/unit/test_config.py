"""Unit tests for homeserver endpoint resolution."""

import pytest

from relay.config import DEFAULT_HOMESERVER_URL, MatrixSettings


class TestHomeserverUrl:
    """Tests for homeserver URL precedence."""

    def test_homeserver_url_wins_over_legacy_name(self):
        settings = MatrixSettings(
            homeserver_url="https://matrix.example.org",
            base_url="https://legacy.example.org",
        )

        assert settings.homeserver_url == "https://matrix.example.org"

    def test_legacy_name_is_used_when_primary_missing(self):
        settings = MatrixSettings(base_url="https://legacy.example.org")

        assert settings.homeserver_url == "https://legacy.example.org"

    def test_blank_primary_falls_through(self):
        settings = MatrixSettings(
            homeserver_url="  ", base_url="https://legacy.example.org"
        )

        assert settings.homeserver_url == "https://legacy.example.org"

    def test_default_when_nothing_configured(self):
        assert MatrixSettings().homeserver_url == DEFAULT_HOMESERVER_URL

    @pytest.mark.parametrize(
        "url", ["https://matrix.example.org/", "https://matrix.example.org//"]
    )
    def test_trailing_slashes_are_stripped(self, url):
        assert MatrixSettings(homeserver_url=url).homeserver_url == (
            "https://matrix.example.org"
        )


class TestServerName:
    """Tests for server name derivation."""

    def test_explicit_server_name_wins(self):
        settings = MatrixSettings(
            homeserver_url="https://matrix.example.org", server_name="example.org"
        )

        assert settings.server_name == "example.org"

    def test_derived_from_homeserver_host(self):
        settings = MatrixSettings(homeserver_url="https://matrix.example.org:8448")

        assert settings.server_name == "matrix.example.org"

    def test_local_default(self):
        assert MatrixSettings().server_name == "localhost"
