"""Unit tests for localpart and messaging ID value objects."""

import pytest

from relay.domain.value import Localpart, MatrixUserId, sanitize_localpart


class TestLocalpart:
    """Tests for Localpart validation."""

    @pytest.mark.parametrize(
        "value",
        ["ab", "a" * 25, "AbC1234", "_abc123", ".abc123", "has space", "emoji😀x", ""],
    )
    def test_rejects_invalid_localparts(self, value):
        with pytest.raises(ValueError):
            Localpart(value)

    @pytest.mark.parametrize(
        "value", ["valid_user.1", "abc", "a" * 24, "x=y-z/w", "123", "-dash"]
    )
    def test_accepts_valid_localparts(self, value):
        assert Localpart(value).root == value

    def test_rejects_trailing_newline(self):
        with pytest.raises(ValueError):
            Localpart("artist1\n")


class TestSanitizeLocalpart:
    """Tests for sanitize_localpart."""

    def test_lowercases(self):
        assert sanitize_localpart("Artist1") == "artist1"

    def test_drops_disallowed_characters(self):
        assert sanitize_localpart("Art ist+1!") == "artist1"

    def test_strips_leading_underscore_and_dot(self):
        assert sanitize_localpart("__.bob") == "bob"

    def test_keeps_inner_underscore_and_dot(self):
        assert sanitize_localpart("valid_user.1") == "valid_user.1"

    def test_truncates_to_24_characters(self):
        assert sanitize_localpart("a" * 30) == "a" * 24

    def test_may_return_too_short_result(self):
        """Sanitizing does not pad; validation decides."""
        assert sanitize_localpart("!!a") == "a"

    def test_sanitized_output_is_valid_when_long_enough(self):
        candidate = sanitize_localpart("  ._John.Doe+News@ ")

        assert Localpart(candidate).root == "john.doenews"


class TestMatrixUserId:
    """Tests for MatrixUserId."""

    def test_build_from_parts(self):
        user_id = MatrixUserId.build(Localpart("artist1"), "example.org")

        assert user_id.root == "@artist1:example.org"
        assert str(user_id) == "@artist1:example.org"

    def test_exposes_localpart_and_domain(self):
        user_id = MatrixUserId("@artist1:example.org")

        assert user_id.localpart == "artist1"
        assert user_id.domain == "example.org"

    def test_domain_keeps_port(self):
        assert MatrixUserId("@a1b:localhost:8448").domain == "localhost:8448"

    @pytest.mark.parametrize("value", ["artist1", "@artist1", "@:example.org", "@a:"])
    def test_rejects_malformed_ids(self, value):
        with pytest.raises(ValueError):
            MatrixUserId(value)

    def test_equality_by_value(self):
        assert MatrixUserId("@a1b:x.org") == MatrixUserId("@a1b:x.org")
