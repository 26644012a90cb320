"""Unit tests for homeserver result types."""

import pytest
from pydantic import TypeAdapter

from relay.domain.value import (
    HomeserverFailure,
    RegisterCreated,
    RegisterOutcome,
    RegisterUserInUse,
)


class TestHomeserverFailure:
    """Tests for HomeserverFailure.retryable."""

    @pytest.mark.parametrize(
        "status_code, errcode",
        [(None, None), (429, None), (500, None), (502, "M_UNKNOWN"), (400, "M_LIMIT_EXCEEDED")],
    )
    def test_retryable_failures(self, status_code, errcode):
        failure = HomeserverFailure(status_code=status_code, errcode=errcode, error="x")

        assert failure.retryable is True

    @pytest.mark.parametrize(
        "status_code, errcode",
        [(400, "M_INVALID_USERNAME"), (401, None), (403, "M_FORBIDDEN"), (404, None)],
    )
    def test_permanent_failures(self, status_code, errcode):
        failure = HomeserverFailure(status_code=status_code, errcode=errcode, error="x")

        assert failure.retryable is False


class TestRegisterOutcome:
    """Tests for the registration result union."""

    def test_discriminates_on_kind(self):
        adapter = TypeAdapter(RegisterOutcome)

        assert isinstance(
            adapter.validate_python({"kind": "created", "user_id": "@a1b:x.org"}),
            RegisterCreated,
        )
        assert isinstance(
            adapter.validate_python({"kind": "user_in_use", "user_id": "@a1b:x.org"}),
            RegisterUserInUse,
        )
        assert isinstance(
            adapter.validate_python({"kind": "error", "status_code": 500, "error": "x"}),
            HomeserverFailure,
        )
