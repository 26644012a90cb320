"""Unit tests for the telemetry send decision."""

from relay.config import ObservabilitySettings
from relay.util.observability import should_send_to_logfire
from tests.factories import make_test_settings


def _settings(**observability):
    settings = make_test_settings()
    settings.observability = ObservabilitySettings(**observability)
    return settings


def test_console_only_without_token():
    assert should_send_to_logfire(_settings()) is False


def test_token_enables_sending():
    assert should_send_to_logfire(_settings(logfire_token="lf_token")) is True


def test_explicit_flag_overrides_token():
    settings = _settings(logfire_token="lf_token", send_to_logfire=False)

    assert should_send_to_logfire(settings) is False
