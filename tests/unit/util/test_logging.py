"""Unit tests for log level resolution."""

import logging

from relay.config import ObservabilitySettings
from relay.util.logging import resolve_log_level
from tests.factories import make_test_settings


def test_info_by_default():
    assert resolve_log_level(make_test_settings()) == logging.INFO


def test_debug_mode_logs_debug():
    settings = make_test_settings()
    settings.debug = True

    assert resolve_log_level(settings) == logging.DEBUG


def test_explicit_level_wins():
    settings = make_test_settings()
    settings.debug = True
    settings.observability = ObservabilitySettings(log_level="WARNING")

    assert resolve_log_level(settings) == logging.WARNING
