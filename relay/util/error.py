"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Required configuration is missing or invalid.

    Fatal: callers must not retry.
    """

    pass
