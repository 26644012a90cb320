"""Console logging for the bridge process."""

import logging
import sys

from relay.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# httpx logs full request URLs at INFO, including the reset-password user ID
QUIET_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(settings: Settings) -> int:
    """Pick the level: explicit override, else DEBUG in debug mode, else INFO."""
    if settings.observability.log_level:
        return logging.getLevelName(settings.observability.log_level)
    return logging.DEBUG if settings.debug else logging.INFO


def setup_logging(settings: Settings) -> None:
    """Configure the root logger and quiet noisy libraries.

    Args:
        settings: Application settings
    """
    level = resolve_log_level(settings)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger("relay").setLevel(level)

    logging.getLogger(__name__).info(
        f"Logging configured: environment={settings.environment}, "
        f"level={logging.getLevelName(level)}"
    )
