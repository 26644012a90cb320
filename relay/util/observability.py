"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Identity linked", account_id=account_id, messaging_id=messaging_id)

    # Manual spans for critical operations
    with logfire.span("provision_identity", account_id=account_id):
        ...

Never pass passwords, shared secrets or access tokens as attributes.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from relay.config import Settings

# Attribute names scrubbed on top of logfire's defaults (password, secret,
# token, auth, cookie, ...). Registration bodies carry a MAC and a nonce.
SCRUB_PATTERNS = ["mac", "nonce", "new_password"]


def should_send_to_logfire(settings: Settings) -> bool:
    """Decide whether telemetry leaves the process.

    Priority: explicit setting > token presence > console only.
    """
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the bridge process.

    Set OBSERVABILITY__LOGFIRE_TOKEN to send telemetry to Logfire cloud;
    OBSERVABILITY__SEND_TO_LOGFIRE overrides the decision either way.

    Args:
        settings: Application settings
    """
    send_to_logfire = should_send_to_logfire(settings)

    logfire.configure(
        service_name="relay-bridge",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUB_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        server_name=settings.matrix.server_name,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every bridge request.

    Header capture stays off: requests carry session cookies, bearer tokens
    and the provision key.
    """
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
    )


def _request_attributes(request, attributes):
    # Keep validation errors, drop parsed values: bodies hold emails
    return {"errors": attributes["errors"]} if "errors" in attributes else None


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace identity store queries."""
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )


def instrument_httpx() -> None:
    """Trace every homeserver call (nonce fetch, registration, login, reset)."""
    logfire.instrument_httpx()
