"""FastAPI application."""

import logging

from dishka import AsyncContainer
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relay.config import Settings
from relay.interface.api.routes import health, identity
from relay.util.di.container import create_container, setup_di
from relay.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)

logger = logging.getLogger(__name__)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed or incomplete request bodies as 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def create_app(
    settings: Settings | None = None, container: AsyncContainer | None = None
) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, conftest.py disables sending.

    Args:
        settings: Application settings (loaded from environment if omitted)
        container: DI container (production container if omitted)
    """
    settings = settings or Settings()

    if not settings.matrix.registration_shared_secret:
        logger.error(
            "MATRIX__REGISTRATION_SHARED_SECRET is not set: "
            "identity provisioning will fail until it is configured"
        )

    # Instrument httpx for outbound homeserver requests
    instrument_httpx()

    app_instance = FastAPI(
        title="Relay Identity Bridge",
        description="Links external-auth accounts to auto-provisioned messaging identities",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
        ],
        allow_credentials=True,  # Session cookie
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Provision-Token",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container(settings))

    app_instance.add_exception_handler(
        RequestValidationError, validation_exception_handler
    )

    app_instance.include_router(health.router)
    app_instance.include_router(identity.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()
