"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from relay.config import Settings
from relay.util.di import PROVIDERS, ProdConfigProvider, get_provider


def create_container(settings: Settings | None = None) -> AsyncContainer:
    """Build the production container.

    Args:
        settings: Settings shared with the app (loaded from environment if omitted)

    Returns:
        Container with production providers and FastAPI integration
    """
    providers = [
        ProdConfigProvider(settings=settings)
        if base is ProdConfigProvider
        else get_provider(base, use_mock=False)()
        for base in PROVIDERS
    ]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app; DishkaRoute resolves from it."""
    setup_dishka(container, app)
