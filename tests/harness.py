"""Test harness for unit and integration tests.

Integration tests assume a running Postgres reachable through DATABASE__URL.
"""

from collections.abc import Callable

import pytest_asyncio

from relay.config import Settings
from relay.util.di import Component
from tests.di import build_test_container
from tests.factories import make_test_settings


def create_env_fixture(
    unmock: set[Component] | None = None,
    settings_factory: Callable[[], Settings] = make_test_settings,
):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for
        settings_factory: Builds the settings injected into the container

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked
        unit_env = create_env_fixture()

        # Password reset unavailable
        no_reset_env = create_env_fixture(
            settings_factory=lambda: make_test_settings(admin_access_token=None)
        )

        @pytest.mark.asyncio
        async def test_provision(unit_env):
            use_case = await unit_env.get(ProvisionIdentityUseCase)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(
            unmock=unmock or set(), settings=settings_factory()
        )

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
