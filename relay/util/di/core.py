"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from relay.config import AuthSettings, MatrixSettings, Settings
from relay.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file unless an
    explicit instance is passed in.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self._settings = settings

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings."""
        return self._settings or Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_matrix_settings(self, settings: Settings) -> MatrixSettings:
        """Provide matrix settings."""
        return settings.matrix
