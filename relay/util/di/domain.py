"""Domain layer DI providers."""

from dishka import Scope, provide

from relay.config import AuthSettings, MatrixSettings
from relay.domain.repository import CredentialRepository, IdentityRepository
from relay.domain.service import (
    HomeserverClient,
    HomeserverService,
    IdentityService,
    SessionService,
)
from relay.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_session_service(self, auth_settings: AuthSettings) -> SessionService:
        """Provide session verification domain service."""
        return SessionService(auth_settings=auth_settings)

    @provide
    def get_homeserver_service(
        self, client: HomeserverClient, matrix_settings: MatrixSettings
    ) -> HomeserverService:
        """Provide homeserver domain service bound to the current server name."""
        return HomeserverService(
            client=client, server_name=matrix_settings.server_name or "localhost"
        )

    @provide
    def get_identity_service(
        self,
        identity_repository: IdentityRepository,
        credential_repository: CredentialRepository,
    ) -> IdentityService:
        """Provide identity store domain service."""
        return IdentityService(
            identity_repository=identity_repository,
            credential_repository=credential_repository,
        )
