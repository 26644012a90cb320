"""Application layer DI providers."""

from dishka import Scope, provide

from relay.application.usecase.identity import (
    ExchangeTokenUseCase,
    ProvisionIdentityUseCase,
)
from relay.config import MatrixSettings
from relay.domain.service import HomeserverService, IdentityService, SessionService
from relay.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_provision_use_case(
        self,
        homeserver_service: HomeserverService,
        identity_service: IdentityService,
    ) -> ProvisionIdentityUseCase:
        """Provide provision identity use case."""
        return ProvisionIdentityUseCase(
            homeserver_service=homeserver_service,
            identity_service=identity_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_exchange_token_use_case(
        self,
        session_service: SessionService,
        identity_service: IdentityService,
        homeserver_service: HomeserverService,
        provision_use_case: ProvisionIdentityUseCase,
        matrix_settings: MatrixSettings,
    ) -> ExchangeTokenUseCase:
        """Provide exchange token use case."""
        return ExchangeTokenUseCase(
            session_service=session_service,
            identity_service=identity_service,
            homeserver_service=homeserver_service,
            provision_use_case=provision_use_case,
            matrix_settings=matrix_settings,
        )
