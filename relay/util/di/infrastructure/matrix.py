"""Matrix homeserver infrastructure providers."""

from dishka import Scope, provide

from relay.adapter.matrix.client import RealMatrixHomeserverClient
from relay.config import Settings
from relay.domain.service import HomeserverClient
from relay.util.di.base import ProviderBase


class MatrixProvider(ProviderBase):
    """Matrix component base."""

    __mock_component__ = "matrix"


class ProdMatrixProvider(MatrixProvider):
    """Production Matrix provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_homeserver_client(self, settings: Settings) -> HomeserverClient:
        """Provide Matrix homeserver client.

        A missing registration shared secret is not fatal here: login keeps
        working and provisioning fails with ConfigurationError.

        Returns:
            Matrix homeserver client
        """
        matrix = settings.matrix
        return RealMatrixHomeserverClient(
            homeserver_url=matrix.homeserver_url or "",
            server_name=matrix.server_name or "localhost",
            shared_secret=matrix.registration_shared_secret,
            admin_access_token=matrix.admin_access_token,
            timeout=matrix.request_timeout,
            device_display_name=matrix.device_display_name,
            proxy_bypass_hosts=matrix.proxy_bypass_hosts,
        )
