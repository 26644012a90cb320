"""Exchange token use case."""

import logfire
from pydantic import BaseModel

from relay.application.usecase.base import BaseUseCase
from relay.config import MatrixSettings
from relay.domain.error import (
    InvalidUsername,
    NotFoundError,
    ProvisioningFailed,
    UpstreamAuthError,
    UsernameTaken,
)
from relay.domain.model import CredentialRecord, IdentityRecord, SessionToken
from relay.domain.service import (
    HomeserverService,
    IdentityService,
    SessionService,
    VerifiedSession,
)

from .provision import ProvisionIdentityUseCase, ProvisionRequest


class ExchangeTokenRequest(BaseModel):
    """Exchange token request carrying the external session token."""

    token: str | None = None


class ExchangeTokenResponse(BaseModel):
    """Homeserver session for the client."""

    access_token: str
    device_id: str
    user_id: str


class ExchangeTokenUseCase(BaseUseCase):
    """Use case for trading a verified session for a homeserver access token.

    Provisions on demand when the account has no usable identity, and
    re-provisions at most once per call.
    """

    def __init__(
        self,
        session_service: SessionService,
        identity_service: IdentityService,
        homeserver_service: HomeserverService,
        provision_use_case: ProvisionIdentityUseCase,
        matrix_settings: MatrixSettings,
    ) -> None:
        """Initialize exchange token use case.

        Args:
            session_service: External session domain service
            identity_service: Identity store domain service
            homeserver_service: Homeserver domain service
            provision_use_case: Provision use case for auto-provisioning
            matrix_settings: Matrix settings (auto-provision switch)
        """
        self.session_service = session_service
        self.identity_service = identity_service
        self.homeserver_service = homeserver_service
        self.provision_use_case = provision_use_case
        self.matrix_settings = matrix_settings

    async def execute(self, request: ExchangeTokenRequest) -> ExchangeTokenResponse:
        """Execute token exchange.

        Steps:
        1. Verify the external session
        2. Load identity and credential records
        3. Re-provision if the identity is missing, stale or has no credential
        4. Log in; a rejected login re-provisions once when reset is available

        Args:
            request: Exchange token request

        Returns:
            Homeserver access token, device ID and user ID

        Raises:
            AuthenticationFailed: If there is no valid session
            NotFoundError: If there is no usable identity and provisioning is
                disabled or failed
            UpstreamAuthError: If the homeserver rejects the login
            ConfigurationError: If provisioning is needed but not configured
        """
        session = self.session_service.verify(request.token)

        with logfire.span("exchange_token", account_id=session.account_id):
            identity = await self.identity_service.get_identity(session.account_id)
            credential = await self.identity_service.get_credential(
                session.account_id
            )

            reprovisioned = False
            reason = self._reprovision_reason(identity, credential)
            if reason:
                identity, credential = await self._reprovision(
                    session, identity, reason
                )
                reprovisioned = True

            try:
                token = await self.homeserver_service.login(
                    identity.messaging_id, credential.secret
                )
            except UpstreamAuthError as e:
                if (
                    reprovisioned
                    or e.retryable
                    or not self.matrix_settings.auto_provision
                    or not self.homeserver_service.can_reset_passwords
                ):
                    raise
                identity, credential = await self._reprovision(
                    session, identity, "credential_rejected"
                )
                token = await self.homeserver_service.login(
                    identity.messaging_id, credential.secret
                )

            return self._to_response(token)

    def _reprovision_reason(
        self, identity: IdentityRecord | None, credential: CredentialRecord | None
    ) -> str | None:
        if identity is None:
            return "missing_identity"
        if self.homeserver_service.is_stale(identity.messaging_id):
            return "stale_domain"
        if credential is None:
            return "missing_credential"
        return None

    async def _reprovision(
        self,
        session: VerifiedSession,
        identity: IdentityRecord | None,
        reason: str,
    ) -> tuple[IdentityRecord, CredentialRecord]:
        """Run provisioning for the session's account and reload its records.

        The stored username wins over the one requested at sign-up.

        Raises:
            NotFoundError: If auto-provisioning is disabled or fails
        """
        if not self.matrix_settings.auto_provision:
            logfire.warn(
                "Auto-provisioning disabled",
                account_id=session.account_id,
                reason=reason,
            )
            raise NotFoundError("Messaging identity", session.account_id)

        username = identity.username.root if identity else session.requested_username
        logfire.info(
            "Re-provisioning identity",
            account_id=session.account_id,
            reason=reason,
            previous_messaging_id=identity.messaging_id.root if identity else None,
        )

        try:
            await self.provision_use_case.execute(
                ProvisionRequest(
                    account_id=session.account_id,
                    email=session.email,
                    username=username,
                )
            )
        except (ProvisioningFailed, UsernameTaken, InvalidUsername) as e:
            logfire.error(
                "Auto-provisioning failed",
                account_id=session.account_id,
                reason=reason,
                error=str(e),
            )
            raise NotFoundError("Messaging identity", session.account_id) from e

        fresh_identity = await self.identity_service.get_identity(session.account_id)
        fresh_credential = await self.identity_service.get_credential(
            session.account_id
        )
        if fresh_identity is None or fresh_credential is None:
            raise NotFoundError("Messaging identity", session.account_id)
        return fresh_identity, fresh_credential

    @staticmethod
    def _to_response(token: SessionToken) -> ExchangeTokenResponse:
        return ExchangeTokenResponse(
            access_token=token.access_token,
            device_id=token.device_id,
            user_id=token.messaging_id.root,
        )
