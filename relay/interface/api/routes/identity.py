"""Identity bridge routes."""

import hmac
import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, HTTPException, Request, status
from pydantic import BaseModel, Field

from relay.application.usecase.identity import (
    ExchangeTokenRequest,
    ExchangeTokenResponse,
    ExchangeTokenUseCase,
    ProvisionIdentityUseCase,
    ProvisionRequest,
    ProvisionResponse,
)
from relay.config import AuthSettings
from relay.domain.error import (
    AuthenticationFailed,
    InvalidUsername,
    NotFoundError,
    ProvisioningFailed,
    UpstreamAuthError,
    UsernameTaken,
)
from relay.util.error import ConfigurationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/identity", tags=["identity"], route_class=DishkaRoute)


class ProvisionAPIRequest(BaseModel):
    """API request for provisioning a messaging identity."""

    account_id: str = Field(min_length=1)
    email: str = Field(min_length=1)
    username: str | None = None


def _server_error(message: str, retryable: bool) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": message, "retryable": retryable},
    )


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@router.post("/provision", response_model=ProvisionResponse)
async def provision_identity(
    request: ProvisionAPIRequest,
    provision_use_case: FromDishka[ProvisionIdentityUseCase],
    auth_settings: FromDishka[AuthSettings],
    x_provision_token: str | None = Header(default=None),
) -> ProvisionResponse:
    """Provision a messaging identity for a newly registered account.

    Called by the front end right after sign-up. Safe to repeat.

    Args:
        request: Account ID, email and optional requested username
        provision_use_case: Provision identity use case from DI
        auth_settings: Auth settings from DI (optional provision guard)
        x_provision_token: Shared provision key, required when configured

    Returns:
        Provisioned messaging identity

    Raises:
        HTTPException: 400 invalid username, 401 bad provision key,
            409 username taken, 500 registration or storage failure
    """
    if auth_settings.provision_token and not hmac.compare_digest(
        (x_provision_token or "").encode("utf-8"),
        auth_settings.provision_token.encode("utf-8"),
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid provision token",
        )

    try:
        return await provision_use_case.execute(
            ProvisionRequest(
                account_id=request.account_id,
                email=request.email,
                username=request.username,
            )
        )

    except InvalidUsername as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UsernameTaken as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ProvisioningFailed as e:
        logger.error(f"Provisioning failed for {request.account_id}: {e}")
        raise _server_error("Identity auto-provisioning failed.", e.retryable)
    except ConfigurationError as e:
        logger.error(f"Provisioning is misconfigured: {e}")
        raise _server_error("Identity auto-provisioning is not configured.", False)
    except Exception as e:
        logger.exception(f"Unexpected error provisioning {request.account_id}: {e}")
        raise _server_error("Failed to create/update identity linking.", True)


@router.get("/token", response_model=ExchangeTokenResponse)
async def exchange_token(
    request: Request,
    exchange_token_use_case: FromDishka[ExchangeTokenUseCase],
    auth_settings: FromDishka[AuthSettings],
    authorization: str | None = Header(default=None),
) -> ExchangeTokenResponse:
    """Exchange the current session for a homeserver access token.

    The session comes from the auth provider's cookie, or from an
    ``Authorization: Bearer`` header when no cookie is sent.

    Args:
        request: Incoming request (for the configurable session cookie)
        exchange_token_use_case: Exchange token use case from DI
        auth_settings: Auth settings from DI
        authorization: Authorization header

    Returns:
        Access token, device ID and user ID

    Raises:
        HTTPException: 401 no session, 404 no identity, 502 login rejected
    """
    token = request.cookies.get(auth_settings.session_cookie_name) or _bearer_token(
        authorization
    )

    try:
        return await exchange_token_use_case.execute(ExchangeTokenRequest(token=token))

    except AuthenticationFailed as e:
        logger.warning(f"No valid session for token exchange: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: No active session",
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Messaging credentials not found for this user",
        )
    except UpstreamAuthError as e:
        logger.error(f"Homeserver login failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to authenticate with the homeserver",
        )
    except ConfigurationError as e:
        logger.error(f"Token exchange is misconfigured: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    except Exception as e:
        logger.exception(f"Unexpected error exchanging token: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
