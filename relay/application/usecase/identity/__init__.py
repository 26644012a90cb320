"""Identity bridge use cases."""

from .exchange_token import (
    ExchangeTokenRequest,
    ExchangeTokenResponse,
    ExchangeTokenUseCase,
)
from .provision import ProvisionIdentityUseCase, ProvisionRequest, ProvisionResponse

__all__ = [
    "ExchangeTokenRequest",
    "ExchangeTokenResponse",
    "ExchangeTokenUseCase",
    "ProvisionIdentityUseCase",
    "ProvisionRequest",
    "ProvisionResponse",
]
