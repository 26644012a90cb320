"""Domain services."""

from .base import Service
from .homeserver_service import HomeserverClient, HomeserverService, RegistrationResult
from .identity_service import IdentityService
from .session_service import SessionService, VerifiedSession

__all__ = [
    "HomeserverClient",
    "HomeserverService",
    "IdentityService",
    "RegistrationResult",
    "Service",
    "SessionService",
    "VerifiedSession",
]
