"""Domain value objects for the identity bridge."""

from relay.domain.value.homeserver import (
    HomeserverFailure,
    LoginOutcome,
    LoginSucceeded,
    PasswordReset,
    RegisterCreated,
    RegisterOutcome,
    RegisterUserInUse,
    ResetOutcome,
)
from relay.domain.value.identifiers import AccountId
from relay.domain.value.types import Localpart, MatrixUserId, sanitize_localpart

__all__ = [
    # Identifiers
    "AccountId",
    # Types
    "Localpart",
    "MatrixUserId",
    "sanitize_localpart",
    # Homeserver results
    "HomeserverFailure",
    "LoginOutcome",
    "LoginSucceeded",
    "PasswordReset",
    "RegisterCreated",
    "RegisterOutcome",
    "RegisterUserInUse",
    "ResetOutcome",
]
