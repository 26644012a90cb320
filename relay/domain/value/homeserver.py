"""Tagged results of homeserver calls.

Homeserver responses are loosely shaped JSON; adapters translate them into
one of these variants so callers branch on ``kind`` instead of inspecting
error-code strings inline.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from relay.domain.value.common import ValueObject

USER_IN_USE = "M_USER_IN_USE"
LIMIT_EXCEEDED = "M_LIMIT_EXCEEDED"


class HomeserverFailure(ValueObject):
    """Any homeserver call that did not succeed.

    ``status_code`` is None when the homeserver could not be reached.
    """

    kind: Literal["error"] = "error"
    status_code: int | None = None
    errcode: str | None = None
    error: str

    @property
    def retryable(self) -> bool:
        """Network errors, rate limiting and 5xx are worth retrying; the rest are not."""
        if self.status_code is None:
            return True
        if self.status_code == 429 or self.errcode == LIMIT_EXCEEDED:
            return True
        return self.status_code >= 500


class RegisterCreated(ValueObject):
    """Registration created a new account."""

    kind: Literal["created"] = "created"
    user_id: str


class RegisterUserInUse(ValueObject):
    """The localpart is already registered on the homeserver."""

    kind: Literal["user_in_use"] = "user_in_use"
    user_id: str


class LoginSucceeded(ValueObject):
    """Password login issued an access token."""

    kind: Literal["ok"] = "ok"
    access_token: str
    device_id: str
    user_id: str


class PasswordReset(ValueObject):
    """Admin password reset succeeded."""

    kind: Literal["reset"] = "reset"


RegisterOutcome = Annotated[
    Union[RegisterCreated, RegisterUserInUse, HomeserverFailure],
    Field(discriminator="kind"),
]
LoginOutcome = Annotated[
    Union[LoginSucceeded, HomeserverFailure], Field(discriminator="kind")
]
ResetOutcome = Annotated[
    Union[PasswordReset, HomeserverFailure], Field(discriminator="kind")
]
