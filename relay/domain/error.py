"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class InvalidUsername(ValidationError):
    """No valid localpart could be derived from the request (HTTP 400)."""

    def __init__(self, candidate: str, reason: str):
        self.candidate = candidate
        super().__init__(f"Invalid username '{candidate}': {reason}")


class UsernameConflict(DomainError):
    """Storage-level unique violation: another account owns the username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already owned by another account: {username}")


class UsernameTaken(DomainError):
    """Provisioning could not claim the username (HTTP 409)."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username is taken: {username}")


class RegistrationError(DomainError):
    """The homeserver refused registration for a reason other than "in use"."""

    def __init__(
        self,
        localpart: str,
        error: str,
        errcode: str | None = None,
        status_code: int | None = None,
        retryable: bool = False,
    ):
        self.localpart = localpart
        self.error = error
        self.errcode = errcode
        self.status_code = status_code
        self.retryable = retryable
        super().__init__(
            f"Registration of {localpart} failed: {errcode or status_code}: {error}"
        )


class ProvisioningFailed(DomainError):
    """Provisioning aborted before anything was stored (HTTP 500)."""

    def __init__(self, message: str, retryable: bool = False):
        self.retryable = retryable
        super().__init__(message)


class UpstreamAuthError(DomainError):
    """The homeserver rejected stored credentials (HTTP 502)."""

    def __init__(
        self,
        messaging_id: str,
        error: str,
        errcode: str | None = None,
        retryable: bool = False,
    ):
        self.messaging_id = messaging_id
        self.errcode = errcode
        self.retryable = retryable
        super().__init__(f"Homeserver login failed for {messaging_id}: {error}")


class AuthenticationFailed(DomainError):
    """No valid external session (HTTP 401)."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
