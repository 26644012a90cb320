"""Matrix homeserver adapter."""

from .client import (
    MatrixHomeserverClient,
    MockMatrixHomeserverClient,
    RealMatrixHomeserverClient,
)
from .signing import sign_registration

__all__ = [
    "MatrixHomeserverClient",
    "RealMatrixHomeserverClient",
    "MockMatrixHomeserverClient",
    "sign_registration",
]
