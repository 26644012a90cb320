"""Domain value objects for the identity bridge.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules.
"""

import re

from pydantic import field_validator

from relay.domain.value.common import RootValueObject

LOCALPART_PATTERN = re.compile(r"(?![_.])[a-z0-9_=\-./]{3,24}")
LOCALPART_MIN_LENGTH = 3
LOCALPART_MAX_LENGTH = 24

_DISALLOWED_LOCALPART_CHARS = re.compile(r"[^a-z0-9_=\-./]")


class Localpart(RootValueObject[str]):
    """User-chosen part of a messaging identity, also used as the public username.

    Must be 3-24 characters from ``a-z 0-9 _ = - . /`` and must not start
    with ``_`` or ``.``.
    Examples: 'artist1', 'valid_user.1'
    """

    @field_validator("root")
    @classmethod
    def validate_localpart(cls, v: str) -> str:
        """Validate localpart format."""
        if not LOCALPART_PATTERN.fullmatch(v):
            raise ValueError(
                "Username must be 3-24 characters of a-z, 0-9, _ = - . / "
                "and must not start with _ or ."
            )
        return v


def sanitize_localpart(raw: str) -> str:
    """Reduce arbitrary input to the localpart charset.

    Lowercases, drops disallowed characters, strips leading ``_``/``.`` and
    truncates to the maximum length. The result may still be too short;
    validate it with :class:`Localpart`.

    Args:
        raw: Requested username or email local part

    Returns:
        Sanitized candidate localpart (possibly empty)
    """
    candidate = _DISALLOWED_LOCALPART_CHARS.sub("", raw.strip().lower())
    candidate = candidate.lstrip("_.")
    return candidate[:LOCALPART_MAX_LENGTH]


class MatrixUserId(RootValueObject[str]):
    """Fully qualified messaging identity: ``@localpart:domain``."""

    @field_validator("root")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Validate the @localpart:domain shape."""
        if not v.startswith("@") or ":" not in v:
            raise ValueError("Messaging ID must have the form @localpart:domain")
        localpart, _, domain = v[1:].partition(":")
        if not localpart or not domain:
            raise ValueError("Messaging ID must have the form @localpart:domain")
        return v

    @classmethod
    def build(cls, localpart: Localpart, domain: str) -> "MatrixUserId":
        """Build an identity from its parts."""
        return cls(f"@{localpart.root}:{domain}")

    @property
    def localpart(self) -> str:
        """Part between '@' and the first ':'."""
        return self.root[1:].partition(":")[0]

    @property
    def domain(self) -> str:
        """Server name after the first ':'."""
        return self.root[1:].partition(":")[2]
