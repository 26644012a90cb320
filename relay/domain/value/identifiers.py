"""Strongly typed identifiers for bridge entities.

Account IDs are issued by the external auth provider and treated as opaque
strings; NewType keeps them from being mixed up with other strings.
"""

from typing import NewType

AccountId = NewType("AccountId", str)
