"""Base model for bridge entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for identity, credential and session models.

    Entities are immutable; updates go through ``model_copy(update=...)``.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # Allow custom value objects
    )
