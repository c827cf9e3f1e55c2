"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for models exchanged with the frontend.

    Serializes to camelCase keys (dueDate, createdAt, ...) and accepts
    either camelCase or snake_case on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from verified session token claims and made
    available to route handlers via dependency injection. It is the only
    source of the caller's identity; client-supplied owner ids are ignored.
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }


class MessageResponse(BaseModel):
    """Envelope for responses that only carry a message."""

    message: str
