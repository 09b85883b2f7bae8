"""API request and response schemas.

Pydantic models for API validation and serialization.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from contact_service.models.contact import ContactErrors


class ContactErrorResponse(BaseModel):
    """Response model for a rejected POST / submission.

    Each field holds the user-visible problem with that field, or null.
    """

    email: str | None = Field(default=None, description="Email field error")
    name: str | None = Field(default=None, description="Name field error")
    message: str | None = Field(default=None, description="Message field error")

    @classmethod
    def from_errors(cls, errors: ContactErrors) -> ContactErrorResponse:
        """Build the response from validation error codes."""
        return cls(**errors.to_messages())


class ErrorResponse(BaseModel):
    """Opaque server error response model."""

    detail: str = Field(description="Error description")
