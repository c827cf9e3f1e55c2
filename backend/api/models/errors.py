"""
Error response models.

Standardized error responses for the API.
"""

from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str
    error: Optional[str] = None
    errors: Optional[list[str]] = None
