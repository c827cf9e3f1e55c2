"""
Base exception classes for the Taskflow backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base to an HTTP status; nothing here knows about HTTP.
"""

from typing import Optional, Any


class TaskflowError(Exception):
    """
    Base exception for all Taskflow errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "message": self.message,
            "error": self.code,
        }


class ValidationError(TaskflowError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        errors: Optional[list[str]] = None,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code=code or "VALIDATION_ERROR", details=details)
        self.errors = list(errors) if errors else [message]

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["errors"] = self.errors
        return result


class ConflictError(TaskflowError):
    """A uniqueness constraint would be violated."""

    pass


class NotFoundError(TaskflowError):
    """Resource not found (or not owned by the caller)."""

    pass


class AuthenticationError(TaskflowError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class ConfigurationError(TaskflowError):
    """The server is missing required configuration."""

    pass


class InternalError(TaskflowError):
    """Unexpected infrastructure failure."""

    pass


class StoreError(InternalError):
    """A persistence call failed. The raw driver error never leaves this wrapper."""

    def __init__(self, operation: str, db_code: Optional[str] = None):
        super().__init__(
            "Internal server error",
            code="STORE_ERROR",
            details={"operation": operation, "db_code": db_code},
        )
        self.operation = operation
        self.db_code = db_code


def raise_for_errors(errors: list[str]) -> None:
    """Raise a single ValidationError carrying every collected message."""
    if errors:
        message = errors[0] if len(errors) == 1 else "Validation Error"
        raise ValidationError(message, errors=errors)
