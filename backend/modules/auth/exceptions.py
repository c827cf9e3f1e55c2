"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
)


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when an email/password pair does not authenticate.

    Unknown email and wrong password use the same message so callers
    cannot probe which accounts exist.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Token has expired, please login again"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "No token provided, please login"):
        super().__init__(message, code="MISSING_TOKEN")


class EmailAlreadyExistsError(ConflictError):
    """Raised when an email is already registered to another user."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message, code="EMAIL_EXISTS")


class UserNotFoundError(NotFoundError):
    """Raised when the authenticated user doesn't exist in the database."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class TokenSecretMissingError(ConfigurationError):
    """Raised when the token signing secret is not configured."""

    def __init__(self):
        super().__init__(
            "JWT_SECRET is not configured on the server",
            code="JWT_SECRET_MISSING",
        )
