"""
Authentication module.

Handles registration, login, session tokens and profile management.

Public API:
- IAuthService: Interface for auth operations
- SessionClaim: Verified token payload
- UserProfile: Public user profile
- Auth exceptions: InvalidCredentialsError, InvalidTokenError, etc.
"""

from .interfaces import IAuthService, IUserRepository, IPasswordHasher
from .models import SessionClaim, UserProfile, UpdateProfileRequest, LoginResult
from .exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    EmailAlreadyExistsError,
    UserNotFoundError,
    TokenSecretMissingError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IUserRepository",
    "IPasswordHasher",
    # Models
    "SessionClaim",
    "UserProfile",
    "UpdateProfileRequest",
    "LoginResult",
    # Exceptions
    "InvalidCredentialsError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "EmailAlreadyExistsError",
    "UserNotFoundError",
    "TokenSecretMissingError",
]
