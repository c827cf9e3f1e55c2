"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
The service in turn depends on IUserRepository and IPasswordHasher, so
tests can substitute in-memory implementations.
"""

from typing import Any, Protocol, Optional, runtime_checkable

from .models import (
    LoginResult,
    SessionClaim,
    UpdateProfileRequest,
    UserProfile,
    UserRecord,
)


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> UserProfile:
        """
        Register a new user.

        Raises:
            ValidationError: If name, email or password is missing or invalid
            EmailAlreadyExistsError: If the email is already registered
        """
        ...

    async def authenticate(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> LoginResult:
        """
        Check credentials and issue a session token.

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentialsError: If the email is unknown or the password is wrong
            TokenSecretMissingError: If no signing secret is configured
        """
        ...

    async def verify_token(self, token: Optional[str]) -> SessionClaim:
        """
        Verify a session token and return its claim.

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If token is past its expiry
            InvalidTokenError: If signature or structure is invalid
            TokenSecretMissingError: If no signing secret is configured
        """
        ...

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Get a user's public profile.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def update_profile(
        self,
        user_id: str,
        request: UpdateProfileRequest,
    ) -> UserProfile:
        """
        Update name/email and optionally the password.

        Raises:
            ValidationError: On blank fields or an incomplete password change
            EmailAlreadyExistsError: If the new email belongs to another user
            InvalidCredentialsError: If the current password does not match
            UserNotFoundError: If the user does not exist
        """
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Credential store contract."""

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    def create(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Insert a user. Raises EmailAlreadyExistsError on a duplicate email."""
        ...

    def update(self, user_id: str, fields: dict[str, Any]) -> Optional[UserRecord]:
        """Apply fields to one user. Returns None if no such user."""
        ...


@runtime_checkable
class IPasswordHasher(Protocol):
    """One-way salted password hashing."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, hashed: str) -> bool:
        ...
