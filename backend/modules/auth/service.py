"""
Authentication service implementation.

Registers users, checks credentials, issues and verifies stateless
session tokens (PyJWT, HS256) and manages the user's own profile.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import jwt
from email_validator import EmailNotValidError, validate_email
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from shared.config import Settings
from shared.exceptions import ValidationError, raise_for_errors

from .exceptions import (
    EmailAlreadyExistsError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    TokenSecretMissingError,
    UserNotFoundError,
)
from .interfaces import IAuthService, IPasswordHasher, IUserRepository
from .models import (
    LoginResult,
    SessionClaim,
    UpdateProfileRequest,
    UserProfile,
    UserRecord,
)
from .passwords import BCRYPT_MAX_PASSWORD_BYTES, BcryptPasswordHasher

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case an email address."""
    return (email or "").strip().lower()


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses an injected user repository for storage and bcrypt for hashing.
    Sessions are not stored: a token is valid until its exp claim passes.
    """

    def __init__(
        self,
        users: IUserRepository,
        settings: Settings,
        hasher: Optional[IPasswordHasher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._users = users
        self._settings = settings
        self._hasher = hasher or BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._dummy_hash: Optional[str] = None

    # -------------------------------------------------------------------------
    # Registration and login
    # -------------------------------------------------------------------------

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> UserProfile:
        """Register a new user, storing only a salted hash of the password."""
        name = (name or "").strip()
        email = normalize_email(email)

        errors: list[str] = []
        if not name:
            errors.append("Name is required")
        self._check_email(email, errors)
        if not password:
            errors.append("Password is required")
        else:
            self._check_password_strength(password, errors, label="Password")
        raise_for_errors(errors)

        if self._users.get_by_email(email) is not None:
            raise EmailAlreadyExistsError()

        password_hash = await self._hash(password)
        record = self._users.create(name=name, email=email, password_hash=password_hash)
        logger.info("Registered user %s", record.id)
        return UserProfile.from_record(record)

    async def authenticate(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> LoginResult:
        """Check credentials and issue a session token valid for jwt_expires_days."""
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Please provide email and password")

        record = self._users.get_by_email(email)
        if record is None:
            # Spend the same hashing time as a real check
            await self._verify(password, await self._get_dummy_hash())
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        if not await self._verify(password, record.password_hash):
            logger.warning("Failed login attempt for user %s", record.id)
            raise InvalidCredentialsError()

        token = self.issue_token(record)
        logger.info("User %s logged in", record.id)
        return LoginResult(token=token, user=UserProfile.from_record(record))

    # -------------------------------------------------------------------------
    # Session tokens
    # -------------------------------------------------------------------------

    def issue_token(self, record: UserRecord) -> str:
        """
        Sign a session token for a user.

        The claim holds the user id (sub), email, issue time and expiry.
        """
        secret = self._require_secret()
        issued_at = self._clock()
        expires_at = issued_at + timedelta(days=self._settings.jwt_expires_days)

        payload: dict[str, Any] = {
            "sub": record.id,
            "email": record.email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=self._settings.jwt_algorithm)

    async def verify_token(self, token: Optional[str]) -> SessionClaim:
        """
        Verify a session token and return its claim.

        Signature, structure and expiry are all checked; a valid,
        unexpired token never raises.
        """
        secret = self._require_secret()

        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._settings.jwt_algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError:
            raise InvalidTokenError()

        try:
            return SessionClaim(**payload)
        except PydanticValidationError:
            raise InvalidTokenError()

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> UserProfile:
        """Get the public profile of a user."""
        return UserProfile.from_record(self._get_record(user_id))

    async def update_profile(
        self,
        user_id: str,
        request: UpdateProfileRequest,
    ) -> UserProfile:
        """
        Update name and email, and change the password when asked to.

        A password change is all-or-nothing: both current_password and
        new_password must be present, and the current one must match.
        Only fields that differ from the stored values are written.
        """
        record = self._get_record(user_id)

        name = (request.name or "").strip()
        email = normalize_email(request.email)
        current_password = request.current_password
        new_password = request.new_password
        wants_password_change = bool(current_password) or bool(new_password)

        errors: list[str] = []
        if not name:
            errors.append("Name is required")
        self._check_email(email, errors)
        if wants_password_change:
            if not current_password or not new_password:
                errors.append("To change password, provide both current and new password")
            else:
                self._check_password_strength(new_password, errors, label="New password")
        raise_for_errors(errors)

        updates: dict[str, Any] = {}
        if name != record.name:
            updates["name"] = name
        if email != record.email:
            owner = self._users.get_by_email(email)
            if owner is not None and owner.id != record.id:
                raise EmailAlreadyExistsError("Email is already in use")
            updates["email"] = email

        if wants_password_change:
            if not await self._verify(current_password, record.password_hash):
                raise InvalidCredentialsError("Current password is incorrect")
            updates["password_hash"] = await self._hash(new_password)

        if not updates:
            return UserProfile.from_record(record)

        updated = self._users.update(record.id, updates)
        if updated is None:
            raise UserNotFoundError(user_id)

        logger.info("Updated profile for user %s (%s)", user_id, ", ".join(sorted(updates)))
        return UserProfile.from_record(updated)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_record(self, user_id: str) -> UserRecord:
        record = self._users.get_by_id(user_id)
        if record is None:
            raise UserNotFoundError(user_id)
        return record

    def _require_secret(self) -> str:
        if not self._settings.jwt_secret:
            logger.error("JWT_SECRET is not configured")
            raise TokenSecretMissingError()
        return self._settings.jwt_secret

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self._hash("taskflow-dummy-password")
        return self._dummy_hash

    # bcrypt is CPU-bound; keep it off the event loop
    async def _hash(self, password: str) -> str:
        return await run_in_threadpool(self._hasher.hash, password)

    async def _verify(self, password: str, hashed: str) -> bool:
        return await run_in_threadpool(self._hasher.verify, password, hashed)

    def _check_email(self, email: str, errors: list[str]) -> None:
        if not email:
            errors.append("Email is required")
            return
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append("Please provide a valid email address")

    def _check_password_strength(self, password: str, errors: list[str], label: str) -> None:
        min_length = self._settings.password_min_length
        if len(password) < min_length:
            errors.append(f"{label} must be at least {min_length} characters")
        elif len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            errors.append(f"{label} must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
