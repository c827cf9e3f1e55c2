"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import CamelModel


class SessionClaim(BaseModel):
    """
    Decoded, verified session token payload.

    Issued at login and never stored server-side.
    """

    sub: str = Field(..., min_length=1, description="Subject (user ID)")
    email: str = Field(..., description="User's email at issuance")
    exp: int = Field(..., description="Expiration timestamp")
    iat: Optional[int] = Field(None, description="Issued at timestamp")

    model_config = {"frozen": True}


class UserRecord(BaseModel):
    """
    A stored user, including the password hash.

    Internal to the auth module: never returned from a route.
    """

    id: str
    name: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserProfile(CamelModel):
    """Public user fields. The password hash is not part of this model."""

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address (lower-cased)")
    created_at: Optional[datetime] = Field(None, description="Account creation time")
    updated_at: Optional[datetime] = Field(None, description="Last update time")

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserProfile":
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class RegisterRequest(BaseModel):
    """
    Signup payload.

    Fields are optional at the schema level so that missing values are
    reported together by the service, field by field.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Login payload."""

    email: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(CamelModel):
    """
    Profile update payload.

    A password change needs both current_password and new_password;
    sending only one of them is rejected.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class LoginResult(BaseModel):
    """Outcome of a successful authentication."""

    token: str
    user: UserProfile


# Response envelopes


class UserResponse(BaseModel):
    """Response carrying a user profile."""

    message: str
    user: UserProfile


class LoginResponse(BaseModel):
    """Response for a successful login."""

    message: str
    token: str
    user: UserProfile
