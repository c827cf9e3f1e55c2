"""
Shared infrastructure for Taskflow backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- logging_setup: Root logger configuration
- repository: Base repository with driver error normalization

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import create_supabase_client
from .exceptions import (
    TaskflowError,
    ValidationError,
    ConflictError,
    NotFoundError,
    AuthenticationError,
    ConfigurationError,
    InternalError,
    StoreError,
    raise_for_errors,
)
from .logging_setup import setup_logging
from .models import AuthenticatedUser, CamelModel, MessageResponse

__all__ = [
    "Settings",
    "get_settings",
    "create_supabase_client",
    "TaskflowError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "AuthenticationError",
    "ConfigurationError",
    "InternalError",
    "StoreError",
    "raise_for_errors",
    "setup_logging",
    "AuthenticatedUser",
    "CamelModel",
    "MessageResponse",
]
