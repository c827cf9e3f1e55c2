"""
User repository for database access.

Encapsulates all Supabase queries and data mapping for the users table.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from shared.exceptions import StoreError
from shared.repository import (
    BaseRepository,
    INVALID_TEXT_REPRESENTATION,
    UNIQUE_VIOLATION,
)
from .exceptions import EmailAlreadyExistsError
from .models import UserRecord

USERS_TABLE = "users"


class UserRepository(BaseRepository[UserRecord]):
    """
    Repository for user data access. Satisfies IUserRepository.

    Emails are expected to arrive already normalized (trimmed, lower-cased);
    the unique index on users.email is the final guard against duplicates.
    """

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        query = self._db.table(USERS_TABLE).select("*").eq("id", user_id).limit(1)
        try:
            result = self._execute(query, "users.get_by_id")
        except StoreError as e:
            # A malformed id cannot match any row
            if e.db_code == INVALID_TEXT_REPRESENTATION:
                return None
            raise

        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        query = self._db.table(USERS_TABLE).select("*").eq("email", email).limit(1)
        result = self._execute(query, "users.get_by_email")

        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def create(self, name: str, email: str, password_hash: str) -> UserRecord:
        """
        Insert a new user.

        Returns:
            Created UserRecord with generated ID and timestamps.

        Raises:
            EmailAlreadyExistsError: If the email is already taken.
        """
        data = {
            "name": name,
            "email": email,
            "password_hash": password_hash,
        }
        query = self._db.table(USERS_TABLE).insert(data)
        try:
            result = self._execute(query, "users.create")
        except StoreError as e:
            if e.db_code == UNIQUE_VIOLATION:
                raise EmailAlreadyExistsError() from e
            raise

        return self._map_to_user(result.data[0])

    def update(self, user_id: str, fields: dict[str, Any]) -> Optional[UserRecord]:
        """
        Apply a partial update to one user.

        Args:
            user_id: The user UUID.
            fields: Column values to set (name, email, password_hash).

        Returns:
            The updated UserRecord, or None if the user does not exist.

        Raises:
            EmailAlreadyExistsError: If the new email is already taken.
        """
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()

        query = self._db.table(USERS_TABLE).update(data).eq("id", user_id)
        try:
            result = self._execute(query, "users.update")
        except StoreError as e:
            if e.db_code == UNIQUE_VIOLATION:
                raise EmailAlreadyExistsError("Email is already in use") from e
            if e.db_code == INVALID_TEXT_REPRESENTATION:
                return None
            raise

        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def _map_to_user(self, data: dict[str, Any]) -> UserRecord:
        """Map database row to UserRecord model."""
        return UserRecord(
            id=str(data["id"]),
            name=data["name"],
            email=data["email"],
            password_hash=data["password_hash"],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
