"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and normalizing driver errors into StoreError.
"""

import logging
from typing import TypeVar, Generic, Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import StoreError


T = TypeVar("T")

logger = logging.getLogger(__name__)

# PostgreSQL error codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute() which turns postgrest and transport errors into StoreError

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class TaskRepository(BaseRepository[Task]):
            def get_owned(self, task_id: str, user_id: str) -> Optional[Task]:
                query = self._db.table("tasks").select("*").eq("id", task_id).eq("user_id", user_id)
                result = self._execute(query, "tasks.get_owned")
                if not result.data:
                    return None
                return self._map_to_task(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, query: Any, operation: str) -> Any:
        """
        Execute a query builder, normalizing driver failures.

        Args:
            query: A postgrest request builder.
            operation: Short label used in logs and error details.

        Returns:
            The postgrest APIResponse.

        Raises:
            StoreError: If PostgREST rejected the request or could not be reached.
        """
        try:
            return query.execute()
        except APIError as e:
            logger.error("Store operation %s failed (code=%s): %s", operation, e.code, e.message)
            raise StoreError(operation, db_code=e.code) from e
        except httpx.HTTPError as e:
            logger.error("Store operation %s failed to reach the database: %s", operation, e)
            raise StoreError(operation) from e
