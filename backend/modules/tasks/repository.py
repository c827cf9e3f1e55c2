"""
Task repository for database access.

Encapsulates all Supabase queries and data mapping for the tasks table.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from shared.exceptions import StoreError
from shared.repository import BaseRepository, INVALID_TEXT_REPRESENTATION
from .models import Task, TaskPriority, TaskStatus

TASKS_TABLE = "tasks"


def quote_filter_value(value: str) -> str:
    """
    Quote a value for use inside a PostgREST logical filter.

    Commas, parentheses and dots are filter syntax unless the value is
    double-quoted; backslashes and quotes inside it are escaped.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_search_filter(pattern: str) -> str:
    """Build an or=(...) filter matching pattern against title or description."""
    quoted = quote_filter_value(pattern)
    return f"title.imatch.{quoted},description.imatch.{quoted}"


class TaskRepository(BaseRepository[Task]):
    """
    Repository for task data access. Satisfies ITaskRepository.

    Every query on an existing task filters on id AND user_id, so
    existence and ownership are checked by the same statement.
    """

    def create(self, data: dict[str, Any]) -> Task:
        """
        Create a new task record.

        Args:
            data: Column values (user_id, title, description, status, priority, due_date)

        Returns:
            Created Task with generated ID and timestamps.
        """
        query = self._db.table(TASKS_TABLE).insert(data)
        result = self._execute(query, "tasks.create")
        return self._map_to_task(result.data[0])

    def get_owned(self, task_id: str, user_id: str) -> Optional[Task]:
        query = (
            self._db.table(TASKS_TABLE)
            .select("*")
            .eq("id", task_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        result = self._execute_by_id(query, "tasks.get_owned")
        if not result or not result.data:
            return None
        return self._map_to_task(result.data[0])

    def count_owned(self, user_id: str, pattern: Optional[str] = None) -> int:
        query = self._db.table(TASKS_TABLE).select("id", count="exact").eq("user_id", user_id)
        if pattern:
            query = query.or_(build_search_filter(pattern))

        result = self._execute(query, "tasks.count_owned")
        return result.count or 0

    def list_owned(
        self,
        user_id: str,
        offset: int,
        limit: int,
        pattern: Optional[str] = None,
    ) -> list[Task]:
        """
        List one page of a user's tasks, newest first.

        Args:
            user_id: The owner's ID.
            offset: Rows to skip.
            limit: Maximum rows to return.
            pattern: Optional case-insensitive regex (already escaped).

        Returns:
            Tasks in the requested window.
        """
        query = self._db.table(TASKS_TABLE).select("*").eq("user_id", user_id)
        if pattern:
            query = query.or_(build_search_filter(pattern))

        query = (
            query.order("created_at", desc=True)
            .order("id", desc=True)
            .range(offset, offset + limit - 1)
        )
        result = self._execute(query, "tasks.list_owned")
        return [self._map_to_task(row) for row in result.data]

    def update_owned(
        self,
        task_id: str,
        user_id: str,
        fields: dict[str, Any],
    ) -> Optional[Task]:
        """
        Update selected columns of a task owned by user_id.

        Returns:
            The updated Task, or None if no owned task matched.
        """
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()

        query = (
            self._db.table(TASKS_TABLE)
            .update(data)
            .eq("id", task_id)
            .eq("user_id", user_id)
        )
        result = self._execute_by_id(query, "tasks.update_owned")
        if not result or not result.data:
            return None
        return self._map_to_task(result.data[0])

    def delete_owned(self, task_id: str, user_id: str) -> Optional[Task]:
        """
        Delete a task owned by user_id.

        Returns:
            The deleted Task as it was last stored, or None if no owned task matched.
        """
        query = (
            self._db.table(TASKS_TABLE)
            .delete()
            .eq("id", task_id)
            .eq("user_id", user_id)
        )
        result = self._execute_by_id(query, "tasks.delete_owned")
        if not result or not result.data:
            return None
        return self._map_to_task(result.data[0])

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _execute_by_id(self, query: Any, operation: str) -> Any:
        """Execute a query keyed by task id; a malformed id matches nothing."""
        try:
            return self._execute(query, operation)
        except StoreError as e:
            if e.db_code == INVALID_TEXT_REPRESENTATION:
                return None
            raise

    def _map_to_task(self, data: dict[str, Any]) -> Task:
        """Map database row to Task model."""
        return Task(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            title=data["title"],
            description=data.get("description"),
            status=TaskStatus(data.get("status") or TaskStatus.PENDING.value),
            priority=TaskPriority(data.get("priority") or TaskPriority.MEDIUM.value),
            due_date=data.get("due_date"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
