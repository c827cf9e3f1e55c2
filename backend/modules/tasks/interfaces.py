"""
Tasks module interface.

Defines the contract for task operations and for the task store.
"""

from typing import Any, Protocol, Optional, runtime_checkable

from .models import CreateTaskRequest, Task, TaskPage, UpdateTaskRequest


@runtime_checkable
class ITaskService(Protocol):
    """
    Interface for task operations.

    Every method takes the caller's user id, taken from a verified
    session claim. A task owned by someone else behaves exactly like
    a task that does not exist.
    """

    async def create_task(self, user_id: str, request: CreateTaskRequest) -> Task:
        """
        Create a task owned by user_id.

        Raises:
            ValidationError: If the title is blank
        """
        ...

    async def list_tasks(
        self,
        user_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
    ) -> TaskPage:
        """
        List the user's tasks, newest first.

        page and limit are clamped, never rejected. A non-blank search
        keeps tasks whose title or description contains it (case-insensitive).
        """
        ...

    async def get_task(self, user_id: str, task_id: str) -> Task:
        """
        Raises:
            TaskNotFoundError: If missing or not owned by user_id
        """
        ...

    async def update_task(
        self,
        user_id: str,
        task_id: str,
        request: UpdateTaskRequest,
    ) -> Task:
        """
        Apply only the fields present in request.

        Raises:
            ValidationError: On a blank title or a null status/priority
            TaskNotFoundError: If missing or not owned by user_id
        """
        ...

    async def delete_task(self, user_id: str, task_id: str) -> Task:
        """
        Permanently delete a task and return its last state.

        Raises:
            TaskNotFoundError: If missing or not owned by user_id
        """
        ...


@runtime_checkable
class ITaskRepository(Protocol):
    """
    Task store contract.

    Every method that touches an existing task takes both task_id and
    user_id and matches on both in a single operation.
    """

    def create(self, data: dict[str, Any]) -> Task:
        ...

    def get_owned(self, task_id: str, user_id: str) -> Optional[Task]:
        ...

    def count_owned(self, user_id: str, pattern: Optional[str] = None) -> int:
        """Count the user's tasks, optionally filtered by a search regex."""
        ...

    def list_owned(
        self,
        user_id: str,
        offset: int,
        limit: int,
        pattern: Optional[str] = None,
    ) -> list[Task]:
        """
        Return one slice of the user's tasks, newest first.

        pattern is a case-insensitive regular expression matched against
        title and description; callers escape user input before passing it.
        """
        ...

    def update_owned(
        self,
        task_id: str,
        user_id: str,
        fields: dict[str, Any],
    ) -> Optional[Task]:
        ...

    def delete_owned(self, task_id: str, user_id: str) -> Optional[Task]:
        ...
