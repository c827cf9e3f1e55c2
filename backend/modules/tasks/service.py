"""
Tasks service implementation.

Applies ownership, search and pagination policy on top of the task store.
"""

import logging
import math
import re
from typing import Any, Optional

from shared.config import Settings
from shared.exceptions import ValidationError, raise_for_errors

from .exceptions import TaskNotFoundError
from .interfaces import ITaskRepository, ITaskService
from .models import (
    CreateTaskRequest,
    Pagination,
    Task,
    TaskPage,
    TaskPriority,
    TaskStatus,
    UpdateTaskRequest,
)

logger = logging.getLogger(__name__)

_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\]")


def escape_search_term(term: str) -> str:
    """Escape regex metacharacters so the term only matches literally."""
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), term)


def clamp_pagination(
    page: Optional[int],
    limit: Optional[int],
    default_limit: int,
    max_limit: int,
) -> tuple[int, int]:
    """
    Bring page and limit into range instead of rejecting them.

    Missing values take their defaults; page is at least 1 and limit
    is between 1 and max_limit.
    """
    page = 1 if page is None else max(page, 1)
    limit = default_limit if limit is None else min(max(limit, 1), max_limit)
    return page, limit


class TaskService(ITaskService):
    """
    Task service over an injected task repository.

    The owner id always comes from the caller's verified claim; the
    repository matches on (task id, owner id) together, so a task owned
    by someone else is reported as not found.
    """

    def __init__(self, repository: ITaskRepository, settings: Settings):
        self._tasks = repository
        self._settings = settings

    async def create_task(self, user_id: str, request: CreateTaskRequest) -> Task:
        """Create a task; status starts as pending and priority defaults to medium."""
        title = (request.title or "").strip()
        if not title:
            raise ValidationError("Please provide a task title")

        data: dict[str, Any] = {
            "user_id": user_id,
            "title": title,
            "description": _strip_optional(request.description),
            "status": TaskStatus.PENDING.value,
            "priority": (request.priority or TaskPriority.MEDIUM).value,
            "due_date": request.due_date.isoformat() if request.due_date else None,
        }
        task = self._tasks.create(data)
        logger.info("User %s created task %s", user_id, task.id)
        return task

    async def list_tasks(
        self,
        user_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
    ) -> TaskPage:
        """List tasks for a user with pagination, newest first."""
        page, limit = clamp_pagination(
            page,
            limit,
            default_limit=self._settings.tasks_default_page_size,
            max_limit=self._settings.tasks_max_page_size,
        )
        term = (search or "").strip()
        pattern = escape_search_term(term) if term else None

        total = self._tasks.count_owned(user_id, pattern)
        offset = (page - 1) * limit

        # Skip the fetch for pages past the end
        tasks = self._tasks.list_owned(user_id, offset, limit, pattern) if offset < total else []

        return TaskPage(
            tasks=tasks,
            pagination=Pagination(
                current_page=page,
                limit=limit,
                total_tasks=total,
                total_pages=math.ceil(total / limit),
            ),
        )

    async def get_task(self, user_id: str, task_id: str) -> Task:
        task = self._tasks.get_owned(task_id, user_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def update_task(
        self,
        user_id: str,
        task_id: str,
        request: UpdateTaskRequest,
    ) -> Task:
        """Apply only the fields present in the request; absent fields are left as they are."""
        present = request.model_fields_set
        updates: dict[str, Any] = {}
        errors: list[str] = []

        if "title" in present:
            title = (request.title or "").strip()
            if title:
                updates["title"] = title
            else:
                errors.append("Task title cannot be empty")
        if "description" in present:
            updates["description"] = _strip_optional(request.description)
        if "status" in present:
            if request.status is None:
                errors.append("Status cannot be null")
            else:
                updates["status"] = request.status.value
        if "priority" in present:
            if request.priority is None:
                errors.append("Priority cannot be null")
            else:
                updates["priority"] = request.priority.value
        if "due_date" in present:
            updates["due_date"] = request.due_date.isoformat() if request.due_date else None
        raise_for_errors(errors)

        if not updates:
            return await self.get_task(user_id, task_id)

        task = self._tasks.update_owned(task_id, user_id, updates)
        if task is None:
            raise TaskNotFoundError(task_id)

        logger.info("User %s updated task %s (%s)", user_id, task_id, ", ".join(sorted(updates)))
        return task

    async def delete_task(self, user_id: str, task_id: str) -> Task:
        task = self._tasks.delete_owned(task_id, user_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        logger.info("User %s deleted task %s", user_id, task_id)
        return task


def _strip_optional(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None
