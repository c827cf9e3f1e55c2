"""
Tasks module.

Per-user task CRUD with search and pagination.

Public API:
- ITaskService: Interface for task operations
- ITaskRepository: Task store contract
- Task, TaskStatus, TaskPriority: Task data
- TaskNotFoundError: Missing or not-owned task
"""

from .interfaces import ITaskService, ITaskRepository
from .models import (
    Task,
    TaskStatus,
    TaskPriority,
    CreateTaskRequest,
    UpdateTaskRequest,
    Pagination,
    TaskPage,
)
from .exceptions import TaskNotFoundError

__all__ = [
    # Interfaces
    "ITaskService",
    "ITaskRepository",
    # Models
    "Task",
    "TaskStatus",
    "TaskPriority",
    "CreateTaskRequest",
    "UpdateTaskRequest",
    "Pagination",
    "TaskPage",
    # Exceptions
    "TaskNotFoundError",
]
