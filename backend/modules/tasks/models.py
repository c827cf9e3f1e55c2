"""
Tasks module data models.

These models define the core data structures for per-user tasks.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import CamelModel


class TaskStatus(str, Enum):
    """Task progress status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(CamelModel):
    """A task owned by exactly one user."""

    id: str = Field(..., description="Task ID (UUID)")
    user_id: str = Field(..., description="Owning user ID")
    title: str = Field(..., min_length=1, description="Task title")
    description: Optional[str] = Field(None, description="Free-form description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Progress status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority")
    due_date: Optional[datetime] = Field(None, description="Optional due date")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the task was created",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last modification time",
    )


class CreateTaskRequest(CamelModel):
    """
    Request to create a task.

    The owner is never read from the request body; any userId sent
    by the client is ignored.
    """

    title: Optional[str] = Field(None, description="Task title (required, non-blank)")
    description: Optional[str] = Field(None, description="Free-form description")
    priority: Optional[TaskPriority] = Field(None, description="Defaults to medium")
    due_date: Optional[datetime] = Field(None, description="Optional due date")


class UpdateTaskRequest(CamelModel):
    """
    Partial update of a task.

    Only fields present in the payload are applied; pydantic's
    model_fields_set tells an absent field apart from an explicit null.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None


class Pagination(CamelModel):
    """Pagination info for a task listing."""

    current_page: int = Field(..., ge=1, description="Page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Items per page")
    total_tasks: int = Field(..., ge=0, description="Total matching tasks")
    total_pages: int = Field(..., ge=0, description="ceil(total_tasks / limit)")


class TaskPage(BaseModel):
    """One page of a user's tasks."""

    tasks: list[Task]
    pagination: Pagination


# Response envelopes


class TaskResponse(BaseModel):
    """Response carrying a single task."""

    message: str
    task: Task


class TaskListResponse(BaseModel):
    """Response carrying a page of tasks."""

    message: str
    tasks: list[Task]
    pagination: Pagination
