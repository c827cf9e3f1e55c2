"""
Task API endpoints.

Provides REST endpoints for task CRUD operations. All routes require
authentication and only ever see the caller's own tasks.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.middleware.auth import get_current_user
from api.dependencies import get_task_service
from shared.models import AuthenticatedUser

from .interfaces import ITaskService
from .models import (
    CreateTaskRequest,
    TaskListResponse,
    TaskResponse,
    UpdateTaskRequest,
)

router = APIRouter()


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Lenient integer parsing for query parameters; garbage means 'use the default'."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    request: CreateTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ITaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Create a new task.

    Status starts as 'pending'; priority defaults to 'medium'.
    """
    task = await service.create_task(user.id, request)
    return TaskResponse(message="Task created successfully", task=task)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    page: Optional[str] = Query(default=None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(default=None, description="Items per page (max 50)"),
    search: Optional[str] = Query(default=None, description="Text to find in title or description"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: ITaskService = Depends(get_task_service),
) -> TaskListResponse:
    """
    List the current user's tasks.

    Returns paginated results, most recent first. Out-of-range page
    and limit values are clamped.
    """
    result = await service.list_tasks(
        user.id,
        page=_parse_int(page),
        limit=_parse_int(limit),
        search=search,
    )
    return TaskListResponse(
        message="Tasks fetched successfully",
        tasks=result.tasks,
        pagination=result.pagination,
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ITaskService = Depends(get_task_service),
) -> TaskResponse:
    """Get a specific task."""
    task = await service.get_task(user.id, task_id)
    return TaskResponse(message="Task fetched successfully", task=task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ITaskService = Depends(get_task_service),
) -> TaskResponse:
    """Update the fields present in the body; others are left unchanged."""
    task = await service.update_task(user.id, task_id, request)
    return TaskResponse(message="Task updated successfully", task=task)


@router.delete("/{task_id}", response_model=TaskResponse)
async def delete_task(
    task_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ITaskService = Depends(get_task_service),
) -> TaskResponse:
    """Permanently delete a task and return its last state."""
    task = await service.delete_task(user.id, task_id)
    return TaskResponse(message="Task deleted successfully", task=task)
