"""
Tasks module exceptions.
"""

from shared.exceptions import NotFoundError


class TaskNotFoundError(NotFoundError):
    """
    Raised when a task does not exist or belongs to another user.

    Both cases produce the same error so that other users' task ids
    cannot be probed.
    """

    def __init__(self, task_id: str):
        super().__init__(
            "Task not found",
            code="TASK_NOT_FOUND",
            details={"task_id": task_id},
        )
