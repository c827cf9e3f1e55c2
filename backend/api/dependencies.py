"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and the container creates the concrete implementations.

One container is built per application by create_app() and stored on
app.state; route handlers reach it through the Depends() functions below.
There is no module-level container.
"""

from typing import TYPE_CHECKING, Optional

from fastapi import Depends, Request

from shared.config import Settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from modules.auth.interfaces import IAuthService, IUserRepository
    from modules.tasks.interfaces import ITaskService, ITaskRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access and
    cached within the container.

    Repositories can be injected (tests pass in-memory ones); otherwise
    Supabase-backed repositories are built from settings on first use.
    """

    def __init__(
        self,
        settings: Settings,
        user_repository: "Optional[IUserRepository]" = None,
        task_repository: "Optional[ITaskRepository]" = None,
    ) -> None:
        self.settings = settings
        self._db: "Client | None" = None
        self._user_repository = user_repository
        self._task_repository = task_repository
        self._auth_service: "IAuthService | None" = None
        self._task_service: "ITaskService | None" = None

    @property
    def db(self) -> "Client":
        """Get the Supabase client, creating it on first use."""
        if self._db is None:
            from shared.database import create_supabase_client
            self._db = create_supabase_client(self.settings)
        return self._db

    @property
    def user_repository(self) -> "IUserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            from modules.auth.repository import UserRepository
            self._user_repository = UserRepository(self.db)
        return self._user_repository

    @property
    def task_repository(self) -> "ITaskRepository":
        """Get the task repository instance."""
        if self._task_repository is None:
            from modules.tasks.repository import TaskRepository
            self._task_repository = TaskRepository(self.db)
        return self._task_repository

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                users=self.user_repository,
                settings=self.settings,
            )
        return self._auth_service

    @property
    def tasks(self) -> "ITaskService":
        """Get the task service instance."""
        if self._task_service is None:
            from modules.tasks.service import TaskService
            self._task_service = TaskService(
                repository=self.task_repository,
                settings=self.settings,
            )
        return self._task_service


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency for the application's service container."""
    return request.app.state.container


def get_auth_service(
    container: ServiceContainer = Depends(get_container),
) -> "IAuthService":
    """FastAPI dependency for auth service."""
    return container.auth


def get_task_service(
    container: ServiceContainer = Depends(get_container),
) -> "ITaskService":
    """FastAPI dependency for task service."""
    return container.tasks
