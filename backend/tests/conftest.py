"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt  # PyJWT
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer
from modules.auth.service import AuthService
from modules.tasks.service import TaskService
from shared.config import Settings
from tests.fakes import InMemoryTaskRepository, InMemoryUserRepository


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env, with fast bcrypt."""
    values = {"jwt_secret": TEST_JWT_SECRET, "bcrypt_rounds": 4}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Create a test session token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        secret: Signing secret
        issued_at: Issue time (defaults to now)

    Returns:
        JWT token string
    """
    now = issued_at or datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(days=7)

    payload = {
        "sub": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def task_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def auth_service(user_repository, settings) -> AuthService:
    return AuthService(users=user_repository, settings=settings)


@pytest.fixture
def task_service(task_repository, settings) -> TaskService:
    return TaskService(repository=task_repository, settings=settings)


@pytest.fixture
def container(settings, user_repository, task_repository) -> ServiceContainer:
    return ServiceContainer(
        settings,
        user_repository=user_repository,
        task_repository=task_repository,
    )


@pytest.fixture
def app(container):
    """Create a fresh app wired to in-memory repositories."""
    return create_app(container=container)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def registered_user(client) -> dict:
    """Register a user through the API and return the signup credentials."""
    credentials = {"name": "Jane", "email": "jane@x.com", "password": "secret1"}
    response = client.post("/api/user/signup", json=credentials)
    assert response.status_code == 201
    return {**credentials, "id": response.json()["user"]["id"]}


@pytest.fixture
def auth_headers(client, registered_user) -> dict[str, str]:
    """Log the registered user in and return authorization headers."""
    response = client.post(
        "/api/user/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
