"""
Health check endpoint.

Provides an endpoint for monitoring application liveness.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..dependencies import ServiceContainer, get_container

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    message: str
    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running. Does not touch the database.
    """
    return HealthResponse(
        message="Server is running",
        status="healthy",
        version=container.settings.app_version,
    )
