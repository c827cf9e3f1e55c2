"""
Taskflow API package.

Provides the FastAPI application factory for the Taskflow task service.
"""

from .app import create_app

__all__ = ["create_app"]
