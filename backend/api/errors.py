"""
Exception handlers.

Translates domain exceptions into HTTP responses with the standard
envelope: {"message": ..., "error": <code>, "errors": [...]}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    InternalError,
    NotFoundError,
    TaskflowError,
    ValidationError,
)
from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; first matching base wins
STATUS_BY_ERROR: tuple[tuple[type[TaskflowError], int], ...] = (
    (ValidationError, 400),
    (ConflictError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (ConfigurationError, 500),
    (InternalError, 500),
)


def status_for(exc: TaskflowError) -> int:
    """Return the HTTP status code for a domain exception."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _format_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def handle_taskflow_error(request: Request, exc: TaskflowError) -> JSONResponse:
    status_code = status_for(exc)
    headers = None

    if status_code >= 500:
        logger.error(
            "%s on %s %s: %s (%s)",
            exc.code, request.method, request.url.path, exc.message, exc.details,
        )
    elif status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


async def handle_request_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render FastAPI's request validation failures as 400 with a list of messages."""
    body = ErrorResponse(
        message="Validation Error",
        error="VALIDATION_ERROR",
        errors=[_format_validation_error(e) for e in exc.errors()],
    )
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(message="Internal server error", error="INTERNAL_ERROR")
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""
    app.add_exception_handler(TaskflowError, handle_taskflow_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
