"""Domain exception hierarchy and HTTP handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationException(AppException):
    """Raised when input is malformed or references the wrong parent."""

    status_code = 400
    code = "validation_error"


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class ConflictException(AppException):
    """Raised when entity conflicts with a unique key."""

    status_code = 409
    code = "conflict"


class CapacityExceededException(AppException):
    """Raised when a schedule has no seats left."""

    status_code = 409
    code = "capacity_exceeded"


class InvalidStateException(AppException):
    """Raised when an entity is not in a state that allows the operation."""

    status_code = 409
    code = "invalid_state"


class RateLimitException(AppException):
    """Raised when a client exceeds its request budget."""

    status_code = 429
    code = "rate_limited"

    def __init__(self, message: str, *, retry_after: int) -> None:
        super().__init__(message)
        self.retry_after = retry_after


def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    headers = None
    if isinstance(exc, RateLimitException):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, exc.message),
        headers=headers,
    )


async def request_validation_exception_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request schema errors as 400 validation errors."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=_error_body(ValidationException.code, details or "Invalid request"),
    )


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("http_error", str(exc.detail)),
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("internal_error", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
