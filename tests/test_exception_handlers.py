from __future__ import annotations

import json

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from langschool.shared.exceptions import (
    CapacityExceededException,
    ConflictException,
    InvalidStateException,
    NotFoundException,
    RateLimitException,
    ValidationException,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)


def _make_request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": []})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "status_code", "code"),
    [
        (ValidationException("bad input"), 400, "validation_error"),
        (NotFoundException("missing"), 404, "not_found"),
        (ConflictException("taken"), 409, "conflict"),
        (CapacityExceededException("full"), 409, "capacity_exceeded"),
        (InvalidStateException("wrong state"), 409, "invalid_state"),
        (RateLimitException("slow down", retry_after=30), 429, "rate_limited"),
    ],
)
async def test_domain_exceptions_render_error_envelope(exc, status_code: int, code: str) -> None:
    response = await app_exception_handler(_make_request(), exc)

    assert response.status_code == status_code
    assert json.loads(response.body) == {"error": {"code": code, "message": exc.message}}


@pytest.mark.asyncio
async def test_rate_limit_errors_tell_clients_when_to_retry() -> None:
    response = await app_exception_handler(
        _make_request(),
        RateLimitException("slow down", retry_after=42),
    )

    assert response.headers["retry-after"] == "42"


@pytest.mark.asyncio
async def test_other_domain_errors_carry_no_retry_header() -> None:
    response = await app_exception_handler(_make_request(), ConflictException("taken"))

    assert "retry-after" not in response.headers


@pytest.mark.asyncio
async def test_http_exception_keeps_status_code() -> None:
    response = await http_exception_handler(
        _make_request(),
        HTTPException(status_code=503, detail="Database is not ready"),
    )

    assert response.status_code == 503
    assert json.loads(response.body)["error"] == {
        "code": "http_error",
        "message": "Database is not ready",
    }


@pytest.mark.asyncio
async def test_unexpected_errors_hide_details() -> None:
    response = await unhandled_exception_handler(_make_request(), RuntimeError("db password leaked"))

    assert response.status_code == 500
    assert json.loads(response.body)["error"] == {
        "code": "internal_error",
        "message": "Internal server error",
    }
