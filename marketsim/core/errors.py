"""
Custom exception hierarchy for the market reaction simulator.

Rule: every HTTP error carries a human `error` message and a
machine-readable `code` string so clients can branch without parsing text.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from marketsim.core.config import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class SimulatorException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(SimulatorException):
    """A required request field is missing or malformed."""
    http_status = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )


class StorageError(SimulatorException):
    """The underlying data-access layer failed."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_ERROR"

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            details={"operation": operation} if operation else {},
        )

    def to_dict(self) -> dict:
        payload = super().to_dict()
        # Driver messages leak table names and SQL; keep them out of production responses.
        if settings.is_production:
            payload["error"] = "A storage error occurred."
        return payload


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def simulator_exception_handler(request: Request, exc: SimulatorException) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


def _field_name(loc) -> str:
    """Dotted field path; positional parts such as JSON decode offsets are dropped."""
    return ".".join(part for part in loc if isinstance(part, str) and part != "body")


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return a 400 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": _field_name(error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })
    first = field_errors[0]["field"] if field_errors else ""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": f"Missing or invalid field: {first}" if first else "Request validation failed.",
            "code": "VALIDATION_ERROR",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "An unexpected error occurred.",
            "code": "INTERNAL_ERROR",
        },
    )
