"""Domain errors and their translation into the JSON error envelope.

Services raise the ``QuestionBankError`` subclasses below at the point of
detection. Only the handlers registered here know about HTTP status codes.
Every non-2xx response has the shape::

    {"timestamp": ..., "status": 404, "error": "Not Found",
     "message": "Category not found with id: '...'", "path": "/api/categories/..."}
"""

from __future__ import annotations

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from questionbank.core.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class QuestionBankError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuestionBankError):
    """Malformed input: bad enum value, out-of-range limit, bad field."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(QuestionBankError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, field: str, value: Any) -> None:
        super().__init__(f"{resource} not found with {field}: '{value}'")
        self.resource = resource
        self.field = field
        self.value = value


class DuplicateResourceError(QuestionBankError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, resource: str, field: str, value: Any) -> None:
        super().__init__(f"{resource} with {field} '{value}' already exists")
        self.resource = resource
        self.field = field
        self.value = value


class ConflictError(QuestionBankError):
    """A state-dependent rule was violated, e.g. deleting a non-empty category."""

    status_code = status.HTTP_409_CONFLICT


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str


def build_error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=reason,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def question_bank_error_handler(request: Request, exc: QuestionBankError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        status=exc.status_code,
        message=exc.message,
    )
    return build_error_response(request, exc.status_code, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        cause = error.get("ctx", {}).get("error")
        # Our own field validators raise ValueError with a ready message
        if error.get("type") == "value_error" and cause is not None:
            errors[field] = str(cause)
        else:
            errors[field] = error.get("msg", "Invalid value")
    return build_error_response(
        request, status.HTTP_400_BAD_REQUEST, f"Validation failed: {errors}"
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return build_error_response(request, exc.status_code, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
    return build_error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuestionBankError, question_bank_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
