"""
Domain errors and standardized error responses for the journal service.

Every failure a user can see is a ``JournalError`` subclass carrying its
error code, HTTP status and a user-facing message. The exception handlers
registered by ``register_exception_handlers`` turn them into the standard
envelope, with the request's correlation ID attached:

    {"error": {"code": "...", "message": "...", "details": {...},
               "correlation_id": "..."}}

Usage:
    from mindful_journal.shared.errors import EntryWriteError

    raise EntryWriteError("Failed to save entry. Please try again.")
"""

import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger("MindfulJournal.Errors")


class ErrorCode(str, Enum):
    """Error codes used in error envelopes."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class JournalError(Exception):
    """Base class for errors surfaced to the user."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ConfigurationError(JournalError):
    """A required setting (API key, backend URL) is missing."""

    code = ErrorCode.CONFIGURATION_ERROR
    default_message = "Service is not configured"


class AuthenticationError(JournalError):
    """Invalid credentials or a rejected sign-in / sign-up."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401
    default_message = "Login failed"


class EmailConfirmationRequired(AuthenticationError):
    """Sign-up succeeded but the account must be confirmed by email first."""

    code = ErrorCode.CONFLICT
    status_code = 409
    default_message = (
        "Account created! Please check your email to confirm your account before logging in."
    )


class NotAuthenticatedError(JournalError):
    code = ErrorCode.UNAUTHORIZED
    status_code = 401
    default_message = "Authentication required"


class InputValidationError(JournalError):
    """Form or editor input rejected before anything is sent to a backend."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 422
    default_message = "Invalid input"


class EntryNotFoundError(JournalError):
    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Entry not found"


class EntryFetchError(JournalError):
    code = ErrorCode.DATABASE_ERROR
    default_message = "Failed to load entries"


class EntryWriteError(JournalError):
    """Save or delete rejected by the backend."""

    code = ErrorCode.DATABASE_ERROR
    default_message = "Failed to save entry. Please try again."


class AnalysisError(JournalError):
    """The analysis endpoint failed or returned nothing usable."""

    code = ErrorCode.EXTERNAL_SERVICE_ERROR
    status_code = 502
    default_message = "Failed to analyze entry. Please try again."


class AnalysisInputTooShort(AnalysisError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = 422
    default_message = "Entry too short to analyze"


# =============================================================================
# RESPONSE HELPERS
# =============================================================================

class ErrorDetail(BaseModel):
    """Structured error detail model."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    correlation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""
    error: ErrorDetail


# OpenAPI documentation of the envelope for the journal routes
ERROR_RESPONSES: dict[int, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Not signed in or login rejected"},
    404: {"model": ErrorResponse, "description": "Entry not found"},
    422: {"model": ErrorResponse, "description": "Invalid request or form input"},
    500: {"model": ErrorResponse, "description": "Backend or configuration failure"},
    502: {"model": ErrorResponse, "description": "Analysis service failure"},
}


def get_correlation_id(request: Optional[Request] = None) -> Optional[str]:
    """Extract the correlation ID set by the correlation middleware."""
    if request is None:
        return None
    return getattr(request.state, "correlation_id", None)


def error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a standardized JSON error response.

    Args:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code
        details: Optional additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with standardized error format
    """
    error_detail = ErrorDetail(
        code=code.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": error_detail.model_dump(exclude_none=True)},
    )


def internal_error(
    message: str = "Internal server error",
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a 500 internal error response.

    Note: never pass internal exception text here, it reaches the client.
    """
    return error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message=message,
        status_code=500,
        correlation_id=correlation_id,
    )


async def journal_error_handler(request: Request, exc: JournalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    return error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=get_correlation_id(request),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body and parameter errors in the journal envelope."""
    field_errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message="Request validation failed.",
        status_code=422,
        details={"errors": field_errors},
        correlation_id=get_correlation_id(request),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_error(correlation_id=get_correlation_id(request))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handlers to the application."""
    app.add_exception_handler(JournalError, journal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
