"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging
from decimal import Decimal
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger("contaedu.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InsufficientPermissionsError(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class TokenRevokedError(AppException):
    """Raised when token has been revoked."""

    def __init__(self):
        super().__init__(
            message="Token has been revoked",
            error_code="ERR_AUTH_002",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


# Ledger errors

class InsufficientLinesError(AppException):
    """Fewer than two lines with a nonzero amount were submitted."""

    def __init__(self, line_count: int):
        super().__init__(
            message=f"A journal entry needs at least 2 lines with an amount (received {line_count})",
            error_code="ERR_LEDGER_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"line_count": line_count}
        )


class UnbalancedEntryError(AppException):
    """Debit and credit totals differ by more than the rounding tolerance."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.delta = abs(total_debit - total_credit)
        super().__init__(
            message=f"The journal entry is not balanced (difference {self.delta:.2f})",
            error_code="ERR_LEDGER_002",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={
                "total_debit": f"{total_debit:.2f}",
                "total_credit": f"{total_credit:.2f}",
                "delta": f"{self.delta:.2f}",
            }
        )


class MalformedAmountError(AppException):
    """A stored amount is not a finite, non-negative number."""

    def __init__(self, value: Any, field: str = "amount"):
        super().__init__(
            message=f"Malformed {field}: {value!r}",
            error_code="ERR_LEDGER_003",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"field": field, "value": str(value)}
        )


class EntryLockedError(AppException):
    """Journal entries of a handed-in exercise or exam are read-only."""

    def __init__(self, exercise_id: int, reason: str):
        super().__init__(
            message=f"Entries for exercise {exercise_id} are locked: {reason}",
            error_code="ERR_LEDGER_004",
            status_code=status.HTTP_409_CONFLICT,
            details={"exercise_id": exercise_id, "reason": reason}
        )


class UnsupportedDatabaseError(AppException):
    """The configured database dialect cannot allocate entry numbers."""

    def __init__(self, dialect: str):
        super().__init__(
            message=f"Entry number allocation is not supported on {dialect} (use PostgreSQL or SQLite)",
            error_code="ERR_DB_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"dialect": dialect}
        )


class InvalidStateTransitionError(AppException):
    """Raised when a workflow object cannot move to the requested state."""

    def __init__(self, message: str, current_status: str = None):
        super().__init__(
            message=message,
            error_code="ERR_STATE_001",
            status_code=status.HTTP_409_CONFLICT,
            details={"current_status": current_status}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                    for err in exc.errors()
                ]
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
