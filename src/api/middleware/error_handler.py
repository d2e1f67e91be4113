"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    CatalogInUseError,
    ConfigurationError,
    DuplicateStockError,
    HasActiveReservationsError,
    InsufficientReservationError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidStateError,
    LedgerError,
    NotFoundError,
    OverReleaseError,
    StorageError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidQuantityError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    InsufficientReservationError: status.HTTP_409_CONFLICT,
    OverReleaseError: status.HTTP_409_CONFLICT,
    HasActiveReservationsError: status.HTTP_409_CONFLICT,
    DuplicateStockError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_409_CONFLICT,
    CatalogInUseError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "MATERIAL_NOT_FOUND": "Check the material ID and try GET /api/catalog to list materials.",
    "STOCK_NOT_FOUND": "Create the stock row first, e.g. POST /api/stock/initialize.",
    "ASSIGNMENT_NOT_FOUND": "Check the assignment ID and try GET /api/assignments?project_id=...",
    "INVALID_QUANTITY": "Quantities must be greater than zero.",
    "INSUFFICIENT_STOCK": "Receive more stock or reduce the requested quantity.",
    "INSUFFICIENT_RESERVATION": "Only reserved quantity can be consumed. Reserve it first.",
    "OVER_RELEASE": "Release at most the currently reserved quantity.",
    "HAS_ACTIVE_RESERVATIONS": "Unreserve or install the project assignments first.",
    "DUPLICATE_STOCK": "The material already has a stock row. Use GET /api/stock/{material_id}.",
    "INVALID_STATE": "Check the assignment status. Installed and cancelled assignments are final.",
    "DUPLICATE_ASSIGNMENT": "Edit the existing assignment's quantity instead of creating a new one.",
    "CATALOG_IN_USE": "Settle or unreserve the material's project assignments first.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
    "KeyError": "The requested key was not found.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current stock state. Re-read and retry.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(request: Request, exc: Exception, status_code: int) -> JSONResponse:
    # Prefer LedgerError.code, fall back to class name
    if isinstance(exc, LedgerError):
        error_code = exc.code
        message = exc.message
        detail = ", ".join(f"{k}={v}" for k, v in exc.details.items()) or None
    else:
        error_code = exc.__class__.__name__
        message = str(exc)
        detail = None

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            detail=detail,
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions to standardized JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Convert exception to standardized JSON response."""
        status_code = _status_for(exc)
        request_id = getattr(request.state, "request_id", None)

        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=request.url.path,
            error_type=exc.__class__.__name__,
            error=str(exc),
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        return _error_response(request, exc, status_code)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(LedgerError)
    async def ledger_exception_handler(
        request: Request,
        exc: LedgerError,
    ) -> JSONResponse:
        """Handle domain errors, keeping their quantities in the message."""
        status_code = _status_for(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(
            "ledger_error",
            path=request.url.path,
            error_code=exc.code,
            status=status_code,
            reason=exc.message,
        )
        return _error_response(request, exc, status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code, exc.detail or "")
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int, detail: str) -> str:
    """Infer a machine-readable error code from HTTPException detail."""
    detail_lower = detail.lower()

    if status_code == 404:
        if "assignment" in detail_lower:
            return "ASSIGNMENT_NOT_FOUND"
        if "stock" in detail_lower:
            return "STOCK_NOT_FOUND"
        if "material" in detail_lower:
            return "MATERIAL_NOT_FOUND"
        return "NOT_FOUND"

    if status_code == 400:
        return "BAD_REQUEST"

    if status_code == 409:
        return "CONFLICT"

    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"

    return "HTTP_ERROR"
