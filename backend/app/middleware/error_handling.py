"""
Error Handling Middleware

Converts errors raised at the HTTP boundary into a consistent JSON body.
The analytics services never raise for bad data (they exclude, clamp or
return empty results); errors only originate in the request handling around
them, e.g. a reference instant that cannot be interpreted.

Response format:
    {
        "error": "validation_error",      # error code
        "message": "...",                 # human-readable message
        "error_id": "1a2b3c4d",           # correlation id, also logged
        "details": {...} | null,
        "timestamp": "2025-01-09T12:00:00+00:00"
    }

Usage:
    from app.middleware.error_handling import ValidationError, setup_error_handling

    setup_error_handling(app, debug=settings.DEBUG)

    raise ValidationError("Invalid reference instant", details={"reference": raw})

Exception handling hierarchy:
    - HTTPException: Re-raised for FastAPI's built-in handler
    - ServiceError: Structured JSON response with the error's status code
    - Exception: Catch-all, sanitized 500 response
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# =============================================================================
# Error Response Schema
# =============================================================================


class ErrorResponse(BaseModel):
    """Standardized error response (documents the JSON body in OpenAPI)."""

    error: str  # Error code (e.g., "validation_error")
    message: str
    error_id: str  # For log correlation
    details: Optional[dict] = None
    timestamp: datetime


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for errors surfaced to API clients.

    Subclasses set status_code and error_code. Details are only returned to
    the client in debug mode unless expose_details is set.
    """

    status_code: int = 500
    error_code: str = "service_error"
    expose_details: bool = False

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class ValidationError(ServiceError):
    """
    Request data that passed schema validation but cannot be interpreted.

    Raised e.g. for a reference instant in an unsupported format. The
    offending input is echoed back in details.
    """

    status_code = 422
    error_code = "validation_error"
    expose_details = True


# =============================================================================
# Error Handling Middleware
# =============================================================================


def _error_body(
    error_code: str, message: str, error_id: str, details: Optional[dict]
) -> dict:
    return ErrorResponse(
        error=error_code,
        message=message,
        error_id=error_id,
        details=details,
        timestamp=datetime.now(timezone.utc),
    ).model_dump(mode="json")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details unless debug is enabled
    """

    def __init__(self, app, debug: bool = False):
        """
        Initialize middleware.

        Args:
            app: FastAPI/Starlette application
            debug: Whether to include details and tracebacks in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            return await call_next(request)

        except HTTPException:
            raise

        except ServiceError as e:
            logger.warning(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            details = e.details if (self.debug or e.expose_details) else None
            return JSONResponse(
                status_code=e.status_code,
                content=_error_body(e.error_code, e.message, error_id, details),
            )

        except Exception as e:
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )
            details = None
            if self.debug:
                details = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }
            return JSONResponse(
                status_code=500,
                content=_error_body(
                    "internal_server_error",
                    "An unexpected error occurred",
                    error_id,
                    details,
                ),
            )


# =============================================================================
# Setup Function
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include details and tracebacks in responses
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")
