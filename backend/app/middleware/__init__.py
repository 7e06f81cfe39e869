"""
Middleware Package

Provides FastAPI middleware for:
- Error handling
"""

from app.middleware.error_handling import (
    ErrorHandlingMiddleware,
    ServiceError,
    ValidationError,
    setup_error_handling,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "ServiceError",
    "ValidationError",
    "setup_error_handling",
]
