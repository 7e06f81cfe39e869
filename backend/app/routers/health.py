"""
Health Check Endpoints

Provides health check endpoints for monitoring and orchestration.

Endpoints:
- GET /api/health - Basic health check
"""

from fastapi import APIRouter

from app.config import settings

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check():
    """
    Basic health check.

    The analytics engine has no external dependencies to probe, so this
    also serves as the readiness check.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "timezone": settings.ANALYTICS_TIMEZONE,
    }
