"""
Centralized enum definitions for the application.

All enums are organized by domain:
- analytics.py: Session kinds, reporting windows, quadrants, risks, mistake categories

Usage:
    from app.enums import WindowKind, Quadrant, RiskId

    # Or import from specific module
    from app.enums.analytics import RiskSeverity
"""

from app.enums.analytics import (
    SessionKind,
    WindowKind,
    WindowDirection,
    Quadrant,
    RiskId,
    RiskSeverity,
    ErrorCategory,
)

__all__ = [
    # Analytics enums
    "SessionKind",
    "WindowKind",
    "WindowDirection",
    "Quadrant",
    "RiskId",
    "RiskSeverity",
    "ErrorCategory",
]
