"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests: a fixed
reference instant, factories for normalized sessions and student profiles,
and raw camelCase records as delivered by the persistence layer.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root BEFORE the settings are imported
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

# Calendar arithmetic in the tests assumes UTC, whatever .env says
os.environ["ANALYTICS_TIMEZONE"] = "UTC"
os.environ["DEBUG"] = "false"

from app.enums.analytics import SessionKind  # noqa: E402
from app.models.analytics import StudentProfile, StudySession  # noqa: E402


# ============================================================================
# Reference Instants
# ============================================================================


@pytest.fixture
def reference() -> datetime:
    """Thursday 9 January 2025, 12:00 UTC (ISO week 6-12 January)."""
    return datetime(2025, 1, 9, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def monday_reference() -> datetime:
    """Monday 6 January 2025, 09:00 UTC (first day of the week)."""
    return datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


# ============================================================================
# Session and Profile Factories
# ============================================================================


@pytest.fixture
def make_session(reference: datetime) -> Callable[..., StudySession]:
    """
    Factory for normalized sessions.

    days_ago is counted from the reference instant; occurred_at overrides it.
    """

    def _make(
        subject: str = "Mathematics",
        topic: str = "Algebra",
        solved: int = 10,
        correct: int = 8,
        duration: int = 30,
        days_ago: int = 0,
        occurred_at: Optional[datetime] = None,
        kind: SessionKind = SessionKind.PRACTICE,
    ) -> StudySession:
        return StudySession(
            subject=subject,
            topic=topic,
            duration_minutes=duration,
            questions_solved=solved,
            questions_correct=correct,
            occurred_at=occurred_at or reference - timedelta(days=days_ago),
            kind=kind,
        )

    return _make


@pytest.fixture
def make_profile() -> Callable[..., StudentProfile]:
    """Factory for ingested student profiles."""

    def _make(
        sessions: tuple = (),
        name: str = "Ada",
        weekly_goal: int = 100,
        class_name: Optional[str] = "12-A",
        student_id: str = "student-1",
        unlocked: frozenset = frozenset(),
    ) -> StudentProfile:
        return StudentProfile(
            id=student_id,
            name=name,
            weekly_goal=weekly_goal,
            class_name=class_name,
            sessions=tuple(sessions),
            unlocked_achievements=unlocked,
        )

    return _make


# ============================================================================
# Raw Records
# ============================================================================


@pytest.fixture
def raw_session() -> dict[str, Any]:
    """A raw study session document with a timestamp-style date."""
    return {
        "id": "s1",
        "subject": "Mathematics",
        "topic": "Algebra",
        "durationInMinutes": 45,
        "questionsSolved": 20,
        "questionsCorrect": 15,
        # 2025-01-08 00:00:00 UTC
        "date": {"seconds": 1736294400, "nanoseconds": 0},
        "type": "practice",
    }


@pytest.fixture
def raw_student(raw_session: dict[str, Any]) -> dict[str, Any]:
    """A raw student document with one valid and two unusable sessions."""
    return {
        "id": "student-1",
        "name": "Ada",
        "weeklyQuestionGoal": 100,
        "className": "12-A",
        "studySessions": [
            raw_session,
            {**raw_session, "id": "s2", "date": "not a date"},
            {**raw_session, "id": "s3", "date": None},
        ],
        "unlockedAchievements": ["first-step"],
        "email": "ada@example.com",
    }
