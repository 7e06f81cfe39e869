"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Analytics thresholds live here so that risk rules, exam scoring and rankings
can be tuned per deployment without touching the rule code.

Usage:
    from app.config import settings

    # Access settings
    tz = settings.reporting_tz
    warning_below = settings.ACCURACY_WARNING_THRESHOLD
"""

from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Study Analytics"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Calendar days, week boundaries and naive timestamps are all
    # interpreted in this timezone.
    ANALYTICS_TIMEZONE: str = "UTC"

    # Session ingestion
    DEFAULT_TOPIC: str = "General"

    # Goal miss risk (fractions of the weekly goal)
    GOAL_MISS_ELAPSED_FRACTION: float = 0.5
    GOAL_MISS_WARNING_PROGRESS: float = 0.40
    GOAL_MISS_CRITICAL_PROGRESS: float = 0.20

    # Accuracy drop risk (percentages)
    ACCURACY_WARNING_THRESHOLD: float = 60.0
    ACCURACY_CRITICAL_THRESHOLD: float = 40.0
    RISK_MIN_QUESTIONS: int = 1

    # Inefficient study risk
    INEFFICIENT_MIN_DURATION: int = 90  # minutes
    INEFFICIENT_MAX_ACCURACY: float = 65.0

    # Inconsistent study risk
    INACTIVITY_DAYS: int = 3

    # Exam scoring
    EXAM_WRONG_ANSWER_PENALTY: float = 0.25
    EXAM_STRENGTH_THRESHOLD: float = 75.0
    EXAM_WEAKNESS_THRESHOLD: float = 60.0
    EXAM_MAX_WEAKNESSES: int = 3

    # Topic rankings ("most challenging" / "easiest")
    RANKING_MIN_SOLVED: int = 20
    RANKING_TOP_N: int = 10

    # Streaks
    STREAK_MILESTONES: list[int] = [3, 7, 14, 30, 60, 100]

    # Achievements
    ACHIEVEMENT_SUBJECT: str = "Mathematics"
    ACHIEVEMENT_SUBJECT_MIN_SESSIONS: int = 3
    ACHIEVEMENT_SUBJECT_MIN_ACCURACY: float = 90.0

    # Cohort overview
    COHORT_LEADERBOARD_SIZE: int = 5
    COHORT_INACTIVE_DAYS: int = 7
    COHORT_DEFAULT_GROUP: str = "Other"
    PERFORMANCE_DROP_MIN_SOLVED: int = 10
    PERFORMANCE_DROP_THRESHOLD: float = 10.0  # percentage points

    @property
    def reporting_tz(self) -> ZoneInfo:
        """Timezone used for calendar-day arithmetic."""
        return ZoneInfo(self.ANALYTICS_TIMEZONE)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load display configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
