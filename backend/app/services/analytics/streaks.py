"""
Streak Calculation

Consecutive-day study streaks for the dashboard streak widget and the
streak achievements.

Responsibilities:
- Calculate the current streak anchored at today or yesterday
- Calculate the longest streak ever achieved
- Track streak milestones
- Count study days in the current week and month

Days are calendar days in the reporting timezone. Sessions dated after the
reference instant are ignored.

Usage:
    from app.services.analytics.streaks import get_streak_data

    streak = get_streak_data(profile.sessions, reference)
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Optional

from app.config import settings
from app.models.analytics import StreakData, StudySession
from app.services.analytics.dates import calendar_day

logger = logging.getLogger(__name__)


def study_days(sessions: Iterable[StudySession], today: Optional[date] = None) -> list[date]:
    """
    Unique calendar days with at least one session, most recent first.

    Args:
        sessions: Normalized sessions.
        today: When given, days after it are excluded.
    """
    days = {calendar_day(s.occurred_at) for s in sessions}
    if today is not None:
        days = {d for d in days if d <= today}
    return sorted(days, reverse=True)


def _current_streak(days: list[date], today: date) -> tuple[int, Optional[date]]:
    """
    Count consecutive study days ending at the most recent one.

    Args:
        days: Unique study days in descending order.
        today: Current calendar day.

    Returns:
        tuple[int, Optional[date]]: streak length and the day it began.
    """
    if not days:
        return 0, None

    most_recent = days[0]
    if most_recent < today - timedelta(days=1):
        # Streak is broken, not merely absent
        return 0, None

    streak = 0
    streak_start = None
    expected = most_recent
    for day in days:
        if day != expected:
            break
        streak += 1
        streak_start = day
        expected = day - timedelta(days=1)

    return streak, streak_start


def current_streak(sessions: Iterable[StudySession], reference: datetime) -> int:
    """
    Current consecutive-day streak as of the reference instant.

    Returns 0 when there are no sessions or when the most recent study day is
    more than one calendar day before the reference day.
    """
    today = calendar_day(reference)
    streak, _ = _current_streak(study_days(sessions, today), today)
    return streak


def _longest_run(days: Iterable[date]) -> int:
    ordered = sorted(set(days))
    if not ordered:
        return 0

    longest = 1
    current = 1
    for i in range(1, len(ordered)):
        if ordered[i] == ordered[i - 1] + timedelta(days=1):
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def longest_streak(
    sessions: Iterable[StudySession], reference: Optional[datetime] = None
) -> int:
    """Longest run of consecutive study days (up to the reference, if given)."""
    today = calendar_day(reference) if reference is not None else None
    return _longest_run(study_days(sessions, today))


def get_streak_data(sessions: Iterable[StudySession], reference: datetime) -> StreakData:
    """
    Get detailed streak information.

    Args:
        sessions: Normalized sessions of one student.
        reference: Instant treated as "now".

    Returns:
        StreakData with current and longest streak, milestones and the number
        of study days in the current ISO week and calendar month.
    """
    milestones = sorted(settings.STREAK_MILESTONES)
    today = calendar_day(reference)
    days = study_days(sessions, today)

    if not days:
        return StreakData(
            current_streak=0,
            longest_streak=0,
            milestones_reached=[],
            next_milestone=milestones[0] if milestones else None,
        )

    streak, streak_start = _current_streak(days, today)
    longest = _longest_run(days)

    reached = [m for m in milestones if longest >= m]
    next_milestone = next((m for m in milestones if m > streak), None)

    week_start = today - timedelta(days=today.weekday())
    month_start = today.replace(day=1)

    logger.debug(f"Streak as of {today}: current={streak}, longest={longest}")

    return StreakData(
        current_streak=streak,
        longest_streak=longest,
        streak_start=streak_start,
        last_study_day=days[0],
        is_active_today=days[0] == today,
        days_this_week=len([d for d in days if d >= week_start]),
        days_this_month=len([d for d in days if d >= month_start]),
        milestones_reached=reached,
        next_milestone=next_milestone,
    )
