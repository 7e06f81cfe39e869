"""Weekly question goal progress."""

from collections.abc import Iterable
from datetime import datetime

from app.enums.analytics import WindowKind
from app.models.analytics import GoalProgress, StudySession
from app.services.analytics.dates import localize_reference
from app.services.analytics.time_windows import (
    filter_sessions,
    week_elapsed_fraction,
    window_for,
)


def weekly_goal_progress(
    sessions: Iterable[StudySession], weekly_goal: int, reference: datetime
) -> GoalProgress:
    """
    Progress towards the weekly goal in the ISO week containing the reference.

    Args:
        sessions: Normalized sessions of one student.
        weekly_goal: Questions the student aims to solve per week.
        reference: Instant treated as "now".

    Returns:
        GoalProgress. progress is 0 when the goal is not positive.
    """
    reference = localize_reference(reference)
    week = window_for(WindowKind.WEEK, reference)
    solved = sum(s.questions_solved for s in filter_sessions(sessions, week))
    goal = max(0, weekly_goal)
    progress = solved / goal if goal > 0 else 0.0

    return GoalProgress(
        week_start=week.start,
        week_end=week.end,
        solved_this_week=solved,
        weekly_goal=goal,
        progress=progress,
        percentage=min(progress * 100, 100.0),
        elapsed_fraction=week_elapsed_fraction(reference),
        goal_met=goal > 0 and solved >= goal,
    )
