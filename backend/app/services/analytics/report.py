"""
Student Report

Combines the analytics services into the single value the student dashboard
and report pages render.

Window-scoped (the selected, possibly paged, window):
- totals and overall accuracy
- subject and topic statistics
- quadrant matrix
- weekly accuracy trend

Relative to the reference instant over the full history:
- weekly goal progress
- streak
- risks
- achievements (with the ids not yet stored on the student)
- solved questions over the last 7 days
"""

import logging
from datetime import datetime
from typing import Optional

from app.enums.analytics import WindowDirection, WindowKind
from app.models.analytics import StudentProfile, StudentReport
from app.services.analytics.achievements import evaluate_achievements
from app.services.analytics.aggregation import (
    aggregate_by_subject,
    aggregate_by_topic,
    overall_accuracy,
)
from app.services.analytics.dates import localize_reference
from app.services.analytics.goals import weekly_goal_progress
from app.services.analytics.quadrants import build_quadrant_matrix
from app.services.analytics.risks import evaluate_risks
from app.services.analytics.streaks import get_streak_data
from app.services.analytics.time_windows import filter_sessions, shift, window_for
from app.services.analytics.trends import daily_solved_series, weekly_accuracy_trend

logger = logging.getLogger(__name__)


def build_student_report(
    profile: StudentProfile,
    reference: datetime,
    window: WindowKind = WindowKind.WEEK,
    direction: Optional[WindowDirection] = None,
) -> StudentReport:
    """
    Build the full report for one student.

    Args:
        profile: Ingested student with full history.
        reference: Instant treated as "now".
        window: Window kind selected for the window-scoped values.
        direction: Page to the previous/next window of that kind first.

    Returns:
        StudentReport.
    """
    reference = localize_reference(reference)
    window_reference = reference
    if direction is not None:
        window_reference = shift(window, reference, direction)

    time_window = window_for(window, window_reference)
    sessions = filter_sessions(profile.sessions, time_window)

    unlocked = evaluate_achievements(profile, reference)

    logger.debug(
        f"Report for {profile.name!r}: {len(sessions)} of "
        f"{len(profile.sessions)} sessions in {time_window.label}"
    )

    return StudentReport(
        student_id=profile.id,
        name=profile.name,
        window=time_window,
        total_solved=sum(s.questions_solved for s in sessions),
        total_correct=sum(s.questions_correct for s in sessions),
        total_duration=sum(s.duration_minutes for s in sessions),
        overall_accuracy=overall_accuracy(sessions),
        weekly_progress=weekly_goal_progress(profile.sessions, profile.weekly_goal, reference),
        streak=get_streak_data(profile.sessions, reference),
        subject_stats=aggregate_by_subject(sessions),
        topic_stats=aggregate_by_topic(sessions),
        quadrant_matrix=build_quadrant_matrix(sessions),
        risks=evaluate_risks(profile.sessions, profile.weekly_goal, reference),
        unlocked_achievements=sorted(unlocked),
        newly_unlocked=sorted(unlocked - profile.unlocked_achievements),
        weekly_trend=weekly_accuracy_trend(sessions),
        daily_solved=daily_solved_series(profile.sessions, reference),
    )
