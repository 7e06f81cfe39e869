"""
Cohort Overview

Cross-student statistics for the coach/administrator dashboard and reports:
- accuracy per class group
- total study minutes per subject
- most challenging and easiest topics across the cohort
- leaderboards: hardest workers this week, students who need help
- attention lists: inactive students and recent performance drops
- questions solved per weekday

A student's class group is the class name prefix before the first "-"
("12-A" -> "12"); students without a class name fall into
settings.COHORT_DEFAULT_GROUP.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from app.config import settings
from app.enums.analytics import SessionKind, WindowKind
from app.models.analytics import (
    CohortOverview,
    InactiveStudent,
    PerformanceDrop,
    StudentMetric,
    StudentProfile,
    WeekdayActivity,
)
from app.services.analytics.aggregation import (
    aggregate_by_label,
    aggregate_by_subject,
    aggregate_by_topic,
    easiest_topics,
    most_challenging_topics,
    overall_accuracy,
)
from app.services.analytics.dates import calendar_day, localize_reference
from app.services.analytics.time_windows import filter_sessions, window_for
from app.services.analytics.trends import accuracy_change

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def class_group(class_name: Optional[str]) -> str:
    """Class group of a class name ("12-A" -> "12")."""
    if not class_name:
        return settings.COHORT_DEFAULT_GROUP
    return class_name.split("-")[0] or settings.COHORT_DEFAULT_GROUP


def _hardest_workers(
    students: list[StudentProfile], reference: datetime
) -> list[StudentMetric]:
    week = window_for(WindowKind.WEEK, reference)
    metrics = [
        StudentMetric(
            student_id=student.id,
            name=student.name,
            class_group=class_group(student.class_name),
            value=sum(s.questions_solved for s in filter_sessions(student.sessions, week)),
        )
        for student in students
    ]
    metrics.sort(key=lambda m: (-m.value, m.name))
    return metrics[: settings.COHORT_LEADERBOARD_SIZE]


def _needs_help(students: list[StudentProfile]) -> list[StudentMetric]:
    metrics = [
        StudentMetric(
            student_id=student.id,
            name=student.name,
            class_group=class_group(student.class_name),
            value=overall_accuracy(student.sessions),
        )
        for student in students
        if sum(s.questions_solved for s in student.sessions) > 0
    ]
    metrics.sort(key=lambda m: (m.value, m.name))
    return metrics[: settings.COHORT_LEADERBOARD_SIZE]


def _inactive_students(
    students: list[StudentProfile], reference: datetime
) -> list[InactiveStudent]:
    today = calendar_day(reference)
    inactive = []
    for student in students:
        days = [calendar_day(s.occurred_at) for s in student.sessions]
        if not days:
            continue
        days_inactive = (today - max(days)).days
        if days_inactive > settings.COHORT_INACTIVE_DAYS:
            inactive.append(
                InactiveStudent(
                    student_id=student.id,
                    name=student.name,
                    class_group=class_group(student.class_name),
                    days_inactive=days_inactive,
                )
            )
    inactive.sort(key=lambda s: (-s.days_inactive, s.name))
    return inactive


def _performance_drops(
    students: list[StudentProfile], reference: datetime
) -> list[PerformanceDrop]:
    drops = []
    for student in students:
        change = accuracy_change(student.sessions, reference)
        if change.recent_solved <= settings.PERFORMANCE_DROP_MIN_SOLVED:
            continue
        if change.previous_solved <= settings.PERFORMANCE_DROP_MIN_SOLVED:
            continue
        if change.change >= -settings.PERFORMANCE_DROP_THRESHOLD:
            continue
        drops.append(
            PerformanceDrop(
                student_id=student.id,
                name=student.name,
                class_group=class_group(student.class_name),
                recent_accuracy=change.recent_accuracy,
                previous_accuracy=change.previous_accuracy,
                change=change.change,
            )
        )
    drops.sort(key=lambda d: (d.change, d.name))
    return drops


def _activity_by_weekday(students: list[StudentProfile]) -> list[WeekdayActivity]:
    solved = [0] * 7
    for student in students:
        for session in student.sessions:
            solved[calendar_day(session.occurred_at).weekday()] += session.questions_solved
    return [
        WeekdayActivity(weekday=name, solved=count)
        for name, count in zip(WEEKDAY_NAMES, solved)
    ]


def build_cohort_overview(
    students: Iterable[StudentProfile], reference: datetime
) -> CohortOverview:
    """
    Build cross-student statistics over every student's full history.

    Args:
        students: Ingested student profiles.
        reference: Instant treated as "now".

    Returns:
        CohortOverview. Without students every list is empty except the
        zero-filled weekday activity.
    """
    reference = localize_reference(reference)
    students = list(students)
    all_sessions = [s for student in students for s in student.sessions]
    practice = [s for s in all_sessions if s.kind == SessionKind.PRACTICE]

    class_groups = aggregate_by_label(
        (class_group(student.class_name), session)
        for student in students
        for session in student.sessions
    )
    class_groups.sort(key=lambda g: -g.accuracy)

    subject_durations = aggregate_by_subject(all_sessions)
    subject_durations.sort(key=lambda g: -g.total_duration)

    topic_stats = aggregate_by_topic(practice)

    logger.debug(
        f"Cohort overview: {len(students)} students, {len(all_sessions)} sessions"
    )

    return CohortOverview(
        student_count=len(students),
        overall_accuracy=overall_accuracy(all_sessions),
        class_groups=class_groups,
        subject_durations=subject_durations,
        most_challenging_topics=most_challenging_topics(topic_stats),
        easiest_topics=easiest_topics(topic_stats),
        hardest_workers=_hardest_workers(students, reference),
        needs_help=_needs_help(students),
        inactive_students=_inactive_students(students, reference),
        performance_drops=_performance_drops(students, reference),
        activity_by_weekday=_activity_by_weekday(students),
    )
