"""
Student Performance Analytics Services

Pure, deterministic transformations from a raw study log to the signals the
dashboard, reports and feedback generator consume. Nothing here performs I/O
or reads the clock; the reference instant is always passed in.

Modules:
- dates: date classification and normalization to reporting-timezone instants
- ingestion: one-time validation and defaulting of raw records
- time_windows: week/month/year windows and paging
- aggregation: grouped sums and accuracy, topic rankings
- streaks: consecutive-day study streaks
- goals: weekly question goal progress
- quadrants: effort/performance topic matrix
- risks: rule-based risk detection
- exams: exam net score and success rate
- mistakes: error category distribution
- achievements: badge predicates
- trends: weekly accuracy and daily solved series
- cohort: cross-student overview for coaches
- feedback: payloads for the feedback generator
- report: the combined student report

Usage:
    from app.services.analytics import ingest_student, build_student_report

    profile = ingest_student(record)
    report = build_student_report(profile, reference)
"""

from app.services.analytics.achievements import (
    ACHIEVEMENTS,
    AchievementDefinition,
    evaluate_achievements,
)
from app.services.analytics.aggregation import (
    aggregate_by_label,
    aggregate_by_subject,
    aggregate_by_topic,
    easiest_topics,
    most_challenging_topics,
    overall_accuracy,
    rank_topics,
)
from app.services.analytics.cohort import build_cohort_overview, class_group
from app.services.analytics.dates import (
    IsoString,
    NativeDate,
    Timestamp,
    calendar_day,
    classify_date,
    localize_reference,
    normalize_instant,
    reporting_now,
)
from app.services.analytics.exams import mistake_candidates, score_exam, score_topic
from app.services.analytics.feedback import (
    build_exam_payload,
    build_mistake_payload,
    build_risk_payload,
    build_weakness_payload,
)
from app.services.analytics.goals import weekly_goal_progress
from app.services.analytics.ingestion import (
    ingest_sessions,
    ingest_student,
    normalize_session,
    sessions_frame,
)
from app.services.analytics.mistakes import (
    aggregate_mistakes,
    format_error_analysis,
    mistake_distribution,
)
from app.services.analytics.quadrants import build_quadrant_matrix, classify_quadrant
from app.services.analytics.report import build_student_report
from app.services.analytics.risks import RISK_RULES, RiskRule, evaluate_risks
from app.services.analytics.streaks import current_streak, get_streak_data, longest_streak
from app.services.analytics.time_windows import (
    filter_sessions,
    shift,
    week_elapsed_fraction,
    window_for,
)
from app.services.analytics.trends import (
    accuracy_change,
    daily_solved_series,
    weekly_accuracy_trend,
)

__all__ = [
    # Dates and ingestion
    "Timestamp",
    "IsoString",
    "NativeDate",
    "classify_date",
    "localize_reference",
    "normalize_instant",
    "calendar_day",
    "reporting_now",
    "normalize_session",
    "ingest_sessions",
    "ingest_student",
    "sessions_frame",
    # Windows
    "window_for",
    "shift",
    "filter_sessions",
    "week_elapsed_fraction",
    # Aggregation
    "aggregate_by_subject",
    "aggregate_by_topic",
    "aggregate_by_label",
    "rank_topics",
    "most_challenging_topics",
    "easiest_topics",
    "overall_accuracy",
    # Streaks and goals
    "current_streak",
    "longest_streak",
    "get_streak_data",
    "weekly_goal_progress",
    # Classification
    "classify_quadrant",
    "build_quadrant_matrix",
    "RiskRule",
    "RISK_RULES",
    "evaluate_risks",
    # Exams and mistakes
    "score_topic",
    "score_exam",
    "mistake_candidates",
    "aggregate_mistakes",
    "mistake_distribution",
    "format_error_analysis",
    # Achievements
    "AchievementDefinition",
    "ACHIEVEMENTS",
    "evaluate_achievements",
    # Trends and cohort
    "weekly_accuracy_trend",
    "daily_solved_series",
    "accuracy_change",
    "class_group",
    "build_cohort_overview",
    # Feedback payloads
    "build_weakness_payload",
    "build_risk_payload",
    "build_exam_payload",
    "build_mistake_payload",
    # Report
    "build_student_report",
]
