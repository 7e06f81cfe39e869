"""
Analytics Enums

Defines enums for study session kinds, reporting windows, performance
quadrants, risk rules and exam mistake categories.
"""

from enum import Enum


class SessionKind(str, Enum):
    """
    Kinds of study sessions.

    Topic reviews are passive (reading, watching) and usually carry no
    solved questions, so they are excluded from tested-performance views
    such as the quadrant matrix.
    """

    PRACTICE = "practice"  # Question solving
    TOPIC_REVIEW = "topic-review"  # Passive topic study


class WindowKind(str, Enum):
    """
    Reporting windows for paging through study history.

    Week windows follow ISO weeks (Monday start).
    """

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class WindowDirection(str, Enum):
    """Direction for paging to the adjacent reporting window."""

    PREV = "prev"
    NEXT = "next"


class Quadrant(str, Enum):
    """
    Effort/performance quadrants for the topic matrix.

    Partitioned by the cohort's average duration and average accuracy:
    - MASTERY: duration >= avg, accuracy >= avg
    - EFFICIENT: duration < avg, accuracy >= avg
    - PRIORITY_REVIEW: duration >= avg, accuracy < avg
    - FRESH_START: duration < avg, accuracy < avg
    """

    MASTERY = "Mastery"
    EFFICIENT = "Efficient"
    PRIORITY_REVIEW = "Priority Review"
    FRESH_START = "Fresh Start"


class RiskId(str, Enum):
    """Identifiers of the rule-based risk checks."""

    GOAL_MISS_RISK = "GOAL_MISS_RISK"  # Falling behind the weekly goal
    ACCURACY_DROP = "ACCURACY_DROP"  # Low accuracy on a topic
    INEFFICIENT_STUDY = "INEFFICIENT_STUDY"  # Lots of time, low accuracy
    INCONSISTENT_STUDY = "INCONSISTENT_STUDY"  # No recent sessions


class RiskSeverity(str, Enum):
    """Severity of a detected risk."""

    WARNING = "warning"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """
    Self-reported causes of exam mistakes.

    Students categorize each topic they lost points on after an exam; the
    resulting distribution feeds the mistake feedback generator.
    """

    KNOWLEDGE_GAP = "knowledge_gap"
    CARELESS_ERROR = "careless_error"
    TIME_PRESSURE = "time_pressure"
    MISREAD_QUESTION = "misread_question"
