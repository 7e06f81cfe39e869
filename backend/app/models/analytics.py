"""
Analytics Models (Pydantic)

Schemas for the student performance analytics engine including:
- Raw study session, student and exam records from the persistence layer
- Normalized (ingested) sessions and student profiles
- Computed statistics: windows, group stats, streaks, quadrants, risks
- Exam scoring and mistake distributions
- Payloads for the feedback generator
- API request/response bodies

ARCHITECTURE NOTE:
    Records use RecordModel (camelCase aliases, extra="ignore") because they
    are produced by the document store. They are normalized exactly once by
    app.services.analytics.ingestion into frozen domain values; every other
    service consumes only the normalized values.

    Data flows: Persistence → Record → ingestion → StudySession → services → results
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import Field

from app.enums.analytics import (
    ErrorCategory,
    Quadrant,
    RiskId,
    RiskSeverity,
    SessionKind,
    WindowDirection,
    WindowKind,
)
from app.models.base import RecordModel, StrictRequest, StrictResponse


# ===========================================
# Raw Records
# ===========================================


class StudySessionRecord(RecordModel):
    """
    A study session as stored by the persistence layer.

    The date field may hold a timestamp-like mapping ({"seconds": ...}), a
    date string or a native date; it is resolved by the date normalizer during
    ingestion. Counts are taken as-is here and clamped during ingestion.
    """

    id: Optional[Union[str, int]] = None
    subject: str = ""
    topic: Optional[str] = None
    duration_in_minutes: int = 0
    questions_solved: int = 0
    questions_correct: int = 0
    occurred_at: Any = Field(None, alias="date", description="Raw session date")
    kind: Optional[str] = Field(
        None, alias="type", description="'topic' / 'topic-review' or practice"
    )


class StudentRecord(RecordModel):
    """
    A student document with its embedded study sessions.

    Sessions are kept loosely typed so a single malformed session is dropped
    during ingestion instead of rejecting the whole student.
    """

    id: Optional[Union[str, int]] = None
    name: str = ""
    weekly_question_goal: Optional[int] = 0
    class_name: Optional[str] = None
    study_sessions: list[Union[StudySessionRecord, dict[str, Any]]] = Field(
        default_factory=list
    )
    unlocked_achievements: list[str] = Field(default_factory=list)


class TopicResultInput(RecordModel):
    """Correct/incorrect/empty answer counts for one exam topic."""

    topic: str
    correct: int = 0
    incorrect: int = 0
    empty: int = 0


class ExamResultRecord(RecordModel):
    """
    A stored exam analysis.

    error_analysis is only present when the student categorized mistakes.
    """

    id: Optional[Union[str, int]] = None
    user_id: Optional[str] = None
    exam_name: str = ""
    subject_name: str = ""
    grade_level: Optional[str] = None
    topic_results: list[TopicResultInput] = Field(default_factory=list)
    error_analysis: Optional[dict[ErrorCategory, int]] = None


class MistakeEntry(RecordModel):
    """A topic with the mistake category the student assigned (if any)."""

    topic: str
    category: Optional[ErrorCategory] = None


# ===========================================
# Normalized Domain Values
# ===========================================


class StudySession(StrictResponse):
    """
    A validated study session.

    Invariants established by ingestion:
    - 0 <= questions_correct <= questions_solved
    - duration_minutes >= 0
    - topic is never empty
    - occurred_at is timezone-aware in the reporting timezone
    """

    id: Optional[str] = None
    subject: str
    topic: str
    duration_minutes: int = 0
    questions_solved: int = 0
    questions_correct: int = 0
    occurred_at: datetime
    kind: SessionKind = SessionKind.PRACTICE

    @property
    def accuracy(self) -> float:
        """Percentage of correct answers, 0 when nothing was solved."""
        if self.questions_solved <= 0:
            return 0.0
        return self.questions_correct / self.questions_solved * 100


class StudentProfile(StrictResponse):
    """A student with ingested sessions, ready for analytics."""

    id: Optional[str] = None
    name: str = ""
    weekly_goal: int = 0
    class_name: Optional[str] = None
    sessions: tuple[StudySession, ...] = ()
    unlocked_achievements: frozenset[str] = frozenset()


# ===========================================
# Windows and Aggregates
# ===========================================


class TimeWindow(StrictResponse):
    """
    A reporting window.

    start is inclusive and end exclusive. Both are None for the unbounded
    "all" window.
    """

    kind: WindowKind
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    label: str
    reference: datetime

    def contains(self, instant: datetime) -> bool:
        """Whether an instant lies within [start, end)."""
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant >= self.end:
            return False
        return True


class GroupStats(StrictResponse):
    """
    Summed session statistics for one group.

    key is the grouping key as displayed ("Subject", "Subject - Topic" or the
    external label); the component fields are filled for the grouping used.
    """

    key: str
    subject: Optional[str] = None
    topic: Optional[str] = None
    label: Optional[str] = None
    session_count: int = 0
    total_solved: int = 0
    total_correct: int = 0
    total_duration: int = 0
    accuracy: float = 0.0


class GoalProgress(StrictResponse):
    """Progress towards the weekly question goal."""

    week_start: datetime
    week_end: datetime
    solved_this_week: int
    weekly_goal: int
    progress: float  # Ratio of goal reached (0 when no goal)
    percentage: float
    elapsed_fraction: float  # Share of the week's days that have started
    goal_met: bool


class StreakData(StrictResponse):
    """
    Study streak information.

    Tracks consecutive days of study to motivate consistent habits. Includes
    current and longest streaks, milestone tracking, and weekly/monthly
    activity counts.
    """

    current_streak: int  # Days
    longest_streak: int
    streak_start: Optional[date] = None
    last_study_day: Optional[date] = None
    is_active_today: bool = False
    days_this_week: int = 0
    days_this_month: int = 0
    # Milestones
    milestones_reached: list[int] = Field(default_factory=list)  # e.g., [3, 7]
    next_milestone: Optional[int] = None


# ===========================================
# Quadrants and Risks
# ===========================================


class TopicQuadrant(StrictResponse):
    """A topic's position in the performance/effort matrix."""

    topic: str  # "Subject - Topic"
    subject: str
    topic_name: str
    duration: int
    accuracy: float
    questions: int
    quadrant: Quadrant


class QuadrantMatrix(StrictResponse):
    """All classified topics plus the averages used as partition lines."""

    topics: list[TopicQuadrant] = Field(default_factory=list)
    avg_duration: float = 0.0
    avg_accuracy: float = 0.0


class Risk(StrictResponse):
    """A rule-triggered warning about a student's trajectory."""

    id: RiskId
    severity: RiskSeverity
    description: str
    topic: Optional[str] = None


class RiskReport(StrictResponse):
    """Output shape of the risk flow: {risks: [{id, severity, description}]}."""

    risks: list[Risk] = Field(default_factory=list)


# ===========================================
# Exam Scoring and Mistakes
# ===========================================


class TopicScore(StrictResponse):
    """Exam result for one topic with derived net and success rate."""

    topic: str
    correct: int
    incorrect: int
    empty: int
    total_questions: int
    net: float
    success_rate: float


class ExamScore(StrictResponse):
    """Scored exam with strengths and the weakest topics."""

    topics: list[TopicScore] = Field(default_factory=list)
    total_questions: int = 0
    overall_net: float = 0.0
    overall_success_rate: float = 0.0
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[TopicScore] = Field(default_factory=list)


class MistakeCount(StrictResponse):
    """Occurrences of one mistake category."""

    category: ErrorCategory
    count: int


# ===========================================
# Trends
# ===========================================


class WeeklyAccuracyPoint(StrictResponse):
    """
    Accuracy per subject for one ISO week.

    Subjects without solved questions in the week map to None so charts can
    render a gap instead of a zero.
    """

    week_start: date
    label: str
    accuracy_by_subject: dict[str, Optional[float]] = Field(default_factory=dict)


class DailySolvedPoint(StrictResponse):
    """Solved questions per subject on one calendar day."""

    day: date
    label: str
    solved_by_subject: dict[str, int] = Field(default_factory=dict)
    total: int = 0


# ===========================================
# Cohort Overview
# ===========================================


class StudentMetric(StrictResponse):
    """A single ranked value for a student (leaderboards)."""

    student_id: Optional[str] = None
    name: str
    class_group: str
    value: float


class InactiveStudent(StrictResponse):
    """A student whose last session is older than the inactivity limit."""

    student_id: Optional[str] = None
    name: str
    class_group: str
    days_inactive: int


class PerformanceDrop(StrictResponse):
    """Accuracy change between the last 7 days and the 7 days before."""

    student_id: Optional[str] = None
    name: str
    class_group: str
    recent_accuracy: float
    previous_accuracy: float
    change: float


class WeekdayActivity(StrictResponse):
    """Questions solved on one weekday across all sessions."""

    weekday: str
    solved: int


class CohortOverview(StrictResponse):
    """Cross-student statistics for coaches and administrators."""

    student_count: int = 0
    overall_accuracy: float = 0.0
    class_groups: list[GroupStats] = Field(default_factory=list)
    subject_durations: list[GroupStats] = Field(default_factory=list)
    most_challenging_topics: list[GroupStats] = Field(default_factory=list)
    easiest_topics: list[GroupStats] = Field(default_factory=list)
    hardest_workers: list[StudentMetric] = Field(default_factory=list)
    needs_help: list[StudentMetric] = Field(default_factory=list)
    inactive_students: list[InactiveStudent] = Field(default_factory=list)
    performance_drops: list[PerformanceDrop] = Field(default_factory=list)
    activity_by_weekday: list[WeekdayActivity] = Field(default_factory=list)


# ===========================================
# Feedback Generator Payloads
# ===========================================


class FeedbackSession(StrictResponse):
    """Session summary passed to the weakness and risk feedback flows."""

    subject: str
    topic: str
    questions_solved: int
    questions_correct: int
    duration_in_minutes: Optional[int] = None


class WeaknessPayload(StrictResponse):
    """Input of the weakness / risk feedback flows."""

    student_name: str
    study_sessions: list[FeedbackSession] = Field(default_factory=list)
    weekly_goal: Optional[int] = None


class ExamTopicPayload(StrictResponse):
    """Per-topic exam result passed to the exam feedback flow."""

    topic: str
    correct: int
    incorrect: int
    empty: int
    net: float
    success_rate: float


class ExamAnalysisPayload(StrictResponse):
    """Input of the exam feedback flow."""

    student_name: str
    exam_name: str
    subject_name: str
    topic_results: list[ExamTopicPayload] = Field(default_factory=list)


class MistakePayload(StrictResponse):
    """Input of the mistake feedback flow."""

    student_name: str
    error_analysis_formatted: str


# ===========================================
# Student Report
# ===========================================


class StudentReport(StrictResponse):
    """
    Everything the dashboard and report pages need for one student.

    Window-scoped values (totals, stats, quadrants) use the selected window;
    streak, weekly progress, risks and achievements always use the full
    history relative to the reference instant.
    """

    student_id: Optional[str] = None
    name: str
    window: TimeWindow
    total_solved: int = 0
    total_correct: int = 0
    total_duration: int = 0
    overall_accuracy: float = 0.0
    weekly_progress: GoalProgress
    streak: StreakData
    subject_stats: list[GroupStats] = Field(default_factory=list)
    topic_stats: list[GroupStats] = Field(default_factory=list)
    quadrant_matrix: QuadrantMatrix
    risks: list[Risk] = Field(default_factory=list)
    unlocked_achievements: list[str] = Field(default_factory=list)
    newly_unlocked: list[str] = Field(default_factory=list)
    weekly_trend: list[WeeklyAccuracyPoint] = Field(default_factory=list)
    daily_solved: list[DailySolvedPoint] = Field(default_factory=list)


# ===========================================
# API Requests and Responses
# ===========================================


class ReportRequest(StrictRequest):
    """
    Request for a student report.

    reference may be any supported date representation; it defaults to now.
    direction pages the reference to the previous/next window first.
    """

    student: StudentRecord
    window: WindowKind = WindowKind.WEEK
    reference: Any = None
    direction: Optional[WindowDirection] = None


class RiskRequest(StrictRequest):
    """Request for the risk evaluation of one student."""

    student: StudentRecord
    reference: Any = None


class RiskAnalysisResponse(RiskReport):
    """Detected risks plus the payload for the risk feedback flow."""

    payload: WeaknessPayload


class ExamRequest(StrictRequest):
    """Request to score an exam."""

    student_name: str
    exam_name: str
    subject_name: str
    topic_results: list[TopicResultInput] = Field(..., min_length=1)


class ExamAnalysisResponse(StrictResponse):
    """Exam score, topics offered for mistake categorization and the feedback payload."""

    score: ExamScore
    mistake_candidates: list[str] = Field(default_factory=list)
    payload: ExamAnalysisPayload


class MistakeRequest(StrictRequest):
    """Request to aggregate categorized mistakes."""

    student_name: str
    entries: list[MistakeEntry] = Field(default_factory=list)


class MistakeAnalysisResponse(StrictResponse):
    """Mistake distribution and the feedback payload."""

    counts: dict[ErrorCategory, int] = Field(default_factory=dict)
    distribution: list[MistakeCount] = Field(default_factory=list)
    payload: MistakePayload


class CohortRequest(StrictRequest):
    """Request for a cohort overview."""

    students: list[StudentRecord] = Field(default_factory=list)
    reference: Any = None
