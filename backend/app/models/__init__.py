"""Pydantic models for the application."""

from app.models.analytics import (
    StudySessionRecord,
    StudentRecord,
    ExamResultRecord,
    TopicResultInput,
    MistakeEntry,
    StudySession,
    StudentProfile,
    TimeWindow,
    GroupStats,
    StreakData,
    QuadrantMatrix,
    Risk,
    ExamScore,
    StudentReport,
    CohortOverview,
)

__all__ = [
    "StudySessionRecord",
    "StudentRecord",
    "ExamResultRecord",
    "TopicResultInput",
    "MistakeEntry",
    "StudySession",
    "StudentProfile",
    "TimeWindow",
    "GroupStats",
    "StreakData",
    "QuadrantMatrix",
    "Risk",
    "ExamScore",
    "StudentReport",
    "CohortOverview",
]
