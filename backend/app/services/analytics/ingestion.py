"""
Session Ingestion

The single place where raw study records are validated and defaulted.
Every analytics service downstream works on the normalized StudySession
values produced here and never re-derives defaults.

Normalization rules:
- Sessions whose date cannot be normalized are dropped
- Records that fail schema validation are dropped
- Missing or blank topics become settings.DEFAULT_TOPIC
- Negative counts and durations are clamped to 0
- questions_correct is clamped to questions_solved
- type "topic" / "topic-review" marks a passive topic review

Usage:
    from app.services.analytics.ingestion import ingest_student, sessions_frame

    profile = ingest_student(student_record)
    df = sessions_frame(profile.sessions)
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import tzinfo
from typing import Any, Optional, Union

import pandas as pd
import pydantic

from app.config import settings
from app.enums.analytics import SessionKind
from app.models.analytics import (
    StudentProfile,
    StudentRecord,
    StudySession,
    StudySessionRecord,
)
from app.services.analytics.dates import calendar_day, normalize_instant

logger = logging.getLogger(__name__)

SESSION_COLUMNS = [
    "subject",
    "topic",
    "kind",
    "duration",
    "solved",
    "correct",
    "occurred_at",
    "day",
]

_TOPIC_REVIEW_TYPES = {"topic", "topic-review", "topic_review"}


def _session_kind(raw_kind: Optional[str]) -> SessionKind:
    if raw_kind and raw_kind.strip().lower() in _TOPIC_REVIEW_TYPES:
        return SessionKind.TOPIC_REVIEW
    return SessionKind.PRACTICE


def normalize_session(
    record: Union[StudySessionRecord, Mapping[str, Any]],
    tz: Optional[tzinfo] = None,
) -> Optional[StudySession]:
    """
    Normalize one raw session record.

    Args:
        record: Raw record or a mapping with the document store's fields.
        tz: Reporting timezone override.

    Returns:
        StudySession, or None when the record must be excluded.
    """
    if not isinstance(record, StudySessionRecord):
        try:
            record = StudySessionRecord.model_validate(record)
        except pydantic.ValidationError as e:
            logger.debug(f"Dropping malformed session record: {e.error_count()} errors")
            return None

    occurred_at = normalize_instant(record.occurred_at, tz)
    if occurred_at is None:
        return None

    solved = max(0, record.questions_solved)
    correct = min(max(0, record.questions_correct), solved)
    topic = record.topic if record.topic and record.topic.strip() else settings.DEFAULT_TOPIC

    return StudySession(
        id=None if record.id is None else str(record.id),
        subject=record.subject,
        topic=topic,
        duration_minutes=max(0, record.duration_in_minutes),
        questions_solved=solved,
        questions_correct=correct,
        occurred_at=occurred_at,
        kind=_session_kind(record.kind),
    )


def ingest_sessions(
    records: Iterable[Union[StudySessionRecord, Mapping[str, Any]]],
    tz: Optional[tzinfo] = None,
) -> list[StudySession]:
    """
    Normalize a batch of session records, preserving their order.

    Excluded records are counted and logged; they never abort the batch.
    """
    sessions: list[StudySession] = []
    dropped = 0
    for record in records:
        session = normalize_session(record, tz)
        if session is None:
            dropped += 1
            continue
        sessions.append(session)

    if dropped:
        logger.debug(f"Ingested {len(sessions)} sessions, dropped {dropped}")
    return sessions


def ingest_student(
    record: Union[StudentRecord, Mapping[str, Any]],
    tz: Optional[tzinfo] = None,
) -> StudentProfile:
    """
    Build an analytics-ready profile from a student document.

    Args:
        record: Student record (or mapping) with embedded sessions.
        tz: Reporting timezone override.

    Returns:
        StudentProfile with only valid, normalized sessions.
    """
    if not isinstance(record, StudentRecord):
        record = StudentRecord.model_validate(record)

    return StudentProfile(
        id=None if record.id is None else str(record.id),
        name=record.name,
        weekly_goal=max(0, record.weekly_question_goal or 0),
        class_name=record.class_name,
        sessions=tuple(ingest_sessions(record.study_sessions, tz)),
        unlocked_achievements=frozenset(record.unlocked_achievements),
    )


def sessions_frame(sessions: Iterable[StudySession]) -> pd.DataFrame:
    """
    Build a DataFrame of normalized sessions for vectorized aggregation.

    Returns:
        DataFrame with columns: subject, topic, kind, duration, solved,
        correct, occurred_at, day (calendar day in the reporting timezone).
    """
    rows = [
        {
            "subject": s.subject,
            "topic": s.topic,
            "kind": s.kind.value,
            "duration": s.duration_minutes,
            "solved": s.questions_solved,
            "correct": s.questions_correct,
            "occurred_at": s.occurred_at,
            "day": calendar_day(s.occurred_at),
        }
        for s in sessions
    ]
    if not rows:
        return pd.DataFrame(columns=SESSION_COLUMNS)
    return pd.DataFrame(rows, columns=SESSION_COLUMNS)
