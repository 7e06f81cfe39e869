"""
Feedback Generator Payloads

Builds the structured summaries handed to the natural-language feedback
generator. The generator itself is an external collaborator; this module only
produces its inputs, serialized with camelCase keys:

- weakness flow: {studentName, studySessions: [{subject, topic,
  questionsSolved, questionsCorrect}]}
- risk flow: as above plus durationInMinutes per session and weeklyGoal
- exam flow: {studentName, examName, subjectName, topicResults: [{topic,
  correct, incorrect, empty, net, successRate}]}
- mistake flow: {studentName, errorAnalysisFormatted}

Usage:
    payload = build_risk_payload(profile)
    body = payload.model_dump(by_alias=True, exclude_none=True)
"""

from collections.abc import Iterable, Mapping
from typing import Optional

from app.enums.analytics import ErrorCategory
from app.models.analytics import (
    ExamAnalysisPayload,
    ExamScore,
    ExamTopicPayload,
    FeedbackSession,
    MistakePayload,
    StudentProfile,
    StudySession,
    WeaknessPayload,
)
from app.services.analytics.mistakes import format_error_analysis


def _feedback_sessions(
    sessions: Iterable[StudySession], include_duration: bool
) -> list[FeedbackSession]:
    return [
        FeedbackSession(
            subject=s.subject,
            topic=s.topic,
            questions_solved=s.questions_solved,
            questions_correct=s.questions_correct,
            duration_in_minutes=s.duration_minutes if include_duration else None,
        )
        for s in sessions
    ]


def build_weakness_payload(
    profile: StudentProfile, sessions: Optional[Iterable[StudySession]] = None
) -> WeaknessPayload:
    """
    Payload for the weakness detector.

    Args:
        profile: Ingested student.
        sessions: Sessions to describe (defaults to the full history, e.g. a
            window-filtered subset may be passed instead).
    """
    if sessions is None:
        sessions = profile.sessions
    return WeaknessPayload(
        student_name=profile.name,
        study_sessions=_feedback_sessions(sessions, include_duration=False),
    )


def build_risk_payload(profile: StudentProfile) -> WeaknessPayload:
    """Payload for the risk analyzer: full history with durations and the weekly goal."""
    return WeaknessPayload(
        student_name=profile.name,
        study_sessions=_feedback_sessions(profile.sessions, include_duration=True),
        weekly_goal=profile.weekly_goal,
    )


def build_exam_payload(
    student_name: str, exam_name: str, subject_name: str, score: ExamScore
) -> ExamAnalysisPayload:
    """Payload for the exam analyzer from an already scored exam."""
    return ExamAnalysisPayload(
        student_name=student_name,
        exam_name=exam_name,
        subject_name=subject_name,
        topic_results=[
            ExamTopicPayload(
                topic=t.topic,
                correct=t.correct,
                incorrect=t.incorrect,
                empty=t.empty,
                net=t.net,
                success_rate=t.success_rate,
            )
            for t in score.topics
        ],
    )


def build_mistake_payload(
    student_name: str, counts: Mapping[ErrorCategory, int]
) -> MistakePayload:
    """Payload for the mistake analyzer with the pre-rendered category listing."""
    return MistakePayload(
        student_name=student_name,
        error_analysis_formatted=format_error_analysis(counts),
    )
