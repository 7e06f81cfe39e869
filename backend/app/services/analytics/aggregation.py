"""
Aggregation Engine

Grouped sums of solved/correct/duration with derived accuracy, computed with
vectorized pandas operations over the normalized session frame.

Group keys:
- subject
- subject + topic (displayed as "Subject - Topic")
- an externally supplied label (e.g. a class group)

Grouping uses exact string equality. "math" and "Math " are different
subjects; casing and whitespace are never corrected here.

Usage:
    from app.services.analytics.aggregation import (
        aggregate_by_topic,
        most_challenging_topics,
    )

    topic_stats = aggregate_by_topic(profile.sessions)
    hardest = most_challenging_topics(topic_stats)
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Optional

import pandas as pd

from app.config import settings
from app.models.analytics import GroupStats, StudySession
from app.services.analytics.ingestion import sessions_frame

logger = logging.getLogger(__name__)


def accuracy_percent(correct: float, solved: float) -> float:
    """Correct/solved as a percentage, 0 when nothing was solved."""
    if solved <= 0:
        return 0.0
    return max(0.0, min(100.0, correct / solved * 100))


def topic_key(subject: str, topic: str) -> str:
    """Display key for a subject/topic pair."""
    return f"{subject} - {topic}"


def _grouped_totals(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Sum sessions per group; one row per distinct key combination."""
    return df.groupby(columns, sort=True).agg(
        session_count=("solved", "size"),
        total_solved=("solved", "sum"),
        total_correct=("correct", "sum"),
        total_duration=("duration", "sum"),
    )


def _to_stats(
    key: str,
    row: pd.Series,
    subject: Optional[str] = None,
    topic: Optional[str] = None,
    label: Optional[str] = None,
) -> GroupStats:
    solved = int(row["total_solved"])
    correct = int(row["total_correct"])
    return GroupStats(
        key=key,
        subject=subject,
        topic=topic,
        label=label,
        session_count=int(row["session_count"]),
        total_solved=solved,
        total_correct=correct,
        total_duration=int(row["total_duration"]),
        accuracy=accuracy_percent(correct, solved),
    )


def aggregate_by_subject(sessions: Iterable[StudySession]) -> list[GroupStats]:
    """
    Aggregate sessions per subject.

    Returns:
        GroupStats per subject, sorted by key.
    """
    df = sessions_frame(sessions)
    if df.empty:
        return []

    grouped = _grouped_totals(df, ["subject"])
    stats = [
        _to_stats(str(subject), row, subject=str(subject))
        for subject, row in grouped.iterrows()
    ]
    return sorted(stats, key=lambda s: s.key)


def aggregate_by_topic(sessions: Iterable[StudySession]) -> list[GroupStats]:
    """
    Aggregate sessions per subject and topic.

    Returns:
        GroupStats per subject/topic pair keyed "Subject - Topic", sorted by key.
    """
    df = sessions_frame(sessions)
    if df.empty:
        return []

    grouped = _grouped_totals(df, ["subject", "topic"])
    stats = [
        _to_stats(topic_key(subject, topic), row, subject=subject, topic=topic)
        for (subject, topic), row in grouped.iterrows()
    ]
    return sorted(stats, key=lambda s: s.key)


def aggregate_by_label(
    labelled_sessions: Iterable[tuple[str, StudySession]],
) -> list[GroupStats]:
    """
    Aggregate sessions under externally supplied labels.

    Args:
        labelled_sessions: (label, session) pairs, e.g. class group and session.

    Returns:
        GroupStats per label, sorted by key.
    """
    pairs = list(labelled_sessions)
    if not pairs:
        return []

    df = sessions_frame(session for _, session in pairs)
    df["label"] = [label for label, _ in pairs]

    grouped = _grouped_totals(df, ["label"])
    stats = [
        _to_stats(str(label), row, label=str(label))
        for label, row in grouped.iterrows()
    ]
    return sorted(stats, key=lambda s: s.key)


def rank_topics(
    stats: Sequence[GroupStats],
    min_solved: Optional[int] = None,
    top_n: Optional[int] = None,
    ascending: bool = True,
) -> list[GroupStats]:
    """
    Rank groups by accuracy after a minimum-sample filter.

    Args:
        stats: Aggregated groups.
        min_solved: Keep only groups with more than this many solved questions
            (defaults to settings.RANKING_MIN_SOLVED).
        top_n: Number of groups to return (defaults to settings.RANKING_TOP_N).
        ascending: Lowest accuracy first when True.

    Returns:
        Up to top_n groups; equal accuracies are ordered by key.
    """
    if min_solved is None:
        min_solved = settings.RANKING_MIN_SOLVED
    if top_n is None:
        top_n = settings.RANKING_TOP_N

    eligible = [s for s in stats if s.total_solved > min_solved]
    eligible.sort(key=lambda s: s.key)
    eligible.sort(key=lambda s: s.accuracy, reverse=not ascending)
    return eligible[:top_n]


def most_challenging_topics(
    stats: Sequence[GroupStats],
    min_solved: Optional[int] = None,
    top_n: Optional[int] = None,
) -> list[GroupStats]:
    """Lowest-accuracy topics with enough solved questions."""
    return rank_topics(stats, min_solved, top_n, ascending=True)


def easiest_topics(
    stats: Sequence[GroupStats],
    min_solved: Optional[int] = None,
    top_n: Optional[int] = None,
) -> list[GroupStats]:
    """Highest-accuracy topics with enough solved questions."""
    return rank_topics(stats, min_solved, top_n, ascending=False)


def overall_accuracy(sessions: Iterable[StudySession]) -> float:
    """Pooled correct/solved ratio over all sessions, as a percentage."""
    solved = 0
    correct = 0
    for session in sessions:
        solved += session.questions_solved
        correct += session.questions_correct
    return accuracy_percent(correct, solved)
