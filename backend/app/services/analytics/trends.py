"""
Trend Analysis

Time series for the report charts and period-over-period comparisons:
- weekly accuracy per subject (Monday-start weeks, chronological)
- questions solved per subject per day over the trailing days
- accuracy change between two consecutive periods

Fewer than two weeks of data is still a valid (short) trend; deciding to
show a "not enough data" message is up to the rendering layer.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from app.enums.analytics import SessionKind
from app.models.analytics import DailySolvedPoint, StudySession, WeeklyAccuracyPoint
from app.services.analytics.aggregation import accuracy_percent
from app.services.analytics.dates import calendar_day
from app.services.analytics.ingestion import sessions_frame

logger = logging.getLogger(__name__)


def weekly_accuracy_trend(sessions: Iterable[StudySession]) -> list[WeeklyAccuracyPoint]:
    """
    Accuracy per subject for every week that has sessions.

    Subjects without solved questions in a week map to None.

    Returns:
        Points ordered by week start.
    """
    df = sessions_frame(sessions)
    if df.empty:
        return []

    df["week_start"] = df["day"].map(lambda d: d - timedelta(days=d.weekday()))
    subjects = sorted(set(df["subject"]))

    grouped = df.groupby(["week_start", "subject"]).agg(
        solved=("solved", "sum"),
        correct=("correct", "sum"),
    )
    totals = {
        key: (int(row["solved"]), int(row["correct"])) for key, row in grouped.iterrows()
    }

    points = []
    for week_start in sorted(set(df["week_start"])):
        accuracy_by_subject: dict[str, Optional[float]] = {}
        for subject in subjects:
            solved, correct = totals.get((week_start, subject), (0, 0))
            accuracy_by_subject[subject] = (
                accuracy_percent(correct, solved) if solved > 0 else None
            )
        points.append(
            WeeklyAccuracyPoint(
                week_start=week_start,
                label=week_start.strftime("%d %b"),
                accuracy_by_subject=accuracy_by_subject,
            )
        )
    return points


def daily_solved_series(
    sessions: Iterable[StudySession], reference: datetime, days: int = 7
) -> list[DailySolvedPoint]:
    """
    Questions solved per subject on each of the trailing days, today included.

    Only practice sessions count. Every subject practised at any time appears
    in every point (0 on days without sessions).

    Args:
        sessions: Normalized sessions.
        reference: Instant treated as "now".
        days: Number of days in the series.
    """
    practice = [s for s in sessions if s.kind == SessionKind.PRACTICE]
    subjects = sorted({s.subject for s in practice})
    today = calendar_day(reference)
    first_day = today - timedelta(days=days - 1)

    solved: dict[date, dict[str, int]] = {}
    for session in practice:
        day = calendar_day(session.occurred_at)
        if first_day <= day <= today:
            per_subject = solved.setdefault(day, {})
            per_subject[session.subject] = per_subject.get(session.subject, 0) + session.questions_solved

    points = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        per_subject = {subject: solved.get(day, {}).get(subject, 0) for subject in subjects}
        points.append(
            DailySolvedPoint(
                day=day,
                label=day.strftime("%a"),
                solved_by_subject=per_subject,
                total=sum(per_subject.values()),
            )
        )
    return points


@dataclass(frozen=True)
class AccuracyChange:
    """Accuracy over a recent period compared with the period before it."""

    recent_solved: int
    recent_accuracy: float
    previous_solved: int
    previous_accuracy: float

    @property
    def change(self) -> float:
        """Percentage-point difference (negative means a drop)."""
        return self.recent_accuracy - self.previous_accuracy


def accuracy_change(
    sessions: Iterable[StudySession], reference: datetime, days: int = 7
) -> AccuracyChange:
    """
    Compare accuracy over the last `days` calendar days with the `days` before.

    The recent period includes the reference day.
    """
    today = calendar_day(reference)
    recent_start = today - timedelta(days=days - 1)
    previous_start = recent_start - timedelta(days=days)

    totals = {"recent": [0, 0], "previous": [0, 0]}
    for session in sessions:
        day = calendar_day(session.occurred_at)
        if recent_start <= day <= today:
            bucket = totals["recent"]
        elif previous_start <= day < recent_start:
            bucket = totals["previous"]
        else:
            continue
        bucket[0] += session.questions_solved
        bucket[1] += session.questions_correct

    recent_solved, recent_correct = totals["recent"]
    previous_solved, previous_correct = totals["previous"]
    return AccuracyChange(
        recent_solved=recent_solved,
        recent_accuracy=accuracy_percent(recent_correct, recent_solved),
        previous_solved=previous_solved,
        previous_accuracy=accuracy_percent(previous_correct, previous_solved),
    )
