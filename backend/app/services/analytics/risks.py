"""
Risk Classification

Rule-based detection of risks to a student's progress. Each rule is a named,
pure record in the RISK_RULES registry; rules are evaluated independently and
several may fire at once.

Rules:
- GOAL_MISS_RISK: more than half of the week elapsed with little progress
- ACCURACY_DROP: low accuracy on a subject/topic (one risk per topic)
- INEFFICIENT_STUDY: long study time on a topic with low accuracy
- INCONSISTENT_STUDY: no session in the trailing INACTIVITY_DAYS days

Thresholds come from settings. Output order follows the registry, then the
topic key, so the same input always yields the same list.

Usage:
    from app.services.analytics.risks import evaluate_risks

    risks = evaluate_risks(profile.sessions, profile.weekly_goal, reference)
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.config import settings
from app.enums.analytics import RiskId, RiskSeverity
from app.models.analytics import GroupStats, Risk, StudySession
from app.services.analytics.aggregation import aggregate_by_topic
from app.services.analytics.dates import localize_reference
from app.services.analytics.goals import weekly_goal_progress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskContext:
    """Inputs shared by all risk rules."""

    sessions: tuple[StudySession, ...]
    weekly_goal: int
    reference: datetime
    topic_stats: tuple[GroupStats, ...]


@dataclass(frozen=True)
class RiskRule:
    """A named risk check producing zero or more risks."""

    id: RiskId
    evaluate: Callable[[RiskContext], list[Risk]]


def _goal_miss(ctx: RiskContext) -> list[Risk]:
    progress = weekly_goal_progress(ctx.sessions, ctx.weekly_goal, ctx.reference)
    if progress.weekly_goal <= 0:
        return []
    if progress.elapsed_fraction <= settings.GOAL_MISS_ELAPSED_FRACTION:
        return []

    if progress.progress < settings.GOAL_MISS_CRITICAL_PROGRESS:
        severity = RiskSeverity.CRITICAL
    elif progress.progress < settings.GOAL_MISS_WARNING_PROGRESS:
        severity = RiskSeverity.WARNING
    else:
        return []

    return [
        Risk(
            id=RiskId.GOAL_MISS_RISK,
            severity=severity,
            description=(
                f"Only {progress.solved_this_week} of {progress.weekly_goal} weekly "
                f"questions solved ({progress.progress * 100:.0f}%) with most of the "
                f"week gone. Plan extra sessions to catch up."
            ),
        )
    ]


def _accuracy_drop(ctx: RiskContext) -> list[Risk]:
    risks = []
    for stats in ctx.topic_stats:
        if stats.total_solved < settings.RISK_MIN_QUESTIONS:
            continue
        if stats.accuracy < settings.ACCURACY_CRITICAL_THRESHOLD:
            severity = RiskSeverity.CRITICAL
        elif stats.accuracy < settings.ACCURACY_WARNING_THRESHOLD:
            severity = RiskSeverity.WARNING
        else:
            continue
        risks.append(
            Risk(
                id=RiskId.ACCURACY_DROP,
                severity=severity,
                description=(
                    f"Accuracy in {stats.key} is {stats.accuracy:.0f}%. "
                    f"Revisit the fundamentals of this topic before solving more questions."
                ),
                topic=stats.key,
            )
        )
    return risks


def _inefficient_study(ctx: RiskContext) -> list[Risk]:
    risks = []
    for stats in ctx.topic_stats:
        if stats.total_solved <= 0:
            continue
        if stats.total_duration <= settings.INEFFICIENT_MIN_DURATION:
            continue
        if stats.accuracy >= settings.INEFFICIENT_MAX_ACCURACY:
            continue
        risks.append(
            Risk(
                id=RiskId.INEFFICIENT_STUDY,
                severity=RiskSeverity.WARNING,
                description=(
                    f"{stats.total_duration} minutes spent on {stats.key} with only "
                    f"{stats.accuracy:.0f}% accuracy. Try a different study method for this topic."
                ),
                topic=stats.key,
            )
        )
    return risks


def _inconsistent_study(ctx: RiskContext) -> list[Risk]:
    since = ctx.reference - timedelta(days=settings.INACTIVITY_DAYS)
    if any(since <= s.occurred_at <= ctx.reference for s in ctx.sessions):
        return []
    return [
        Risk(
            id=RiskId.INCONSISTENT_STUDY,
            severity=RiskSeverity.WARNING,
            description=(
                f"No study sessions in the last {settings.INACTIVITY_DAYS} days. "
                f"Short daily sessions keep momentum better than occasional long ones."
            ),
        )
    ]


RISK_RULES: tuple[RiskRule, ...] = (
    RiskRule(RiskId.GOAL_MISS_RISK, _goal_miss),
    RiskRule(RiskId.ACCURACY_DROP, _accuracy_drop),
    RiskRule(RiskId.INEFFICIENT_STUDY, _inefficient_study),
    RiskRule(RiskId.INCONSISTENT_STUDY, _inconsistent_study),
)


def evaluate_risks(
    sessions: Iterable[StudySession],
    weekly_goal: int,
    reference: datetime,
    rules: Sequence[RiskRule] = RISK_RULES,
) -> list[Risk]:
    """
    Evaluate every risk rule against a student's history.

    Args:
        sessions: Normalized sessions of one student (full history).
        weekly_goal: The student's weekly question goal.
        reference: Instant treated as "now".
        rules: Rules to evaluate (defaults to the full registry).

    Returns:
        Fired risks; empty when no rule applies.
    """
    sessions = tuple(sessions)
    ctx = RiskContext(
        sessions=sessions,
        weekly_goal=weekly_goal,
        reference=localize_reference(reference),
        topic_stats=tuple(aggregate_by_topic(sessions)),
    )

    risks: list[Risk] = []
    for rule in rules:
        fired = rule.evaluate(ctx)
        if fired:
            logger.debug(f"Risk rule {rule.id.value} fired {len(fired)} time(s)")
        risks.extend(fired)
    return risks
