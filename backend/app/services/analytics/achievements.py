"""
Achievement Evaluation

Badges are named predicates over a student's full history. Evaluation is a
pure re-check on every call; there is no incremental unlocking. Comparing the
result with the ids already stored on the student is up to the caller.

Usage:
    from app.services.analytics.achievements import evaluate_achievements

    unlocked = evaluate_achievements(profile, reference)
    newly_unlocked = sorted(unlocked - profile.unlocked_achievements)
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from app.config import settings
from app.models.analytics import StudentProfile
from app.services.analytics.aggregation import accuracy_percent
from app.services.analytics.dates import localize_reference
from app.services.analytics.goals import weekly_goal_progress
from app.services.analytics.streaks import current_streak

logger = logging.getLogger(__name__)

AchievementPredicate = Callable[[StudentProfile, datetime], bool]


@dataclass(frozen=True)
class AchievementDefinition:
    """A badge and the condition that unlocks it."""

    id: str
    name: str
    description: str
    predicate: AchievementPredicate


def _lifetime_solved(profile: StudentProfile) -> int:
    return sum(s.questions_solved for s in profile.sessions)


def _solved_at_least(threshold: int) -> AchievementPredicate:
    return lambda profile, reference: _lifetime_solved(profile) >= threshold


def _streak_at_least(days: int) -> AchievementPredicate:
    return lambda profile, reference: current_streak(profile.sessions, reference) >= days


def _goal_champion(profile: StudentProfile, reference: datetime) -> bool:
    return weekly_goal_progress(profile.sessions, profile.weekly_goal, reference).goal_met


def _subject_whiz(profile: StudentProfile, reference: datetime) -> bool:
    sessions = [s for s in profile.sessions if s.subject == settings.ACHIEVEMENT_SUBJECT]
    if len(sessions) < settings.ACHIEVEMENT_SUBJECT_MIN_SESSIONS:
        return False
    solved = sum(s.questions_solved for s in sessions)
    correct = sum(s.questions_correct for s in sessions)
    return solved > 0 and accuracy_percent(correct, solved) >= settings.ACHIEVEMENT_SUBJECT_MIN_ACCURACY


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        "first-step",
        "First Step",
        "Completed your first study session.",
        lambda profile, reference: len(profile.sessions) > 0,
    ),
    AchievementDefinition(
        "q-hunter-1", "Question Hunter I", "Solved 100 questions in total.", _solved_at_least(100)
    ),
    AchievementDefinition(
        "q-hunter-2", "Question Hunter II", "Solved 500 questions in total.", _solved_at_least(500)
    ),
    AchievementDefinition(
        "q-hunter-3", "Question Hunter III", "Solved 1000 questions in total.", _solved_at_least(1000)
    ),
    AchievementDefinition(
        "streak-3", "3 Day Streak", "Studied 3 days in a row.", _streak_at_least(3)
    ),
    AchievementDefinition(
        "streak-7", "7 Day Streak", "Studied 7 days in a row.", _streak_at_least(7)
    ),
    AchievementDefinition(
        "goal-champion",
        "Goal Champion",
        "Reached your weekly question goal.",
        _goal_champion,
    ),
    AchievementDefinition(
        "subject-whiz",
        "Subject Whiz",
        "Reached 90% overall accuracy in your focus subject.",
        _subject_whiz,
    ),
)


def evaluate_achievements(
    profile: StudentProfile,
    reference: datetime,
    definitions: Sequence[AchievementDefinition] = ACHIEVEMENTS,
) -> frozenset[str]:
    """
    Ids of every achievement whose predicate currently holds.

    Args:
        profile: Ingested student with full history.
        reference: Instant treated as "now".
        definitions: Achievements to check (defaults to the full registry).
    """
    reference = localize_reference(reference)
    unlocked = frozenset(d.id for d in definitions if d.predicate(profile, reference))
    logger.debug(f"Achievements unlocked for {profile.name!r}: {sorted(unlocked)}")
    return unlocked
