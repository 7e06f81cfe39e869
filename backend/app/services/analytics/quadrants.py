"""
Quadrant Classification

Partitions topics into four effort/performance quadrants using averages
computed from the student's own topics as the partition lines:

                     accuracy >= avg       accuracy < avg
    duration >= avg  Mastery               Priority Review
    duration <  avg  Efficient             Fresh Start

Only practice sessions count; topic reviews are passive and say nothing
about tested performance. Ties on either axis resolve to the ">=" branch.
"""

import logging
from collections.abc import Iterable

from app.enums.analytics import Quadrant, SessionKind
from app.models.analytics import QuadrantMatrix, StudySession, TopicQuadrant
from app.services.analytics.aggregation import aggregate_by_topic

logger = logging.getLogger(__name__)


def classify_quadrant(
    duration: float, accuracy: float, avg_duration: float, avg_accuracy: float
) -> Quadrant:
    """Quadrant of a single topic given the matrix averages."""
    long_study = duration >= avg_duration
    accurate = accuracy >= avg_accuracy

    if long_study and accurate:
        return Quadrant.MASTERY
    if accurate:
        return Quadrant.EFFICIENT
    if long_study:
        return Quadrant.PRIORITY_REVIEW
    return Quadrant.FRESH_START


def build_quadrant_matrix(sessions: Iterable[StudySession]) -> QuadrantMatrix:
    """
    Classify every practised topic into its quadrant.

    avg_duration is the mean of per-topic total durations. avg_accuracy is
    weighted by questions solved (sum of accuracy x questions over total
    questions), not a simple mean of topic accuracies.

    Args:
        sessions: Normalized sessions (any kind; topic reviews are skipped).

    Returns:
        QuadrantMatrix; empty with zero averages when no topic has a solved
        question.
    """
    practice = [s for s in sessions if s.kind == SessionKind.PRACTICE]
    topics = [t for t in aggregate_by_topic(practice) if t.total_solved > 0]
    if not topics:
        return QuadrantMatrix()

    total_questions = sum(t.total_solved for t in topics)
    avg_duration = sum(t.total_duration for t in topics) / len(topics)
    avg_accuracy = sum(t.accuracy * t.total_solved for t in topics) / total_questions

    logger.debug(
        f"Quadrant averages over {len(topics)} topics: "
        f"duration={avg_duration:.1f}, accuracy={avg_accuracy:.1f}"
    )

    return QuadrantMatrix(
        topics=[
            TopicQuadrant(
                topic=t.key,
                subject=t.subject,
                topic_name=t.topic,
                duration=t.total_duration,
                accuracy=t.accuracy,
                questions=t.total_solved,
                quadrant=classify_quadrant(
                    t.total_duration, t.accuracy, avg_duration, avg_accuracy
                ),
            )
            for t in topics
        ],
        avg_duration=avg_duration,
        avg_accuracy=avg_accuracy,
    )
