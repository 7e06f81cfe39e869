"""
Exam Score Calculation

Multiple-choice exam scoring with a quarter-point penalty per wrong answer:

    net = correct - incorrect * EXAM_WRONG_ANSWER_PENALTY
    success_rate = net / (correct + incorrect + empty) * 100

Net may go negative when wrong answers outweigh correct ones, but the success
rate is clamped to [0, 100] and is 0 when a topic has no questions.
"""

import logging
from collections.abc import Iterable

from app.config import settings
from app.models.analytics import ExamScore, TopicResultInput, TopicScore

logger = logging.getLogger(__name__)


def _rate(net: float, total: int) -> float:
    if total <= 0:
        return 0.0
    return max(0.0, min(100.0, net / total * 100))


def score_topic(result: TopicResultInput) -> TopicScore:
    """Derive net and success rate for one topic; negative counts become 0."""
    correct = max(0, result.correct)
    incorrect = max(0, result.incorrect)
    empty = max(0, result.empty)
    total = correct + incorrect + empty
    net = correct - incorrect * settings.EXAM_WRONG_ANSWER_PENALTY

    return TopicScore(
        topic=result.topic,
        correct=correct,
        incorrect=incorrect,
        empty=empty,
        total_questions=total,
        net=net,
        success_rate=_rate(net, total),
    )


def score_exam(topic_results: Iterable[TopicResultInput]) -> ExamScore:
    """
    Score an exam from its per-topic results.

    Strengths are topics above EXAM_STRENGTH_THRESHOLD. Weaknesses are the
    lowest-scoring topics below EXAM_WEAKNESS_THRESHOLD, ascending by success
    rate (input order on ties), at most EXAM_MAX_WEAKNESSES of them.

    Args:
        topic_results: Correct/incorrect/empty counts per topic, in exam order.

    Returns:
        ExamScore with per-topic scores and overall net/success rate.
    """
    topics = [score_topic(result) for result in topic_results]

    total_questions = sum(t.total_questions for t in topics)
    overall_net = sum(t.net for t in topics)

    strengths = [
        t.topic for t in topics if t.success_rate > settings.EXAM_STRENGTH_THRESHOLD
    ]
    weak = [t for t in topics if t.success_rate < settings.EXAM_WEAKNESS_THRESHOLD]
    weaknesses = sorted(weak, key=lambda t: t.success_rate)[: settings.EXAM_MAX_WEAKNESSES]

    logger.debug(
        f"Scored exam with {len(topics)} topics: net={overall_net}, "
        f"{len(strengths)} strengths, {len(weaknesses)} weaknesses"
    )

    return ExamScore(
        topics=topics,
        total_questions=total_questions,
        overall_net=overall_net,
        overall_success_rate=_rate(overall_net, total_questions),
        strengths=strengths,
        weaknesses=weaknesses,
    )


def mistake_candidates(topic_results: Iterable[TopicResultInput]) -> list[str]:
    """Topics with at least one wrong or empty answer, offered for error categorization."""
    candidates: list[str] = []
    for result in topic_results:
        if (result.incorrect > 0 or result.empty > 0) and result.topic not in candidates:
            candidates.append(result.topic)
    return candidates
