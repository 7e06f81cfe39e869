"""
Unit tests for exam scoring.

Tests the net / success rate formula, clamping of invalid counts, strengths
and weaknesses selection, and mistake categorization candidates.
"""

import pytest

from app.models.analytics import TopicResultInput
from app.services.analytics.exams import mistake_candidates, score_exam, score_topic


def _result(topic: str, correct: int = 0, incorrect: int = 0, empty: int = 0) -> TopicResultInput:
    return TopicResultInput(topic=topic, correct=correct, incorrect=incorrect, empty=empty)


class TestScoreTopic:
    """Tests for score_topic."""

    def test_quarter_point_penalty(self):
        """8 correct, 4 wrong, 0 empty gives net 7 and 58.33%."""
        score = score_topic(_result("Derivatives", correct=8, incorrect=4))

        assert score.net == pytest.approx(7.0)
        assert score.total_questions == 12
        assert score.success_rate == pytest.approx(58.333, abs=0.01)

    def test_empty_answers_count_towards_total(self):
        """Empty answers carry no penalty but lower the success rate."""
        score = score_topic(_result("Limits", correct=5, empty=5))

        assert score.net == pytest.approx(5.0)
        assert score.success_rate == pytest.approx(50.0)

    def test_no_questions(self):
        """A topic without questions has success rate 0."""
        score = score_topic(_result("Empty"))
        assert score.total_questions == 0
        assert score.success_rate == 0.0

    def test_negative_net_clamps_rate(self):
        """Net may go negative but the success rate stays at 0."""
        score = score_topic(_result("Vectors", correct=0, incorrect=8))

        assert score.net == pytest.approx(-2.0)
        assert score.success_rate == 0.0

    def test_negative_counts_are_treated_as_zero(self):
        """Invalid negative counts are clamped before scoring."""
        score = score_topic(_result("Sets", correct=4, incorrect=-3, empty=-1))

        assert score.incorrect == 0
        assert score.empty == 0
        assert score.success_rate == pytest.approx(100.0)


class TestScoreExam:
    """Tests for score_exam."""

    def test_overall_totals(self):
        """Overall net and success rate sum over all topics."""
        exam = score_exam(
            [_result("A", correct=8, incorrect=4), _result("B", correct=4, empty=4)]
        )

        assert exam.total_questions == 20
        assert exam.overall_net == pytest.approx(11.0)
        assert exam.overall_success_rate == pytest.approx(55.0)

    def test_strengths_above_threshold(self):
        """Topics above 75% are strengths, in input order."""
        exam = score_exam(
            [
                _result("Strong", correct=10),
                _result("Border", correct=3, empty=1),  # exactly 75%
                _result("Good", correct=9, empty=1),
            ]
        )
        assert exam.strengths == ["Strong", "Good"]

    def test_weaknesses_are_weakest_three_ascending(self):
        """At most three topics below 60%, lowest first."""
        exam = score_exam(
            [
                _result("W50", correct=5, empty=5),
                _result("W10", correct=1, empty=9),
                _result("W30", correct=3, empty=7),
                _result("W40", correct=4, empty=6),
                _result("OK", correct=6, empty=4),  # exactly 60%
            ]
        )
        assert [t.topic for t in exam.weaknesses] == ["W10", "W30", "W40"]

    def test_weakness_ties_keep_input_order(self):
        """Equal success rates stay in exam order."""
        exam = score_exam([_result("First", correct=2, empty=8), _result("Second", correct=2, empty=8)])
        assert [t.topic for t in exam.weaknesses] == ["First", "Second"]

    def test_success_rates_are_bounded(self):
        """Every success rate lies in [0, 100]."""
        exam = score_exam(
            [
                _result("A", correct=10),
                _result("B", incorrect=10),
                _result("C", correct=3, incorrect=3, empty=3),
                _result("D"),
            ]
        )
        for topic in exam.topics:
            assert 0.0 <= topic.success_rate <= 100.0
        assert 0.0 <= exam.overall_success_rate <= 100.0

    def test_empty_exam(self):
        """No topics give a zero score."""
        exam = score_exam([])
        assert exam.total_questions == 0
        assert exam.overall_success_rate == 0.0
        assert exam.strengths == []
        assert exam.weaknesses == []


class TestMistakeCandidates:
    """Tests for mistake_candidates."""

    def test_topics_with_lost_points(self):
        """Topics with wrong or empty answers are offered, once each."""
        results = [
            _result("Perfect", correct=10),
            _result("Wrong", correct=5, incorrect=1),
            _result("Skipped", correct=5, empty=2),
            _result("Wrong", correct=1, incorrect=1),
        ]
        assert mistake_candidates(results) == ["Wrong", "Skipped"]

    def test_nothing_to_categorize(self):
        """A perfect exam offers no candidates."""
        assert mistake_candidates([_result("A", correct=3)]) == []
