"""
Unit tests for time windows.

Tests window bounds and labels, paging with shift, session filtering and the
elapsed fraction of the week.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.enums.analytics import WindowDirection, WindowKind
from app.services.analytics.time_windows import (
    filter_sessions,
    shift,
    week_elapsed_fraction,
    window_for,
)

UTC = timezone.utc


class TestWindowFor:
    """Tests for window_for."""

    def test_week_window(self, reference):
        """Week windows run Monday 00:00 to the next Monday."""
        window = window_for(WindowKind.WEEK, reference)

        assert window.start == datetime(2025, 1, 6, tzinfo=UTC)
        assert window.end == datetime(2025, 1, 13, tzinfo=UTC)
        assert window.label == "06 Jan 2025 - 12 Jan 2025"

    def test_week_window_on_sunday_night(self):
        """Sunday belongs to the week that started the previous Monday."""
        window = window_for(WindowKind.WEEK, datetime(2025, 1, 12, 23, 59, tzinfo=UTC))
        assert window.start == datetime(2025, 1, 6, tzinfo=UTC)

    def test_month_window(self, reference):
        """Month windows run from the first to the first of the next month."""
        window = window_for(WindowKind.MONTH, reference)

        assert window.start == datetime(2025, 1, 1, tzinfo=UTC)
        assert window.end == datetime(2025, 2, 1, tzinfo=UTC)
        assert window.label == "January 2025"

    def test_december_month_window_rolls_year(self):
        """The December window ends on January 1st of the next year."""
        window = window_for(WindowKind.MONTH, datetime(2024, 12, 31, tzinfo=UTC))
        assert window.end == datetime(2025, 1, 1, tzinfo=UTC)

    def test_year_window(self, reference):
        """Year windows run January 1st to January 1st."""
        window = window_for(WindowKind.YEAR, reference)

        assert window.start == datetime(2025, 1, 1, tzinfo=UTC)
        assert window.end == datetime(2026, 1, 1, tzinfo=UTC)
        assert window.label == "2025"

    def test_all_window_is_unbounded(self, reference):
        """The all window has no bounds."""
        window = window_for(WindowKind.ALL, reference)

        assert window.start is None
        assert window.end is None
        assert window.label == "All Time"
        assert window.contains(datetime(1990, 1, 1, tzinfo=UTC))

    @pytest.mark.parametrize("kind", list(WindowKind), ids=lambda k: k.value)
    def test_window_contains_reference(self, reference, kind):
        """Every window contains its reference instant."""
        assert window_for(kind, reference).contains(reference)


class TestShift:
    """Tests for shift."""

    def test_week_shift(self, reference):
        """Week shifts move by seven days."""
        assert shift(WindowKind.WEEK, reference, WindowDirection.PREV) == reference - timedelta(days=7)
        assert shift(WindowKind.WEEK, reference, WindowDirection.NEXT) == reference + timedelta(days=7)

    def test_month_shift_clamps_day(self):
        """31 March moves to the last day of February."""
        moved = shift(WindowKind.MONTH, datetime(2025, 3, 31, tzinfo=UTC), WindowDirection.PREV)
        assert moved.date() == date(2025, 2, 28)

    def test_month_shift_leap_year(self):
        """In leap years February has 29 days."""
        moved = shift(WindowKind.MONTH, datetime(2024, 1, 31, tzinfo=UTC), WindowDirection.NEXT)
        assert moved.date() == date(2024, 2, 29)

    def test_month_shift_across_year(self):
        """Shifting past December rolls the year."""
        moved = shift(WindowKind.MONTH, datetime(2024, 12, 15, tzinfo=UTC), WindowDirection.NEXT)
        assert moved.date() == date(2025, 1, 15)

    def test_month_round_trip_stays_in_month(self, reference):
        """next then prev returns to the same month."""
        moved = shift(WindowKind.MONTH, reference, WindowDirection.NEXT)
        back = shift(WindowKind.MONTH, moved, WindowDirection.PREV)
        assert (back.year, back.month) == (reference.year, reference.month)

    def test_year_shift_from_leap_day(self):
        """29 February clamps to 28 February in a common year."""
        moved = shift(WindowKind.YEAR, datetime(2024, 2, 29, tzinfo=UTC), WindowDirection.NEXT)
        assert moved.date() == date(2025, 2, 28)

    def test_all_shift_is_identity(self, reference):
        """The all window has nothing to page through."""
        assert shift(WindowKind.ALL, reference, WindowDirection.NEXT) == reference


class TestFilterSessions:
    """Tests for filter_sessions."""

    def test_week_filter_bounds(self, reference, make_session):
        """Only sessions in [Monday, next Monday) are kept."""
        inside_start = make_session(occurred_at=datetime(2025, 1, 6, tzinfo=UTC))
        inside_end = make_session(occurred_at=datetime(2025, 1, 12, 23, 59, tzinfo=UTC))
        before = make_session(occurred_at=datetime(2025, 1, 5, 23, 59, tzinfo=UTC))
        after = make_session(occurred_at=datetime(2025, 1, 13, tzinfo=UTC))

        kept = filter_sessions(
            [before, inside_start, inside_end, after],
            window_for(WindowKind.WEEK, reference),
        )

        assert kept == [inside_start, inside_end]

    def test_every_kept_session_is_in_a_monday_to_sunday_span(self, reference, make_session):
        """Kept sessions share the ISO week of the reference."""
        sessions = [make_session(days_ago=n) for n in range(-5, 15)]
        kept = filter_sessions(sessions, window_for(WindowKind.WEEK, reference))

        assert kept
        for session in kept:
            assert session.occurred_at.isocalendar()[:2] == reference.isocalendar()[:2]

    def test_all_window_keeps_everything(self, reference, make_session):
        """The all window applies no filtering."""
        sessions = [make_session(days_ago=n) for n in (0, 400, 4000)]
        assert filter_sessions(sessions, window_for(WindowKind.ALL, reference)) == sessions


class TestWeekElapsedFraction:
    """Tests for week_elapsed_fraction."""

    @pytest.mark.parametrize(
        "day,expected",
        [
            pytest.param(6, 1 / 7, id="monday"),
            pytest.param(9, 4 / 7, id="thursday"),
            pytest.param(12, 7 / 7, id="sunday"),
        ],
    )
    def test_fraction_by_weekday(self, day, expected):
        """Days of the week that have started, over seven."""
        assert week_elapsed_fraction(datetime(2025, 1, day, 8, tzinfo=UTC)) == pytest.approx(expected)
