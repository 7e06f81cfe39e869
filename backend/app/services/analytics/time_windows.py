"""
Time Window Filter

Calendar windows used to scope reports:
- week: Monday 00:00 of the ISO week containing the reference, to the next Monday
- month: first of the month to the first of the next month
- year: January 1st to the next January 1st
- all: unbounded

Windows are half-open ([start, end)) and computed in the reporting timezone.
The reference instant is always passed in by the caller.
"""

import calendar
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from app.config import settings
from app.enums.analytics import WindowDirection, WindowKind
from app.models.analytics import StudySession, TimeWindow
from app.services.analytics.dates import calendar_day, day_start, localize_reference

logger = logging.getLogger(__name__)

ALL_TIME_LABEL = "All Time"


def window_for(
    kind: WindowKind, reference: datetime, tz: Optional[tzinfo] = None
) -> TimeWindow:
    """
    Compute the window of the given kind containing the reference instant.

    Args:
        kind: Window granularity.
        reference: Instant the window must contain.
        tz: Reporting timezone override.

    Returns:
        TimeWindow with inclusive start, exclusive end and a display label.
    """
    tz = tz or settings.reporting_tz
    reference = localize_reference(reference, tz)
    day = reference.date()

    if kind == WindowKind.WEEK:
        monday = day - timedelta(days=day.weekday())
        sunday = monday + timedelta(days=6)
        start = day_start(monday, tz)
        end = day_start(monday + timedelta(days=7), tz)
        label = f"{monday.strftime('%d %b %Y')} - {sunday.strftime('%d %b %Y')}"
    elif kind == WindowKind.MONTH:
        first = day.replace(day=1)
        if first.month == 12:
            next_first = first.replace(year=first.year + 1, month=1)
        else:
            next_first = first.replace(month=first.month + 1)
        start = day_start(first, tz)
        end = day_start(next_first, tz)
        label = first.strftime("%B %Y")
    elif kind == WindowKind.YEAR:
        first = day.replace(month=1, day=1)
        start = day_start(first, tz)
        end = day_start(first.replace(year=first.year + 1), tz)
        label = str(first.year)
    else:  # WindowKind.ALL
        return TimeWindow(kind=kind, label=ALL_TIME_LABEL, reference=reference)

    return TimeWindow(kind=kind, start=start, end=end, label=label, reference=reference)


def _add_months(reference: datetime, months: int) -> datetime:
    """Move a datetime by whole months, clamping the day of month."""
    month_index = reference.month - 1 + months
    year = reference.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return reference.replace(year=year, month=month, day=min(reference.day, last_day))


def shift(
    kind: WindowKind,
    reference: datetime,
    direction: WindowDirection,
    tz: Optional[tzinfo] = None,
) -> datetime:
    """
    Move a reference instant by one window unit, for paging through history.

    Month and year shifts keep the day of month where possible and clamp it
    otherwise (31 Mar -> 28/29 Feb). The "all" window has nothing to page
    through, so the reference is returned unchanged.
    """
    step = 1 if direction == WindowDirection.NEXT else -1
    if kind == WindowKind.ALL:
        return reference

    reference = localize_reference(reference, tz)
    if kind == WindowKind.WEEK:
        moved = reference.replace(tzinfo=None) + timedelta(weeks=step)
        return moved.replace(tzinfo=reference.tzinfo)
    if kind == WindowKind.MONTH:
        return _add_months(reference, step)
    return _add_months(reference, 12 * step)


def filter_sessions(
    sessions: Iterable[StudySession], window: TimeWindow
) -> list[StudySession]:
    """
    Keep the sessions whose instant lies in [window.start, window.end).

    Sessions without an instant are skipped.
    """
    kept = []
    for session in sessions:
        occurred_at = getattr(session, "occurred_at", None)
        if occurred_at is None:
            continue
        if window.contains(occurred_at):
            kept.append(session)
    return kept


def week_elapsed_fraction(reference: datetime, tz: Optional[tzinfo] = None) -> float:
    """
    Share of the current week's calendar days that have started.

    Monday is 1/7, Thursday 4/7 and Sunday 7/7.
    """
    return calendar_day(localize_reference(reference, tz), tz).isoweekday() / 7
