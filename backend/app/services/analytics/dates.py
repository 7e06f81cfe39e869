"""
Date Normalization

Study session dates reach the engine in three shapes:
- Timestamp: a document-store timestamp exposing integer seconds since epoch
  (either as a mapping {"seconds": ..., "nanoseconds": ...} or as an object
  with a `seconds` attribute)
- IsoString: a date/time string
- NativeDate: a Python date or datetime

Each raw value is first classified into one of these variants and then
converted by a single function into a timezone-aware instant in the
reporting timezone. Unparseable values produce None and never raise, so a
bad record can be excluded without aborting a report.

Usage:
    from app.services.analytics.dates import normalize_instant, calendar_day

    instant = normalize_instant({"seconds": 1736150400})
    if instant is not None:
        day = calendar_day(instant)
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional, Union

import pandas as pd

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Timestamp:
    """Seconds (and optional nanoseconds) since the Unix epoch."""

    seconds: int
    nanoseconds: int = 0


@dataclass(frozen=True)
class IsoString:
    """A calendar date/time string."""

    value: str


@dataclass(frozen=True)
class NativeDate:
    """A date or datetime value."""

    value: date


DateSource = Union[Timestamp, IsoString, NativeDate]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _timestamp_fields(raw: Any) -> Optional[Timestamp]:
    """Extract seconds/nanoseconds from a timestamp-like mapping or object."""
    if isinstance(raw, Mapping):
        seconds = raw.get("seconds", raw.get("_seconds"))
        nanoseconds = raw.get("nanoseconds", raw.get("_nanoseconds", 0))
    else:
        seconds = getattr(raw, "seconds", None)
        nanoseconds = getattr(raw, "nanoseconds", 0)

    if not _is_number(seconds):
        return None
    if not _is_number(nanoseconds):
        nanoseconds = 0
    return Timestamp(seconds=int(seconds), nanoseconds=int(nanoseconds))


def classify_date(raw: Any) -> Optional[DateSource]:
    """
    Classify a raw date value into its source representation.

    Args:
        raw: Value found in a record's date field.

    Returns:
        The matching DateSource variant, or None when the value has none of
        the supported shapes.
    """
    if raw is None or isinstance(raw, (bool, timedelta)):
        return None
    if isinstance(raw, (Timestamp, IsoString, NativeDate)):
        return raw
    if isinstance(raw, str):
        return IsoString(raw.strip())
    if isinstance(raw, date):
        return NativeDate(raw)
    return _timestamp_fields(raw)


def _to_datetime(source: DateSource) -> Optional[datetime]:
    """Convert a classified source to a (possibly naive) datetime."""
    if isinstance(source, Timestamp):
        instant = datetime.fromtimestamp(source.seconds, tz=settings.reporting_tz)
        return instant + timedelta(microseconds=source.nanoseconds // 1000)

    if isinstance(source, IsoString):
        # Relative keywords such as "now" or "today" are not dates.
        if not any(ch.isdigit() for ch in source.value):
            return None
        parsed = pd.to_datetime(source.value, errors="coerce")
        if pd.isna(parsed):
            return None
        return parsed.to_pydatetime()

    value = source.value
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def normalize_instant(raw: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Normalize a raw date value to an aware instant in the reporting timezone.

    Naive values are interpreted in the reporting timezone; aware values are
    converted to it. A bare date becomes the start of that day.

    Args:
        raw: Timestamp-like value, date string, date/datetime, or a
            DateSource variant.
        tz: Target timezone (defaults to settings.ANALYTICS_TIMEZONE).

    Returns:
        Aware datetime, or None if the value cannot be interpreted.
    """
    source = classify_date(raw)
    if source is None:
        return None

    tz = tz or settings.reporting_tz
    try:
        instant = _to_datetime(source)
        if instant is None:
            return None
        if instant.tzinfo is None:
            return instant.replace(tzinfo=tz)
        return instant.astimezone(tz)
    except (OverflowError, OSError, ValueError, TypeError) as e:
        logger.debug(f"Unparseable date {raw!r}: {e}")
        return None


def localize_reference(reference: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express a reference instant in the reporting timezone.

    Naive values are taken as wall-clock time in that timezone, never in the
    host's local timezone.
    """
    tz = tz or settings.reporting_tz
    if reference.tzinfo is None:
        return reference.replace(tzinfo=tz)
    return reference.astimezone(tz)


def calendar_day(instant: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of an instant in the reporting timezone."""
    return localize_reference(instant, tz).date()


def day_start(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Midnight at the start of a calendar day in the reporting timezone."""
    return datetime.combine(day, time.min, tzinfo=tz or settings.reporting_tz)


def reporting_now() -> datetime:
    """Current instant in the reporting timezone."""
    return datetime.now(settings.reporting_tz)
