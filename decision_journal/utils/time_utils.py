"""
Time and date utilities for calendar-day bucketing.

Key concepts:
  - Decision timestamps: ``madeOn`` arrives as an ISO 8601 string, either a
    bare date (``2026-01-03``) or a datetime (``2026-01-03T21:15:00Z``).
  - Evaluation zone: the timezone whose calendar decides what "today" and
    "the day a decision was made" mean. Aware datetimes are converted into it;
    naive datetimes keep their wall-clock date.
  - Injected clock: insight functions take ``now`` as an argument. Only the
    CLI reads the system clock, via ``local_now()``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def parse_made_on(value: Optional[str]) -> date | datetime | None:
    """Parse a ``madeOn`` string into a ``date`` or ``datetime``.

    Bare dates return a ``date``; anything with a time component returns a
    ``datetime`` (aware if the string carries an offset or ``Z``).

    Returns:
        The parsed value, or ``None`` if the string is empty or unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def to_local_date(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[date]:
    """Return the calendar date of a ``madeOn`` string in the evaluation zone.

    Args:
        value: Raw ``madeOn`` string.
        tz: Evaluation timezone. Only applied to timezone-aware datetimes.

    Returns:
        A ``date`` with time-of-day dropped, or ``None`` if unparseable.
    """
    parsed = parse_made_on(value)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        if tz is not None and parsed.tzinfo is not None:
            parsed = parsed.astimezone(tz)
        return parsed.date()
    return parsed


def evaluation_zone(now: date | datetime, tz: Optional[tzinfo] = None) -> Optional[tzinfo]:
    """Pick the timezone used for day bucketing.

    Explicit ``tz`` wins; otherwise an aware ``now`` supplies its own zone;
    otherwise ``None`` (naive wall-clock dates).
    """
    if tz is not None:
        return tz
    if isinstance(now, datetime) and now.tzinfo is not None:
        return now.tzinfo
    return None


def resolve_today(now: date | datetime, tz: Optional[tzinfo] = None) -> date:
    """Return the calendar date of ``now`` in the evaluation zone."""
    if isinstance(now, datetime):
        if tz is not None and now.tzinfo is not None:
            now = now.astimezone(tz)
        return now.date()
    return now


def date_range(start: date, end: date, step_days: int = 1) -> list[date]:
    """Generate a list of dates from ``start`` to ``end`` (inclusive).

    Args:
        start: First date in the range.
        end: Last date in the range (inclusive).
        step_days: Step size in days (default 1).

    Returns:
        List of date objects.

    Raises:
        ValueError: If ``end < start`` or ``step_days < 1``.
    """
    if end < start:
        raise ValueError(f"end ({end}) must be >= start ({start}).")
    if step_days < 1:
        raise ValueError(f"step_days must be >= 1, got {step_days}.")

    result: list[date] = []
    current = start
    while current <= end:
        result.append(current)
        current += timedelta(days=step_days)
    return result


def resolve_timezone(name: str) -> tzinfo:
    """Return a ``tzinfo`` for an IANA zone name (``"UTC"`` included).

    Raises:
        ValueError: If the zone name is unknown.
    """
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone '{name}'. Expected an IANA name like 'Europe/Berlin'.")


def local_now(tz: Optional[tzinfo] = None) -> datetime:
    """Return the current datetime in ``tz`` (UTC when omitted).

    Library code never calls this — it is the CLI's clock.
    """
    return datetime.now(tz=tz or timezone.utc)
