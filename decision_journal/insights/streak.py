"""
Daily streak calculation for the dashboard streak tracker.

Definitions
-----------
active day:
    A calendar day (in the evaluation zone) with at least one decision.
    Several decisions on one day count once.

activity:
    Seven booleans, oldest first, for today and the six days before it.

current streak:
    Consecutive active days walking backward from today, today included.
    With the default strict policy an inactive today gives 0. With
    ``today_grace=True`` an inactive today is skipped and counting starts
    from yesterday, so a streak survives until the day is over.

longest streak:
    The longest run of consecutive active days anywhere in the history,
    independent of today. Always >= current streak.

Records whose ``made_on`` cannot be parsed are skipped.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Sequence

from decision_journal.models.decision import DecisionRecord
from decision_journal.models.insight import ACTIVITY_WINDOW_DAYS, StreakResult
from decision_journal.utils.time_utils import (
    date_range,
    evaluation_zone,
    resolve_today,
    to_local_date,
)

logger = logging.getLogger(__name__)

DEFAULT_MILESTONES: tuple[int, ...] = (3, 7, 14, 30, 60, 90, 180, 365)

# Added to the current streak once every milestone has been passed.
_MILESTONE_OVERFLOW_DAYS = 30

_ONE_DAY = timedelta(days=1)


def active_dates(
    decisions: Iterable[DecisionRecord],
    tz: Optional[tzinfo] = None,
) -> set[date]:
    """Reduce decisions to the set of distinct local calendar days.

    Args:
        decisions: Decision records in any order.
        tz: Evaluation zone applied to timezone-aware ``made_on`` values.

    Returns:
        Set of active dates. Unparseable records contribute nothing.
    """
    days: set[date] = set()
    skipped = 0
    for record in decisions:
        day = to_local_date(record.made_on, tz)
        if day is None:
            skipped += 1
            logger.debug(
                "Skipping decision %s: unparseable made_on %r", record.id, record.made_on,
                extra={"decision_id": record.id},
            )
            continue
        days.add(day)
    if skipped:
        logger.debug("Skipped %d decision(s) with unparseable made_on.", skipped)
    return days


def calculate_streak(
    decisions:   Sequence[DecisionRecord],
    now:         date | datetime,
    tz:          Optional[tzinfo] = None,
    today_grace: bool = False,
) -> StreakResult:
    """Compute current streak, longest streak and 7-day activity.

    Args:
        decisions:   The full decision log.
        now:         Evaluation instant. A ``date`` or ``datetime``; aware
                     datetimes are converted into ``tz`` when given.
        tz:          Evaluation zone. Defaults to ``now.tzinfo`` when ``now``
                     is aware, else naive wall-clock dates are used.
        today_grace: If True, an inactive today does not reset the current
                     streak; counting starts from yesterday.

    Returns:
        StreakResult. Empty input gives ``(0, 0, [False] * 7)``.
    """
    if not decisions:
        return StreakResult()

    zone  = evaluation_zone(now, tz)
    today = resolve_today(now, zone)
    days  = active_dates(decisions, zone)

    window_start = today - timedelta(days=ACTIVITY_WINDOW_DAYS - 1)
    activity = tuple(day in days for day in date_range(window_start, today))

    return StreakResult(
        current_streak=_current_run(days, today, today_grace),
        longest_streak=_longest_run(days),
        activity=activity,
    )


def next_milestone(
    current_streak: int,
    milestones:     Sequence[int] = DEFAULT_MILESTONES,
) -> int:
    """Return the first milestone strictly above ``current_streak``.

    Once every milestone is passed, the target becomes
    ``current_streak + 30``.
    """
    for milestone in sorted(milestones):
        if milestone > current_streak:
            return milestone
    return current_streak + _MILESTONE_OVERFLOW_DAYS


def _current_run(days: set[date], today: date, today_grace: bool) -> int:
    """Count consecutive active days backward from today."""
    cursor = today
    if today_grace and cursor not in days:
        cursor -= _ONE_DAY

    run = 0
    while cursor in days:
        run += 1
        cursor -= _ONE_DAY
    return run


def _longest_run(days: set[date]) -> int:
    """Longest run of calendar-consecutive dates in a single sorted pass."""
    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in sorted(days):
        if previous is not None and day - previous == _ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest
