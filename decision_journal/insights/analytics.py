"""
Insights page analytics: success rate, velocity and per-category outcomes.

Success rates are integer percentages rounded half-up. The overall rate
treats SUCCEEDED, FAILED and REVERSED as reviewed; the per-category rate
only counts SUCCEEDED and FAILED.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Sequence

from decision_journal.models.decision import DecisionRecord
from decision_journal.models.insight import AnalyticsSummary, CategoryStat
from decision_journal.taxonomy.decision_taxonomy import (
    CATEGORY_REVIEWED_STATUSES,
    REVIEWED_STATUSES,
    DecisionStatus,
)
from decision_journal.utils.time_utils import evaluation_zone, resolve_today, to_local_date

DEFAULT_VELOCITY_DAYS = 30


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def calculate_analytics(
    decisions:     Sequence[DecisionRecord],
    now:           date | datetime,
    tz:            Optional[tzinfo] = None,
    velocity_days: int = DEFAULT_VELOCITY_DAYS,
) -> AnalyticsSummary:
    """Summarise the decision log for the insights page.

    Args:
        decisions:     The full decision log.
        now:           Evaluation instant (see ``calculate_streak``).
        tz:            Evaluation zone.
        velocity_days: Size of the trailing velocity window in days.

    Returns:
        AnalyticsSummary. Empty input gives an all-zero summary.
    """
    if not decisions:
        return AnalyticsSummary()

    zone   = evaluation_zone(now, tz)
    today  = resolve_today(now, zone)
    cutoff = today - timedelta(days=velocity_days)

    reviewed  = sum(1 for d in decisions if d.status in REVIEWED_STATUSES)
    succeeded = sum(1 for d in decisions if d.status == DecisionStatus.SUCCEEDED)

    velocity = 0
    for record in decisions:
        day = to_local_date(record.made_on, zone)
        if day is not None and day > cutoff:
            velocity += 1

    return AnalyticsSummary(
        total_decisions=len(decisions),
        success_rate=_percent(succeeded, reviewed),
        velocity=velocity,
        category_breakdown=tuple(category_breakdown(decisions)),
    )


def category_breakdown(decisions: Sequence[DecisionRecord]) -> list[CategoryStat]:
    """Per-category outcome counts, largest category first.

    Categories with equal totals keep first-seen order.
    """
    by_category: dict[str, list[DecisionRecord]] = {}
    for record in decisions:
        by_category.setdefault(record.category, []).append(record)

    stats: list[CategoryStat] = []
    for category, items in by_category.items():
        cat_succeeded = sum(1 for d in items if d.status == DecisionStatus.SUCCEEDED)
        cat_failed    = sum(1 for d in items if d.status == DecisionStatus.FAILED)
        cat_reviewed  = sum(1 for d in items if d.status in CATEGORY_REVIEWED_STATUSES)
        stats.append(
            CategoryStat(
                category=category,
                total=len(items),
                succeeded=cat_succeeded,
                failed=cat_failed,
                rate=_percent(cat_succeeded, cat_reviewed),
            )
        )

    return sorted(stats, key=lambda s: -s.total)
