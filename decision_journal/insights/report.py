"""
Monthly decision report.

Decisions are assigned to a month by the calendar date of ``made_on`` in the
evaluation zone (same bucketing as the streak calculator). Records with an
unreadable ``made_on`` belong to no month.

The average risk score only counts decisions that carry ``ai_risk_score``.
"""

from __future__ import annotations

import calendar
import math
from datetime import tzinfo
from typing import Optional, Sequence

from decision_journal.models.decision import DecisionRecord
from decision_journal.models.insight import MonthlyReport
from decision_journal.utils.time_utils import to_local_date

NO_TOP_CATEGORY = "None"


def generate_monthly_report(
    decisions: Sequence[DecisionRecord],
    month:     int,
    year:      int,
    tz:        Optional[tzinfo] = None,
) -> MonthlyReport:
    """Summarise the decisions made in one calendar month.

    Args:
        decisions: The full decision log.
        month:     Month number, 1-12.
        year:      Calendar year.
        tz:        Zone used to read aware ``made_on`` timestamps.

    Returns:
        MonthlyReport. A month with no decisions gives zero counts and
        ``top_category == "None"``.

    Raises:
        ValueError: If ``month`` is outside 1-12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}.")

    in_month = []
    for record in decisions:
        day = to_local_date(record.made_on, tz)
        if day is not None and day.year == year and day.month == month:
            in_month.append(record)

    categories: dict[str, int] = {}
    statuses: dict[str, int] = {}
    risk_scores: list[float] = []
    for record in in_month:
        categories[record.category] = categories.get(record.category, 0) + 1
        statuses[record.status.value] = statuses.get(record.status.value, 0) + 1
        if record.ai_risk_score is not None:
            risk_scores.append(record.ai_risk_score)

    average = 0
    if risk_scores:
        average = int(math.floor(sum(risk_scores) / len(risk_scores) + 0.5))

    return MonthlyReport(
        year=year,
        month=month,
        month_name=calendar.month_name[month],
        total_decisions=len(in_month),
        category_breakdown=categories,
        status_distribution=statuses,
        average_risk_score=average,
        top_category=_top_category(categories),
    )


def _top_category(counts: dict[str, int]) -> str:
    top, best = NO_TOP_CATEGORY, 0
    for category, count in counts.items():
        if count > best:
            top, best = category, count
    return top
