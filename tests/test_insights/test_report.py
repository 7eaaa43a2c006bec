"""
Tests for decision_journal/insights/report.py.

What we test
------------
generate_monthly_report():
  - Only decisions dated inside the requested month are counted.
  - Category and status counts keep first-seen order.
  - Average risk score skips unscored decisions and rounds half-up.
  - Top category: the first category to reach the maximum count wins.
  - Empty month -> zero counts, top category "None".
  - Aware timestamps are bucketed in the evaluation zone.
  - Month outside 1-12 raises ValueError.
"""

from __future__ import annotations

from datetime import timedelta, timezone

import pytest

from decision_journal.insights.report import generate_monthly_report
from decision_journal.models.decision import DecisionRecord
from decision_journal.taxonomy.decision_taxonomy import DecisionStatus

S = DecisionStatus.SUCCEEDED
F = DecisionStatus.FAILED
A = DecisionStatus.ACTIVE


def _rec(
    id: str,
    made_on: str | None = "2026-01-15",
    category: str = "TECH",
    status: DecisionStatus = A,
    risk: float | None = None,
) -> DecisionRecord:
    return DecisionRecord(
        id=id, made_on=made_on, category=category, status=status, ai_risk_score=risk
    )


def test_counts_only_the_requested_month() -> None:
    decisions = [
        _rec("dec", made_on="2025-12-31"),
        _rec("jan-1", made_on="2026-01-01"),
        _rec("jan-31", made_on="2026-01-31T23:00:00"),
        _rec("feb", made_on="2026-02-01"),
        _rec("last-year", made_on="2025-01-10"),
    ]
    report = generate_monthly_report(decisions, month=1, year=2026)
    assert report.total_decisions == 2
    assert report.month_name == "January"
    assert report.year == 2026
    assert report.month == 1


def test_breakdowns_keep_first_seen_order() -> None:
    decisions = [
        _rec("1", category="FINANCE", status=F),
        _rec("2", category="TECH", status=S),
        _rec("3", category="FINANCE", status=S),
    ]
    report = generate_monthly_report(decisions, month=1, year=2026)
    assert list(report.category_breakdown.items()) == [("FINANCE", 2), ("TECH", 1)]
    assert list(report.status_distribution.items()) == [("FAILED", 1), ("SUCCEEDED", 2)]


def test_average_risk_skips_unscored_and_rounds_half_up() -> None:
    decisions = [_rec("1", risk=40), _rec("2", risk=None), _rec("3", risk=51)]
    report = generate_monthly_report(decisions, month=1, year=2026)
    # (40 + 51) / 2 = 45.5
    assert report.average_risk_score == 46


def test_average_risk_is_zero_without_scores() -> None:
    report = generate_monthly_report([_rec("1"), _rec("2")], month=1, year=2026)
    assert report.average_risk_score == 0


def test_top_category_tie_goes_to_first_seen() -> None:
    decisions = [
        _rec("1", category="HIRING"),
        _rec("2", category="TECH"),
        _rec("3", category="TECH"),
        _rec("4", category="HIRING"),
    ]
    report = generate_monthly_report(decisions, month=1, year=2026)
    assert report.top_category == "HIRING"


def test_top_category_is_most_frequent() -> None:
    decisions = [_rec("1", category="HIRING"), _rec("2", category="TECH"), _rec("3", category="TECH")]
    assert generate_monthly_report(decisions, month=1, year=2026).top_category == "TECH"


def test_empty_month() -> None:
    report = generate_monthly_report([_rec("1", made_on="2026-03-01")], month=1, year=2026)
    assert report.total_decisions == 0
    assert report.category_breakdown == {}
    assert report.status_distribution == {}
    assert report.average_risk_score == 0
    assert report.top_category == "None"


def test_unparseable_dates_belong_to_no_month() -> None:
    decisions = [_rec("1"), _rec("2", made_on="soon"), _rec("3", made_on=None)]
    assert generate_monthly_report(decisions, month=1, year=2026).total_decisions == 1


def test_aware_timestamps_use_evaluation_zone() -> None:
    # 2026-02-01T03:00Z is still January 31st at UTC-5.
    decisions = [_rec("1", made_on="2026-02-01T03:00:00Z")]
    in_utc = generate_monthly_report(decisions, month=1, year=2026, tz=timezone.utc)
    in_utc_minus_5 = generate_monthly_report(
        decisions, month=1, year=2026, tz=timezone(timedelta(hours=-5))
    )
    assert in_utc.total_decisions == 0
    assert in_utc_minus_5.total_decisions == 1


@pytest.mark.parametrize("month", [0, 13, -1])
def test_month_out_of_range_raises(month: int) -> None:
    with pytest.raises(ValueError, match="month must be between 1 and 12"):
        generate_monthly_report([], month=month, year=2026)
