"""
Tests for decision_journal/insights/streak.py.

What we test
------------
calculate_streak():
  - Consecutive run ending today -> current == longest == run length.
  - A gap resets the run; longest is a historical maximum.
  - Same-day decisions count as one active day.
  - Strict policy: inactive today -> current streak 0.
  - Grace policy: inactive today -> count from yesterday.
  - activity always has 7 entries, oldest first, last entry = today.
  - Unparseable made_on values are skipped, never raised.
  - Aware datetimes are bucketed in the evaluation zone.
  - Empty input -> (0, 0, [False] * 7).

next_milestone():
  - First milestone strictly above the current streak.
  - Past the last milestone -> current + 30.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from decision_journal.insights.streak import (
    DEFAULT_MILESTONES,
    active_dates,
    calculate_streak,
    next_milestone,
)
from decision_journal.models.decision import DecisionRecord
from decision_journal.models.insight import StreakResult


def _on(*days: str | None) -> list[DecisionRecord]:
    return [DecisionRecord(id=f"d{i}", made_on=d, category="TECH") for i, d in enumerate(days)]


# ── Core scenarios ────────────────────────────────────────────────────────────


def test_three_consecutive_days_ending_today(three_day_run, fixed_today) -> None:
    result = calculate_streak(three_day_run, fixed_today)
    assert result.current_streak == 3
    assert result.longest_streak == 3
    assert result.activity == (False, False, False, False, True, True, True)


def test_gap_breaks_streak(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-01", "2026-01-03"), fixed_today)
    assert result.current_streak == 1
    assert result.longest_streak == 1


def test_empty_input_is_zero_state(fixed_today) -> None:
    result = calculate_streak([], fixed_today)
    assert result.current_streak == 0
    assert result.longest_streak == 0
    assert result.activity == (False,) * 7


def test_same_day_decisions_count_once(fixed_today) -> None:
    decisions = _on("2026-01-03T08:00:00", "2026-01-03T20:30:00", "2026-01-03")
    result = calculate_streak(decisions, fixed_today)
    assert result.current_streak == 1
    assert result.longest_streak == 1
    assert sum(result.activity) == 1


def test_input_order_does_not_matter(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-03", "2026-01-01", "2026-01-02"), fixed_today)
    assert result.current_streak == 3


# ── Today policy ──────────────────────────────────────────────────────────────


def test_inactive_today_strict_policy_gives_zero(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-01", "2026-01-02"), fixed_today)
    assert result.current_streak == 0
    assert result.longest_streak == 2
    assert result.activity[-1] is False


def test_inactive_today_with_grace_counts_from_yesterday(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-01", "2026-01-02"), fixed_today, today_grace=True)
    assert result.current_streak == 2
    assert result.longest_streak == 2


def test_grace_does_not_bridge_two_missing_days(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-01"), fixed_today, today_grace=True)
    assert result.current_streak == 0


def test_grace_has_no_effect_when_today_active(three_day_run, fixed_today) -> None:
    strict = calculate_streak(three_day_run, fixed_today)
    graced = calculate_streak(three_day_run, fixed_today, today_grace=True)
    assert strict == graced


# ── Longest streak ────────────────────────────────────────────────────────────


def test_longest_streak_is_historical(fixed_today) -> None:
    old_run = [f"2025-12-{day:02d}" for day in range(10, 15)]
    result = calculate_streak(_on(*old_run, "2026-01-03"), fixed_today)
    assert result.current_streak == 1
    assert result.longest_streak == 5


def test_longest_streak_spans_month_boundary(fixed_today) -> None:
    result = calculate_streak(_on("2025-12-30", "2025-12-31", "2026-01-01"), fixed_today)
    assert result.longest_streak == 3
    assert result.current_streak == 0


def test_long_history_keeps_seven_entry_activity(fixed_today) -> None:
    days = [(fixed_today - timedelta(days=i)).isoformat() for i in range(100)]
    result = calculate_streak(_on(*days), fixed_today)
    assert result.current_streak == 100
    assert result.longest_streak == 100
    assert result.activity == (True,) * 7


def test_future_decisions_do_not_count_toward_current(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-04"), fixed_today)
    assert result.current_streak == 0
    assert result.longest_streak == 1
    assert result.activity == (False,) * 7


@pytest.mark.parametrize(
    "days",
    [
        [],
        ["2026-01-03"],
        ["2025-06-01", "2025-06-02", "2026-01-02", "2026-01-03"],
        ["2026-01-01", "2026-01-02"],
        ["2025-12-28", "2025-12-29", "2025-12-30", "2025-12-31", "2026-01-01",
         "2026-01-02", "2026-01-03"],
    ],
)
def test_invariants_hold(days, fixed_today) -> None:
    for grace in (False, True):
        result = calculate_streak(_on(*days), fixed_today, today_grace=grace)
        assert len(result.activity) == 7
        assert result.longest_streak >= result.current_streak >= 0


# ── Malformed records ─────────────────────────────────────────────────────────


def test_unparseable_dates_are_skipped(fixed_today) -> None:
    decisions = _on("not-a-date", "", "2026-13-45", "2026-01-03")
    decisions.append(DecisionRecord(id="null", made_on=None, category="TECH"))
    result = calculate_streak(decisions, fixed_today)
    assert result.current_streak == 1
    assert result.activity[-1] is True


def test_all_records_malformed_gives_zero_state(fixed_today) -> None:
    result = calculate_streak(_on("yesterday", "soon"), fixed_today)
    assert result == StreakResult()


# ── Timezones ─────────────────────────────────────────────────────────────────


def test_aware_made_on_is_bucketed_in_evaluation_zone() -> None:
    # 23:30 at UTC-5 on Jan 3 is 04:30 UTC on Jan 4.
    decisions = _on("2026-01-03T23:30:00-05:00")
    now = datetime(2026, 1, 4, 12, 0, tzinfo=timezone.utc)

    in_utc = calculate_streak(decisions, now)
    assert in_utc.current_streak == 1
    assert in_utc.activity[-1] is True

    eastern = timezone(timedelta(hours=-5))
    in_eastern = calculate_streak(decisions, now, tz=eastern)
    assert in_eastern.current_streak == 0
    assert in_eastern.activity[-2] is True


def test_zulu_suffix_is_parsed(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-03T10:00:00Z"), fixed_today)
    assert result.current_streak == 1


def test_naive_datetime_keeps_wall_clock_date(fixed_today) -> None:
    result = calculate_streak(_on("2026-01-03T23:59:59"), fixed_today)
    assert result.current_streak == 1


def test_datetime_now_is_accepted() -> None:
    result = calculate_streak(_on("2026-01-03"), datetime(2026, 1, 3, 18, 45))
    assert result.current_streak == 1


def test_calculation_does_not_mutate_input(three_day_run, fixed_today) -> None:
    before = list(three_day_run)
    calculate_streak(three_day_run, fixed_today)
    assert three_day_run == before


# ── active_dates ──────────────────────────────────────────────────────────────


def test_active_dates_deduplicates() -> None:
    days = active_dates(_on("2026-01-03", "2026-01-03T12:00:00", "bad"))
    assert days == {date(2026, 1, 3)}


# ── next_milestone ────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "streak, expected",
    [(0, 3), (2, 3), (3, 7), (6, 7), (29, 30), (364, 365), (365, 395), (400, 430)],
)
def test_next_milestone(streak, expected) -> None:
    assert next_milestone(streak) == expected


def test_next_milestone_custom_list() -> None:
    assert next_milestone(4, milestones=[10, 5]) == 5


def test_default_milestones() -> None:
    assert DEFAULT_MILESTONES == (3, 7, 14, 30, 60, 90, 180, 365)


# ── StreakResult validation ───────────────────────────────────────────────────


def test_streak_result_rejects_short_activity() -> None:
    with pytest.raises(ValidationError, match="activity"):
        StreakResult(activity=(True,) * 6)


def test_streak_result_rejects_longest_below_current() -> None:
    with pytest.raises(ValidationError, match="longest_streak"):
        StreakResult(current_streak=3, longest_streak=2)
