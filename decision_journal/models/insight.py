"""
Insight result models.

These are the plain value objects handed back to rendering code: streak
counters, the analytics summary, failure-pattern matches and monthly reports.
All are frozen; results are recomputed from the decision log, never edited in
place.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

ACTIVITY_WINDOW_DAYS = 7


class StreakResult(BaseModel):
    """Daily streak counters and the trailing 7-day activity vector.

    Attributes:
        current_streak: Consecutive active days ending today.
        longest_streak: Longest run of consecutive active days ever recorded.
        activity: Exactly 7 booleans, oldest first; the last entry is today.
    """

    model_config = ConfigDict(frozen=True)

    current_streak: int = 0
    longest_streak: int = 0
    activity: tuple[bool, ...] = (False,) * ACTIVITY_WINDOW_DAYS

    @field_validator("activity")
    @classmethod
    def validate_activity_length(cls, v: tuple[bool, ...]) -> tuple[bool, ...]:
        if len(v) != ACTIVITY_WINDOW_DAYS:
            raise ValueError(
                f"activity must have exactly {ACTIVITY_WINDOW_DAYS} entries, got {len(v)}."
            )
        return v

    @model_validator(mode="after")
    def validate_streak_order(self) -> "StreakResult":
        if self.current_streak < 0:
            raise ValueError("current_streak must be non-negative.")
        if self.longest_streak < self.current_streak:
            raise ValueError(
                f"longest_streak ({self.longest_streak}) must be >= "
                f"current_streak ({self.current_streak})."
            )
        return self

    @property
    def active_days_this_week(self) -> int:
        return sum(self.activity)


class CategoryStat(BaseModel):
    """Outcome counts for one decision category.

    ``rate`` is the integer success percentage over SUCCEEDED + FAILED
    decisions in the category (0 when none are reviewed).
    """

    model_config = ConfigDict(frozen=True)

    category: str
    total: int
    succeeded: int
    failed: int
    rate: int


class AnalyticsSummary(BaseModel):
    """Headline numbers for the insights page.

    Attributes:
        total_decisions: Every record in the log, malformed dates included.
        success_rate: Integer percentage of SUCCEEDED over all reviewed decisions.
        velocity: Decisions logged inside the trailing velocity window.
        category_breakdown: Per-category stats, largest category first.
    """

    model_config = ConfigDict(frozen=True)

    total_decisions: int = 0
    success_rate: int = 0
    velocity: int = 0
    category_breakdown: tuple[CategoryStat, ...] = ()


class PatternMatch(BaseModel):
    """A past failed decision that looks like the one being drafted."""

    model_config = ConfigDict(frozen=True)

    decision_id: str
    title: str
    reason: str
    score: int


class MonthlyReport(BaseModel):
    """Decision activity for one calendar month.

    Attributes:
        year: Calendar year.
        month: Month number, 1-12.
        month_name: English month name, e.g. ``"January"``.
        total_decisions: Decisions whose ``made_on`` falls in the month.
        category_breakdown: Count per category, in first-seen order.
        status_distribution: Count per status value, in first-seen order.
        average_risk_score: Mean ``ai_risk_score`` of the month's scored
            decisions, rounded half-up; 0 when none were scored.
        top_category: Most frequent category; the first one seen wins a tie.
            ``"None"`` for an empty month.
    """

    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    month_name: str
    total_decisions: int = 0
    category_breakdown: dict[str, int] = {}
    status_distribution: dict[str, int] = {}
    average_risk_score: int = 0
    top_category: str = "None"

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError(f"month must be between 1 and 12, got {v}.")
        return v
