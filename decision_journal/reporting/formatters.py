"""
ASCII terminal formatters for CLI insight commands.

All formatters accept insight result objects and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Activity strip
--------------
The 7-day activity vector is drawn oldest-first with one cell per day::

    Mon Tue Wed Thu Fri Sat Sun
     x   x   .   x   x   x   x
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from decision_journal.insights.similarity import ScoredDecision
from decision_journal.models.insight import (
    AnalyticsSummary,
    MonthlyReport,
    PatternMatch,
    StreakResult,
)

_ACTIVE_CELL = "x"
_IDLE_CELL = "."


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


# ── Streak ────────────────────────────────────────────────────────────────────


def format_activity_strip(activity: Sequence[bool], today: date) -> str:
    """Return a two-line weekday header + activity cell strip.

    Args:
        activity: Oldest-first booleans; the last entry is ``today``.
        today:    Date of the last cell, used for weekday labels.
    """
    n = len(activity)
    days = [today - timedelta(days=n - 1 - i) for i in range(n)]
    header = " ".join(f"{d.strftime('%a'):>3}" for d in days)
    cells  = " ".join(f"{(_ACTIVE_CELL if a else _IDLE_CELL):>3}" for a in activity)
    return f"  {header}\n  {cells}"


def format_streak_summary(
    result:         StreakResult,
    today:          date,
    next_milestone: Optional[int] = None,
) -> str:
    """Format streak counters, milestone and the activity strip.

    Example::

      Daily streak:     3 days
      Longest streak:   5 days
      Next milestone:   7 days
      Active this week: 6/7

        Mon Tue Wed Thu Fri Sat Sun
          x   x   .   x   x   x   x
    """
    lines = [
        f"  Daily streak:     {_plural(result.current_streak, 'day')}",
        f"  Longest streak:   {_plural(result.longest_streak, 'day')}",
    ]
    if next_milestone is not None:
        lines.append(f"  Next milestone:   {_plural(next_milestone, 'day')}")
    lines.append(
        f"  Active this week: {result.active_days_this_week}/{len(result.activity)}"
    )
    lines.append("")
    lines.append(format_activity_strip(result.activity, today))
    return "\n".join(lines)


# ── Similar decisions ─────────────────────────────────────────────────────────


def format_similar_table(scored: Sequence[ScoredDecision], subject_id: str) -> str:
    """Format ranked related decisions as an ASCII table.

    Rows appear in rank order (already ordered by the ranker)::

      Rank  Score  Category    Made on     Id        Shared tags
      -----------------------------------------------------------
         1      5  TECH        2026-01-02  dec-3     db
    """
    if not scored:
        return f"  No related decisions for '{subject_id}'."

    header = f"  {'Rank':>4}  {'Score':>5}  {'Category':<10}  {'Made on':<10}  {'Id':<12}  Shared tags"
    rule = "  " + "-" * (len(header) - 2)
    rows = [header, rule]
    for rank, sd in enumerate(scored, start=1):
        made_on = (sd.record.made_on or "?")[:10]
        shared  = ", ".join(sorted(sd.shared_tags)) or "-"
        rows.append(
            f"  {rank:>4}  {sd.score:>5}  {sd.record.category:<10.10}  "
            f"{made_on:<10}  {sd.record.id:<12.12}  {shared}"
        )
    return "\n".join(rows)


# ── Analytics ─────────────────────────────────────────────────────────────────


def format_analytics_summary(summary: AnalyticsSummary, velocity_days: int = 30) -> str:
    """Format headline analytics followed by a per-category table."""
    lines = [
        f"  Total decisions:  {summary.total_decisions}",
        f"  Success rate:     {summary.success_rate}%",
        f"  Velocity ({velocity_days}d):    {summary.velocity}",
    ]
    if not summary.category_breakdown:
        return "\n".join(lines)

    lines.append("")
    header = f"  {'Category':<12}  {'Total':>5}  {'Won':>4}  {'Lost':>4}  {'Rate':>5}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for stat in summary.category_breakdown:
        lines.append(
            f"  {stat.category:<12.12}  {stat.total:>5}  {stat.succeeded:>4}  "
            f"{stat.failed:>4}  {stat.rate:>4}%"
        )
    return "\n".join(lines)


# ── Failure patterns ──────────────────────────────────────────────────────────


def format_pattern_warning(match: Optional[PatternMatch]) -> str:
    """Return a one- or two-line failure-pattern warning."""
    if match is None:
        return "  [OK] No similar failed decisions found."
    return (
        f"  [WARN] Looks like a past failure: {match.title} ({match.decision_id})\n"
        f"         {match.reason}"
    )


# ── Monthly report ────────────────────────────────────────────────────────────


def format_monthly_report(report: MonthlyReport) -> str:
    """Format a monthly report: headline numbers, then category and status counts.

    Example::

      January 2026
      Total decisions:  4
      Top category:     TECH
      Avg risk score:   45

      Category      Count
      -------------------
      TECH              2
    """
    lines = [
        f"  {report.month_name} {report.year}",
        f"  Total decisions:  {report.total_decisions}",
        f"  Top category:     {report.top_category}",
        f"  Avg risk score:   {report.average_risk_score}",
    ]
    for title, counts in (
        ("Category", report.category_breakdown),
        ("Status", report.status_distribution),
    ):
        if not counts:
            continue
        header = f"  {title:<12}  {'Count':>5}"
        lines.append("")
        lines.append(header)
        lines.append("  " + "-" * (len(header) - 2))
        for label, count in counts.items():
            lines.append(f"  {label:<12.12}  {count:>5}")
    return "\n".join(lines)
