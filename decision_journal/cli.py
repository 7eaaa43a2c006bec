"""
Decision journal — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the decision export and resolve the evaluation date.
  4. Run the insight function.
  5. Report result to stdout.

Install and run::

    pip install -e .
    decision-journal --help
    decision-journal validate-config
    decision-journal streak --file export.json --today 2026-01-03
    decision-journal similar --file export.json --id dec-42
    decision-journal analytics --file export.json
    decision-journal check-pattern --file export.json --title "Move to Postgres"
    decision-journal monthly-report --file export.json --month 2026-01
    decision-journal dismiss-nudge --key regret-nudge-dismissed
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(
    name="decision-journal",
    help="Decision journal insights — streaks, related decisions and analytics.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from decision_journal.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config, command: str):
    """Set up logging from config, tagging records with the command name."""
    from decision_journal.utils.logging import configure_logging
    configure_logging(config.logging, command=command, tz=config.tz)


def _load_decisions_or_exit(file_path: str):
    """Parse the decision export, printing a friendly error and exiting on failure."""
    from decision_journal.ingestion.decision_json import parse_decision_json

    try:
        return parse_decision_json(Path(file_path))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _resolve_now(today: Optional[str], config) -> date | datetime:
    """Return the evaluation date: ``--today`` if given, else the configured-zone clock."""
    from decision_journal.utils.time_utils import local_now

    if today is None:
        return local_now(config.tz)
    try:
        return date.fromisoformat(today)
    except ValueError:
        typer.echo(f"[ERROR] Invalid --today '{today}'. Expected YYYY-MM-DD.", err=True)
        raise typer.Exit(code=1)


_FILE_OPTION_HELP = "Path to a JSON decision export (array or {'decisions': [...]})."
_TODAY_OPTION_HELP = "Evaluation date (YYYY-MM-DD). Defaults to today in the configured timezone."


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Timezone:         {config.timezone}")
    typer.echo(f"  Streak grace:     {config.streak.today_grace}")
    typer.echo(f"  Milestones:       {', '.join(str(m) for m in config.streak.milestones)}")
    typer.echo(f"  Similar limit:    {config.similarity.limit}")
    typer.echo(f"  Velocity window:  {config.analytics.velocity_days}d")
    typer.echo(f"  Dismissals file:  {config.nudges.dismissals_file}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("streak")
def streak(
    file_path: str = typer.Option(..., "--file", "-f", help=_FILE_OPTION_HELP),
    today: Optional[str] = typer.Option(None, "--today", help=_TODAY_OPTION_HELP),
    grace: Optional[bool] = typer.Option(
        None,
        "--grace/--no-grace",
        help="Let an inactive today keep yesterday's streak alive. Defaults to config.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Show the daily streak, longest streak and last 7 days of activity."""
    from decision_journal.insights.streak import calculate_streak, next_milestone
    from decision_journal.reporting.formatters import format_streak_summary
    from decision_journal.utils.time_utils import resolve_today

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "streak")

    decisions = _load_decisions_or_exit(file_path)
    now = _resolve_now(today, config)
    today_grace = config.streak.today_grace if grace is None else grace

    result = calculate_streak(decisions, now, tz=config.tz, today_grace=today_grace)
    milestone = next_milestone(result.current_streak, config.streak.milestones)

    typer.echo(f"Streak as of {resolve_today(now, config.tz)} ({len(decisions)} decisions)")
    typer.echo("")
    typer.echo(format_streak_summary(result, resolve_today(now, config.tz), milestone))


@app.command("similar")
def similar(
    file_path: str = typer.Option(..., "--file", "-f", help=_FILE_OPTION_HELP),
    decision_id: str = typer.Option(..., "--id", help="Id of the subject decision."),
    category: Optional[str] = typer.Option(
        None, "--category", help="Override the subject's category."
    ),
    tags: Optional[List[str]] = typer.Option(
        None, "--tag", help="Override the subject's tags (repeatable)."
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Max related decisions. Defaults to config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """List decisions related to a subject decision by category and tags."""
    from decision_journal.insights.similarity import score_similar
    from decision_journal.reporting.formatters import format_similar_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "similar")

    decisions = _load_decisions_or_exit(file_path)
    subject = next((d for d in decisions if d.id == decision_id), None)

    if subject is None and category is None and not tags:
        typer.echo(
            f"[ERROR] Decision '{decision_id}' not found; pass --category/--tag to rank anyway.",
            err=True,
        )
        raise typer.Exit(code=1)

    query_category = category if category is not None else (subject.category if subject else None)
    query_tags = tags if tags else (subject.tags if subject else None)
    max_results = config.similarity.limit if limit is None else limit

    scored = score_similar(decisions, decision_id, query_category, query_tags)
    top = scored[:max_results] if max_results > 0 else []

    typer.echo(f"Related decisions for {decision_id} (category={query_category}, "
               f"tags={', '.join(query_tags or []) or '-'})")
    typer.echo("")
    typer.echo(format_similar_table(top, decision_id))


@app.command("analytics")
def analytics(
    file_path: str = typer.Option(..., "--file", "-f", help=_FILE_OPTION_HELP),
    today: Optional[str] = typer.Option(None, "--today", help=_TODAY_OPTION_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Show success rate, velocity and the per-category breakdown."""
    from decision_journal.insights.analytics import calculate_analytics
    from decision_journal.reporting.formatters import format_analytics_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "analytics")

    decisions = _load_decisions_or_exit(file_path)
    now = _resolve_now(today, config)
    velocity_days = config.analytics.velocity_days

    summary = calculate_analytics(decisions, now, tz=config.tz, velocity_days=velocity_days)

    typer.echo("Decision analytics")
    typer.echo("")
    typer.echo(format_analytics_summary(summary, velocity_days))


@app.command("check-pattern")
def check_pattern(
    file_path: str = typer.Option(..., "--file", "-f", help=_FILE_OPTION_HELP),
    title: str = typer.Option(..., "--title", help="Draft decision title."),
    context: str = typer.Option("", "--context", help="Draft decision context."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Warn if a draft decision resembles a past failed or reversed one.

    Exits with code 2 when a match is found, so scripts can branch on it.
    """
    from decision_journal.insights.patterns import detect_failure_patterns
    from decision_journal.reporting.formatters import format_pattern_warning

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "check-pattern")

    decisions = _load_decisions_or_exit(file_path)
    match = detect_failure_patterns(
        title, context, decisions, min_overlap=config.patterns.min_overlap
    )

    typer.echo(format_pattern_warning(match))
    if match is not None:
        raise typer.Exit(code=2)


@app.command("monthly-report")
def monthly_report(
    file_path: str = typer.Option(..., "--file", "-f", help=_FILE_OPTION_HELP),
    month: Optional[str] = typer.Option(
        None, "--month", help="Month to report (YYYY-MM). Defaults to the current month."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Summarise one month: totals, categories, statuses and average risk score."""
    from decision_journal.insights.report import generate_monthly_report
    from decision_journal.reporting.formatters import format_monthly_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "monthly-report")

    decisions = _load_decisions_or_exit(file_path)
    year, month_num = _resolve_month(month, config)
    report = generate_monthly_report(decisions, month_num, year, tz=config.tz)

    typer.echo(format_monthly_report(report))


def _resolve_month(month: Optional[str], config) -> tuple[int, int]:
    """Return ``(year, month)`` from ``--month``, else the configured-zone clock."""
    from decision_journal.utils.time_utils import local_now

    if month is None:
        current = local_now(config.tz)
        return current.year, current.month
    try:
        parsed = datetime.strptime(month, "%Y-%m")
    except ValueError:
        typer.echo(f"[ERROR] Invalid --month '{month}'. Expected YYYY-MM.", err=True)
        raise typer.Exit(code=1)
    return parsed.year, parsed.month


def _gate_or_exit(key: str, config):
    from decision_journal.nudges.dismissal import JsonFileDismissalStore, NudgeGate

    try:
        return NudgeGate(JsonFileDismissalStore(Path(config.nudges.dismissals_file)), key)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


@app.command("nudge-status")
def nudge_status(
    key: str = typer.Option(..., "--key", help="Nudge flag key, e.g. regret-nudge-dismissed."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print whether a nudge would be shown."""
    from decision_journal.nudges.dismissal import KNOWN_NUDGE_KEYS

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "nudge-status")

    if key not in KNOWN_NUDGE_KEYS:
        typer.echo(f"[WARN] '{key}' is not a built-in nudge key.", err=True)

    gate = _gate_or_exit(key, config)
    try:
        visible = gate.should_show()
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{key}: {'shown' if visible else 'dismissed'}")


@app.command("dismiss-nudge")
def dismiss_nudge(
    key: str = typer.Option(..., "--key", help="Nudge flag key, e.g. regret-nudge-dismissed."),
    reset: bool = typer.Option(False, "--reset", help="Clear the flag so the nudge shows again."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Dismiss (or with --reset, re-enable) a dashboard nudge."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config, "dismiss-nudge")

    gate = _gate_or_exit(key, config)
    try:
        if reset:
            gate.reset()
        else:
            gate.dismiss()
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"[OK] {key} {'reset' if reset else 'dismissed'}.")


if __name__ == "__main__":
    app()
