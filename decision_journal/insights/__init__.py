"""
Insight engine: pure functions over an in-memory decision log.

Modules
-------
streak     : calculate_streak() + active_dates() + next_milestone().
similarity : ScoredDecision dataclass + compute_match_score() +
             score_similar() + rank_similar().
analytics  : calculate_analytics() — success rate, velocity, category breakdown.
patterns   : detect_failure_patterns() — keyword overlap with failed decisions.
report     : generate_monthly_report() — one month of totals and breakdowns.

No module here performs I/O or reads the clock; ``now`` is always a parameter.
"""
