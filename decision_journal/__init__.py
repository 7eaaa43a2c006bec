"""Decision journal insights: streaks, related decisions, and dashboard analytics."""

__version__ = "0.1.0"
