"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``DECISION_JOURNAL_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

CLI commands receive an ``AppConfig`` instance and pass plain values (limit,
grace policy, timezone) into the insight functions — the insight functions
themselves never read config.
"""

from __future__ import annotations

import os
import tomllib
from datetime import tzinfo
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from decision_journal.utils.time_utils import resolve_timezone

# ── Sub-config models ─────────────────────────────────────────────────────────


class StreakConfig(BaseModel):
    """Daily streak settings."""

    model_config = ConfigDict(frozen=True)

    today_grace: bool = False
    milestones: list[int] = [3, 7, 14, 30, 60, 90, 180, 365]

    @field_validator("milestones")
    @classmethod
    def validate_milestones(cls, v: list[int]) -> list[int]:
        if any(m <= 0 for m in v):
            raise ValueError(f"milestones must all be positive, got {v}.")
        return sorted(set(v))


class SimilarityConfig(BaseModel):
    """Related-decision ranking settings."""

    model_config = ConfigDict(frozen=True)

    limit: int = 3


class AnalyticsConfig(BaseModel):
    """Insights page settings."""

    model_config = ConfigDict(frozen=True)

    velocity_days: int = 30

    @field_validator("velocity_days")
    @classmethod
    def validate_velocity_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"velocity_days must be >= 1, got {v}.")
        return v


class PatternsConfig(BaseModel):
    """Failure-pattern detection settings."""

    model_config = ConfigDict(frozen=True)

    min_overlap: int = 2


class NudgesConfig(BaseModel):
    """Where dismissed-nudge flags are persisted."""

    model_config = ConfigDict(frozen=True)

    dismissals_file: str = "data/state/dismissals.json"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "WARNING"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    streak: StreakConfig = StreakConfig()
    similarity: SimilarityConfig = SimilarityConfig()
    analytics: AnalyticsConfig = AnalyticsConfig()
    patterns: PatternsConfig = PatternsConfig()
    nudges: NudgesConfig = NudgesConfig()
    logging: LoggingConfig = LoggingConfig()
    timezone: str = "UTC"
    debug: bool = False

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        resolve_timezone(v)
        return v

    @property
    def tz(self) -> tzinfo:
        """The configured evaluation timezone as a ``tzinfo``."""
        return resolve_timezone(self.timezone)


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply DECISION_JOURNAL_* env vars to the raw config dict.

    Supported overrides:
      DECISION_JOURNAL_LOG_LEVEL        → raw["logging"]["level"]
      DECISION_JOURNAL_TIMEZONE         → raw["timezone"]
      DECISION_JOURNAL_DISMISSALS_FILE  → raw["nudges"]["dismissals_file"]
      DECISION_JOURNAL_DEBUG            → raw["debug"]
    """
    if log_level := os.environ.get("DECISION_JOURNAL_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if tz_name := os.environ.get("DECISION_JOURNAL_TIMEZONE"):
        raw["timezone"] = tz_name

    if dismissals := os.environ.get("DECISION_JOURNAL_DISMISSALS_FILE"):
        raw.setdefault("nudges", {})["dismissals_file"] = dismissals

    if debug := os.environ.get("DECISION_JOURNAL_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        streak=StreakConfig(**raw.get("streak", {})),
        similarity=SimilarityConfig(**raw.get("similarity", {})),
        analytics=AnalyticsConfig(**raw.get("analytics", {})),
        patterns=PatternsConfig(**raw.get("patterns", {})),
        nudges=NudgesConfig(**raw.get("nudges", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        timezone=raw.get("timezone", project.get("timezone", "UTC")),
        debug=raw.get("debug", project.get("debug", False)),
    )
