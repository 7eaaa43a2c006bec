"""
Logging setup for decision-journal commands.

``configure_logging(config, command=..., tz=...)`` is called once per CLI
command. Every record is stamped with the command name, and timestamps are
rendered in the journal's configured timezone so log lines line up with the
calendar days the streak and analytics commands report on.

Library modules only call ``logging.getLogger(__name__)``. They attach
decision context through ``extra=``; the keys listed in ``CONTEXT_FIELDS``
are copied into JSON output, anything else stays on the record only.

Text format::

    2026-01-03T09:15:00+00:00 [INFO] streak decision_journal.ingestion.decision_json: Parsed 4 decisions from export.json

JSON format (``json_format = true`` under [logging])::

    {"ts": "2026-01-03T09:15:00+00:00", "level": "INFO", "command": "streak",
     "logger": "...", "msg": "...", "source": "export.json", "decision_count": 4}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from decision_journal.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(command)s %(name)s: %(message)s"

# ``extra=`` keys used by decision_journal modules.
CONTEXT_FIELDS = ("decision_id", "source", "decision_count", "categories", "nudge_key")

_NO_COMMAND = "-"


class _CommandFilter(logging.Filter):
    """Stamp each record with the running CLI command."""

    def __init__(self, command: str) -> None:
        super().__init__()
        self.command = command

    def filter(self, record: logging.LogRecord) -> bool:
        record.command = self.command
        return True


def _timestamp(created: float, tz: tzinfo) -> str:
    return datetime.fromtimestamp(created, tz=tz).isoformat(timespec="seconds")


class _ZonedFormatter(logging.Formatter):
    """Plain-text formatter with ISO timestamps in the journal timezone."""

    def __init__(self, tz: tzinfo) -> None:
        super().__init__(LOG_FORMAT)
        self.tz = tz

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        return _timestamp(record.created, self.tz)


class _JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, command, logger, msg, decision context."""

    def __init__(self, tz: tzinfo) -> None:
        super().__init__()
        self.tz = tz

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": _timestamp(record.created, self.tz),
            "level": record.levelname,
            "command": getattr(record, "command", _NO_COMMAND),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(
    config:  "LoggingConfig",
    command: str = _NO_COMMAND,
    tz:      Optional[tzinfo] = None,
) -> None:
    """Configure the root logger for one CLI command.

    Handlers write to stderr, so command output on stdout stays clean, plus
    ``config.log_file`` when set (parent directories are created).

    Args:
        config:  Logging section of ``AppConfig``.
        command: CLI command name stamped onto every record.
        tz:      Timezone for timestamps; UTC when omitted.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    zone = tz or timezone.utc

    formatter: logging.Formatter
    if config.json_format:
        formatter = _JsonFormatter(zone)
    else:
        formatter = _ZonedFormatter(zone)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    command_filter = _CommandFilter(command)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(command_filter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
