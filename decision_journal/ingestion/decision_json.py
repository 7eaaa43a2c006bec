"""
JSON import parser for exported decision logs.

Accepted layouts (top level):
  - An array of decision objects, as returned by ``GET /decisions``.
  - An object with a ``"decisions"`` array (full workspace export).

Each decision object needs at least ``id``, ``madeOn`` and ``category``.
Optional keys: ``tags``, ``status``, ``title``, ``context``, ``aiRiskScore``.
Any other keys (comments, links, alternatives, ...) are ignored.

``madeOn`` is not checked here — a decision with an unreadable timestamp
still loads, and the insight functions skip it. Categories outside
``DecisionCategory`` also load; they are reported once at WARNING level.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from decision_journal.models.decision import DecisionRecord
from decision_journal.taxonomy.decision_taxonomy import DecisionCategory

logger = logging.getLogger(__name__)

REQUIRED_DECISION_KEYS = frozenset({"id", "madeOn", "category"})

_MAX_ERRORS_SHOWN = 10


def parse_decision_json(path: Path) -> list[DecisionRecord]:
    """Parse a JSON decision export into validated :class:`DecisionRecord` objects.

    All entries are validated before any are returned. If **any** entry
    fails, a single :class:`ValueError` is raised listing the first 10 failures.

    Args:
        path: Path to the JSON file (must exist).

    Returns:
        Decision records in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON, an unexpected layout, invalid entries,
            or duplicate ids.
    """
    if not path.exists():
        raise FileNotFoundError(f"Decision file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name} is not valid JSON: {exc}") from exc

    entries = _extract_entries(raw, path)
    if not entries:
        logger.warning("Decision file contains no decisions: %s", path)
        return []

    records = parse_decision_entries(entries, source=path.name)
    logger.info(
        "Parsed %d decisions from %s", len(records), path.name,
        extra={"source": path.name, "decision_count": len(records)},
    )
    _warn_unknown_categories(records, path.name)
    return records


def parse_decision_entries(
    entries: list[Any],
    source: str = "<input>",
) -> list[DecisionRecord]:
    """Validate a list of decision dicts (already decoded from JSON).

    Raises:
        ValueError: If any entry is invalid or an id repeats.
    """
    records: list[DecisionRecord] = []
    errors: list[tuple[int, str]] = []
    seen_ids: set[str] = set()

    for i, entry in enumerate(entries):
        try:
            record = _entry_to_record(entry)
        except (ValueError, ValidationError) as exc:
            errors.append((i, str(exc)))
            continue
        if record.id in seen_ids:
            errors.append((i, f"Duplicate decision id '{record.id}'."))
            continue
        seen_ids.add(record.id)
        records.append(record)

    if errors:
        detail = "\n".join(f"  Entry {i}: {msg}" for i, msg in errors[:_MAX_ERRORS_SHOWN])
        extra = len(errors) - _MAX_ERRORS_SHOWN
        suffix = f"\n  … and {extra} more" if extra > 0 else ""
        raise ValueError(
            f"{len(errors)} decision(s) failed validation in {source}:\n{detail}{suffix}"
        )

    return records


# ── Private helpers ────────────────────────────────────────────────────────────

def _warn_unknown_categories(records: list[DecisionRecord], source: str) -> None:
    """Log categories outside ``DecisionCategory``. They still load and match."""
    known = {c.value for c in DecisionCategory}
    unknown = sorted({r.category for r in records} - known)
    if unknown:
        logger.warning(
            "Unrecognised categories in %s: %s", source, ", ".join(unknown),
            extra={"source": source, "categories": unknown},
        )


def _extract_entries(raw: Any, path: Path) -> list[Any]:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("decisions"), list):
        return raw["decisions"]
    raise ValueError(
        f"{path.name} must contain a JSON array of decisions "
        "or an object with a 'decisions' array."
    )


def _entry_to_record(entry: Any) -> DecisionRecord:
    """Convert one decoded JSON object into a :class:`DecisionRecord`.

    Raises:
        ValueError: If the entry is not an object or lacks required keys.
        pydantic.ValidationError: On model-level validation failure.
    """
    if not isinstance(entry, dict):
        raise ValueError(f"Expected a JSON object, got {type(entry).__name__}.")

    present = set(entry)
    if "made_on" in present:
        present.add("madeOn")
    missing = REQUIRED_DECISION_KEYS - present
    if missing:
        raise ValueError(f"Missing required keys: {sorted(missing)}")

    return DecisionRecord.model_validate(entry)
