"""
Dismissal flags for dashboard nudges.

A nudge (the "log a past decision" prompt, the onboarding checklist, the
annotation layer) is shown until the user dismisses it. The dismissal is a
boolean stored under a string key in a ``DismissalStore``; callers inject
whichever store suits them instead of binding to one storage mechanism.

Implementations
---------------
InMemoryDismissalStore : dict-backed; for tests and embedding.
JsonFileDismissalStore : one JSON object ``{key: bool}`` on disk. A missing
                         file reads as "nothing dismissed".

Usage::

    gate = NudgeGate(JsonFileDismissalStore(Path("data/state/dismissals.json")),
                     REGRET_NUDGE_KEY)
    if gate.should_show():
        ...
    gate.dismiss()
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

REGRET_NUDGE_KEY = "regret-nudge-dismissed"
ONBOARDING_CHECKLIST_KEY = "onboarding_checklist_dismissed"
ANNOTATION_KEY = "annotation_dismissed"

KNOWN_NUDGE_KEYS: frozenset[str] = frozenset({
    REGRET_NUDGE_KEY,
    ONBOARDING_CHECKLIST_KEY,
    ANNOTATION_KEY,
})


class DismissalStore(ABC):
    """Boolean key/value capability backing nudge dismissal flags."""

    @abstractmethod
    def get(self, key: str) -> bool:
        """Return the flag for ``key``; unknown keys are ``False``."""

    @abstractmethod
    def set(self, key: str, value: bool) -> None:
        """Persist ``value`` under ``key``."""


class InMemoryDismissalStore(DismissalStore):
    """Dict-backed store. State lives as long as the instance."""

    def __init__(self, initial: dict[str, bool] | None = None) -> None:
        self._flags: dict[str, bool] = dict(initial or {})

    def get(self, key: str) -> bool:
        return self._flags.get(key, False)

    def set(self, key: str, value: bool) -> None:
        self._flags[key] = bool(value)


class JsonFileDismissalStore(DismissalStore):
    """Store flags in a single JSON file.

    The file is re-read on every ``get`` so separate processes see each
    other's writes. Writes create parent directories as needed.

    Attributes:
        path: Location of the JSON file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, bool]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError(f"Dismissal file {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(
                f"Dismissal file {self.path} must contain a JSON object, "
                f"got {type(data).__name__}."
            )
        bad = sorted(k for k, v in data.items() if not isinstance(v, bool))
        if bad:
            raise ValueError(
                f"Dismissal file {self.path} has non-boolean values for: {', '.join(bad)}."
            )
        return data

    def get(self, key: str) -> bool:
        return self._read().get(key, False)

    def set(self, key: str, value: bool) -> None:
        flags = self._read()
        flags[key] = bool(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(flags, indent=2, sort_keys=True), encoding="utf-8")
        logger.info(
            "Set dismissal flag %s=%s in %s", key, value, self.path,
            extra={"nudge_key": key},
        )


class NudgeGate:
    """Show/dismiss logic for one nudge.

    Attributes:
        store: The injected DismissalStore.
        key:   Flag key for this nudge.
    """

    def __init__(self, store: DismissalStore, key: str) -> None:
        if not key:
            raise ValueError("Nudge key must not be empty.")
        self.store = store
        self.key = key

    def should_show(self) -> bool:
        return not self.store.get(self.key)

    def dismiss(self) -> None:
        self.store.set(self.key, True)

    def reset(self) -> None:
        self.store.set(self.key, False)
