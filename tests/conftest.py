"""
Shared pytest fixtures for the decision journal test suite.

Provides:
  - ``make_decision``: factory for ``DecisionRecord`` objects with sensible
    defaults, so tests only spell out the fields they care about.
  - ``fixed_today``: the pinned evaluation date used across insight tests.
  - Sample decision logs for streak and similarity scenarios.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

import pytest

from decision_journal.models.decision import DecisionRecord
from decision_journal.taxonomy.decision_taxonomy import DecisionStatus


def build_decision(
    id: str = "dec-1",
    made_on: Optional[str] = "2026-01-03",
    category: str = "TECH",
    tags: Optional[list[str]] = None,
    status: DecisionStatus = DecisionStatus.ACTIVE,
    title: str = "",
    context: str = "",
    ai_risk_score: Optional[float] = None,
) -> DecisionRecord:
    return DecisionRecord(
        id=id,
        made_on=made_on,
        category=category,
        tags=tags,
        status=status,
        title=title,
        context=context,
        ai_risk_score=ai_risk_score,
    )


@pytest.fixture
def make_decision() -> Callable[..., DecisionRecord]:
    """Factory fixture returning ``build_decision``."""
    return build_decision


@pytest.fixture
def fixed_today() -> date:
    """Pinned "today" for time-dependent tests."""
    return date(2026, 1, 3)


@pytest.fixture
def three_day_run() -> list[DecisionRecord]:
    """Decisions on 2026-01-01, 01-02 and 01-03."""
    return [
        build_decision(id="d1", made_on="2026-01-01"),
        build_decision(id="d2", made_on="2026-01-02"),
        build_decision(id="d3", made_on="2026-01-03"),
    ]


@pytest.fixture
def ranking_candidates() -> list[DecisionRecord]:
    """Subject (TECH, [db]) plus three candidates scoring 3, 2 and 5."""
    return [
        build_decision(id="subject", category="TECH", tags=["db"]),
        build_decision(id="cand-a", category="TECH", tags=[]),
        build_decision(id="cand-b", category="FINANCE", tags=["db", "scaling"]),
        build_decision(id="cand-c", category="TECH", tags=["db"]),
    ]
