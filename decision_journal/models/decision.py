"""
Decision record model — the read-only input to every insight function.

``DecisionRecord`` mirrors the decision payload returned by the journal API.
Field names follow Python conventions; the API's camelCase ``madeOn`` is
accepted as an alias, and unknown payload keys (comments, links, alternatives,
etc.) are ignored.

``made_on`` is stored as the raw string from the API and is NOT validated as a
date here; non-string values (epoch numbers, objects) become ``None``.
Insight functions parse it themselves and skip records they cannot read, so one
malformed timestamp never prevents a decision log from loading.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from decision_journal.taxonomy.decision_taxonomy import DecisionStatus


class DecisionRecord(BaseModel):
    """A single journaled decision.

    Attributes:
        id: Unique identifier assigned by the API.
        made_on: ISO 8601 date or datetime string (API field ``madeOn``);
            ``None`` when the API sent null.
        category: Category label, e.g. ``"TECH"``. Matched exactly, case-sensitive.
        tags: Free-text labels; order is irrelevant. ``None`` means no tags.
        status: Lifecycle state from ``DecisionStatus``.
        title: Short decision headline.
        context: Free-text background written when the decision was logged.
        ai_risk_score: Risk score (0-100) from the API's assistant, if one was
            computed (API field ``aiRiskScore``). Non-numeric values load as ``None``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    made_on: Optional[str] = Field(alias="madeOn")
    category: str
    tags: Optional[list[str]] = None
    status: DecisionStatus = DecisionStatus.ACTIVE
    title: str = ""
    context: str = ""
    ai_risk_score: Optional[float] = Field(default=None, alias="aiRiskScore")

    @field_validator("made_on", mode="before")
    @classmethod
    def coerce_made_on(cls, v: Any) -> Optional[str]:
        # Epoch numbers, objects etc. load as "no date" and are skipped later.
        return v if isinstance(v, str) else None

    @field_validator("ai_risk_score", mode="before")
    @classmethod
    def coerce_risk_score(cls, v: Any) -> Optional[float]:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        return v

    @field_validator("id")
    @classmethod
    def validate_id_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("id must not be empty.")
        return v

    @property
    def tag_set(self) -> frozenset[str]:
        """Distinct tags as a set; empty when ``tags`` is absent."""
        return frozenset(self.tags or ())
