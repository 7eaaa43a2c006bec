"""
Related-decision ranking for the decision detail page.

Score formula (integer)
-----------------------
    score = 3 * (record.category == category)
          + 2 * |record.tags ∩ tags|

Matching is exact and case-sensitive; tags are compared as sets, so a tag
repeated on either side counts once. A single tag may be passed as a plain
string.

Ranking
-------
1. Drop the subject decision (``exclude_id``).
2. Drop records with score 0 — unrelated decisions never pad the list.
3. Sort by score descending. Python's sort is stable, so equal scores keep
   their input order.
4. Truncate to ``limit``. ``limit <= 0`` returns an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from decision_journal.models.decision import DecisionRecord

CATEGORY_MATCH_POINTS = 3
SHARED_TAG_POINTS = 2
DEFAULT_LIMIT = 3


@dataclass(frozen=True)
class ScoredDecision:
    """A candidate decision with its match score breakdown.

    Attributes:
        record:         The candidate DecisionRecord.
        score:          Total integer match score.
        category_match: True if the category matched exactly.
        shared_tags:    Tags present on both the candidate and the query.
    """

    record:         DecisionRecord
    score:          int
    category_match: bool
    shared_tags:    frozenset[str]


def _query_tags(tags: Optional[Iterable[str]]) -> frozenset[str]:
    # A bare string is one tag, not a collection of characters.
    if isinstance(tags, str):
        return frozenset({tags})
    return frozenset(tags or ())


def _score(
    record:     DecisionRecord,
    category:   Optional[str],
    query_tags: frozenset[str],
) -> ScoredDecision:
    category_match = category is not None and record.category == category
    shared = record.tag_set & query_tags
    score = (CATEGORY_MATCH_POINTS if category_match else 0) + SHARED_TAG_POINTS * len(shared)
    return ScoredDecision(
        record=record,
        score=score,
        category_match=category_match,
        shared_tags=shared,
    )


def compute_match_score(
    record:   DecisionRecord,
    category: Optional[str],
    tags:     Optional[Iterable[str]],
) -> int:
    """Return the integer match score of ``record`` against a category and tags."""
    return _score(record, category, _query_tags(tags)).score


def score_similar(
    decisions:  Sequence[DecisionRecord],
    exclude_id: Optional[str],
    category:   Optional[str],
    tags:       Optional[Iterable[str]],
) -> list[ScoredDecision]:
    """Score every related decision, best first, without truncation.

    Args:
        decisions:  The full decision log.
        exclude_id: Id of the subject decision; never included in the result.
        category:   Subject category.
        tags:       Subject tags (``None`` means no tags).

    Returns:
        ScoredDecision list with score > 0, stable-sorted by score descending.
    """
    query_tags = _query_tags(tags)
    scored = [
        _score(record, category, query_tags)
        for record in decisions
        if record.id != exclude_id
    ]
    related = [sd for sd in scored if sd.score > 0]
    return sorted(related, key=lambda sd: -sd.score)


def rank_similar(
    decisions:  Sequence[DecisionRecord],
    exclude_id: Optional[str],
    category:   Optional[str],
    tags:       Optional[Iterable[str]],
    limit:      int = DEFAULT_LIMIT,
) -> list[DecisionRecord]:
    """Return up to ``limit`` decisions most related to the subject.

    See the module docstring for the scoring and ordering rules.
    """
    if limit <= 0:
        return []
    return [sd.record for sd in score_similar(decisions, exclude_id, category, tags)[:limit]]
