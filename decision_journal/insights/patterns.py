"""
Failure-pattern detection for the decision form.

While a decision is being drafted, its title and context are compared with
every past FAILED or REVERSED decision. Keywords are lowercase words longer
than three characters, minus a short stop-word list. The past decision
sharing the most keywords is reported, provided it shares at least
``min_overlap`` of them. The first failed decision wins a tie.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from decision_journal.models.decision import DecisionRecord
from decision_journal.models.insight import PatternMatch
from decision_journal.taxonomy.decision_taxonomy import NEGATIVE_STATUSES

STOPWORDS: frozenset[str] = frozenset({
    "the", "and", "for", "with", "this", "that", "from", "migration", "update", "new",
})

MIN_TITLE_LENGTH = 5
DEFAULT_MIN_OVERLAP = 2

_WORD_SPLIT = re.compile(r"\W+")


def extract_keywords(text: str) -> set[str]:
    """Return the keyword set of a piece of text."""
    return {
        word
        for word in _WORD_SPLIT.split(text.lower())
        if len(word) > 3 and word not in STOPWORDS
    }


def detect_failure_patterns(
    title:          str,
    context:        str,
    past_decisions: Sequence[DecisionRecord],
    min_overlap:    int = DEFAULT_MIN_OVERLAP,
) -> Optional[PatternMatch]:
    """Find the past failed decision most similar to a draft.

    Args:
        title:          Draft decision title.
        context:        Draft decision context.
        past_decisions: The decision log to search.
        min_overlap:    Minimum shared keywords for a match.

    Returns:
        The best PatternMatch, or ``None`` if the title is too short, there
        are no failed decisions, or nothing overlaps enough.
    """
    if not title or len(title) < MIN_TITLE_LENGTH:
        return None

    failed = [d for d in past_decisions if d.status in NEGATIVE_STATUSES]
    if not failed:
        return None

    current_words = extract_keywords(f"{title} {context or ''}")

    best: Optional[PatternMatch] = None
    best_overlap = 0
    for record in failed:
        overlap = len(extract_keywords(f"{record.title} {record.context}") & current_words)
        if overlap > best_overlap and overlap >= min_overlap:
            best_overlap = overlap
            best = PatternMatch(
                decision_id=record.id,
                title=record.title,
                reason=f"Matches {overlap} keywords from a previous failed attempt.",
                score=overlap,
            )
    return best
