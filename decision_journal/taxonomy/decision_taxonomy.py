"""
Decision taxonomy for journaled decisions.

Two dimensions describe every decision record:
  - ``DecisionCategory`` — the *area* the decision belongs to.
  - ``DecisionStatus``   — where the decision is in its review lifecycle.

``DecisionRecord.category`` is deliberately a plain ``str`` — the API may send
categories this enum does not know yet, and category matching is exact-string.
The loader uses ``DecisionCategory`` to warn about unfamiliar labels, never to
reject them.

This module has NO imports from any other ``decision_journal`` package.
"""

from enum import StrEnum


class DecisionCategory(StrEnum):
    """Built-in decision categories offered by the journal templates."""

    TECH = "TECH"
    """Architecture, tooling, vendor and infrastructure choices."""

    PRODUCT = "PRODUCT"
    """Feature scope, roadmap and prioritisation calls."""

    FINANCE = "FINANCE"
    """Budget, pricing and spend decisions."""

    HIRING = "HIRING"
    """Headcount, role and candidate decisions."""

    MARKETING = "MARKETING"
    """Positioning, channel and campaign decisions."""

    OPERATIONS = "OPERATIONS"
    """Process, tooling and vendor operations."""

    STRATEGY = "STRATEGY"
    """Company-level direction and bets."""

    PERSONAL = "PERSONAL"
    """Career and personal choices."""


class DecisionStatus(StrEnum):
    """Lifecycle state of a decision record."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    REVERSED = "REVERSED"


# Outcomes counted as "reviewed" for the overall success rate.
REVIEWED_STATUSES: frozenset[DecisionStatus] = frozenset({
    DecisionStatus.SUCCEEDED,
    DecisionStatus.FAILED,
    DecisionStatus.REVERSED,
})

# Per-category success rate only counts clean wins and losses.
CATEGORY_REVIEWED_STATUSES: frozenset[DecisionStatus] = frozenset({
    DecisionStatus.SUCCEEDED,
    DecisionStatus.FAILED,
})

# Outcomes that feed failure-pattern detection.
NEGATIVE_STATUSES: frozenset[DecisionStatus] = frozenset({
    DecisionStatus.FAILED,
    DecisionStatus.REVERSED,
})
