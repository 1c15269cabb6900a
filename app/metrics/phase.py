"""Confidence phase from history length.

Rules (first match wins, high to low):
- >= 28 days → official (high confidence)
- >= 14 days → semi_stable (medium confidence)
- >= 7 days → reference (advisory only)
- otherwise → insufficient (ratio must not be surfaced as actionable)
"""

from __future__ import annotations

from datetime import date

from models.workload import Phase

OFFICIAL_MIN_DAYS = 28
SEMI_STABLE_MIN_DAYS = 14
REFERENCE_MIN_DAYS = 7


def days_since_first_record(first_record_date: date | None, target_date: date) -> int:
    """Days of history up to and including ``target_date``, clamped to >= 0.

    The first record's own day counts as day 1. No record means 0 days.
    """
    if first_record_date is None:
        return 0
    return max(0, (target_date - first_record_date).days + 1)


def classify(days_of_history: int) -> Phase:
    if days_of_history >= OFFICIAL_MIN_DAYS:
        return "official"
    if days_of_history >= SEMI_STABLE_MIN_DAYS:
        return "semi_stable"
    if days_of_history >= REFERENCE_MIN_DAYS:
        return "reference"
    return "insufficient"
