"""Rest-day availability from the latest recorded workload.

A heavier outing needs more days off before the subject can be used again.
The next available day is ``last_record + rest_days + 1``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal

from app.metrics.errors import require_calendar_date
from models.workload import SubjectWorkload, WorkloadRecord


@dataclass(frozen=True)
class RestRule:
    max_count: int
    rest_days: int


DEFAULT_REST_RULES: tuple[RestRule, ...] = (
    RestRule(max_count=30, rest_days=0),
    RestRule(max_count=50, rest_days=1),
    RestRule(max_count=75, rest_days=2),
    RestRule(max_count=105, rest_days=3),
    RestRule(max_count=999, rest_days=4),
)
MAX_REST_DAYS = 4


@dataclass(frozen=True)
class Availability:
    status: Literal["available", "resting"]
    available_from: date
    last_record: WorkloadRecord | None = None


def required_rest_days(count: int, rules: Sequence[RestRule] = DEFAULT_REST_RULES) -> int:
    for rule in rules:
        if count <= rule.max_count:
            return rule.rest_days
    return MAX_REST_DAYS


def latest_record(subject: SubjectWorkload) -> WorkloadRecord | None:
    """Most recent record belonging to the subject; stray ids are ignored."""
    own = [record for record in subject.records if record.subject_id == subject.subject_id]
    if not own:
        return None
    return max(own, key=lambda record: record.date)


def availability(
    subject: SubjectWorkload,
    today: date,
    rules: Sequence[RestRule] = DEFAULT_REST_RULES,
) -> Availability:
    """Whether the subject may take on load today, and from when otherwise."""
    require_calendar_date(today)

    last = latest_record(subject)
    if last is None:
        return Availability(status="available", available_from=today)

    rest_days = required_rest_days(last.count, rules)
    if rest_days > 0:
        next_available = last.date + timedelta(days=rest_days + 1)
        if next_available > today:
            return Availability(status="resting", available_from=next_available, last_record=last)

    return Availability(status="available", available_from=today, last_record=last)
