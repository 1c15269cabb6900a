"""Per-subject workload summary and roster-wide upcoming schedule."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta

from pydantic import BaseModel, Field

from app.metrics.errors import require_calendar_date
from models.workload import PlannedRange, SubjectWorkload, WorkloadRecord


class MonthlyWorkload(BaseModel):
    month: str = Field(..., description="Calendar month as YYYY-MM")
    total_count: int
    records: list[WorkloadRecord]


class WorkloadReport(BaseModel):
    subject_id: str
    total_count: int
    competitive_sessions: int
    training_sessions: int
    average_competitive_count: int
    months: list[MonthlyWorkload]


class ScheduledEntry(BaseModel):
    subject_id: str
    name: str
    number: str
    plan: PlannedRange


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def summarize(subject: SubjectWorkload) -> WorkloadReport:
    """Summarize a subject's recorded history, newest first."""
    records = sorted(subject.records, key=lambda record: record.date, reverse=True)

    competitive = [record for record in records if record.category == "competitive"]
    training_sessions = len(records) - len(competitive)
    average = _round_half_up(sum(r.count for r in competitive) / len(competitive)) if competitive else 0

    grouped: dict[str, list[WorkloadRecord]] = defaultdict(list)
    for record in records:
        grouped[record.date.strftime("%Y-%m")].append(record)

    months = [
        MonthlyWorkload(month=month, total_count=sum(r.count for r in month_records), records=month_records)
        for month, month_records in grouped.items()
    ]

    return WorkloadReport(
        subject_id=subject.subject_id,
        total_count=sum(record.count for record in records),
        competitive_sessions=len(competitive),
        training_sessions=training_sessions,
        average_competitive_count=average,
        months=months,
    )


def upcoming_schedule(subjects: Iterable[SubjectWorkload], today: date) -> dict[date, list[ScheduledEntry]]:
    """Planned ranges from yesterday onwards, grouped by date ascending."""
    require_calendar_date(today)
    cutoff = today - timedelta(days=1)

    entries: list[ScheduledEntry] = []
    for subject in subjects:
        for plan in subject.planned_ranges:
            if plan.date >= cutoff:
                entries.append(ScheduledEntry(subject_id=subject.subject_id, name=subject.name, number=subject.number, plan=plan))

    grouped: dict[date, list[ScheduledEntry]] = {}
    for entry in sorted(entries, key=lambda e: e.plan.date):
        grouped.setdefault(entry.plan.date, []).append(entry)
    return grouped
