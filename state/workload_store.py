from __future__ import annotations

from datetime import date
from typing import Literal

from loguru import logger

from app.metrics.range_grid import GridMode, parse_count, parse_range
from models.workload import PlannedRange, SubjectWorkload, WorkloadRecord


def upsert_record(
    subject: SubjectWorkload,
    *,
    day: date,
    count: int,
    category: Literal["competitive", "training"] = "competitive",
    notes: str | None = None,
) -> SubjectWorkload:
    """Return a copy of ``subject`` with ``day``'s record replaced (last write wins).

    NO mutation of the input subject.
    """
    record = WorkloadRecord(subject_id=subject.subject_id, date=day, count=count, category=category, notes=notes)
    records = [r for r in subject.records if r.date != day]
    records.append(record)
    return subject.model_copy(update={"records": records})


def remove_record(subject: SubjectWorkload, *, day: date) -> SubjectWorkload:
    return subject.model_copy(update={"records": [r for r in subject.records if r.date != day]})


def upsert_planned_range(subject: SubjectWorkload, *, day: date, min_count: int, max_count: int) -> SubjectWorkload:
    plan = PlannedRange(subject_id=subject.subject_id, date=day, min_count=min_count, max_count=max_count)
    plans = [p for p in subject.planned_ranges if p.date != day]
    plans.append(plan)
    return subject.model_copy(update={"planned_ranges": plans})


def remove_planned_range(subject: SubjectWorkload, *, day: date) -> SubjectWorkload:
    return subject.model_copy(update={"planned_ranges": [p for p in subject.planned_ranges if p.date != day]})


def apply_grid_input(subject: SubjectWorkload, *, day: date, text: str, mode: GridMode) -> SubjectWorkload:
    """Apply free-form grid cell text to a subject.

    Plan mode: blank deletes the plan, a parsed range with a positive maximum
    replaces it, anything else is ignored.
    Result mode: blank deletes the record, a leading integer replaces it as a
    competitive record, anything else is ignored.
    """
    value = text.strip()

    if mode == "result":
        if not value:
            return remove_record(subject, day=day)
        count = parse_count(value)
        if count is None:
            logger.debug(f"Ignoring unreadable result input {text!r} for {subject.subject_id} on {day.isoformat()}")
            return subject
        return upsert_record(subject, day=day, count=count, category="competitive", notes="")

    parsed = parse_range(value)
    if parsed is None:
        return remove_planned_range(subject, day=day)
    if parsed.max_count <= 0:
        logger.debug(f"Ignoring empty plan input {text!r} for {subject.subject_id} on {day.isoformat()}")
        return subject
    return upsert_planned_range(subject, day=day, min_count=parsed.min_count, max_count=parsed.max_count)
