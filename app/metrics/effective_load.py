"""Effective daily workload resolution.

Decides the single authoritative workload value for a subject on a day from
three sources, in precedence order:

- Past days (< today): the actual record, else 0. Plans and hypotheticals
  never earn retroactive credit.
- Today and later: the caller's hypothetical override, else the actual record,
  else the planned range's maximum, else 0.

Properties:
- Pure: same inputs always produce the same sample
- Never raises for missing data; absence resolves to 0 with provenance "none"
- Last-write-wins per date for both records and planned ranges
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType

from app.metrics.errors import require_calendar_date
from models.workload import (
    EffectiveLoadSample,
    HypotheticalOverride,
    LoadRange,
    PlannedRange,
    SubjectWorkload,
    WorkloadRecord,
)

Overrides = Mapping[date, int] | Iterable[HypotheticalOverride] | None


def _index_records(subject_id: str, records: Iterable[WorkloadRecord]) -> dict[date, WorkloadRecord]:
    indexed: dict[date, WorkloadRecord] = {}
    for record in records:
        if record.subject_id == subject_id:
            indexed[record.date] = record
    return indexed


def _index_plans(subject_id: str, plans: Iterable[PlannedRange]) -> dict[date, PlannedRange]:
    indexed: dict[date, PlannedRange] = {}
    for plan in plans:
        if plan.subject_id == subject_id:
            indexed[plan.date] = plan
    return indexed


def normalize_overrides(overrides: Overrides) -> dict[date, int]:
    """Turn a mapping or a list of HypotheticalOverride into ``{date: count}``.

    Mapping entries go through HypotheticalOverride too, so negative counts
    fail validation in both shapes.
    """
    if overrides is None:
        return {}
    if isinstance(overrides, Mapping):
        overrides = [
            HypotheticalOverride(date=require_calendar_date(day, "override date"), count=count)
            for day, count in overrides.items()
        ]
    return {override.date: override.count for override in overrides}


@dataclass(frozen=True)
class EffectiveLoadResolver:
    """Read-only lookup over one subject's records, plans and overrides."""

    subject_id: str
    actuals: Mapping[date, WorkloadRecord] = field(default_factory=dict)
    plans: Mapping[date, PlannedRange] = field(default_factory=dict)
    overrides: Mapping[date, int] = field(default_factory=dict)

    @classmethod
    def for_subject(cls, subject: SubjectWorkload, overrides: Overrides = None) -> EffectiveLoadResolver:
        return cls(
            subject_id=subject.subject_id,
            actuals=MappingProxyType(_index_records(subject.subject_id, subject.records)),
            plans=MappingProxyType(_index_plans(subject.subject_id, subject.planned_ranges)),
            overrides=MappingProxyType(normalize_overrides(overrides)),
        )

    @property
    def first_record_date(self) -> date | None:
        """Date of the subject's earliest actual record, or None."""
        return min(self.actuals) if self.actuals else None

    def resolve(self, day: date, today: date) -> EffectiveLoadSample:
        """Resolve the effective workload for ``day`` as seen from ``today``."""
        record = self.actuals.get(day)

        if day < today:
            if record is not None:
                return EffectiveLoadSample(date=day, value=record.count, provenance="actual")
            return EffectiveLoadSample(date=day, value=0, provenance="none")

        if day in self.overrides:
            return EffectiveLoadSample(date=day, value=self.overrides[day], provenance="hypothetical")
        if record is not None:
            return EffectiveLoadSample(date=day, value=record.count, provenance="actual")
        plan = self.plans.get(day)
        if plan is not None:
            return EffectiveLoadSample(date=day, value=plan.max_count, provenance="planned")
        return EffectiveLoadSample(date=day, value=0, provenance="none")

    def effective_range(self, day: date) -> LoadRange:
        """Min/max pair for grid reporting; independent of the reference day."""
        record = self.actuals.get(day)
        if record is not None:
            return LoadRange(min_count=record.count, max_count=record.count)
        plan = self.plans.get(day)
        if plan is not None:
            return LoadRange(min_count=plan.min_count, max_count=plan.max_count)
        return LoadRange()


def resolve(
    subject: SubjectWorkload,
    day: date,
    today: date,
    overrides: Overrides = None,
) -> EffectiveLoadSample:
    """One-off resolution without keeping a resolver around."""
    require_calendar_date(today)
    require_calendar_date(day, "day")
    return EffectiveLoadResolver.for_subject(subject, overrides).resolve(day, today)
