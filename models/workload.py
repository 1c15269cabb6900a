from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Category = Literal["competitive", "training"]
Provenance = Literal["actual", "planned", "hypothetical", "none"]
Phase = Literal["insufficient", "reference", "semi_stable", "official"]
RiskStatus = Literal[
    "insufficient_data",
    "low_confidence_reference",
    "low",
    "safe",
    "warning",
    "danger",
]


class WorkloadRecord(BaseModel):
    """One recorded exertion (e.g. a pitch count) for a subject on a day."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    date: date
    count: int = Field(..., ge=0)
    category: Category = "competitive"
    notes: str | None = None


class PlannedRange(BaseModel):
    """Forward-looking planned workload range for a subject on a day.

    Reversed bounds are swapped on construction so that
    ``min_count <= max_count`` always holds.
    """

    model_config = ConfigDict(frozen=True)

    subject_id: str
    date: date
    min_count: int = Field(..., ge=0)
    max_count: int = Field(..., ge=0)

    @model_validator(mode="after")
    def normalize_bounds(self) -> PlannedRange:
        if self.min_count > self.max_count:
            low, high = self.max_count, self.min_count
            object.__setattr__(self, "min_count", low)
            object.__setattr__(self, "max_count", high)
        return self


class HypotheticalOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(..., ge=0)


class LoadRange(BaseModel):
    """A min/max workload pair. Actual records contribute ``count, count``."""

    model_config = ConfigDict(frozen=True)

    min_count: int = Field(default=0, ge=0)
    max_count: int = Field(default=0, ge=0)


class EffectiveLoadSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    value: int = Field(..., ge=0)
    provenance: Provenance


class RollingWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    end_date: date
    window_length_days: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    daily_average: float = Field(..., ge=0)


class RiskAssessment(BaseModel):
    """Risk snapshot for a single day.

    ``ratio`` is None only while the phase is ``insufficient``.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    acute_load: int = Field(..., ge=0)
    chronic_weekly_load: float = Field(..., ge=0)
    ratio: float | None
    phase: Phase
    status: RiskStatus
    days_of_history: int = Field(default=0, ge=0)


class TimelinePoint(BaseModel):
    """One day of a projected timeline.

    Past days only carry ``actual``, future days only ``predicted``. Today
    carries the same assessment in both fields.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    actual: RiskAssessment | None = None
    predicted: RiskAssessment | None = None

    @property
    def assessment(self) -> RiskAssessment:
        result = self.actual or self.predicted
        if result is None:
            raise ValueError(f"Timeline point {self.date} carries no assessment")
        return result


class SubjectWorkload(BaseModel):
    """Everything the engine knows about one subject."""

    subject_id: str
    name: str = ""
    number: str = ""
    records: list[WorkloadRecord] = Field(default_factory=list)
    planned_ranges: list[PlannedRange] = Field(default_factory=list)


class Roster(BaseModel):
    subjects: list[SubjectWorkload] = Field(default_factory=list)

    def get(self, subject_id: str) -> SubjectWorkload | None:
        for subject in self.subjects:
            if subject.subject_id == subject_id:
                return subject
        return None
