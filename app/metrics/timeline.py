"""Risk timeline projection across history and what-if future.

Produces one TimelinePoint per day from ``today - past_days`` to
``today + future_days``:
- Before today: actual series only, from recorded loads
- Today: the join point, one assessment shared by both series
- After today: predicted series, from overrides, then records, then plans, then 0

Every day is assessed independently from raw inputs, so callers can evaluate
any subset of days in any order. The returned RiskTimeline is restartable:
each iteration recomputes from scratch.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from loguru import logger

from app.metrics.effective_load import EffectiveLoadResolver, Overrides
from app.metrics.errors import require_calendar_date, require_non_negative
from app.metrics.risk import assess
from app.metrics.rolling_window import ACUTE_WINDOW_DAYS, CHRONIC_WINDOW_DAYS
from models.workload import RiskAssessment, SubjectWorkload, TimelinePoint

DEFAULT_PAST_DAYS = 28
DEFAULT_FUTURE_DAYS = 7


@dataclass(frozen=True)
class RiskTimeline:
    resolver: EffectiveLoadResolver
    today: date
    past_days: int = DEFAULT_PAST_DAYS
    future_days: int = DEFAULT_FUTURE_DAYS
    acute_window_days: int = ACUTE_WINDOW_DAYS
    chronic_window_days: int = CHRONIC_WINDOW_DAYS

    @property
    def start_date(self) -> date:
        return self.today - timedelta(days=self.past_days)

    @property
    def end_date(self) -> date:
        return self.today + timedelta(days=self.future_days)

    def __len__(self) -> int:
        return self.past_days + self.future_days + 1

    def __iter__(self) -> Iterator[TimelinePoint]:
        for offset in range(len(self)):
            yield self.point(self.start_date + timedelta(days=offset))

    def point(self, day: date) -> TimelinePoint:
        """Assess a single day of the timeline."""
        assessment = assess(
            self.resolver,
            day,
            self.today,
            acute_window_days=self.acute_window_days,
            chronic_window_days=self.chronic_window_days,
        )
        if day < self.today:
            return TimelinePoint(date=day, actual=assessment)
        if day == self.today:
            return TimelinePoint(date=day, actual=assessment, predicted=assessment)
        return TimelinePoint(date=day, predicted=assessment)


def project(
    subject: SubjectWorkload,
    today: date,
    past_days: int = DEFAULT_PAST_DAYS,
    future_days: int = DEFAULT_FUTURE_DAYS,
    overrides: Overrides = None,
    acute_window_days: int = ACUTE_WINDOW_DAYS,
    chronic_window_days: int = CHRONIC_WINDOW_DAYS,
) -> RiskTimeline:
    """Build the lazy risk timeline for a subject.

    Args:
        subject: Subject records and planned ranges
        today: Caller-supplied reference day
        past_days: Days of history before today to include
        future_days: Days after today to include
        overrides: What-if loads for today or later, as ``{date: count}`` or
            a list of HypotheticalOverride
        acute_window_days: Acute window length
        chronic_window_days: Maximum chronic window length

    Raises:
        WorkloadPreconditionError: On a non-date ``today`` or negative lengths
    """
    require_calendar_date(today)
    require_non_negative(past_days, "past_days", code="NEGATIVE_RANGE")
    require_non_negative(future_days, "future_days", code="NEGATIVE_RANGE")
    require_non_negative(acute_window_days, "acute_window_days")
    require_non_negative(chronic_window_days, "chronic_window_days")

    resolver = EffectiveLoadResolver.for_subject(subject, overrides)
    logger.debug(
        f"Projecting risk timeline for subject={subject.subject_id} "
        f"today={today.isoformat()} past_days={past_days} future_days={future_days} "
        f"overrides={len(resolver.overrides)}"
    )
    return RiskTimeline(
        resolver=resolver,
        today=today,
        past_days=past_days,
        future_days=future_days,
        acute_window_days=acute_window_days,
        chronic_window_days=chronic_window_days,
    )


def current_assessment(
    subject: SubjectWorkload,
    today: date,
    overrides: Overrides = None,
    acute_window_days: int = ACUTE_WINDOW_DAYS,
    chronic_window_days: int = CHRONIC_WINDOW_DAYS,
) -> RiskAssessment:
    """Single snapshot for today; identical to the timeline's join point."""
    timeline = project(
        subject,
        today,
        past_days=0,
        future_days=0,
        overrides=overrides,
        acute_window_days=acute_window_days,
        chronic_window_days=chronic_window_days,
    )
    return timeline.point(today).assessment
