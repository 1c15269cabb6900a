"""Planned-range text parsing and grid aggregation.

Grid text protocol:
- blank → None (delete the planned range)
- "50" → 50, 50
- "50-60", "50~60", "50〜60" → 50, 60
- an unreadable low side is 0; a missing, unreadable or zero high side falls
  back to the low side
- reversed bounds are swapped, never rejected

Totals are rendered with one rule at every granularity (row, column, grand
total): "-" when nothing is planned, the single number when min equals max,
otherwise "min〜max".
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal

from loguru import logger

from app.metrics.effective_load import EffectiveLoadResolver
from models.workload import LoadRange, PlannedRange, SubjectWorkload

GridMode = Literal["plan", "result"]

RANGE_SEPARATORS = ("-", "~", "〜")
RANGE_JOINER = "〜"
EMPTY_TOTAL = "-"

_LEADING_INT = re.compile(r"\s*([0-9]+)")


@dataclass(frozen=True)
class RangeTokens:
    """Raw sides of a range expression before normalization."""

    low: str
    high: str | None


def tokenize_range(text: str) -> RangeTokens:
    """Split range text on its first separator, preferring '-' over '~'."""
    for separator in RANGE_SEPARATORS:
        if separator in text:
            parts = text.split(separator)
            return RangeTokens(low=parts[0], high=parts[1])
    return RangeTokens(low=text, high=None)


def parse_count(token: str | None) -> int | None:
    """Read a leading non-negative integer ("50abc" → 50), or None."""
    if token is None:
        return None
    match = _LEADING_INT.match(token)
    if match is None:
        return None
    return int(match.group(1))


def parse_range(text: str | None) -> LoadRange | None:
    if text is None or not text.strip():
        return None

    tokens = tokenize_range(text.strip())
    low = parse_count(tokens.low) or 0
    if tokens.high is None:
        high = low
    else:
        high = parse_count(tokens.high) or low

    if low > high:
        logger.debug(f"Swapping reversed range input {text!r} → {high}-{low}")
        low, high = high, low
    return LoadRange(min_count=low, max_count=high)


def render_totals(min_total: int, max_total: int) -> str:
    if min_total == 0 and max_total == 0:
        return EMPTY_TOTAL
    if min_total == max_total:
        return str(max_total)
    return f"{min_total}{RANGE_JOINER}{max_total}"


def aggregate(samples: Iterable[LoadRange]) -> str:
    """Sum mins and maxes independently and render the total."""
    min_total = 0
    max_total = 0
    for sample in samples:
        min_total += sample.min_count
        max_total += sample.max_count
    return render_totals(min_total, max_total)


def format_planned_range(planned: LoadRange | PlannedRange) -> str:
    """Display a single plan: "50" when fixed, "50〜60" otherwise."""
    if planned.min_count == planned.max_count:
        return str(planned.max_count)
    return f"{planned.min_count}{RANGE_JOINER}{planned.max_count}"


def column_dates(start: date, count: int = 7) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(max(count, 0))]


def shift_dates(dates: Sequence[date], days: int) -> list[date]:
    return [day + timedelta(days=days) for day in dates]


@dataclass(frozen=True)
class WorkloadGrid:
    """Subjects × dates matrix of effective ranges with rendered totals."""

    dates: tuple[date, ...]
    subject_ids: tuple[str, ...]
    cells: dict[str, dict[date, LoadRange]]

    def row_total(self, subject_id: str) -> str:
        return aggregate(self.cells[subject_id][day] for day in self.dates)

    def column_total(self, day: date) -> str:
        return aggregate(self.cells[subject_id][day] for subject_id in self.subject_ids)

    def grand_total(self) -> str:
        return aggregate(self.cells[subject_id][day] for subject_id in self.subject_ids for day in self.dates)


def build_grid(subjects: Iterable[SubjectWorkload], dates: Sequence[date]) -> WorkloadGrid:
    subject_list = list(subjects)
    cells: dict[str, dict[date, LoadRange]] = {}
    for subject in subject_list:
        resolver = EffectiveLoadResolver.for_subject(subject)
        cells[subject.subject_id] = {day: resolver.effective_range(day) for day in dates}

    return WorkloadGrid(
        dates=tuple(dates),
        subject_ids=tuple(subject.subject_id for subject in subject_list),
        cells=cells,
    )


def cell_display(subject: SubjectWorkload, day: date, mode: GridMode) -> str:
    """Editable text of a grid cell in the given input mode."""
    resolver = EffectiveLoadResolver.for_subject(subject)
    if mode == "result":
        record = resolver.actuals.get(day)
        return str(record.count) if record is not None else ""

    plan = resolver.plans.get(day)
    if plan is None:
        return ""
    if plan.min_count == plan.max_count:
        return str(plan.max_count)
    return f"{plan.min_count}-{plan.max_count}"


def cell_placeholder(subject: SubjectWorkload, day: date, mode: GridMode) -> str:
    """Hint shown in an empty cell; result mode hints the planned maximum."""
    if mode == "result":
        plan = EffectiveLoadResolver.for_subject(subject).plans.get(day)
        if plan is not None:
            return f"plan:{plan.max_count}"
    return EMPTY_TOTAL
