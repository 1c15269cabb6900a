"""HTTP endpoints exposing the workload risk engine.

Stateless: every request carries the records, plans and reference day it is
evaluated against.
"""

from datetime import date
from typing import Literal

from fastapi import APIRouter, HTTPException
from loguru import logger
from pydantic import BaseModel, Field

from app.config.settings import settings
from app.metrics.availability import availability
from app.metrics.errors import WorkloadPreconditionError
from app.metrics.range_grid import aggregate, build_grid, column_dates, parse_range
from app.metrics.timeline import current_assessment, project
from models.workload import HypotheticalOverride, LoadRange, RiskAssessment, Roster, SubjectWorkload, TimelinePoint

router = APIRouter(prefix="/workload", tags=["workload"])

UNPROCESSABLE = 422


class TimelineRequest(BaseModel):
    subject: SubjectWorkload
    today: date
    past_days: int = Field(default_factory=lambda: settings.past_days, ge=0)
    future_days: int = Field(default_factory=lambda: settings.future_days, ge=0)
    overrides: list[HypotheticalOverride] = Field(default_factory=list, description="What-if loads for today or later")


class TimelineResponse(BaseModel):
    subject_id: str
    today: date
    points: list[TimelinePoint]


class StatusRequest(BaseModel):
    roster: Roster
    today: date


class SubjectStatus(BaseModel):
    subject_id: str
    name: str
    availability: Literal["available", "resting"]
    available_from: date
    assessment: RiskAssessment


class GridRequest(BaseModel):
    roster: Roster
    start: date
    days: int = Field(default=7, ge=1, le=62)


class GridRow(BaseModel):
    subject_id: str
    cells: list[str]
    total: str


class GridResponse(BaseModel):
    dates: list[date]
    rows: list[GridRow]
    column_totals: list[str]
    grand_total: str


class ParseRangeRequest(BaseModel):
    text: str


class ParseRangeResponse(BaseModel):
    range: LoadRange | None = Field(..., description="None means the planned range should be deleted")


def _precondition_failed(error: WorkloadPreconditionError) -> HTTPException:
    logger.warning(f"Rejected workload request: {error}")
    return HTTPException(
        status_code=UNPROCESSABLE,
        detail={"code": error.code, "message": error.message},
    )


@router.post("/timeline", response_model=TimelineResponse)
def timeline(request: TimelineRequest) -> TimelineResponse:
    """Project actual and predicted ACWR around ``today``."""
    try:
        projected = project(
            request.subject,
            request.today,
            past_days=request.past_days,
            future_days=request.future_days,
            overrides=request.overrides,
            acute_window_days=settings.acute_window_days,
            chronic_window_days=settings.chronic_window_days,
        )
        points = list(projected)
    except WorkloadPreconditionError as e:
        raise _precondition_failed(e) from e

    return TimelineResponse(subject_id=request.subject.subject_id, today=request.today, points=points)


@router.post("/status", response_model=list[SubjectStatus])
def roster_status(request: StatusRequest) -> list[SubjectStatus]:
    """Today's risk snapshot and rest availability for every subject."""
    results: list[SubjectStatus] = []
    try:
        for subject in request.roster.subjects:
            assessment = current_assessment(
                subject,
                request.today,
                acute_window_days=settings.acute_window_days,
                chronic_window_days=settings.chronic_window_days,
            )
            rest = availability(subject, request.today)
            results.append(
                SubjectStatus(
                    subject_id=subject.subject_id,
                    name=subject.name,
                    availability=rest.status,
                    available_from=rest.available_from,
                    assessment=assessment,
                )
            )
    except WorkloadPreconditionError as e:
        raise _precondition_failed(e) from e
    return results


@router.post("/grid", response_model=GridResponse)
def grid(request: GridRequest) -> GridResponse:
    """Planned/actual grid with row, column and grand totals."""
    dates = column_dates(request.start, request.days)
    built = build_grid(request.roster.subjects, dates)
    rows = [
        GridRow(
            subject_id=subject_id,
            cells=[aggregate([built.cells[subject_id][day]]) for day in dates],
            total=built.row_total(subject_id),
        )
        for subject_id in built.subject_ids
    ]
    return GridResponse(
        dates=dates,
        rows=rows,
        column_totals=[built.column_total(day) for day in dates],
        grand_total=built.grand_total(),
    )


@router.post("/parse-range", response_model=ParseRangeResponse)
def parse_range_text(request: ParseRangeRequest) -> ParseRangeResponse:
    return ParseRangeResponse(range=parse_range(request.text))
