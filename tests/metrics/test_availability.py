import datetime as dt

import pytest

from app.metrics.availability import availability, required_rest_days
from models.workload import SubjectWorkload, WorkloadRecord

TODAY = dt.date(2025, 1, 10)


def subject_with(*loads: tuple[int, int]) -> SubjectWorkload:
    return SubjectWorkload(
        subject_id="p1",
        records=[WorkloadRecord(subject_id="p1", date=TODAY + dt.timedelta(days=o), count=c) for o, c in loads],
    )


@pytest.mark.parametrize(
    ("count", "rest"),
    [(0, 0), (30, 0), (31, 1), (50, 1), (51, 2), (75, 2), (105, 3), (106, 4), (2000, 4)],
)
def test_required_rest_days(count: int, rest: int) -> None:
    assert required_rest_days(count) == rest


def test_no_records_is_available_today() -> None:
    result = availability(subject_with(), TODAY)

    assert result.status == "available"
    assert result.available_from == TODAY
    assert result.last_record is None


def test_heavy_outing_yesterday_needs_rest() -> None:
    result = availability(subject_with((-1, 110)), TODAY)

    assert result.status == "resting"
    assert result.available_from == TODAY + dt.timedelta(days=4)


def test_rest_already_served() -> None:
    result = availability(subject_with((-3, 40)), TODAY)

    assert result.status == "available"
    assert result.available_from == TODAY


def test_light_outing_needs_no_rest() -> None:
    assert availability(subject_with((-1, 20)), TODAY).status == "available"


def test_latest_record_decides() -> None:
    result = availability(subject_with((-1, 20), (-2, 110)), TODAY)

    assert result.status == "available"
    assert result.last_record is not None
    assert result.last_record.date == TODAY - dt.timedelta(days=1)


def test_records_of_other_subjects_do_not_decide_rest() -> None:
    subject = SubjectWorkload(
        subject_id="p1",
        records=[
            WorkloadRecord(subject_id="p1", date=TODAY - dt.timedelta(days=5), count=40),
            WorkloadRecord(subject_id="p2", date=TODAY - dt.timedelta(days=1), count=110),
        ],
    )

    result = availability(subject, TODAY)

    assert result.status == "available"
    assert result.last_record is not None
    assert result.last_record.subject_id == "p1"


def test_only_foreign_records_is_available() -> None:
    subject = SubjectWorkload(
        subject_id="p1",
        records=[WorkloadRecord(subject_id="p2", date=TODAY - dt.timedelta(days=1), count=110)],
    )

    assert availability(subject, TODAY).last_record is None
