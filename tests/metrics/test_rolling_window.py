import datetime as dt

import pytest

from app.metrics.effective_load import EffectiveLoadResolver
from app.metrics.errors import WorkloadPreconditionError
from app.metrics.rolling_window import acute_load, chronic_weekly_load, rolling_window
from models.workload import SubjectWorkload, WorkloadRecord

TODAY = dt.date(2025, 1, 10)


def constant_resolver(value: int, first_offset: int, last_offset: int = 0) -> EffectiveLoadResolver:
    records = [
        WorkloadRecord(subject_id="p1", date=TODAY + dt.timedelta(days=offset), count=value)
        for offset in range(first_offset, last_offset + 1)
    ]
    return EffectiveLoadResolver.for_subject(SubjectWorkload(subject_id="p1", records=records))


@pytest.mark.parametrize("value", [1, 10, 73])
def test_acute_load_of_constant_week(value: int) -> None:
    resolver = constant_resolver(value, -6)

    assert acute_load(resolver, TODAY, TODAY) == 7 * value


@pytest.mark.parametrize("value", [1, 10, 73])
def test_chronic_weekly_load_of_constant_history(value: int) -> None:
    resolver = constant_resolver(value, -40)

    assert chronic_weekly_load(resolver, TODAY, TODAY, days_of_history=41) == 7 * value


def test_chronic_load_averages_short_history_only() -> None:
    resolver = constant_resolver(10, -9)

    assert chronic_weekly_load(resolver, TODAY, TODAY, days_of_history=10) == pytest.approx(70.0)


def test_chronic_load_without_history_is_zero() -> None:
    resolver = constant_resolver(10, -9)

    assert chronic_weekly_load(resolver, TODAY, TODAY, days_of_history=0) == 0.0


def test_acute_window_is_inclusive_and_trailing() -> None:
    records = [
        WorkloadRecord(subject_id="p1", date=TODAY, count=5),
        WorkloadRecord(subject_id="p1", date=TODAY - dt.timedelta(days=6), count=20),
        WorkloadRecord(subject_id="p1", date=TODAY - dt.timedelta(days=7), count=300),
    ]
    resolver = EffectiveLoadResolver.for_subject(SubjectWorkload(subject_id="p1", records=records))

    assert acute_load(resolver, TODAY, TODAY) == 25


def test_rolling_window_fields() -> None:
    resolver = constant_resolver(12, -3)

    window = rolling_window(resolver, TODAY, 4, TODAY)

    assert window.end_date == TODAY
    assert window.window_length_days == 4
    assert window.total == 48
    assert window.daily_average == pytest.approx(12.0)


def test_empty_rolling_window() -> None:
    window = rolling_window(constant_resolver(12, -3), TODAY, 0, TODAY)

    assert window.total == 0
    assert window.daily_average == 0.0


def test_negative_window_length_fails_fast() -> None:
    with pytest.raises(WorkloadPreconditionError, match="NEGATIVE_WINDOW"):
        rolling_window(constant_resolver(12, -3), TODAY, -1, TODAY)


def test_non_date_reference_fails_fast() -> None:
    with pytest.raises(WorkloadPreconditionError, match="INVALID_DATE"):
        acute_load(constant_resolver(12, -3), TODAY, "2025-01-10")
