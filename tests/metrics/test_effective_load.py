import datetime as dt

import pytest
from pydantic import ValidationError

from app.metrics.effective_load import EffectiveLoadResolver, normalize_overrides, resolve
from app.metrics.errors import WorkloadPreconditionError
from models.workload import HypotheticalOverride, PlannedRange, SubjectWorkload, WorkloadRecord

TODAY = dt.date(2025, 1, 10)


def day(offset: int) -> dt.date:
    return TODAY + dt.timedelta(days=offset)


def make_subject(
    *,
    records: dict[int, int] | None = None,
    plans: dict[int, tuple[int, int]] | None = None,
    subject_id: str = "p1",
) -> SubjectWorkload:
    return SubjectWorkload(
        subject_id=subject_id,
        records=[WorkloadRecord(subject_id=subject_id, date=day(o), count=c) for o, c in (records or {}).items()],
        planned_ranges=[
            PlannedRange(subject_id=subject_id, date=day(o), min_count=lo, max_count=hi) for o, (lo, hi) in (plans or {}).items()
        ],
    )


@pytest.mark.parametrize("offset", [-1, -7, -30])
def test_past_day_without_record_is_zero(offset: int) -> None:
    subject = make_subject(plans={offset: (40, 60)})
    resolver = EffectiveLoadResolver.for_subject(subject, {day(offset): 90})

    sample = resolver.resolve(day(offset), TODAY)

    assert sample.value == 0
    assert sample.provenance == "none"


def test_past_day_uses_actual_record() -> None:
    subject = make_subject(records={-3: 85}, plans={-3: (40, 60)})

    sample = resolve(subject, day(-3), TODAY)

    assert sample.value == 85
    assert sample.provenance == "actual"


@pytest.mark.parametrize("offset", [0, 1, 6])
def test_future_day_without_override_or_plan_is_zero(offset: int) -> None:
    sample = resolve(make_subject(), day(offset), TODAY)

    assert sample.value == 0
    assert sample.provenance == "none"


def test_future_day_uses_planned_maximum() -> None:
    subject = make_subject(plans={2: (60, 80)})

    sample = resolve(subject, day(2), TODAY)

    assert sample.value == 80
    assert sample.provenance == "planned"


def test_override_beats_plan_on_future_day() -> None:
    subject = make_subject(plans={2: (60, 80)})

    sample = resolve(subject, day(2), TODAY, overrides={day(2): 120})

    assert sample.value == 120
    assert sample.provenance == "hypothetical"


def test_override_applies_on_today() -> None:
    sample = resolve(make_subject(), TODAY, TODAY, overrides=[HypotheticalOverride(date=TODAY, count=45)])

    assert sample.value == 45
    assert sample.provenance == "hypothetical"


@pytest.mark.parametrize(("count", "plan"), [(0, (50, 90)), (120, (10, 20)), (70, (70, 70))])
@pytest.mark.parametrize("offset", [-2, 0])
def test_actual_record_dominates_plan(offset: int, count: int, plan: tuple[int, int]) -> None:
    subject = make_subject(records={offset: count}, plans={offset: plan})

    sample = resolve(subject, day(offset), TODAY)

    assert sample.value == count
    assert sample.provenance == "actual"


def test_last_record_for_a_date_wins() -> None:
    subject = SubjectWorkload(
        subject_id="p1",
        records=[
            WorkloadRecord(subject_id="p1", date=day(-1), count=40),
            WorkloadRecord(subject_id="p1", date=day(-1), count=95),
        ],
    )

    assert resolve(subject, day(-1), TODAY).value == 95


def test_records_of_other_subjects_are_ignored() -> None:
    subject = SubjectWorkload(
        subject_id="p1",
        records=[WorkloadRecord(subject_id="p2", date=day(-1), count=40)],
    )

    assert resolve(subject, day(-1), TODAY).value == 0


def test_effective_range_prefers_actual_then_plan() -> None:
    subject = make_subject(records={0: 55}, plans={0: (30, 40), 1: (30, 40)})
    resolver = EffectiveLoadResolver.for_subject(subject)

    assert (resolver.effective_range(day(0)).min_count, resolver.effective_range(day(0)).max_count) == (55, 55)
    assert (resolver.effective_range(day(1)).min_count, resolver.effective_range(day(1)).max_count) == (30, 40)
    assert (resolver.effective_range(day(2)).min_count, resolver.effective_range(day(2)).max_count) == (0, 0)


def test_first_record_date() -> None:
    assert EffectiveLoadResolver.for_subject(make_subject()).first_record_date is None
    resolver = EffectiveLoadResolver.for_subject(make_subject(records={-4: 10, -20: 10, -9: 10}))
    assert resolver.first_record_date == day(-20)


def test_normalize_overrides_accepts_list_and_mapping() -> None:
    assert normalize_overrides(None) == {}
    assert normalize_overrides({day(1): 30}) == {day(1): 30}
    assert normalize_overrides([HypotheticalOverride(date=day(2), count=15)]) == {day(2): 15}


def test_normalize_overrides_rejects_negative_mapping_count() -> None:
    with pytest.raises(ValidationError):
        normalize_overrides({day(1): -5})


def test_normalize_overrides_rejects_fractional_mapping_count() -> None:
    with pytest.raises(ValidationError):
        normalize_overrides({day(1): 2.5})


def test_normalize_overrides_rejects_datetime_keys() -> None:
    with pytest.raises(WorkloadPreconditionError, match="INVALID_DATE"):
        normalize_overrides({dt.datetime(2025, 1, 11, 0, 0): 30})


def test_resolve_rejects_datetime_reference() -> None:
    with pytest.raises(WorkloadPreconditionError, match="INVALID_DATE"):
        resolve(make_subject(), TODAY, dt.datetime(2025, 1, 10, 12, 0))
