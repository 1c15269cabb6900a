import datetime as dt

from app.metrics.workload_report import summarize, upcoming_schedule
from models.workload import PlannedRange, SubjectWorkload, WorkloadRecord


def test_summary_groups_by_month_newest_first() -> None:
    subject = SubjectWorkload(
        subject_id="p1",
        records=[
            WorkloadRecord(subject_id="p1", date=dt.date(2025, 1, 5), count=80, category="competitive"),
            WorkloadRecord(subject_id="p1", date=dt.date(2025, 2, 3), count=95, category="competitive"),
            WorkloadRecord(subject_id="p1", date=dt.date(2025, 1, 20), count=30, category="training"),
        ],
    )

    report = summarize(subject)

    assert report.total_count == 205
    assert report.competitive_sessions == 2
    assert report.training_sessions == 1
    assert report.average_competitive_count == 88
    assert [m.month for m in report.months] == ["2025-02", "2025-01"]
    assert [m.total_count for m in report.months] == [95, 110]
    assert [r.date.day for r in report.months[1].records] == [20, 5]


def test_summary_of_empty_subject() -> None:
    report = summarize(SubjectWorkload(subject_id="p1"))

    assert report.total_count == 0
    assert report.average_competitive_count == 0
    assert report.months == []


def test_upcoming_schedule_starts_yesterday() -> None:
    today = dt.date(2025, 1, 10)

    def plan(subject_id: str, offset: int) -> PlannedRange:
        return PlannedRange(subject_id=subject_id, date=today + dt.timedelta(days=offset), min_count=50, max_count=60)

    subjects = [
        SubjectWorkload(subject_id="a", name="A", planned_ranges=[plan("a", 3), plan("a", -2), plan("a", -1)]),
        SubjectWorkload(subject_id="b", name="B", planned_ranges=[plan("b", 3)]),
    ]

    grouped = upcoming_schedule(subjects, today)

    assert list(grouped) == [today - dt.timedelta(days=1), today + dt.timedelta(days=3)]
    assert [e.subject_id for e in grouped[today + dt.timedelta(days=3)]] == ["a", "b"]
