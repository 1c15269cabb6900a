"""Demonstration roster covering the three typical load profiles."""

from __future__ import annotations

import datetime as dt

from models.workload import PlannedRange, Roster, SubjectWorkload, WorkloadRecord


def generate_sample_roster(today: dt.date) -> Roster:
    def day(offset: int) -> dt.date:
        return today + dt.timedelta(days=offset)

    # Heavy recent usage, heading towards the danger band
    heavy = SubjectWorkload(
        subject_id="sample-p1",
        name="Heavy Load",
        number="18",
        records=[
            WorkloadRecord(
                subject_id="sample-p1",
                date=day(offset),
                count=110 if offset > -7 else 90,
                category="competitive",
                notes="sample: starter",
            )
            for offset in (-28, -24, -20, -14, -10, -5, -1)
        ],
        planned_ranges=[PlannedRange(subject_id="sample-p1", date=day(3), min_count=80, max_count=100)],
    )

    # Regular weekly rotation
    balanced = SubjectWorkload(
        subject_id="sample-p2",
        name="Balanced Rotation",
        number="11",
        records=[
            WorkloadRecord(
                subject_id="sample-p2",
                date=day(offset),
                count=70,
                category="competitive",
                notes="sample: steady rotation",
            )
            for offset in (-25, -18, -11, -4)
        ],
        planned_ranges=[PlannedRange(subject_id="sample-p2", date=day(2), min_count=60, max_count=80)],
    )

    # Light training only
    returning = SubjectWorkload(
        subject_id="sample-p3",
        name="Returning",
        number="45",
        records=[
            WorkloadRecord(
                subject_id="sample-p3",
                date=day(offset),
                count=30,
                category="training",
                notes="sample: building back",
            )
            for offset in (-10, -5, -2)
        ],
    )

    return Roster(subjects=[heavy, balanced, returning])
