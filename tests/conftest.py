"""Root conftest for all tests.

Shared fixtures for the workload risk engine tests.
"""

import datetime as dt

import pytest
from loguru import logger

from models.workload import Roster, SubjectWorkload
from state.sample_roster import generate_sample_roster


@pytest.fixture
def today() -> dt.date:
    return dt.date(2025, 1, 10)


@pytest.fixture
def sample_roster(today: dt.date) -> Roster:
    return generate_sample_roster(today)


@pytest.fixture
def balanced_subject(sample_roster: Roster) -> SubjectWorkload:
    subject = sample_roster.get("sample-p2")
    assert subject is not None
    return subject


@pytest.fixture(autouse=True)
def detach_log_sinks():
    """Drop sinks bound to streams that a test runner may have closed."""
    yield
    logger.remove()
