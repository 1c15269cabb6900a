"""Caller-error types for the workload risk engine.

Sparse or messy workload data never raises. Only programming errors in the
caller do:
- INVALID_DATE: a reference/target date that is not a calendar date
- NEGATIVE_WINDOW: a negative rolling-window length
- NEGATIVE_RANGE: negative past/future day counts for a projection
"""

from __future__ import annotations

from datetime import date, datetime


class WorkloadPreconditionError(ValueError):
    """Raised when the caller violates an engine precondition.

    Attributes:
        code: Error code (e.g., "INVALID_DATE", "NEGATIVE_WINDOW")
        message: Error message
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


def require_calendar_date(value: object, name: str = "today") -> date:
    """Return ``value`` if it is a plain calendar date, else fail fast."""
    if isinstance(value, datetime) or not isinstance(value, date):
        raise WorkloadPreconditionError(
            "INVALID_DATE",
            f"{name} must be a calendar date without time, got {value!r}",
        )
    return value


def require_non_negative(value: int, name: str, code: str = "NEGATIVE_WINDOW") -> int:
    if value < 0:
        raise WorkloadPreconditionError(code, f"{name} must be >= 0, got {value}")
    return value
