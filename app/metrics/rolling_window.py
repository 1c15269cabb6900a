"""Trailing-window workload aggregation (acute and chronic load).

Metrics:
- Acute load: sum of effective load over the 7 days ending at the target day
- Chronic weekly load: daily average over min(history, 28) trailing days,
  rescaled by 7 so it shares units with acute load

Both windows are inclusive of the target day. A subject with 10 days of
history is averaged over those 10 days only, which keeps the ratio meaningful
before a full chronic window exists.
"""

from __future__ import annotations

from datetime import date, timedelta

from app.metrics.effective_load import EffectiveLoadResolver
from app.metrics.errors import require_calendar_date, require_non_negative
from models.workload import RollingWindow

ACUTE_WINDOW_DAYS = 7
CHRONIC_WINDOW_DAYS = 28


def rolling_window(
    resolver: EffectiveLoadResolver,
    end_date: date,
    window_length_days: int,
    today: date,
) -> RollingWindow:
    """Sum and average the effective load over a trailing inclusive window.

    Args:
        resolver: Effective load resolver for the subject
        end_date: Last day of the window (included)
        window_length_days: Number of days in the window (0 gives an empty window)
        today: Reference day separating actual from predicted loads

    Returns:
        RollingWindow with total and daily average

    Raises:
        WorkloadPreconditionError: On a negative length or a non-date argument
    """
    require_calendar_date(today)
    require_calendar_date(end_date, "end_date")
    require_non_negative(window_length_days, "window_length_days")

    total = 0
    for offset in range(window_length_days):
        total += resolver.resolve(end_date - timedelta(days=offset), today).value

    daily_average = total / window_length_days if window_length_days else 0.0
    return RollingWindow(
        end_date=end_date,
        window_length_days=window_length_days,
        total=total,
        daily_average=daily_average,
    )


def acute_load(
    resolver: EffectiveLoadResolver,
    target_date: date,
    today: date,
    window_days: int = ACUTE_WINDOW_DAYS,
) -> int:
    return rolling_window(resolver, target_date, window_days, today).total


def chronic_weekly_load(
    resolver: EffectiveLoadResolver,
    target_date: date,
    today: date,
    days_of_history: int,
    window_days: int = CHRONIC_WINDOW_DAYS,
    weekly_scale_days: int = ACUTE_WINDOW_DAYS,
) -> float:
    """Chronic load expressed on the acute window's weekly basis.

    Averages over ``min(days_of_history, window_days)`` trailing days and
    multiplies by ``weekly_scale_days``. No history means no chronic load.
    """
    require_non_negative(window_days, "window_days")
    require_non_negative(weekly_scale_days, "weekly_scale_days")

    span = min(max(days_of_history, 0), window_days)
    if span == 0:
        require_calendar_date(today)
        return 0.0

    window = rolling_window(resolver, target_date, span, today)
    return window.daily_average * weekly_scale_days
