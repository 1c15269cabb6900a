"""ACWR risk evaluation.

Combines the acute:chronic ratio with the confidence phase into a discrete
status. Boundaries are exact:

- insufficient → insufficient_data (ratio unused)
- reference → low_confidence_reference (ratio shown, not banded)
- semi_stable: ratio >= 1.3 warning, 0.8 <= ratio < 1.3 safe, else low
- official: ratio > 1.5 danger, 1.3 <= ratio <= 1.5 warning,
  0.8 <= ratio < 1.3 safe, else low

The semi-stable ladder has no danger tier.
"""

from __future__ import annotations

from datetime import date

from loguru import logger

from app.metrics.effective_load import EffectiveLoadResolver
from app.metrics.errors import require_calendar_date
from app.metrics.phase import classify, days_since_first_record
from app.metrics.rolling_window import (
    ACUTE_WINDOW_DAYS,
    CHRONIC_WINDOW_DAYS,
    acute_load,
    chronic_weekly_load,
)
from models.workload import Phase, RiskAssessment, RiskStatus

DANGER_THRESHOLD = 1.5
WARNING_THRESHOLD = 1.3
SAFE_THRESHOLD = 0.8


def compute_ratio(acute: float, chronic: float) -> float:
    """Acute over chronic load; a zero chronic load yields 0.0."""
    if chronic == 0:
        return 0.0
    return acute / chronic


def evaluate(ratio: float | None, phase: Phase) -> RiskStatus:
    if phase == "insufficient":
        return "insufficient_data"
    if phase == "reference":
        return "low_confidence_reference"

    value = ratio if ratio is not None else 0.0

    if phase == "semi_stable":
        if value >= WARNING_THRESHOLD:
            return "warning"
        if value >= SAFE_THRESHOLD:
            return "safe"
        return "low"

    if value > DANGER_THRESHOLD:
        return "danger"
    if value >= WARNING_THRESHOLD:
        return "warning"
    if value >= SAFE_THRESHOLD:
        return "safe"
    return "low"


def assess(
    resolver: EffectiveLoadResolver,
    target_date: date,
    today: date,
    acute_window_days: int = ACUTE_WINDOW_DAYS,
    chronic_window_days: int = CHRONIC_WINDOW_DAYS,
) -> RiskAssessment:
    """Compute the full risk assessment for one day.

    Each call recomputes from the resolver's raw inputs; the chronic window is
    anchored to ``target_date``, not to ``today``.
    """
    require_calendar_date(today)
    require_calendar_date(target_date, "target_date")

    days_of_history = days_since_first_record(resolver.first_record_date, target_date)
    phase = classify(days_of_history)

    acute = acute_load(resolver, target_date, today, window_days=acute_window_days)
    chronic = chronic_weekly_load(
        resolver,
        target_date,
        today,
        days_of_history,
        window_days=chronic_window_days,
        weekly_scale_days=acute_window_days,
    )
    ratio = None if phase == "insufficient" else compute_ratio(acute, chronic)
    status = evaluate(ratio, phase)

    logger.debug(
        f"ACWR {resolver.subject_id} {target_date.isoformat()}: acute={acute} "
        f"chronic={chronic:.2f} ratio={ratio} phase={phase} status={status}"
    )

    return RiskAssessment(
        date=target_date,
        acute_load=acute,
        chronic_weekly_load=chronic,
        ratio=ratio,
        phase=phase,
        status=status,
        days_of_history=days_of_history,
    )
