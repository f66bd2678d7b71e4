"""
Health Alert Engine

Main entry point for alert generation:
1. Order both reading lists newest first
2. Run the blood pressure, blood sugar and cross-metric generators
3. Rank the combined alerts by priority, then by recency

Generation is a pure function of the readings and the reference time.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from .alert_context import AlertContext
from .bp_alerts import generate_bp_alerts
from .general_alerts import generate_general_alerts
from .glucose_alerts import generate_glucose_alerts
from .models import BloodPressureReading, GlucoseReading, HealthAlert, local_time

logger = logging.getLogger(__name__)

T = TypeVar("T")


def newest_first(readings: Sequence[T]) -> List[T]:
    """Return a copy of the readings sorted by local time, newest first."""
    return sorted(readings, key=lambda r: local_time(r.timestamp), reverse=True)


def sort_alerts(alerts: Sequence[HealthAlert]) -> List[HealthAlert]:
    """Sort by priority (critical first), then by generation time (latest first)."""
    return sorted(alerts, key=lambda a: (a.rank, a.timestamp), reverse=True)


def generate_health_alerts(
    bp_readings: Sequence[BloodPressureReading],
    glucose_readings: Sequence[GlucoseReading],
    now: Optional[datetime] = None,
) -> List[HealthAlert]:
    """
    Generate all health alerts for a set of readings.

    Args:
        bp_readings: Blood pressure readings, any order
        glucose_readings: Glucose readings, any order
        now: Reference time for the 7-day window and alert timestamps
             (defaults to the current time)

    Returns:
        Alerts sorted by priority and recency
    """
    context = AlertContext(now)
    bp_sorted = newest_first(bp_readings)
    glucose_sorted = newest_first(glucose_readings)

    alerts = (
        generate_bp_alerts(bp_sorted, context)
        + generate_glucose_alerts(glucose_sorted, context)
        + generate_general_alerts(bp_sorted, glucose_sorted, context)
    )

    logger.info(
        "Generated %d health alerts from %d bp and %d glucose readings",
        len(alerts), len(bp_sorted), len(glucose_sorted),
    )
    return sort_alerts(alerts)
