"""
Duplicate Reading Detection

A reading counts as a duplicate when an existing reading was taken within
a short time window (1 minute by default) and carries the same values.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, Sequence, TypeVar

from .models import BloodPressureReading, GlucoseReading, local_time

T = TypeVar("T")

DEFAULT_WINDOW_MINUTES = 1


@dataclass
class DuplicateCheck:
    is_duplicate: bool
    existing: Optional[object] = None
    message: Optional[str] = None


def _find_duplicate(
    new_reading: T,
    existing_readings: Sequence[T],
    same_values: Callable[[T, T], bool],
    window_minutes: float,
) -> Optional[T]:
    window = timedelta(minutes=window_minutes)
    for existing in existing_readings:
        gap = abs(local_time(existing.timestamp) - local_time(new_reading.timestamp))
        if gap <= window and same_values(existing, new_reading):
            return existing
    return None


def check_bp_duplicate(
    new_reading: BloodPressureReading,
    existing_readings: Sequence[BloodPressureReading],
    window_minutes: float = DEFAULT_WINDOW_MINUTES,
) -> DuplicateCheck:
    """Same systolic, diastolic and pulse (missing pulse counts as 0) within the window."""
    existing = _find_duplicate(
        new_reading,
        existing_readings,
        lambda a, b: (
            a.systolic == b.systolic
            and a.diastolic == b.diastolic
            and (a.pulse or 0) == (b.pulse or 0)
        ),
        window_minutes,
    )
    if existing is None:
        return DuplicateCheck(is_duplicate=False)
    return DuplicateCheck(
        is_duplicate=True,
        existing=existing,
        message=(
            f"Duplicate entry detected! A reading with {existing.systolic}/{existing.diastolic} "
            f"mmHg at {existing.timestamp:%Y-%m-%d %H:%M} already exists."
        ),
    )


def check_glucose_duplicate(
    new_reading: GlucoseReading,
    existing_readings: Sequence[GlucoseReading],
    window_minutes: float = DEFAULT_WINDOW_MINUTES,
) -> DuplicateCheck:
    """Same glucose value and test type within the window."""
    existing = _find_duplicate(
        new_reading,
        existing_readings,
        lambda a, b: a.glucose == b.glucose and a.test_type == b.test_type,
        window_minutes,
    )
    if existing is None:
        return DuplicateCheck(is_duplicate=False)
    return DuplicateCheck(
        is_duplicate=True,
        existing=existing,
        message=(
            f"Duplicate entry detected! A {existing.test_type} reading with {existing.glucose} "
            f"mg/dL at {existing.timestamp:%Y-%m-%d %H:%M} already exists."
        ),
    )

