"""
Reading Statistics

Simple summary numbers shown next to the alerts: averages, the direction of
the latest change, estimated HbA1c and time in range. None of this feeds
into alert decisions.
"""

from collections import Counter
from typing import Any, Dict, Optional, Sequence

from .blood_pressure import classify_blood_pressure
from .blood_sugar import classify_glucose
from .models import BloodPressureReading, GlucoseReading


TIME_IN_RANGE_LOW = 70
TIME_IN_RANGE_HIGH = 180


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _average(values: Sequence[float]) -> Optional[int]:
    if not values:
        return None
    return round(sum(values) / len(values))


def estimate_hba1c(readings: Sequence[GlucoseReading]) -> float:
    """
    Estimate HbA1c (%) from average glucose.

    Uses HbA1c = (average glucose + 46.7) / 28.7, rounded to one decimal.
    Returns 0.0 when there are no readings.
    """
    if not readings:
        return 0.0
    avg = sum(r.glucose for r in readings) / len(readings)
    return round((avg + 46.7) / 28.7, 1)


def time_in_range(readings: Sequence[GlucoseReading]) -> Dict[str, int]:
    """
    Percentage of readings below, inside and above 70-180 mg/dL.

    Percentages are rounded individually, so they may not sum to exactly 100.
    """
    if not readings:
        return {"in_range": 0, "below_range": 0, "above_range": 0}

    below = sum(1 for r in readings if r.glucose < TIME_IN_RANGE_LOW)
    above = sum(1 for r in readings if r.glucose > TIME_IN_RANGE_HIGH)
    inside = len(readings) - below - above
    total = len(readings)

    return {
        "in_range": round(inside / total * 100),
        "below_range": round(below / total * 100),
        "above_range": round(above / total * 100),
    }


def summarize_blood_pressure(readings: Sequence[BloodPressureReading]) -> Dict[str, Any]:
    """
    Summarize blood pressure readings (newest first).

    Trend values are -1, 0 or 1: the sign of latest minus previous.
    """
    if not readings:
        return {"count": 0}

    avg_systolic = _average([r.systolic for r in readings])
    avg_diastolic = _average([r.diastolic for r in readings])
    pulses = [r.pulse for r in readings if r.pulse is not None]

    systolic_trend = diastolic_trend = 0
    if len(readings) >= 2:
        latest, previous = readings[0], readings[1]
        systolic_trend = _sign(latest.systolic - previous.systolic)
        diastolic_trend = _sign(latest.diastolic - previous.diastolic)

    return {
        "count": len(readings),
        "avg_systolic": avg_systolic,
        "avg_diastolic": avg_diastolic,
        "avg_pulse": _average(pulses),
        "systolic_trend": systolic_trend,
        "diastolic_trend": diastolic_trend,
        "category": classify_blood_pressure(avg_systolic, avg_diastolic).to_dict(),
    }


def summarize_glucose(readings: Sequence[GlucoseReading]) -> Dict[str, Any]:
    """Summarize glucose readings: averages, HbA1c estimate, time in range."""
    if not readings:
        return {"count": 0}

    avg_glucose = _average([r.glucose for r in readings])
    distribution = Counter(
        classify_glucose(r.glucose, r.test_type).label for r in readings
    )

    return {
        "count": len(readings),
        "avg_glucose": avg_glucose,
        "avg_fasting": _average([r.glucose for r in readings if r.test_type == "fasting"]),
        "estimated_hba1c": estimate_hba1c(readings),
        "time_in_range": time_in_range(readings),
        "category": classify_glucose(avg_glucose, "random").to_dict(),
        "category_distribution": dict(distribution),
    }
