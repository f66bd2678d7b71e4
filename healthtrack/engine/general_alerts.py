"""
Cross-Metric Alert Generator

Looks at blood pressure and blood sugar readings together to detect:
- Both metrics being elevated in the same week
- Medication that does not seem to cover the whole day
- Lifestyle factors (exercise, stress, sleep) mentioned in notes
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .alert_context import AlertContext
from .blood_pressure import classify_blood_pressure
from .models import BloodPressureReading, GlucoseReading, HealthAlert, local_time
from .text_patterns import EXERCISE_TERMS, SLEEP_TERMS, STRESS_TERMS, count_term_mentions

logger = logging.getLogger(__name__)


MIN_READINGS = 3

CORRELATION_MIN_READINGS = 3
CORRELATION_MIN_HIGH_BP = 2
CORRELATION_MIN_HIGH_GLUCOSE = 2
HIGH_GLUCOSE_MGDL = 180

MEDICATED_MIN_READINGS = 2
TIMING_MIN_READINGS = 3
BP_TIMING_THRESHOLD = 15
GLUCOSE_TIMING_THRESHOLD = 40

LIFESTYLE_MIN_NOTES = 4
LIFESTYLE_MIN_MENTIONS = 3

# Hour-of-day buckets, [start, end)
TIME_BUCKETS = {
    "morning": (6, 12),
    "afternoon": (12, 18),
    "evening": (18, 24),
}


def bp_timing_mismatch(readings: Sequence[BloodPressureReading]) -> bool:
    """True when average systolic differs by more than 15 mmHg between times of day."""
    return _timing_mismatch(
        [(local_time(r.timestamp).hour, r.systolic) for r in readings],
        BP_TIMING_THRESHOLD,
    )


def glucose_timing_mismatch(readings: Sequence[GlucoseReading]) -> bool:
    """True when average glucose differs by more than 40 mg/dL between times of day."""
    return _timing_mismatch(
        [(local_time(r.timestamp).hour, r.glucose) for r in readings],
        GLUCOSE_TIMING_THRESHOLD,
    )


def _timing_mismatch(samples: List[Tuple[int, float]], threshold: float) -> bool:
    """
    Bucket (hour, value) samples by time of day and compare bucket means.

    Only buckets that have at least one sample take part in the comparison.
    """
    if len(samples) < TIMING_MIN_READINGS:
        return False

    buckets: Dict[str, List[float]] = {name: [] for name in TIME_BUCKETS}
    for hour, value in samples:
        for name, (start, end) in TIME_BUCKETS.items():
            if start <= hour < end:
                buckets[name].append(value)
                break

    means = [sum(values) / len(values) for values in buckets.values() if values]
    if len(means) < 2:
        return False

    return max(means) - min(means) > threshold


def generate_general_alerts(
    bp_readings: Sequence[BloodPressureReading],
    glucose_readings: Sequence[GlucoseReading],
    context: Optional[AlertContext] = None,
) -> List[HealthAlert]:
    """
    Generate alerts that need both kinds of readings.

    Args:
        bp_readings: Blood pressure readings, newest first
        glucose_readings: Glucose readings, newest first
        context: Clock and id sequence for this call (a fresh one if None)

    Returns:
        List of HealthAlert objects, unsorted
    """
    if len(bp_readings) < MIN_READINGS and len(glucose_readings) < MIN_READINGS:
        return []

    context = context or AlertContext()
    recent_bp = context.recent(bp_readings)
    recent_glucose = context.recent(glucose_readings)
    alerts = []

    correlation_alert = _detect_correlated_elevation(recent_bp, recent_glucose, context)
    if correlation_alert:
        alerts.append(correlation_alert)

    timing_alert = _detect_medication_timing(recent_bp, recent_glucose, context)
    if timing_alert:
        alerts.append(timing_alert)

    alerts.extend(_detect_lifestyle_patterns(recent_bp, recent_glucose, context))

    logger.debug(
        "general alerts: %d bp / %d glucose recent -> %d alerts",
        len(recent_bp), len(recent_glucose), len(alerts),
    )
    return alerts


def _detect_correlated_elevation(
    recent_bp: List[BloodPressureReading],
    recent_glucose: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    if len(recent_bp) < CORRELATION_MIN_READINGS or len(recent_glucose) < CORRELATION_MIN_READINGS:
        return None

    high_bp = sum(
        1 for r in recent_bp
        if classify_blood_pressure(r.systolic, r.diastolic).is_elevated
    )
    high_glucose = sum(1 for r in recent_glucose if r.glucose > HIGH_GLUCOSE_MGDL)

    if high_bp < CORRELATION_MIN_HIGH_BP or high_glucose < CORRELATION_MIN_HIGH_GLUCOSE:
        return None

    return context.create(
        "general-bp-bs",
        "Correlated BP and Blood Sugar Elevation",
        "You have multiple elevated readings for both blood pressure and blood sugar. "
        "These conditions often influence each other.",
        "high",
        "pattern",
        "general",
        [
            "Focus on lifestyle changes that benefit both conditions",
            "Increase physical activity (with doctor approval)",
            "Follow a low-sodium, low-glycemic diet",
            "Ensure adequate hydration",
            "Discuss medication interactions with your healthcare provider",
        ],
    )


def _detect_medication_timing(
    recent_bp: List[BloodPressureReading],
    recent_glucose: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    medicated_bp = [r for r in recent_bp if r.medication]
    medicated_glucose = [r for r in recent_glucose if r.medication]

    if len(medicated_bp) < MEDICATED_MIN_READINGS or len(medicated_glucose) < MEDICATED_MIN_READINGS:
        return None

    if not (bp_timing_mismatch(medicated_bp) or glucose_timing_mismatch(medicated_glucose)):
        return None

    return context.create(
        "general-medication-timing",
        "Medication Timing Optimization",
        "Your readings suggest potential benefits from adjusting your medication "
        "timing for better 24-hour control.",
        "medium",
        "timing",
        "general",
        [
            "Track the exact times you take medications",
            "Note the relationship between medication times and readings",
            "Discuss chronotherapy (timing-based medication) with your doctor",
            "Maintain consistent daily medication schedule",
        ],
    )


def _collect_notes(
    recent_bp: Iterable[BloodPressureReading],
    recent_glucose: Iterable[GlucoseReading]
) -> List[str]:
    """Non-empty note text, one entry per reading."""
    notes = [r.notes for r in recent_bp if r.notes]
    for r in recent_glucose:
        text = " ".join(part for part in (r.notes, r.meal_info) if part)
        if text:
            notes.append(text)
    return notes


def _detect_lifestyle_patterns(
    recent_bp: List[BloodPressureReading],
    recent_glucose: List[GlucoseReading],
    context: AlertContext
) -> List[HealthAlert]:
    notes = _collect_notes(recent_bp, recent_glucose)
    if len(notes) < LIFESTYLE_MIN_NOTES:
        return []

    alerts = []

    if count_term_mentions(notes, EXERCISE_TERMS) >= LIFESTYLE_MIN_MENTIONS:
        alerts.append(context.create(
            "general-exercise",
            "Exercise Impact Detected",
            "Your notes mention exercise multiple times. Physical activity appears "
            "to be influencing your health metrics.",
            "low",
            "lifestyle",
            "general",
            [
                "Continue tracking readings before and after exercise",
                "Aim for consistent, moderate activity rather than occasional intense workouts",
                "Stay hydrated before, during, and after exercise",
                "Consider timing exercise to optimize health benefits",
            ],
        ))

    if count_term_mentions(notes, STRESS_TERMS) >= LIFESTYLE_MIN_MENTIONS:
        alerts.append(context.create(
            "general-stress",
            "Stress Impact Detected",
            "Your notes mention stress or anxiety multiple times. Psychological "
            "factors appear to be influencing your health metrics.",
            "medium",
            "lifestyle",
            "general",
            [
                "Incorporate stress management techniques like deep breathing or meditation",
                "Consider mindfulness practices or yoga",
                "Ensure adequate sleep and relaxation time",
                "Discuss stress management strategies with your healthcare provider",
            ],
        ))

    if count_term_mentions(notes, SLEEP_TERMS) >= LIFESTYLE_MIN_MENTIONS:
        alerts.append(context.create(
            "general-sleep",
            "Sleep Impact Detected",
            "Your notes mention sleep issues multiple times. Sleep quality appears "
            "to be influencing your health metrics.",
            "medium",
            "lifestyle",
            "general",
            [
                "Maintain a consistent sleep schedule",
                "Create a relaxing bedtime routine",
                "Limit screen time before bed",
                "Avoid caffeine and large meals before bedtime",
                "Consider discussing sleep issues with your healthcare provider",
            ],
        ))

    return alerts
