"""
Blood Pressure Alert Generator

Scans a newest-first list of blood pressure readings and raises alerts for:
- The latest reading being in a hypertensive range
- Elevated readings on consecutive mornings
- A rapid rise in systolic pressure
- Elevated readings at night
- Elevated readings despite medication
- Symptoms that keep coming back
"""

import logging
from typing import List, Optional, Sequence

from .alert_context import AlertContext
from .blood_pressure import classify_blood_pressure
from .models import BloodPressureReading, HealthAlert, local_time
from .text_patterns import find_common_terms

logger = logging.getLogger(__name__)


MIN_READINGS = 2

MORNING_START_HOUR = 6
MORNING_END_HOUR = 10
MORNING_SAMPLE_SIZE = 5
MORNING_MIN_ELEVATED = 3
MORNING_HIGH_ELEVATED = 4

TREND_MIN_READINGS = 5
TREND_INCREASE_MMHG = 15
TREND_HIGH_INCREASE_MMHG = 25

NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 4
NIGHT_MIN_ELEVATED = 2

MEDICATED_MIN_READINGS = 3
MEDICATED_MIN_ELEVATED = 3

SYMPTOM_MIN_READINGS = 3


def _is_elevated(reading: BloodPressureReading) -> bool:
    return classify_blood_pressure(reading.systolic, reading.diastolic).is_elevated


def _hour(reading: BloodPressureReading) -> int:
    return local_time(reading.timestamp).hour


def generate_bp_alerts(
    readings: Sequence[BloodPressureReading],
    context: Optional[AlertContext] = None,
) -> List[HealthAlert]:
    """
    Generate blood pressure alerts.

    Args:
        readings: Blood pressure readings, newest first
        context: Clock and id sequence for this call (a fresh one if None)

    Returns:
        List of HealthAlert objects, unsorted
    """
    if len(readings) < MIN_READINGS:
        return []

    context = context or AlertContext()
    recent = context.recent(readings)

    alerts = []

    # A) Latest reading in a hypertensive range
    threshold_alert = _check_latest_reading(readings[0], context)
    if threshold_alert:
        alerts.append(threshold_alert)

    # B) Elevated mornings
    morning_alert = _detect_morning_pattern(recent, context)
    if morning_alert:
        alerts.append(morning_alert)

    # C) Rapid systolic increase
    trend_alert = _detect_rapid_increase(recent, context)
    if trend_alert:
        alerts.append(trend_alert)

    # D) Elevated nights
    night_alert = _detect_nighttime_pattern(recent, context)
    if night_alert:
        alerts.append(night_alert)

    # E) Elevated despite medication
    medication_alert = _detect_medication_ineffective(recent, context)
    if medication_alert:
        alerts.append(medication_alert)

    # F) Recurring symptoms
    symptoms_alert = _detect_recurring_symptoms(recent, context)
    if symptoms_alert:
        alerts.append(symptoms_alert)

    logger.debug(
        "bp alerts: %d readings (%d recent) -> %d alerts",
        len(readings), len(recent), len(alerts),
    )
    return alerts


def _check_latest_reading(
    latest: BloodPressureReading,
    context: AlertContext
) -> Optional[HealthAlert]:
    """Threshold alert for the most recent reading."""
    category = classify_blood_pressure(latest.systolic, latest.diastolic)
    value = f"{latest.systolic}/{latest.diastolic} mmHg"

    if category.label == "Hypertensive Crisis":
        return context.create(
            "bp-crisis",
            "Hypertensive Crisis Detected",
            f"Your latest blood pressure reading ({value}) indicates a hypertensive "
            f"crisis. This is a medical emergency.",
            "critical",
            "threshold",
            "blood_pressure",
            [
                "Seek immediate medical attention",
                "Rest in a calm, quiet environment",
                "Do not drive yourself to the hospital",
                "Take any emergency medication as prescribed by your doctor",
            ],
        )

    if category.label == "High BP Stage 2":
        return context.create(
            "bp-stage2",
            "Stage 2 Hypertension Detected",
            f"Your latest blood pressure reading ({value}) indicates Stage 2 "
            f"Hypertension. This requires prompt medical attention.",
            "high",
            "threshold",
            "blood_pressure",
            [
                "Contact your healthcare provider within 1-2 days",
                "Take medications as prescribed",
                "Reduce sodium intake immediately",
                "Monitor your blood pressure closely",
            ],
        )

    if category.label == "High BP Stage 1":
        return context.create(
            "bp-stage1",
            "Stage 1 Hypertension Detected",
            f"Your latest blood pressure reading ({value}) indicates Stage 1 "
            f"Hypertension. This requires attention.",
            "medium",
            "threshold",
            "blood_pressure",
            [
                "Schedule a check-up with your healthcare provider",
                "Consider the DASH diet to reduce blood pressure",
                "Limit alcohol consumption",
                "Increase physical activity",
            ],
        )

    return None


def _detect_morning_pattern(
    recent: List[BloodPressureReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """Elevated readings on several recent mornings (06:00-10:59)."""
    mornings = [
        r for r in recent
        if MORNING_START_HOUR <= _hour(r) <= MORNING_END_HOUR
    ][:MORNING_SAMPLE_SIZE]

    if len(mornings) < MORNING_MIN_ELEVATED:
        return None

    elevated_count = sum(1 for r in mornings if _is_elevated(r))
    if elevated_count < MORNING_MIN_ELEVATED:
        return None

    return context.create(
        "bp-morning",
        "Elevated Morning Blood Pressure",
        f"Your blood pressure has been elevated for {elevated_count} consecutive "
        f"mornings. This could indicate stress, dehydration, or medication timing issues.",
        "high" if elevated_count >= MORNING_HIGH_ELEVATED else "medium",
        "pattern",
        "blood_pressure",
        [
            "Check hydration levels - drink water upon waking",
            "Review sleep quality and stress levels",
            "Consider medication timing with your doctor",
            "Practice morning relaxation techniques",
        ],
    )


def _detect_rapid_increase(
    recent: List[BloodPressureReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """
    Compare the two newest systolic values with the 4th and 5th newest.
    """
    if len(recent) < TREND_MIN_READINGS:
        return None

    new_avg = (recent[0].systolic + recent[1].systolic) / 2
    old_avg = (recent[3].systolic + recent[4].systolic) / 2
    increase = new_avg - old_avg

    if increase < TREND_INCREASE_MMHG:
        return None

    return context.create(
        "bp-increase",
        "Rapid Blood Pressure Increase",
        f"Your systolic pressure has increased by {round(increase)} mmHg in recent readings.",
        "high" if increase >= TREND_HIGH_INCREASE_MMHG else "medium",
        "trend",
        "blood_pressure",
        [
            "Monitor stress levels and recent changes",
            "Review new medications or supplements",
            "Check sodium intake",
            "Schedule a healthcare provider visit",
        ],
    )


def _detect_nighttime_pattern(
    recent: List[BloodPressureReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """Elevated readings taken between 22:00 and 04:59."""
    night = [
        r for r in recent
        if _hour(r) >= NIGHT_START_HOUR or _hour(r) <= NIGHT_END_HOUR
    ]
    elevated = [r for r in night if _is_elevated(r)]

    if len(elevated) < NIGHT_MIN_ELEVATED:
        return None

    return context.create(
        "bp-night",
        "Elevated Nighttime Blood Pressure",
        f"You have {len(elevated)} elevated blood pressure readings at night. "
        f"Nighttime hypertension can indicate non-dipping pattern, which may "
        f"increase cardiovascular risk.",
        "medium",
        "timing",
        "blood_pressure",
        [
            "Discuss with your doctor about 24-hour ambulatory monitoring",
            "Avoid caffeine and alcohol in the evening",
            "Establish a regular sleep schedule",
            "Consider timing of blood pressure medications",
        ],
    )


def _detect_medication_ineffective(
    recent: List[BloodPressureReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """Elevated readings logged together with a medication."""
    medicated = [r for r in recent if r.medication]
    if len(medicated) < MEDICATED_MIN_READINGS:
        return None

    elevated = [r for r in medicated if _is_elevated(r)]
    if len(elevated) < MEDICATED_MIN_ELEVATED:
        return None

    return context.create(
        "bp-medication",
        "Medication Effectiveness Alert",
        f"You have {len(elevated)} elevated readings despite taking medication. "
        f"Your current treatment may need adjustment.",
        "high",
        "pattern",
        "blood_pressure",
        [
            "Schedule an appointment with your doctor to review medication",
            "Ensure you're taking medication as prescribed",
            "Keep a detailed log of when you take medication and readings",
            "Don't change medication dosage without consulting your doctor",
        ],
    )


def _detect_recurring_symptoms(
    recent: List[BloodPressureReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """Symptom words reported with two or more readings."""
    with_symptoms = [r for r in recent if r.symptoms]
    if len(with_symptoms) < SYMPTOM_MIN_READINGS:
        return None

    common = find_common_terms(r.symptoms for r in with_symptoms)
    if not common:
        return None

    return context.create(
        "bp-symptoms",
        "Recurring Symptoms Detected",
        f'You\'ve reported "{", ".join(common)}" multiple times with your blood '
        f"pressure readings. These recurring symptoms may be related to your blood pressure.",
        "medium",
        "pattern",
        "blood_pressure",
        [
            "Track when these symptoms occur in relation to your readings",
            "Discuss these recurring symptoms with your healthcare provider",
            "Note any triggers that seem to precede these symptoms",
            "Consider keeping a dedicated symptom journal",
        ],
    )
