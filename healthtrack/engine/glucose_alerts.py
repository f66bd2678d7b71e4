"""
Blood Sugar Alert Generator

Scans a newest-first list of glucose readings and raises alerts for:
- The latest reading being critically high, low, or in the diabetes range
- Repeatedly elevated fasting glucose
- Repeated low glucose episodes
- High post-meal readings
- Large swings between highest and lowest readings
- Foods that keep showing up next to high readings
"""

import logging
from typing import List, Optional, Sequence

from .alert_context import AlertContext
from .blood_sugar import classify_glucose
from .models import GlucoseReading, HealthAlert
from .text_patterns import MAX_COMMON_TERMS, find_common_terms, token_set

logger = logging.getLogger(__name__)


MIN_READINGS = 2

CRITICAL_HIGH_MGDL = 300
LOW_MGDL = 70
DIABETES_RANGE_ALERT_MGDL = 200

FASTING_SAMPLE_SIZE = 5
FASTING_ELEVATED_MGDL = 100
FASTING_MIN_ELEVATED = 3
FASTING_HIGH_ELEVATED = 4

LOW_EPISODES_MIN = 2
LOW_EPISODES_HIGH = 3

HIGH_MGDL = 180
POST_MEAL_MIN_READINGS = 3
POST_MEAL_MIN_HIGH = 2

VARIABILITY_MIN_READINGS = 5
VARIABILITY_MGDL = 100
VARIABILITY_HIGH_MGDL = 150

FOOD_MIN_READINGS = 3
FOOD_MIN_HIGH_READINGS = 2


def generate_glucose_alerts(
    readings: Sequence[GlucoseReading],
    context: Optional[AlertContext] = None,
) -> List[HealthAlert]:
    """
    Generate blood sugar alerts.

    Args:
        readings: Glucose readings, newest first
        context: Clock and id sequence for this call (a fresh one if None)

    Returns:
        List of HealthAlert objects, unsorted
    """
    if len(readings) < MIN_READINGS:
        return []

    context = context or AlertContext()
    recent = context.recent(readings)
    alerts = []

    # A) Latest reading out of range
    threshold_alert = _check_latest_reading(readings[0], context)
    if threshold_alert:
        alerts.append(threshold_alert)

    # B) Elevated fasting glucose
    fasting_alert = _detect_fasting_pattern(recent, context)
    if fasting_alert:
        alerts.append(fasting_alert)

    # C) Low episodes
    low_alert = _detect_low_episodes(recent, context)
    if low_alert:
        alerts.append(low_alert)

    # D) Post-meal spikes
    post_meal_alert = _detect_post_meal_spikes(recent, context)
    if post_meal_alert:
        alerts.append(post_meal_alert)

    # E) Variability
    variability_alert = _detect_high_variability(recent, context)
    if variability_alert:
        alerts.append(variability_alert)

    # F) Foods linked to high readings
    food_alert = _detect_food_pattern(recent, context)
    if food_alert:
        alerts.append(food_alert)

    logger.debug(
        "glucose alerts: %d readings (%d recent) -> %d alerts",
        len(readings), len(recent), len(alerts),
    )
    return alerts


def _check_latest_reading(
    latest: GlucoseReading,
    context: AlertContext
) -> Optional[HealthAlert]:
    """Threshold alert for the most recent reading."""
    if latest.glucose > CRITICAL_HIGH_MGDL:
        return context.create(
            "bs-critical-high",
            "Critical High Blood Sugar",
            f"Your latest blood sugar reading ({latest.glucose} mg/dL) is dangerously "
            f"high. This requires immediate attention.",
            "critical",
            "threshold",
            "blood_sugar",
            [
                "Contact your healthcare provider immediately",
                "Check for ketones if you have type 1 diabetes",
                "Stay hydrated with water",
                "Follow your sick day management plan if you have one",
            ],
        )

    if latest.glucose < LOW_MGDL:
        return context.create(
            "bs-critical-low",
            "Low Blood Sugar Alert",
            f"Your latest blood sugar reading ({latest.glucose} mg/dL) is below the "
            f"safe threshold. This requires immediate action.",
            "critical",
            "threshold",
            "blood_sugar",
            [
                "Consume 15-20g of fast-acting carbohydrates immediately",
                "Recheck blood sugar after 15 minutes",
                "If still low, repeat treatment",
                "Once normalized, eat a small snack if your next meal is more than an hour away",
            ],
        )

    category = classify_glucose(latest.glucose, latest.test_type)
    if category.label == "Diabetes" and latest.glucose >= DIABETES_RANGE_ALERT_MGDL:
        return context.create(
            "bs-diabetes-range",
            "Diabetes Range Blood Sugar",
            f"Your latest {latest.test_type} blood sugar reading ({latest.glucose} mg/dL) "
            f"is in the diabetes range.",
            "high",
            "threshold",
            "blood_sugar",
            [
                "Contact your healthcare provider to discuss this reading",
                "Review your meal plan and carbohydrate intake",
                "Ensure you're taking medications as prescribed",
                "Increase physical activity if appropriate and approved by your doctor",
            ],
        )

    return None


def _detect_fasting_pattern(
    recent: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """Fasting readings at or above 100 mg/dL in the latest five fasting tests."""
    fasting = [r for r in recent if r.test_type == "fasting"][:FASTING_SAMPLE_SIZE]
    if len(fasting) < FASTING_MIN_ELEVATED:
        return None

    high_count = sum(1 for r in fasting if r.glucose >= FASTING_ELEVATED_MGDL)
    if high_count < FASTING_MIN_ELEVATED:
        return None

    return context.create(
        "bs-fasting",
        "Elevated Fasting Blood Sugar",
        f"Your fasting blood sugar has been elevated (≥{FASTING_ELEVATED_MGDL} mg/dL) "
        f"for {high_count} recent tests.",
        "high" if high_count >= FASTING_HIGH_ELEVATED else "medium",
        "pattern",
        "blood_sugar",
        [
            "Avoid eating 3-4 hours before bedtime",
            "Limit refined carbohydrates",
            "Increase physical activity after meals",
            "Schedule HbA1c test with healthcare provider",
        ],
    )


def _detect_low_episodes(
    recent: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    low_count = sum(1 for r in recent if r.glucose < LOW_MGDL)
    if low_count < LOW_EPISODES_MIN:
        return None

    return context.create(
        "bs-low",
        "Low Blood Sugar Episodes",
        f"You've had {low_count} episodes of low blood sugar (<{LOW_MGDL} mg/dL) recently.",
        "high" if low_count >= LOW_EPISODES_HIGH else "medium",
        "threshold",
        "blood_sugar",
        [
            "Always carry glucose tablets",
            "Eat regular meals and snacks",
            "Review medication timing with doctor",
            "Learn hypoglycemia symptoms",
        ],
    )


def _detect_post_meal_spikes(
    recent: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    post_meal = [r for r in recent if r.test_type == "post-meal"]
    if len(post_meal) < POST_MEAL_MIN_READINGS:
        return None

    high_count = sum(1 for r in post_meal if r.glucose > HIGH_MGDL)
    if high_count < POST_MEAL_MIN_HIGH:
        return None

    return context.create(
        "bs-postmeal",
        "High Post-Meal Blood Sugar",
        f"You have {high_count} high post-meal blood sugar readings (>{HIGH_MGDL} mg/dL). "
        f"This suggests your meals may be affecting your glucose control.",
        "medium",
        "pattern",
        "blood_sugar",
        [
            "Consider lower carbohydrate meal options",
            "Try taking a 15-minute walk after meals",
            "Eat protein and fat before carbohydrates in your meal",
            "Discuss meal-time medication adjustments with your doctor",
        ],
    )


def _detect_high_variability(
    recent: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """Spread between highest and lowest recent readings."""
    if len(recent) < VARIABILITY_MIN_READINGS:
        return None

    values = [r.glucose for r in recent]
    highest = max(values)
    lowest = min(values)
    variability = highest - lowest

    if variability <= VARIABILITY_MGDL:
        return None

    return context.create(
        "bs-variability",
        "High Blood Sugar Variability",
        f"Your blood sugar has varied by {variability} mg/dL recently (from {lowest} "
        f"to {highest} mg/dL). High variability can increase health risks.",
        "high" if variability > VARIABILITY_HIGH_MGDL else "medium",
        "trend",
        "blood_sugar",
        [
            "Maintain consistent meal timing and composition",
            "Check for patterns related to specific foods or activities",
            "Ensure consistent medication timing",
            "Discuss continuous glucose monitoring with your doctor",
        ],
    )


def _detect_food_pattern(
    recent: List[GlucoseReading],
    context: AlertContext
) -> Optional[HealthAlert]:
    """
    Foods mentioned in meal info that go together with high readings.

    A food is implicated when at least two readings that mention it are
    above 180 mg/dL.
    """
    with_meals = [r for r in recent if r.meal_info]
    if len(with_meals) < FOOD_MIN_READINGS:
        return None

    # All shared foods; the implicated ones need not rank in the top three
    common_foods = find_common_terms((r.meal_info for r in with_meals), limit=None)
    if not common_foods:
        return None

    meal_tokens = [(r, token_set(r.meal_info)) for r in with_meals]
    implicated = [
        food for food in common_foods
        if sum(1 for r, tokens in meal_tokens if food in tokens and r.glucose > HIGH_MGDL)
        >= FOOD_MIN_HIGH_READINGS
    ][:MAX_COMMON_TERMS]
    if not implicated:
        return None

    return context.create(
        "bs-food-pattern",
        "Food Impact Pattern Detected",
        f'Meals containing "{", ".join(implicated)}" appear to be associated with '
        f"higher blood sugar readings. Consider adjusting these food choices.",
        "medium",
        "pattern",
        "blood_sugar",
        [
            "Consider reducing portion sizes of these foods",
            "Pair these foods with protein and healthy fats",
            "Try alternative lower-carb options",
            "Monitor blood sugar before and after eating these foods",
        ],
    )
