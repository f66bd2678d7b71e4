"""
Blood Pressure Categories

Maps a systolic/diastolic pair to one of five severity categories:
Normal, Elevated, High BP Stage 1, High BP Stage 2, Hypertensive Crisis.

Systolic and diastolic are classified independently and the more severe
category wins. A crisis reading on either value overrides everything else.
"""

from typing import List

from .models import Category


# Crisis thresholds (either value alone triggers)
CRISIS_SYSTOLIC = 180
CRISIS_DIASTOLIC = 120

# Upper bounds of each ladder step (inclusive). Index = severity level.
SYSTOLIC_LADDER = (120, 129, 139)   # Normal, Elevated, Stage 1, else Stage 2
DIASTOLIC_LADDER = (80, 80, 89)     # Normal, (no diastolic-only Elevated), Stage 1, else Stage 2

NORMAL = 0
ELEVATED = 1
STAGE_1 = 2
STAGE_2 = 3
CRISIS = 4


def get_bp_categories() -> List[Category]:
    """Return the BP categories in ascending severity."""
    return [
        Category(
            label="Normal",
            description="Your blood pressure is in the normal range. Keep up the good work!",
            color="green",
            ranges={"systolic": (0, 120), "diastolic": (0, 80)},
        ),
        Category(
            label="Elevated",
            description="Your systolic pressure is elevated. Consider lifestyle changes.",
            color="yellow",
            ranges={"systolic": (120, 129), "diastolic": (0, 80)},
        ),
        Category(
            label="High BP Stage 1",
            description="You have stage 1 high blood pressure. Consult your doctor.",
            color="orange",
            ranges={"systolic": (130, 139), "diastolic": (80, 89)},
        ),
        Category(
            label="High BP Stage 2",
            description="You have stage 2 high blood pressure. See your doctor promptly.",
            color="red",
            ranges={"systolic": (140, 179), "diastolic": (90, 119)},
        ),
        Category(
            label="Hypertensive Crisis",
            description="This is a medical emergency. Seek immediate medical attention!",
            color="red",
            ranges={"systolic": (180, 999), "diastolic": (120, 999)},
        ),
    ]


def _ladder_level(value: float, ladder: tuple) -> int:
    for level, upper in enumerate(ladder):
        if value <= upper:
            return level
    return STAGE_2


def classify_blood_pressure(systolic: int, diastolic: int) -> Category:
    """
    Categorize a blood pressure reading.

    Args:
        systolic: Systolic pressure (mmHg)
        diastolic: Diastolic pressure (mmHg)

    Returns:
        The matching Category (never None)
    """
    categories = get_bp_categories()

    if systolic >= CRISIS_SYSTOLIC or diastolic >= CRISIS_DIASTOLIC:
        return categories[CRISIS]

    level = max(
        _ladder_level(systolic, SYSTOLIC_LADDER),
        _ladder_level(diastolic, DIASTOLIC_LADDER),
    )
    return categories[level]
