"""
Blood Sugar Categories

Maps a glucose value (mg/dL) to a severity category. The reference ranges
depend on the test context: fasting and post-meal readings have their own
tables, everything else (pre-meal, random, bedtime) uses the random table.
"""

from typing import List

from .models import Category


LOW_GLUCOSE_THRESHOLD = 70


def get_glucose_categories() -> List[Category]:
    """Return the glucose categories in ascending severity."""
    return [
        Category(
            label="Normal",
            description="Your blood sugar levels are within the normal range. Keep up the good work!",
            color="green",
            ranges={"fasting": (70, 99), "random": (70, 139), "postMeal": (70, 139)},
        ),
        Category(
            label="Pre-diabetes",
            description="Your blood sugar is elevated. Consider lifestyle changes and consult your doctor.",
            color="yellow",
            ranges={"fasting": (100, 125), "random": (140, 199), "postMeal": (140, 199)},
        ),
        Category(
            label="Diabetes",
            description="Your blood sugar indicates diabetes. Please consult with your healthcare provider.",
            color="orange",
            ranges={"fasting": (126, 300), "random": (200, 400), "postMeal": (200, 400)},
        ),
        Category(
            label="Critical",
            description="This is a critical level. Seek immediate medical attention!",
            color="red",
            ranges={"fasting": (300, 999), "random": (400, 999), "postMeal": (400, 999)},
        ),
    ]


def low_blood_sugar_category() -> Category:
    return Category(
        label="Low Blood Sugar",
        description=(
            "Your blood sugar is dangerously low. Consume glucose immediately "
            "and seek medical help if symptoms persist."
        ),
        color="red",
        ranges={"fasting": (0, 69), "random": (0, 69), "postMeal": (0, 69)},
    )


def range_type_for(test_type: str) -> str:
    """Pick the reference table for a test type."""
    if test_type == "fasting":
        return "fasting"
    if test_type == "post-meal":
        return "postMeal"
    return "random"


def classify_glucose(glucose: int, test_type: str) -> Category:
    """
    Categorize a glucose reading.

    Values below 70 mg/dL are "Low Blood Sugar" whatever the test type.
    Values above every table bound fall back to "Critical".
    """
    if glucose < LOW_GLUCOSE_THRESHOLD:
        return low_blood_sugar_category()

    categories = get_glucose_categories()
    range_type = range_type_for(test_type)

    for category in categories:
        low, high = category.ranges[range_type]
        if low <= glucose <= high:
            return category

    return categories[-1]
