"""
Local reading storage.

Keeps blood pressure and blood sugar readings in JSON files under
settings.DATA_DIR, newest first.
"""

import json
import logging
import os
from typing import Any, Callable, Dict, List, Type
from uuid import uuid4

from healthtrack.config import settings
from healthtrack.engine.alert_engine import newest_first
from healthtrack.engine.duplicates import check_bp_duplicate, check_glucose_duplicate
from healthtrack.engine.models import BloodPressureReading, GlucoseReading

logger = logging.getLogger(__name__)

BP_FILE = "blood_pressure_readings.json"
GLUCOSE_FILE = "blood_sugar_readings.json"


class DuplicateReadingError(Exception):
    """Raised when a new reading repeats one that is already stored."""

    def __init__(self, message: str, existing: Any):
        super().__init__(message)
        self.existing = existing


class ReadingNotFoundError(Exception):
    """Raised when deleting a reading id that is not stored."""
    pass


def _path(filename: str) -> str:
    return os.path.join(settings.DATA_DIR, filename)


def _load(filename: str) -> List[Dict[str, Any]]:
    """Load stored items. Return [] if the file is missing or broken."""
    path = _path(filename)
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s, treating it as empty: %s", path, e)
        return []
    if isinstance(data, list):
        return data
    logger.warning("Unexpected content in %s, treating it as empty", path)
    return []


def _save(filename: str, items: List[Dict[str, Any]]) -> None:
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    with open(_path(filename), "w", encoding="utf-8") as f:
        json.dump(items, f, ensure_ascii=False, indent=2)


def _load_readings(filename: str, model: Type) -> List[Any]:
    return newest_first([model.from_dict(item) for item in _load(filename)])


def _save_readings(filename: str, readings: List[Any]) -> None:
    _save(filename, [r.to_dict() for r in newest_first(readings)])


def _add_reading(
    filename: str,
    model: Type,
    duplicate_check: Callable,
    data: Dict[str, Any],
) -> Any:
    readings = _load_readings(filename, model)
    reading = model.from_dict({**data, "id": data.get("id") or str(uuid4())})

    check = duplicate_check(reading, readings, settings.DUPLICATE_WINDOW_MINUTES)
    if check.is_duplicate:
        raise DuplicateReadingError(check.message, check.existing)

    readings.append(reading)
    _save_readings(filename, readings)
    return reading


def _delete_reading(filename: str, model: Type, reading_id: str) -> None:
    readings = _load_readings(filename, model)
    remaining = [r for r in readings if r.id != reading_id]
    if len(remaining) == len(readings):
        raise ReadingNotFoundError(reading_id)
    _save_readings(filename, remaining)


def get_bp_readings() -> List[BloodPressureReading]:
    """Return stored blood pressure readings, newest first."""
    return _load_readings(BP_FILE, BloodPressureReading)


def add_bp_reading(data: Dict[str, Any]) -> BloodPressureReading:
    """
    Store a new blood pressure reading.

    `data` uses the stored dict form (see BloodPressureReading.from_dict).
    An id is generated when missing.

    Raises:
        DuplicateReadingError: if the same values were logged within the window
    """
    return _add_reading(BP_FILE, BloodPressureReading, check_bp_duplicate, data)


def delete_bp_reading(reading_id: str) -> None:
    _delete_reading(BP_FILE, BloodPressureReading, reading_id)


def get_glucose_readings() -> List[GlucoseReading]:
    """Return stored blood sugar readings, newest first."""
    return _load_readings(GLUCOSE_FILE, GlucoseReading)


def add_glucose_reading(data: Dict[str, Any]) -> GlucoseReading:
    """Store a new blood sugar reading. Same contract as add_bp_reading."""
    return _add_reading(GLUCOSE_FILE, GlucoseReading, check_glucose_duplicate, data)


def delete_glucose_reading(reading_id: str) -> None:
    _delete_reading(GLUCOSE_FILE, GlucoseReading, reading_id)
