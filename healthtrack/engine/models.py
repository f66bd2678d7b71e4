"""
Data models for health readings, categories and alerts.

Defines the structure for blood pressure and blood glucose readings as they
come out of storage, the derived severity categories, and the alerts produced
by the rule engine.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


# Priority rank used for ordering alerts (higher is more urgent)
PRIORITY_RANK = {
    "critical": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}

TEST_TYPES = ("fasting", "pre-meal", "post-meal", "random", "bedtime")
LOCATIONS = ("home", "clinic", "hospital", "pharmacy")


class ReadingFormatError(ValueError):
    """Raised when a stored or submitted reading is missing required fields."""
    pass


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO8601 timestamp (or pass a datetime through).

    A trailing "Z" is accepted for UTC, as browsers emit it.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ReadingFormatError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ReadingFormatError(f"invalid timestamp: {value!r}") from e


def local_time(ts: datetime) -> datetime:
    """
    Wall-clock time of a timestamp as a naive local datetime.

    Naive timestamps are taken to be local already. Aware ones (e.g. the
    UTC "Z" timestamps browsers store) are converted to the local zone, so
    ordering, windows and hour-of-day checks all see the same clock.
    """
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def _require(data: Dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise ReadingFormatError(f"reading is missing required field '{key}'")
    return value


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class BloodPressureReading:
    """
    A single blood pressure measurement.

    Attributes:
        id: Unique reading id
        systolic: Systolic pressure in mmHg
        diastolic: Diastolic pressure in mmHg
        timestamp: When the measurement was taken
        pulse: Heart rate in bpm, if recorded
        notes: Free-text notes
        medication: Medication taken around the reading
        location: home, clinic, hospital or pharmacy
        symptoms: Free-text symptoms
    """
    id: str
    systolic: int
    diastolic: int
    timestamp: datetime
    pulse: Optional[int] = None
    notes: Optional[str] = None
    medication: Optional[str] = None
    location: Optional[str] = None
    symptoms: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BloodPressureReading":
        """Build a reading from its stored (camelCase) dict form."""
        try:
            return cls(
                id=str(_require(data, "id")),
                systolic=int(_require(data, "systolic")),
                diastolic=int(_require(data, "diastolic")),
                timestamp=parse_timestamp(_require(data, "timestamp")),
                pulse=_optional_int(data.get("pulse")),
                notes=_optional_text(data.get("notes")),
                medication=_optional_text(data.get("medication")),
                location=_optional_text(data.get("location")),
                symptoms=_optional_text(data.get("symptoms")),
            )
        except ReadingFormatError:
            raise
        except (TypeError, ValueError) as e:
            raise ReadingFormatError(f"invalid blood pressure reading: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "systolic": self.systolic,
            "diastolic": self.diastolic,
            "pulse": self.pulse,
            "timestamp": self.timestamp.isoformat(),
            "notes": self.notes,
            "medication": self.medication,
            "location": self.location,
            "symptoms": self.symptoms,
        }


@dataclass(frozen=True)
class GlucoseReading:
    """
    A single blood glucose measurement.

    The test type decides which reference ranges apply when categorizing.
    """
    id: str
    glucose: int
    timestamp: datetime
    test_type: str  # fasting, pre-meal, post-meal, random or bedtime
    notes: Optional[str] = None
    medication: Optional[str] = None
    meal_info: Optional[str] = None
    location: Optional[str] = None
    symptoms: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlucoseReading":
        """Build a reading from its stored (camelCase) dict form."""
        try:
            return cls(
                id=str(_require(data, "id")),
                glucose=int(_require(data, "glucose")),
                timestamp=parse_timestamp(_require(data, "timestamp")),
                test_type=str(data.get("testType") or data.get("test_type") or "random"),
                notes=_optional_text(data.get("notes")),
                medication=_optional_text(data.get("medication")),
                meal_info=_optional_text(data.get("mealInfo", data.get("meal_info"))),
                location=_optional_text(data.get("location")),
                symptoms=_optional_text(data.get("symptoms")),
            )
        except ReadingFormatError:
            raise
        except (TypeError, ValueError) as e:
            raise ReadingFormatError(f"invalid glucose reading: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "glucose": self.glucose,
            "timestamp": self.timestamp.isoformat(),
            "testType": self.test_type,
            "notes": self.notes,
            "medication": self.medication,
            "mealInfo": self.meal_info,
            "location": self.location,
            "symptoms": self.symptoms,
        }


@dataclass(frozen=True)
class Category:
    """
    A severity bucket for a reading.

    Attributes:
        label: Category name, e.g. "High BP Stage 1"
        description: Patient-friendly explanation
        color: "green", "yellow", "orange" or "red" (ascending severity)
        ranges: Inclusive (min, max) bounds per range name
    """
    label: str
    description: str
    color: str
    ranges: Dict[str, Tuple[int, int]] = field(default_factory=dict)

    @property
    def is_elevated(self) -> bool:
        return self.color in ("orange", "red")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "description": self.description,
            "color": self.color,
            "ranges": {name: list(bounds) for name, bounds in self.ranges.items()},
        }


@dataclass
class HealthAlert:
    """
    A human-readable notice produced by the rule engine.

    Attributes:
        id: Identifier, unique within one generation call
        title: Short title
        message: One or two sentences explaining what was detected
        priority: "low", "medium", "high" or "critical"
        type: "trend", "pattern", "threshold", "timing" or "lifestyle"
        category: "blood_pressure", "blood_sugar" or "general"
        timestamp: When the alert was generated
        recommendations: Actionable suggestions, in display order
    """
    id: str
    title: str
    message: str
    priority: str
    type: str
    category: str
    timestamp: datetime
    recommendations: List[str] = field(default_factory=list)

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self.priority]

    @property
    def key(self) -> str:
        """Content hash, stable across generation calls for the same finding."""
        content = "|".join((self.category, self.title, self.message))
        return hashlib.sha1(content.encode("utf-8")).hexdigest()[:16]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "title": self.title,
            "message": self.message,
            "priority": self.priority,
            "type": self.type,
            "category": self.category,
            "timestamp": self.timestamp.isoformat(),
            "recommendations": list(self.recommendations),
        }
