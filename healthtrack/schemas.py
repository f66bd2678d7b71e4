"""
Pydantic schemas for API requests and responses.

Incoming readings are range-checked here; the engine itself assumes values
have already been validated.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Location(str, Enum):
    HOME = "home"
    CLINIC = "clinic"
    HOSPITAL = "hospital"
    PHARMACY = "pharmacy"


class GlucoseTestType(str, Enum):
    FASTING = "fasting"
    PRE_MEAL = "pre-meal"
    POST_MEAL = "post-meal"
    RANDOM = "random"
    BEDTIME = "bedtime"


class BloodPressureReadingIn(BaseModel):
    """A blood pressure reading as submitted by the client."""
    id: Optional[str] = None
    systolic: int = Field(ge=50, le=300)
    diastolic: int = Field(ge=30, le=200)
    pulse: Optional[int] = Field(None, ge=30, le=200)
    timestamp: datetime
    notes: Optional[str] = None
    medication: Optional[str] = None
    location: Optional[Location] = None
    symptoms: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class GlucoseReadingIn(BaseModel):
    """A blood sugar reading as submitted by the client (camelCase keys accepted)."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    glucose: int = Field(ge=20, le=600)
    timestamp: datetime
    test_type: GlucoseTestType = Field(alias="testType")
    notes: Optional[str] = None
    medication: Optional[str] = None
    meal_info: Optional[str] = Field(None, alias="mealInfo")
    location: Optional[Location] = None
    symptoms: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class EvaluateRequest(BaseModel):
    """Readings to evaluate without storing them."""
    bp_readings: List[BloodPressureReadingIn] = Field(default_factory=list)
    glucose_readings: List[GlucoseReadingIn] = Field(default_factory=list)
    now: Optional[datetime] = None


class CategoryResponse(BaseModel):
    label: str
    description: str
    color: str
    ranges: Dict[str, List[int]]


class AlertResponse(BaseModel):
    id: str
    key: str
    title: str
    message: str
    priority: str
    type: str
    category: str
    timestamp: datetime
    recommendations: List[str]


class AlertListResponse(BaseModel):
    active: List[AlertResponse]
    dismissed: List[AlertResponse] = Field(default_factory=list)


class DismissedResponse(BaseModel):
    dismissed: List[str]
