"""
FastAPI Application for the Health Tracker

Provides:
- Blood pressure and blood sugar reading storage
- Category lookup for a single reading
- Health alerts over stored or submitted readings, with dismissal
- Reading summaries (averages, HbA1c estimate, time in range)
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, FastAPI, HTTPException, Query

from healthtrack import storage
from healthtrack.config import settings
from healthtrack.engine.alert_engine import generate_health_alerts
from healthtrack.engine.blood_pressure import classify_blood_pressure
from healthtrack.engine.blood_sugar import classify_glucose
from healthtrack.engine.models import BloodPressureReading, GlucoseReading, ReadingFormatError
from healthtrack.engine.reading_stats import summarize_blood_pressure, summarize_glucose
from healthtrack.schemas import (
    AlertListResponse,
    BloodPressureReadingIn,
    CategoryResponse,
    DismissedResponse,
    EvaluateRequest,
    GlucoseReadingIn,
    GlucoseTestType,
)
from healthtrack.storage import dismissed_alerts

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME, version="1.0.0")
router = APIRouter()


@app.get("/health")
async def health():
    return {"status": "healthy"}


# --- Category lookup ---

@router.get("/classify/blood-pressure", response_model=CategoryResponse)
async def classify_bp(
    systolic: int = Query(..., ge=0),
    diastolic: int = Query(..., ge=0),
):
    return classify_blood_pressure(systolic, diastolic).to_dict()


@router.get("/classify/glucose", response_model=CategoryResponse)
async def classify_bs(
    glucose: int = Query(..., ge=0),
    test_type: GlucoseTestType = Query(GlucoseTestType.RANDOM),
):
    return classify_glucose(glucose, test_type.value).to_dict()


# --- Alerts ---

@router.post("/alerts/evaluate", response_model=AlertListResponse)
async def evaluate_alerts(request: EvaluateRequest):
    """
    Generate alerts for the submitted readings. Nothing is stored.

    Readings without an id get a positional one.
    """
    try:
        bp_readings = [
            BloodPressureReading.from_dict({**r.to_record(), "id": r.id or f"bp-{i}"})
            for i, r in enumerate(request.bp_readings)
        ]
        glucose_readings = [
            GlucoseReading.from_dict({**r.to_record(), "id": r.id or f"bs-{i}"})
            for i, r in enumerate(request.glucose_readings)
        ]
    except ReadingFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    alerts = generate_health_alerts(bp_readings, glucose_readings, now=request.now)
    return {"active": [a.to_dict() for a in alerts], "dismissed": []}


@router.get("/alerts", response_model=AlertListResponse)
async def list_alerts():
    """Alerts over the stored readings, split by dismissal state."""
    alerts = generate_health_alerts(storage.get_bp_readings(), storage.get_glucose_readings())
    active, dismissed = dismissed_alerts.split_alerts(alerts, dismissed_alerts.list_dismissed())
    return {
        "active": [a.to_dict() for a in active],
        "dismissed": [a.to_dict() for a in dismissed],
    }


@router.post("/alerts/{alert_key}/dismiss", response_model=DismissedResponse)
async def dismiss_alert(alert_key: str):
    return {"dismissed": sorted(dismissed_alerts.dismiss(alert_key))}


@router.delete("/alerts/{alert_key}/dismiss", response_model=DismissedResponse)
async def restore_alert(alert_key: str):
    return {"dismissed": sorted(dismissed_alerts.restore(alert_key))}


# --- Readings ---

def _store(add, record: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return add(record).to_dict()
    except storage.DuplicateReadingError as e:
        logger.info("Rejected duplicate reading: %s", e)
        raise HTTPException(status_code=409, detail=str(e))
    except ReadingFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _remove(delete, reading_id: str) -> Dict[str, str]:
    try:
        delete(reading_id)
    except storage.ReadingNotFoundError:
        raise HTTPException(status_code=404, detail=f"Reading {reading_id} not found")
    return {"deleted": reading_id}


@router.get("/readings/blood-pressure")
async def list_bp_readings() -> List[Dict[str, Any]]:
    return [r.to_dict() for r in storage.get_bp_readings()]


@router.post("/readings/blood-pressure", status_code=201)
async def create_bp_reading(reading: BloodPressureReadingIn):
    return _store(storage.add_bp_reading, reading.to_record())


@router.delete("/readings/blood-pressure/{reading_id}")
async def remove_bp_reading(reading_id: str):
    return _remove(storage.delete_bp_reading, reading_id)


@router.get("/readings/glucose")
async def list_glucose_readings() -> List[Dict[str, Any]]:
    return [r.to_dict() for r in storage.get_glucose_readings()]


@router.post("/readings/glucose", status_code=201)
async def create_glucose_reading(reading: GlucoseReadingIn):
    return _store(storage.add_glucose_reading, reading.to_record())


@router.delete("/readings/glucose/{reading_id}")
async def remove_glucose_reading(reading_id: str):
    return _remove(storage.delete_glucose_reading, reading_id)


# --- Summaries ---

@router.get("/summary/blood-pressure")
async def bp_summary():
    return summarize_blood_pressure(storage.get_bp_readings())


@router.get("/summary/glucose")
async def glucose_summary():
    return summarize_glucose(storage.get_glucose_readings())


app.include_router(router, prefix=settings.API_PREFIX)
