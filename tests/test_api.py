from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from healthtrack.main import app


@pytest.fixture
def client(data_dir):
    return TestClient(app)


def _hours_ago(hours):
    return (datetime.now() - timedelta(hours=hours)).replace(microsecond=0).isoformat()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_classify_blood_pressure(client):
    response = client.get("/api/classify/blood-pressure", params={"systolic": 135, "diastolic": 70})

    assert response.status_code == 200
    body = response.json()
    assert body["label"] == "High BP Stage 1"
    assert body["color"] == "orange"
    assert body["ranges"]["systolic"] == [130, 139]


def test_classify_glucose(client):
    response = client.get("/api/classify/glucose", params={"glucose": 150, "test_type": "fasting"})
    assert response.json()["label"] == "Diabetes"

    response = client.get("/api/classify/glucose", params={"glucose": 150, "test_type": "sometimes"})
    assert response.status_code == 422


def test_evaluate_with_reference_time(client):
    payload = {
        "now": "2024-06-15T12:00:00",
        "bp_readings": [
            {"systolic": 185, "diastolic": 125, "timestamp": "2024-06-15T09:00:00"},
            {"systolic": 118, "diastolic": 75, "timestamp": "2024-06-14T09:00:00"},
        ],
        "glucose_readings": [
            {"glucose": 320, "timestamp": "2024-06-15T09:30:00", "testType": "random"},
            {"glucose": 110, "timestamp": "2024-06-14T09:30:00", "testType": "random"},
        ],
    }
    response = client.post("/api/alerts/evaluate", json=payload)

    assert response.status_code == 200
    alerts = response.json()["active"]
    assert [(a["category"], a["priority"]) for a in alerts] == [
        ("blood_pressure", "critical"),
        ("blood_sugar", "critical"),
    ]
    assert all(a["timestamp"].startswith("2024-06-15T12:00:00") for a in alerts)


def test_evaluate_rejects_out_of_range_values(client):
    payload = {"bp_readings": [{"systolic": 400, "diastolic": 80, "timestamp": "2024-06-15T09:00:00"}]}
    assert client.post("/api/alerts/evaluate", json=payload).status_code == 422


def test_reading_crud(client):
    created = client.post("/api/readings/glucose", json={
        "glucose": 145,
        "timestamp": _hours_ago(2),
        "testType": "post-meal",
        "mealInfo": "sandwich",
    })
    assert created.status_code == 201
    reading = created.json()
    assert reading["testType"] == "post-meal"
    assert reading["mealInfo"] == "sandwich"

    assert [r["id"] for r in client.get("/api/readings/glucose").json()] == [reading["id"]]

    assert client.delete(f"/api/readings/glucose/{reading['id']}").status_code == 200
    assert client.delete(f"/api/readings/glucose/{reading['id']}").status_code == 404


def test_duplicate_reading_conflict(client):
    reading = {"systolic": 130, "diastolic": 85, "pulse": 72, "timestamp": _hours_ago(1)}

    assert client.post("/api/readings/blood-pressure", json=reading).status_code == 201
    response = client.post("/api/readings/blood-pressure", json=reading)

    assert response.status_code == 409
    assert response.json()["detail"].startswith("Duplicate entry detected!")


def test_dismiss_and_restore_alert(client):
    client.post("/api/readings/blood-pressure", json={"systolic": 185, "diastolic": 125, "timestamp": _hours_ago(1)})
    client.post("/api/readings/blood-pressure", json={"systolic": 118, "diastolic": 75, "timestamp": _hours_ago(30)})

    alerts = client.get("/api/alerts").json()
    assert len(alerts["active"]) == 1
    key = alerts["active"][0]["key"]

    assert client.post(f"/api/alerts/{key}/dismiss").json() == {"dismissed": [key]}
    alerts = client.get("/api/alerts").json()
    assert alerts["active"] == []
    assert [a["key"] for a in alerts["dismissed"]] == [key]

    assert client.delete(f"/api/alerts/{key}/dismiss").json() == {"dismissed": []}
    assert len(client.get("/api/alerts").json()["active"]) == 1


def test_summaries(client):
    assert client.get("/api/summary/glucose").json() == {"count": 0}

    client.post("/api/readings/blood-pressure", json={"systolic": 130, "diastolic": 84, "timestamp": _hours_ago(1)})
    client.post("/api/readings/blood-pressure", json={"systolic": 120, "diastolic": 80, "timestamp": _hours_ago(25)})

    summary = client.get("/api/summary/blood-pressure").json()
    assert summary["avg_systolic"] == 125
    assert summary["systolic_trend"] == 1


def test_mixed_timestamp_styles(client):
    first = {"systolic": 120, "diastolic": 80, "timestamp": "2024-06-14T08:00:00"}
    second = {"systolic": 130, "diastolic": 85, "timestamp": "2024-06-15T08:00:00Z"}

    assert client.post("/api/readings/blood-pressure", json=first).status_code == 201
    assert client.post("/api/readings/blood-pressure", json=second).status_code == 201

    response = client.post("/api/alerts/evaluate", json={
        "now": "2024-06-15T12:00:00",
        "bp_readings": [first, second],
    })
    assert response.status_code == 200
    assert [a["title"] for a in response.json()["active"]] == ["Stage 1 Hypertension Detected"]
