from dataclasses import replace
from datetime import timezone

from healthtrack.engine.alert_context import AlertContext
from healthtrack.engine.bp_alerts import generate_bp_alerts


def _by_slug(alerts, slug):
    return [a for a in alerts if a.id.startswith(slug + "-")]


def test_needs_two_readings(make_bp, now):
    assert generate_bp_alerts([], AlertContext(now)) == []
    assert generate_bp_alerts([make_bp(190, 125)], AlertContext(now)) == []


def test_crisis_on_latest_reading(make_bp, now):
    readings = [make_bp(185, 125), make_bp(118, 75, days_ago=1)]
    alerts = generate_bp_alerts(readings, AlertContext(now))

    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.priority == "critical"
    assert alert.type == "threshold"
    assert alert.category == "blood_pressure"
    assert "185/125 mmHg" in alert.message
    assert "Seek immediate medical attention" in alert.recommendations


def test_stage_thresholds(make_bp, now):
    stage2 = generate_bp_alerts([make_bp(150, 85), make_bp(118, 75, days_ago=1)], AlertContext(now))
    stage1 = generate_bp_alerts([make_bp(132, 78), make_bp(118, 75, days_ago=1)], AlertContext(now))
    elevated = generate_bp_alerts([make_bp(125, 78), make_bp(118, 75, days_ago=1)], AlertContext(now))

    assert [(a.title, a.priority) for a in stage2] == [("Stage 2 Hypertension Detected", "high")]
    assert [(a.title, a.priority) for a in stage1] == [("Stage 1 Hypertension Detected", "medium")]
    assert elevated == []


def test_threshold_uses_first_reading_only(make_bp, now):
    readings = [make_bp(115, 75), make_bp(190, 125, days_ago=1)]
    assert generate_bp_alerts(readings, AlertContext(now)) == []


def test_morning_pattern_medium(make_bp, now):
    # Three of the five readings fall in the 06-10 window; the 11:15 ones do not
    readings = [
        make_bp(135, 88, days_ago=0, hour=11, minute=15),
        make_bp(135, 88, days_ago=0, hour=7, minute=30),
        make_bp(135, 88, days_ago=1, hour=11, minute=15),
        make_bp(135, 88, days_ago=1, hour=7, minute=30),
        make_bp(135, 88, days_ago=2, hour=7, minute=30),
    ]
    alerts = generate_bp_alerts(readings, AlertContext(now))

    morning = _by_slug(alerts, "bp-morning")
    assert len(morning) == 1
    assert morning[0].priority == "medium"
    assert morning[0].type == "pattern"
    assert "3 consecutive mornings" in morning[0].message


def test_morning_pattern_high_with_four_elevated(make_bp, now):
    readings = [make_bp(138, 86, days_ago=d, hour=8) for d in range(5)]
    morning = _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-morning")

    assert len(morning) == 1
    assert morning[0].priority == "high"


def test_morning_pattern_ignores_old_readings(make_bp, now):
    readings = [make_bp(118, 75)] + [make_bp(140, 95, days_ago=d, hour=8) for d in range(8, 12)]
    assert _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-morning") == []


def test_rapid_increase(make_bp, now):
    readings = [
        make_bp(150, 70, days_ago=0),
        make_bp(146, 70, days_ago=1),
        make_bp(130, 70, days_ago=2),
        make_bp(128, 70, days_ago=3),
        make_bp(130, 70, days_ago=4),
    ]
    trend = _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-increase")

    assert len(trend) == 1
    assert trend[0].priority == "medium"
    assert trend[0].type == "trend"
    assert "increased by 19 mmHg" in trend[0].message


def test_rapid_increase_high(make_bp, now):
    systolics = [160, 160, 130, 130, 130]
    readings = [make_bp(s, 70, days_ago=d) for d, s in enumerate(systolics)]
    trend = _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-increase")

    assert trend[0].priority == "high"


def test_rapid_increase_needs_five_recent(make_bp, now):
    systolics = [160, 160, 130, 130]
    readings = [make_bp(s, 70, days_ago=d) for d, s in enumerate(systolics)]
    assert _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-increase") == []


def test_nighttime_pattern(make_bp, now):
    readings = [
        make_bp(145, 92, days_ago=1, hour=23),
        make_bp(142, 91, days_ago=1, hour=2),
        make_bp(118, 75, days_ago=2, hour=12),
    ]
    night = _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-night")

    assert len(night) == 1
    assert night[0].priority == "medium"
    assert night[0].type == "timing"


def test_medication_effectiveness(make_bp, now):
    readings = [make_bp(135, 85, days_ago=d, medication="lisinopril") for d in range(3)]
    medication = _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-medication")

    assert len(medication) == 1
    assert medication[0].priority == "high"
    assert medication[0].type == "pattern"


def test_medication_effectiveness_needs_three_elevated(make_bp, now):
    readings = [
        make_bp(135, 85, days_ago=0, medication="lisinopril"),
        make_bp(135, 85, days_ago=1, medication="lisinopril"),
        make_bp(115, 75, days_ago=2, medication="lisinopril"),
    ]
    assert _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-medication") == []


def test_recurring_symptoms(make_bp, now):
    readings = [
        make_bp(115, 75, days_ago=0, symptoms="mild headache and dizziness"),
        make_bp(115, 75, days_ago=1, symptoms="headache in the morning"),
        make_bp(115, 75, days_ago=2, symptoms="dizziness, headache"),
    ]
    alerts = generate_bp_alerts(readings, AlertContext(now))

    assert len(alerts) == 1
    assert alerts[0].priority == "medium"
    assert '"headache, dizziness"' in alerts[0].message


def test_symptoms_without_repeats(make_bp, now):
    readings = [
        make_bp(115, 75, days_ago=0, symptoms="headache"),
        make_bp(115, 75, days_ago=1, symptoms="nausea"),
        make_bp(115, 75, days_ago=2, symptoms="fatigue"),
    ]
    assert generate_bp_alerts(readings, AlertContext(now)) == []


def test_does_not_mutate_input(make_bp, now):
    readings = [make_bp(185, 125), make_bp(135, 88, days_ago=1, hour=8)]
    snapshot = list(readings)
    generate_bp_alerts(readings, AlertContext(now))
    assert readings == snapshot


def test_hours_use_local_time_for_utc_timestamps(make_bp, now):
    # Readings stored as UTC ("Z") still count as 08:00 local mornings
    readings = [make_bp(138, 86, days_ago=d, hour=8) for d in range(5)]
    readings = [replace(r, timestamp=r.timestamp.astimezone(timezone.utc)) for r in readings]

    morning = _by_slug(generate_bp_alerts(readings, AlertContext(now)), "bp-morning")

    assert len(morning) == 1
    assert morning[0].priority == "high"
