from dataclasses import replace
from datetime import timedelta, timezone

from healthtrack.engine.alert_engine import generate_health_alerts, newest_first, sort_alerts
from healthtrack.engine.models import HealthAlert


def _busy_day(make_bp, make_bs):
    bp = [
        make_bp(185, 125, days_ago=0, notes="work stress"),
        make_bp(150, 95, days_ago=1, notes="feeling anxious"),
        make_bp(145, 92, days_ago=2, notes="tense all day"),
    ]
    bs = [
        make_bs(320, days_ago=0, notes="skipped lunch"),
        make_bs(210, days_ago=1),
        make_bs(190, days_ago=2),
    ]
    return bp, bs


def test_too_few_readings():
    assert generate_health_alerts([], []) == []


def test_single_reading_produces_nothing(make_bp, now):
    assert generate_health_alerts([make_bp(190, 125)], [], now=now) == []


def test_crisis_reading(make_bp, now):
    bp = [make_bp(185, 125), make_bp(118, 75, days_ago=1)]
    alerts = generate_health_alerts(bp, [], now=now)

    assert len(alerts) == 1
    assert alerts[0].priority == "critical"
    assert alerts[0].type == "threshold"
    assert alerts[0].category == "blood_pressure"
    assert alerts[0].timestamp == now


def test_alerts_are_ranked(make_bp, make_bs, now):
    bp, bs = _busy_day(make_bp, make_bs)
    alerts = generate_health_alerts(bp, bs, now=now)

    ranks = [a.rank for a in alerts]
    assert ranks == sorted(ranks, reverse=True)
    assert {a.category for a in alerts} == {"blood_pressure", "blood_sugar", "general"}
    assert alerts[0].priority == "critical"


def test_ids_are_unique(make_bp, make_bs, now):
    bp, bs = _busy_day(make_bp, make_bs)
    alerts = generate_health_alerts(bp, bs, now=now)

    ids = [a.id for a in alerts]
    assert len(ids) == len(set(ids))


def test_unsorted_input(make_bp, now):
    bp = [make_bp(118, 75, days_ago=3), make_bp(185, 125, days_ago=0)]
    alerts = generate_health_alerts(bp, [], now=now)

    assert [a.priority for a in alerts] == ["critical"]
    assert "185/125" in alerts[0].message


def test_same_clock_same_alerts(make_bp, make_bs, now):
    bp, bs = _busy_day(make_bp, make_bs)

    first = [a.to_dict() for a in generate_health_alerts(bp, bs, now=now)]
    second = [a.to_dict() for a in generate_health_alerts(list(reversed(bp)), bs, now=now)]
    assert first == second


def test_input_is_not_mutated(make_bp, make_bs, now):
    bp = [make_bp(118, 75, days_ago=3), make_bp(185, 125, days_ago=0)]
    bs = [make_bs(100, days_ago=2), make_bs(320, days_ago=0)]
    bp_before, bs_before = list(bp), list(bs)

    generate_health_alerts(bp, bs, now=now)

    assert bp == bp_before
    assert bs == bs_before


def test_window_follows_reference_time(make_bp, now):
    bp = [make_bp(138, 86, days_ago=d, hour=8) for d in range(5)]

    current = generate_health_alerts(bp, [], now=now)
    much_later = generate_health_alerts(bp, [], now=now + timedelta(days=30))

    assert any(a.title == "Elevated Morning Blood Pressure" for a in current)
    # Only the latest-reading check survives once every reading is old
    assert [a.type for a in much_later] == ["threshold"]


def test_sort_alerts_breaks_ties_by_recency(now):
    def alert(id, priority, minutes_ago):
        return HealthAlert(
            id=id, title=id, message=id, priority=priority, type="pattern",
            category="general", timestamp=now - timedelta(minutes=minutes_ago),
        )

    alerts = [
        alert("old-medium", "medium", 10),
        alert("low", "low", 0),
        alert("new-medium", "medium", 0),
        alert("critical", "critical", 60),
    ]
    assert [a.id for a in sort_alerts(alerts)] == ["critical", "new-medium", "old-medium", "low"]


def test_newest_first(make_bp):
    readings = [make_bp(120, 80, days_ago=2), make_bp(121, 80, days_ago=0), make_bp(122, 80, days_ago=1)]
    assert [r.systolic for r in newest_first(readings)] == [121, 122, 120]


def test_newest_first_with_mixed_timezones(make_bp):
    older = make_bp(120, 80, days_ago=1)
    newer = make_bp(130, 85)
    newer = replace(newer, timestamp=newer.timestamp.astimezone(timezone.utc))

    assert [r.systolic for r in newest_first([older, newer])] == [130, 120]
