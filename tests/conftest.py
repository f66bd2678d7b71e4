import itertools
from datetime import datetime, timedelta

import pytest

from healthtrack.config import settings
from healthtrack.engine.models import BloodPressureReading, GlucoseReading

# Saturday noon; every engine test runs against this frozen clock
NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_bp():
    """Factory for blood pressure readings, timestamped relative to NOW."""
    ids = itertools.count(1)

    def _make(systolic, diastolic, days_ago=0, hour=12, minute=0, **kwargs):
        day = NOW - timedelta(days=days_ago)
        return BloodPressureReading(
            id=f"bp{next(ids)}",
            systolic=systolic,
            diastolic=diastolic,
            timestamp=day.replace(hour=hour, minute=minute),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_bs():
    """Factory for glucose readings, timestamped relative to NOW."""
    ids = itertools.count(1)

    def _make(glucose, test_type="random", days_ago=0, hour=12, minute=0, **kwargs):
        day = NOW - timedelta(days=days_ago)
        return GlucoseReading(
            id=f"bs{next(ids)}",
            glucose=glucose,
            timestamp=day.replace(hour=hour, minute=minute),
            test_type=test_type,
            **kwargs,
        )

    return _make


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point all JSON storage at a temporary directory."""
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path))
    return tmp_path
