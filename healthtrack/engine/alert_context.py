"""
Shared state for a single alert generation call.

Holds the reference time ("now") and the id sequence, so every alert built
during one call gets a unique id and the same generation timestamp, and the
7-day window is computed from one clock reading.
"""

import itertools
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, TypeVar

from .models import HealthAlert, local_time


RECENT_WINDOW_DAYS = 7

T = TypeVar("T")


class AlertContext:
    """
    Clock and id sequence for one generation call.

    Args:
        now: Reference time; defaults to the current local time
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now if now is not None else datetime.now()
        self._sequence = itertools.count(1)

    def recent(self, readings: Sequence[T], days: int = RECENT_WINDOW_DAYS) -> List[T]:
        """Readings taken within the last `days` days, order preserved."""
        cutoff = local_time(self.now) - timedelta(days=days)
        return [r for r in readings if local_time(r.timestamp) >= cutoff]

    def create(
        self,
        slug: str,
        title: str,
        message: str,
        priority: str,
        type: str,
        category: str,
        recommendations: Optional[List[str]] = None,
    ) -> HealthAlert:
        return HealthAlert(
            id=f"{slug}-{next(self._sequence)}",
            title=title,
            message=message,
            priority=priority,
            type=type,
            category=category,
            timestamp=self.now,
            recommendations=list(recommendations or []),
        )
