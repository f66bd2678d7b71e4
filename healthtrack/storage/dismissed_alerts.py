"""
Dismissed alert storage.

Keeps the set of dismissed alert keys (see HealthAlert.key) in a JSON file
under settings.DATA_DIR, so dismissals survive regenerating the alerts.
"""

import json
import logging
import os
from typing import List, Sequence, Set, Tuple

from healthtrack.config import settings
from healthtrack.engine.models import HealthAlert

logger = logging.getLogger(__name__)

DISMISSED_FILE = "dismissed_alerts.json"


def _path() -> str:
    return os.path.join(settings.DATA_DIR, DISMISSED_FILE)


def _load_all() -> List[str]:
    path = _path()
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s, treating it as empty: %s", path, e)
        return []
    if isinstance(data, list):
        return [str(key) for key in data]
    logger.warning("Unexpected content in %s, treating it as empty", path)
    return []


def _save_all(keys: Set[str]) -> None:
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    with open(_path(), "w", encoding="utf-8") as f:
        json.dump(sorted(keys), f, ensure_ascii=False, indent=2)


def list_dismissed() -> Set[str]:
    """Return the set of dismissed alert keys."""
    return set(_load_all())


def dismiss(alert_key: str) -> Set[str]:
    """Mark an alert key as dismissed and return the updated set."""
    keys = list_dismissed()
    keys.add(alert_key)
    _save_all(keys)
    return keys


def restore(alert_key: str) -> Set[str]:
    """Un-dismiss an alert key and return the updated set."""
    keys = list_dismissed()
    keys.discard(alert_key)
    _save_all(keys)
    return keys


def split_alerts(
    alerts: Sequence[HealthAlert],
    dismissed: Set[str],
) -> Tuple[List[HealthAlert], List[HealthAlert]]:
    """Split alerts into (active, dismissed) by content key, keeping order."""
    active = [a for a in alerts if a.key not in dismissed]
    hidden = [a for a in alerts if a.key in dismissed]
    return active, hidden
