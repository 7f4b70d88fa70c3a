# waypoint_planner/api/persistence.py
"""Persistence adapter for the waypoint sequence."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Sequence

from waypoint_planner.api.models import Waypoint

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "savedLocations"

_REQUIRED_FIELDS = ("lat", "lng", "name")


class WaypointPersistence:
    """Reads and writes the whole waypoint sequence under a single storage key.

    ``storage`` is any object with ``get(key)``, ``set(key, value)`` and
    ``remove(key)``.
    """

    def __init__(self, storage, key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> List[Waypoint]:
        """Return the stored sequence, or an empty list if nothing usable is stored.

        Never raises. Elements that are not objects carrying ``lat``, ``lng``
        and ``name`` (or whose coordinates are invalid) are dropped while the
        rest are kept.
        """
        try:
            raw = self.storage.get(self.key)
        except Exception as e:
            logger.error(f"Failed to read '{self.key}' from storage: {e}")
            return []

        if raw is None:
            logger.info(f"No saved waypoints under '{self.key}'. Starting fresh.")
            return []

        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to parse saved waypoints: {e}")
            return []

        if not isinstance(payload, list):
            logger.warning(f"Saved waypoints are a {type(payload).__name__}, expected a list")
            return []

        waypoints = []
        for index, item in enumerate(payload):
            waypoint = self._parse_item(index, item)
            if waypoint is not None:
                waypoints.append(waypoint)

        dropped = len(payload) - len(waypoints)
        if dropped:
            logger.warning(f"Dropped {dropped} malformed waypoint(s) while loading")
        logger.info(f"Loaded {len(waypoints)} waypoints from '{self.key}'")
        return waypoints

    @staticmethod
    def _parse_item(index: int, item: Any):
        if not isinstance(item, dict):
            logger.warning(f"Saved waypoint #{index} is not an object, skipping")
            return None
        missing = [name for name in _REQUIRED_FIELDS if name not in item]
        if missing:
            logger.warning(f"Saved waypoint #{index} is missing {', '.join(missing)}, skipping")
            return None
        try:
            return Waypoint.from_location(item)
        except ValueError as e:
            logger.warning(f"Saved waypoint #{index} is invalid ({e}), skipping")
            return None

    def save(self, waypoints: Sequence[Waypoint]) -> None:
        """Serialise and write the whole sequence."""
        payload = json.dumps([wp.to_dict() for wp in waypoints], ensure_ascii=False)
        self.storage.set(self.key, payload)
        logger.debug(f"Saved {len(waypoints)} waypoints to '{self.key}'")

    def clear(self) -> None:
        """Remove the stored entry entirely."""
        self.storage.remove(self.key)
        logger.debug(f"Cleared saved waypoints under '{self.key}'")


__all__ = ["WaypointPersistence", "DEFAULT_STORAGE_KEY"]
