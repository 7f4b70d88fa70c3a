# waypoint_planner/api/services/map_service.py
"""Service layer for map-related operations."""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from waypoint_planner.api.models import Waypoint

logger = logging.getLogger(__name__)


class MapService:
    """Handles bounds and marker formatting for the map."""

    @staticmethod
    def calculate_bounds(points: Iterable[Tuple[float, float]]) -> Dict[str, float]:
        """Calculate bounding box for a sequence of (lat, lng) points.

        Args:
            points: Points to enclose

        Returns:
            Dictionary with north, south, east, west bounds, or an empty
            dict when there are no points
        """
        lats = []
        lngs = []
        for lat, lng in points:
            lats.append(lat)
            lngs.append(lng)

        if not lats or not lngs:
            return {}

        return {
            'north': max(lats),
            'south': min(lats),
            'east': max(lngs),
            'west': min(lngs)
        }

    @staticmethod
    def marker_payload(waypoints: Sequence[Waypoint]) -> List[Dict[str, Any]]:
        """Format waypoints as marker descriptions for the front end."""
        return [
            {
                'id': wp.id,
                'position': [wp.lat, wp.lng],
                'label': f"{wp.name} ({wp.lat:.5f}, {wp.lng:.5f})",
            }
            for wp in waypoints
        ]


class MapRenderer:
    """Tracks what is drawn on the map and forwards draw calls.

    Subclasses push changes to a real client by overriding ``_emit``; the
    base class keeps the bookkeeping so it can also run headless.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.layers: Dict[str, Dict[str, Any]] = {}
        self.markers: List[Dict[str, Any]] = []
        self.bounds: Optional[Dict[str, float]] = None

    def _emit(self, event: str, data: Dict[str, Any]) -> None:
        """Deliver a draw event; no-op when nothing is listening."""

    def add_layer(self, layer_id: str, kind: str, payload: Dict[str, Any]) -> None:
        with self.lock:
            self.layers[layer_id] = {'kind': kind, **payload}
        logger.debug(f"Added {kind} layer {layer_id}")
        self._emit('layer_added', {'layer_id': layer_id, 'kind': kind, **payload})

    def remove_layer(self, layer_id: str) -> bool:
        with self.lock:
            removed = self.layers.pop(layer_id, None) is not None
        if removed:
            logger.debug(f"Removed layer {layer_id}")
            self._emit('layer_removed', {'layer_id': layer_id})
        return removed

    def fit_bounds(self, bounds: Dict[str, float]) -> None:
        self.bounds = dict(bounds)
        self._emit('fit_bounds', {'bounds': self.bounds})

    def show_markers(self, waypoints: Sequence[Waypoint]) -> None:
        self.markers = MapService.marker_payload(waypoints)
        self._emit('markers', {'markers': self.markers})

    def state(self) -> Dict[str, Any]:
        with self.lock:
            layers = [{'layer_id': layer_id, **layer} for layer_id, layer in self.layers.items()]
        return {'layers': layers, 'markers': list(self.markers), 'bounds': self.bounds}


# Export for use in other modules
__all__ = ['MapService', 'MapRenderer']
