# waypoint_planner/api/planner.py
"""Wiring for one planner session: storage, store, search and routing."""

import logging
from typing import Any, Dict, Optional

from waypoint_planner.api.config import get_storage_config
from waypoint_planner.api.geocoding import NominatimGeocoder
from waypoint_planner.api.persistence import WaypointPersistence
from waypoint_planner.api.routing import OsrmRouter
from waypoint_planner.api.services.geocode_service import GeocodeService
from waypoint_planner.api.services.map_service import MapRenderer
from waypoint_planner.api.services.route_service import RouteService
from waypoint_planner.api.services.waypoint_store import WaypointStore
from waypoint_planner.api.storage import JsonFileStorage

logger = logging.getLogger(__name__)


class Planner:
    """Holds the store and the services that act on it.

    Built once per process and handed to the HTTP blueprint and the
    WebSocket handlers.
    """

    def __init__(self, store: WaypointStore, geocode: GeocodeService, routes: RouteService):
        self.store = store
        self.geocode = geocode
        self.routes = routes

    @property
    def renderer(self) -> Optional[MapRenderer]:
        return self.routes.renderer

    def attach_renderer(self, renderer: Optional[MapRenderer]) -> None:
        self.routes.attach_renderer(renderer)
        self.refresh_markers()

    def refresh_markers(self) -> None:
        """Redraw one marker per waypoint."""
        if self.renderer is not None:
            self.renderer.show_markers(self.store.waypoints)

    def state(self) -> Dict[str, Any]:
        """Everything the front end needs to redraw itself."""
        state = self.store.snapshot()
        route = self.routes.active_route
        state.update({
            "candidates": [c.to_dict() for c in self.geocode.candidates],
            "travel_mode": self.routes.travel_mode,
            "route": route.to_dict() if route else None,
        })
        return state


def create_planner(storage=None, geocoder=None, router=None,
                   renderer: Optional[MapRenderer] = None) -> Planner:
    """Build a Planner, filling unspecified collaborators from configuration."""
    storage_cfg = get_storage_config()
    if storage is None:
        storage = JsonFileStorage(storage_cfg["path"])
        logger.info(f"Using waypoint storage at {storage_cfg['path']}")

    store = WaypointStore(WaypointPersistence(storage, key=storage_cfg["key"]))
    geocode = GeocodeService(store, geocoder or NominatimGeocoder.from_config())
    routes = RouteService(store, router or OsrmRouter.from_config(), renderer)

    planner = Planner(store, geocode, routes)
    planner.refresh_markers()
    return planner


__all__ = ["Planner", "create_planner"]
