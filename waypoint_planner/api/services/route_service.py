# waypoint_planner/api/services/route_service.py
"""Service layer turning the waypoint sequence into a rendered route."""

import logging
import threading
from typing import Optional, Sequence

from waypoint_planner.api.errors import RoutingError, ValidationFailure
from waypoint_planner.api.models import DEFAULT_TRAVEL_MODE, TRAVEL_MODES, Route, Waypoint
from waypoint_planner.api.routing import decode_geometry
from waypoint_planner.api.services.map_service import MapRenderer, MapService
from waypoint_planner.api.services.waypoint_store import WaypointStore

logger = logging.getLogger(__name__)

TOO_FEW_WAYPOINTS_MESSAGE = "Select at least two locations to plan a route"
MAP_NOT_READY_MESSAGE = "Map is not ready"
NO_ROUTE_MESSAGE = "No route found"
ROUTE_FAILED_MESSAGE = "Route request failed"
# Routes are not recomputed when the list changes afterwards
ROUTE_UPDATED_MESSAGE = "Route updated. Recompute after editing locations."


class RouteService:
    """Keeps at most one live route on the map."""

    def __init__(self, store: WaypointStore, router, renderer: Optional[MapRenderer] = None,
                 travel_mode: str = DEFAULT_TRAVEL_MODE):
        self.store = store
        self.router = router
        self.renderer = renderer
        self.lock = threading.Lock()

        self._travel_mode = self._check_mode(travel_mode)
        self._active_route: Optional[Route] = None
        self._latest_request = 0

    @staticmethod
    def _check_mode(mode: str) -> str:
        if mode not in TRAVEL_MODES:
            raise ValidationFailure(
                f"Unsupported travel mode: {mode}",
                details={"parameter": "mode", "allowed": list(TRAVEL_MODES)},
            )
        return mode

    @property
    def travel_mode(self) -> str:
        return self._travel_mode

    def set_travel_mode(self, mode: str) -> str:
        """Set the mode used when ``compute_route`` is called without one."""
        self._travel_mode = self._check_mode(mode)
        logger.info(f"Travel mode set to {self._travel_mode}")
        return self._travel_mode

    @property
    def active_route(self) -> Optional[Route]:
        return self._active_route

    def attach_renderer(self, renderer: Optional[MapRenderer]) -> None:
        self.renderer = renderer

    def compute_route(self, mode: Optional[str] = None,
                      waypoints: Optional[Sequence[Waypoint]] = None) -> Optional[Route]:
        """Request a route through ``waypoints`` (the store's by default).

        Precondition failures, empty results and service errors set a
        message on the store and return None without touching the route
        already on the map.

        Raises:
            ValidationFailure: If ``mode`` is not a supported travel mode
        """
        mode = self._check_mode(mode or self._travel_mode)
        if waypoints is None:
            waypoints = self.store.waypoints

        if len(waypoints) < 2:
            self.store.set_message(TOO_FEW_WAYPOINTS_MESSAGE)
            return None
        if self.renderer is None:
            self.store.set_message(MAP_NOT_READY_MESSAGE)
            return None

        with self.lock:
            self._latest_request += 1
            request_id = self._latest_request

        points = [(wp.lat, wp.lng) for wp in waypoints]
        logger.info(f"Route #{request_id}: {mode} through {len(points)} waypoints")
        try:
            routes = self.router.route(points, mode)
        except RoutingError as e:
            logger.error(f"Route #{request_id} failed: {e}")
            self._report(request_id, ROUTE_FAILED_MESSAGE)
            return None

        if not routes:
            logger.warning(f"Route #{request_id}: routing service returned no routes")
            self._report(request_id, NO_ROUTE_MESSAGE)
            return None

        best = routes[0]
        try:
            path = decode_geometry(best["geometry"])
        except (KeyError, TypeError, ValueError, IndexError) as e:
            logger.error(f"Route #{request_id}: could not decode geometry: {e}")
            self._report(request_id, ROUTE_FAILED_MESSAGE)
            return None

        if not path:
            self._report(request_id, NO_ROUTE_MESSAGE)
            return None

        route = Route(
            points=path,
            mode=mode,
            layer_id=f"route_{request_id}",
            distance_m=best.get("distance"),
            duration_s=best.get("duration"),
        )
        if not self._render(request_id, route):
            return None
        return route

    def _report(self, request_id: int, message: str) -> None:
        with self.lock:
            if request_id != self._latest_request:
                logger.info(f"Ignoring outcome of stale route #{request_id}")
                return
        self.store.set_message(message)

    def _render(self, request_id: int, route: Route) -> bool:
        with self.lock:
            if request_id != self._latest_request:
                logger.info(f"Discarding stale route #{request_id} (latest is #{self._latest_request})")
                return False

            previous = self._active_route
            if previous is not None:
                self.renderer.remove_layer(previous.layer_id)

            self.renderer.add_layer(route.layer_id, "polyline", {
                "points": [[lat, lng] for lat, lng in route.points],
                "mode": route.mode,
            })
            self.renderer.fit_bounds(MapService.calculate_bounds(route.points))
            self._active_route = route

        self.store.set_message(ROUTE_UPDATED_MESSAGE)
        logger.info(f"Rendered route #{request_id} with {len(route.points)} points")
        return True


__all__ = [
    "RouteService",
    "TOO_FEW_WAYPOINTS_MESSAGE",
    "MAP_NOT_READY_MESSAGE",
    "NO_ROUTE_MESSAGE",
    "ROUTE_FAILED_MESSAGE",
    "ROUTE_UPDATED_MESSAGE",
]
