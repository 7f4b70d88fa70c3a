# waypoint_planner/api/routing.py
"""Client for OSRM-compatible routing services."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests
from googlemaps.convert import decode_polyline

from waypoint_planner.api.config import get_routing_config
from waypoint_planner.api.errors import RoutingError

logger = logging.getLogger(__name__)

# OSRM answers these with a 400 but they mean "valid request, no path"
_NO_ROUTE_CODES = ("NoRoute", "NoSegment")


def _error_code(response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


def format_coordinates(points: Sequence[Tuple[float, float]]) -> str:
    """Render (lat, lng) pairs as the ``lng,lat;lng,lat`` path segment OSRM expects."""
    return ";".join(f"{lng},{lat}" for lat, lng in points)


def decode_geometry(encoded: str) -> List[Tuple[float, float]]:
    """Decode a precision-5 encoded polyline into (lat, lng) tuples."""
    return [(point["lat"], point["lng"]) for point in decode_polyline(encoded)]


class OsrmRouter:
    """Requests a single route through an ordered list of coordinates."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "OsrmRouter":
        cfg = config or get_routing_config()
        return cls(base_url=cfg["url"], timeout=cfg.get("timeout"))

    def build_url(self, points: Sequence[Tuple[float, float]], mode: str) -> str:
        return f"{self.base_url}/route/v1/{mode}/{format_coordinates(points)}"

    def route(self, points: Sequence[Tuple[float, float]], mode: str) -> List[Dict[str, Any]]:
        """Return the candidate routes for ``points`` (in order) and ``mode``.

        An empty list means the service answered but found no route.

        Raises:
            RoutingError: On transport errors, non-2xx responses or a
                malformed payload
        """
        url = self.build_url(points, mode)
        params = {"steps": "true", "geometries": "polyline"}

        logger.debug(f"Requesting {mode} route through {len(points)} points")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            if not response.ok and _error_code(response) in _NO_ROUTE_CODES:
                logger.info(f"Routing service found no {mode} route ({_error_code(response)})")
                return []
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Routing request failed: {e}")
            raise RoutingError("Routing request failed", details={"mode": mode}) from e
        except ValueError as e:
            logger.error(f"Routing service returned invalid JSON: {e}")
            raise RoutingError("Routing service returned invalid JSON", details={"mode": mode}) from e

        if not isinstance(data, dict):
            raise RoutingError("Unexpected routing response", details={"mode": mode})

        routes = data.get("routes") or []
        if not isinstance(routes, list):
            raise RoutingError("Unexpected routing response", details={"mode": mode})

        logger.debug(f"Routing service returned {len(routes)} route(s), code={data.get('code')}")
        return routes


__all__ = ["OsrmRouter", "decode_geometry", "format_coordinates"]
