"""Shared fakes for the geocoder, routing service and HTTP sessions."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from waypoint_planner.api.errors import GeocodingError, RoutingError
from waypoint_planner.api.persistence import WaypointPersistence
from waypoint_planner.api.planner import Planner
from waypoint_planner.api.services.geocode_service import GeocodeService
from waypoint_planner.api.services.map_service import MapRenderer
from waypoint_planner.api.services.route_service import RouteService
from waypoint_planner.api.services.waypoint_store import WaypointStore
from waypoint_planner.api.storage import MemoryStorage

# Reference polyline from the Google encoding docs:
# (38.5, -120.2), (40.7, -120.95), (43.252, -126.453)
ENCODED_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.headers: Dict[str, str] = {}
        self.response = response or FakeResponse(payload=[])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class FakeGeocoder:
    def __init__(self, results: Optional[List[Dict[str, Any]]] = None, fail: bool = False):
        self.results = results or []
        self.fail = fail
        self.queries: List[str] = []

    def search(self, query):
        self.queries.append(query)
        if self.fail:
            raise GeocodingError("Geocoding request failed")
        return list(self.results)


class FakeRouter:
    def __init__(self, routes: Optional[List[Dict[str, Any]]] = None, fail: bool = False):
        self.routes = routes if routes is not None else [
            {"geometry": ENCODED_POLYLINE, "distance": 1200.0, "duration": 180.0},
        ]
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def route(self, points, mode):
        self.calls.append({"points": list(points), "mode": mode})
        if self.fail:
            raise RoutingError("Routing request failed")
        return list(self.routes)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def persistence(storage):
    return WaypointPersistence(storage)


@pytest.fixture
def store(persistence):
    return WaypointStore(persistence)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def router():
    return FakeRouter()


@pytest.fixture
def renderer():
    return MapRenderer()


@pytest.fixture
def planner(store, geocoder, router, renderer):
    return Planner(store, GeocodeService(store, geocoder), RouteService(store, router, renderer))
