import pytest
import requests

from conftest import ENCODED_POLYLINE, FakeResponse, FakeRouter, FakeSession
from waypoint_planner.api.errors import RoutingError, ValidationFailure
from waypoint_planner.api.models import Waypoint
from waypoint_planner.api.routing import OsrmRouter, decode_geometry, format_coordinates
from waypoint_planner.api.services.map_service import MapRenderer, MapService
from waypoint_planner.api.services.route_service import (
    MAP_NOT_READY_MESSAGE,
    NO_ROUTE_MESSAGE,
    ROUTE_FAILED_MESSAGE,
    ROUTE_UPDATED_MESSAGE,
    TOO_FEW_WAYPOINTS_MESSAGE,
    RouteService,
)

A = {"name": "A", "lat": 25.03, "lng": 121.56}
B = {"name": "B", "lat": 25.04, "lng": 121.58}
C = {"name": "C", "lat": 25.05, "lng": 121.60}


# --------------------------------------------------------------------------- #
# HTTP client
# --------------------------------------------------------------------------- #
def test_format_coordinates_uses_lng_lat_order():
    assert format_coordinates([(25.03, 121.56), (25.04, 121.58)]) == "121.56,25.03;121.58,25.04"


def test_decode_geometry_returns_lat_lng_tuples():
    points = decode_geometry(ENCODED_POLYLINE)

    assert points == [
        pytest.approx((38.5, -120.2)),
        pytest.approx((40.7, -120.95)),
        pytest.approx((43.252, -126.453)),
    ]


def test_client_builds_osrm_request():
    payload = {"code": "Ok", "routes": [{"geometry": ENCODED_POLYLINE}]}
    session = FakeSession(FakeResponse(payload=payload))
    router = OsrmRouter("https://osrm.test/", session=session)

    routes = router.route([(25.03, 121.56), (25.04, 121.58)], "cycling")

    assert routes == payload["routes"]
    assert session.calls == [{
        "url": "https://osrm.test/route/v1/cycling/121.56,25.03;121.58,25.04",
        "params": {"steps": "true", "geometries": "polyline"},
        "timeout": None,
    }]


def test_client_treats_no_route_code_as_empty_result():
    session = FakeSession(FakeResponse(status_code=400, payload={"code": "NoRoute", "routes": []}))
    router = OsrmRouter("https://osrm.test", session=session)

    assert router.route([(0.0, 0.0), (1.0, 1.0)], "driving") == []


@pytest.mark.parametrize("session", [
    FakeSession(error=requests.Timeout("slow")),
    FakeSession(FakeResponse(status_code=500, payload={"code": "InternalError"})),
    FakeSession(FakeResponse(text="not json")),
    FakeSession(FakeResponse(payload=["not", "an", "object"])),
])
def test_client_raises_routing_error(session):
    router = OsrmRouter("https://osrm.test", session=session)

    with pytest.raises(RoutingError):
        router.route([(0.0, 0.0), (1.0, 1.0)], "driving")


# --------------------------------------------------------------------------- #
# Service
# --------------------------------------------------------------------------- #
def test_route_with_fewer_than_two_waypoints_makes_no_request(store, router, renderer):
    store.add(A)
    service = RouteService(store, router, renderer)

    assert service.compute_route("driving") is None
    assert router.calls == []
    assert store.message == TOO_FEW_WAYPOINTS_MESSAGE
    assert renderer.layers == {}


def test_route_without_renderer_makes_no_request(store, router):
    store.add(A)
    store.add(B)
    service = RouteService(store, router, renderer=None)

    assert service.compute_route() is None
    assert router.calls == []
    assert store.message == MAP_NOT_READY_MESSAGE


def test_route_renders_single_layer_and_fits_bounds(store, router, renderer):
    store.add(A)
    store.add(B)
    service = RouteService(store, router, renderer)

    route = service.compute_route("driving")

    assert router.calls == [{"points": [(25.03, 121.56), (25.04, 121.58)], "mode": "driving"}]
    assert list(renderer.layers) == [route.layer_id]
    assert renderer.layers[route.layer_id]["kind"] == "polyline"
    assert renderer.bounds == MapService.calculate_bounds(route.points)
    assert renderer.bounds["north"] == pytest.approx(43.252)
    assert renderer.bounds["west"] == pytest.approx(-126.453)
    assert route.mode == "driving"
    assert route.distance_m == 1200.0
    assert service.active_route is route
    assert store.message == ROUTE_UPDATED_MESSAGE


def test_new_route_replaces_previous_layer(store, router, renderer):
    for location in (A, B, C):
        store.add(location)
    service = RouteService(store, router, renderer)

    first = service.compute_route("driving")
    second = service.compute_route("walking")

    assert first.layer_id != second.layer_id
    assert list(renderer.layers) == [second.layer_id]
    assert router.calls[-1]["mode"] == "walking"
    assert router.calls[-1]["points"] == [
        (25.03, 121.56), (25.04, 121.58), (25.05, 121.60),
    ]


def test_route_follows_current_order(store, router, renderer):
    for location in (A, B, C):
        store.add(location)
    store.reorder(2, 0)
    service = RouteService(store, router, renderer)

    service.compute_route()

    assert router.calls[0]["points"] == [(25.05, 121.60), (25.03, 121.56), (25.04, 121.58)]


def test_route_is_not_recomputed_after_edits(store, router, renderer):
    store.add(A)
    store.add(B)
    service = RouteService(store, router, renderer)
    route = service.compute_route()

    store.add(C)

    assert len(router.calls) == 1
    assert service.active_route is route


@pytest.mark.parametrize("router,message", [
    (FakeRouter(routes=[]), NO_ROUTE_MESSAGE),
    (FakeRouter(fail=True), ROUTE_FAILED_MESSAGE),
    (FakeRouter(routes=[{"distance": 10.0}]), ROUTE_FAILED_MESSAGE),
])
def test_failed_route_keeps_previous_route(store, renderer, router, message):
    store.add(A)
    store.add(B)
    service = RouteService(store, FakeRouter(), renderer)
    previous = service.compute_route()

    service.router = router
    assert service.compute_route() is None

    assert store.message == message
    assert service.active_route is previous
    assert list(renderer.layers) == [previous.layer_id]


def test_travel_mode_defaults_and_validation(store, router, renderer):
    store.add(A)
    store.add(B)
    service = RouteService(store, router, renderer)
    assert service.travel_mode == "driving"

    service.set_travel_mode("cycling")
    service.compute_route()
    assert router.calls[-1]["mode"] == "cycling"

    with pytest.raises(ValidationFailure):
        service.set_travel_mode("flying")
    with pytest.raises(ValidationFailure):
        service.compute_route("teleport")
    assert service.travel_mode == "cycling"


def test_explicit_sequence_overrides_store(store, router, renderer):
    service = RouteService(store, router, renderer)
    sequence = [Waypoint.from_location(A), Waypoint.from_location(B)]

    assert service.compute_route("driving", waypoints=sequence) is not None
    assert router.calls[0]["points"] == [(25.03, 121.56), (25.04, 121.58)]


def test_stale_route_is_discarded(store, renderer):
    class InterleavingRouter(FakeRouter):
        """Starts a second route request while the first is in flight."""

        def route(self, points, mode):
            self.calls.append({"points": list(points), "mode": mode})
            if mode == "driving":
                self.service.compute_route("walking")
            return list(self.routes)

    router = InterleavingRouter()
    store.add(A)
    store.add(B)
    service = RouteService(store, router, renderer)
    router.service = service

    assert service.compute_route("driving") is None

    assert service.active_route.mode == "walking"
    assert list(renderer.layers) == [service.active_route.layer_id]


def test_map_renderer_tracks_layers_and_markers():
    renderer = MapRenderer()
    renderer.add_layer("route_1", "polyline", {"points": [[1, 2]]})
    renderer.show_markers([Waypoint(name="A", lat=25.03, lng=121.56, id="wp_a")])

    assert renderer.remove_layer("route_1") is True
    assert renderer.remove_layer("route_1") is False
    assert renderer.state()["layers"] == []
    assert renderer.markers == [
        {"id": "wp_a", "position": [25.03, 121.56], "label": "A (25.03000, 121.56000)"},
    ]
