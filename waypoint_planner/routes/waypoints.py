# waypoint_planner/routes/waypoints.py
"""Waypoint routes and blueprint configuration."""

import logging

from flask import Blueprint, jsonify, request

from waypoint_planner.api.config import get_map_config
from waypoint_planner.api.errors import ValidationFailure

logger = logging.getLogger(__name__)


def create_waypoints_blueprint(planner):
    """Create and configure the waypoints blueprint.

    Args:
        planner: The Planner shared with the WebSocket handlers

    Returns:
        Configured Flask Blueprint
    """
    waypoints_bp = Blueprint("waypoints", __name__, url_prefix="/waypoints")

    def _state(status=200):
        return jsonify(planner.state()), status

    def _body():
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationFailure("Request body must be a JSON object")
        return data

    @waypoints_bp.errorhandler(ValidationFailure)
    def handle_validation_failure(error):
        logger.warning(f"Rejected {request.method} {request.path}: {error.message}")
        return jsonify(error.to_payload()), 400

    @waypoints_bp.route("/api/config")
    def api_config():
        """Return map configuration for the frontend."""
        return jsonify(get_map_config())

    @waypoints_bp.route("/api/state")
    def api_state():
        """Return waypoints, selection, candidates, route and message."""
        return _state()

    @waypoints_bp.route("/api/waypoints", methods=["POST"])
    def add_waypoint():
        """Add a waypoint, e.g. from a map click."""
        data = _body()
        planner.store.add({
            "lat": data.get("lat"),
            "lng": data.get("lng"),
            "name": data.get("name"),
        })
        planner.refresh_markers()
        return _state(201)

    @waypoints_bp.route("/api/waypoints", methods=["DELETE"])
    def clear_waypoints():
        """Remove every waypoint and the saved list."""
        planner.store.clear_all()
        planner.refresh_markers()
        return _state()

    @waypoints_bp.route("/api/waypoints/remove-selected", methods=["POST"])
    def remove_selected():
        """Remove the selected waypoints (or the ids given in the body)."""
        ids = _body().get("ids")
        if ids is not None and not isinstance(ids, list):
            raise ValidationFailure("ids must be a list", details={"parameter": "ids"})
        planner.store.remove_selected(ids)
        planner.refresh_markers()
        return _state()

    @waypoints_bp.route("/api/waypoints/<waypoint_id>/toggle", methods=["POST"])
    def toggle_selection(waypoint_id):
        """Mark or unmark a waypoint for removal."""
        planner.store.toggle_selection(waypoint_id)
        return _state()

    @waypoints_bp.route("/api/waypoints/reorder", methods=["POST"])
    def reorder():
        """Apply a drag-and-drop move."""
        data = _body()
        destination = data.get("destination_index")
        if destination is None:
            # Dropped outside the list
            return _state()
        planner.store.reorder(data.get("source_index"), destination)
        planner.refresh_markers()
        return _state()

    @waypoints_bp.route("/api/search", methods=["POST"])
    def search():
        """Geocode a free-text query into candidates."""
        planner.geocode.search(_body().get("query"))
        return _state()

    @waypoints_bp.route("/api/search/select", methods=["POST"])
    def select_candidate():
        """Add the chosen search result as a waypoint."""
        planner.geocode.select_candidate(_body().get("index"))
        planner.refresh_markers()
        return _state(201)

    @waypoints_bp.route("/api/travel-mode", methods=["PUT"])
    def set_travel_mode():
        """Change the travel mode used for routing."""
        planner.routes.set_travel_mode(_body().get("mode"))
        return _state()

    @waypoints_bp.route("/api/route", methods=["POST"])
    def compute_route():
        """Compute a route through the current waypoints."""
        planner.routes.compute_route(_body().get("mode"))
        return _state()

    @waypoints_bp.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({"status": "ok", "service": "waypoints"})

    return waypoints_bp


__all__ = ['create_waypoints_blueprint']
