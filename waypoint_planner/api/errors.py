# waypoint_planner/api/errors.py
"""Errors raised by the planner services, with JSON payloads for the shell."""

from typing import Any, Dict, Optional


class WaypointPlannerError(Exception):
    code = "WAYPOINT_PLANNER_ERROR"

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        """Shape shared by HTTP 400 bodies and socket ``error`` events."""
        payload = {"success": False, "error_code": self.code, "error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationFailure(WaypointPlannerError):
    """Rejected user input; nothing was changed."""
    code = "VALIDATION_ERROR"


class GeocodingError(WaypointPlannerError):
    code = "GEOCODING_ERROR"


class RoutingError(WaypointPlannerError):
    code = "ROUTING_ERROR"
