"""Shared data structures for waypoint planning.

Waypoints, search candidates and routes are passed between the store, the
geocode / route services and the presentation layer, so they live here as a
single source of truth instead of inside any one service module.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULT_WAYPOINT_NAME = "Unknown location"

# Profiles understood by OSRM-compatible routing services.
TRAVEL_MODES = ("driving", "cycling", "walking")
DEFAULT_TRAVEL_MODE = "driving"

LatLng = Tuple[float, float]


def new_waypoint_id() -> str:
    """Return a fresh immutable identifier for a waypoint."""
    return f"wp_{secrets.token_urlsafe(8)}"


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(lat: Any, lng: Any) -> bool:
    """Return True when lat/lng are numbers inside the WGS84 ranges."""
    if not (is_number(lat) and is_number(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


@dataclass(frozen=True)
class Waypoint:
    """A named geographic point in the user's ordered list."""

    name: str
    lat: float
    lng: float
    id: str = field(default_factory=new_waypoint_id)

    @classmethod
    def from_location(cls, location: Mapping[str, Any]) -> "Waypoint":
        """Build a waypoint from a ``{lat, lng, name}`` mapping.

        Raises ValueError when the coordinates are missing, non-numeric or
        out of range. A blank name falls back to ``DEFAULT_WAYPOINT_NAME``.
        """
        lat = location.get("lat")
        lng = location.get("lng")
        if not validate_coordinates(lat, lng):
            raise ValueError(f"Invalid coordinates: lat={lat!r}, lng={lng!r}")

        name = location.get("name")
        if not isinstance(name, str) or not name.strip():
            name = DEFAULT_WAYPOINT_NAME

        waypoint_id = location.get("id")
        if isinstance(waypoint_id, str) and waypoint_id:
            return cls(name=name, lat=float(lat), lng=float(lng), id=waypoint_id)
        return cls(name=name, lat=float(lat), lng=float(lng))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
        }


@dataclass(frozen=True)
class SearchCandidate:
    """A single geocoder result offered to the user."""

    name: str
    lat: float
    lng: float
    full_location: Optional[str] = None

    def to_location(self) -> Dict[str, Any]:
        # The chosen waypoint is named after the full display name.
        return {"lat": self.lat, "lng": self.lng, "name": self.full_location}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "full_location": self.full_location,
        }


@dataclass
class Route:
    """The most recently computed path between the waypoints."""

    points: List[LatLng]
    mode: str
    layer_id: str
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer_id": self.layer_id,
            "mode": self.mode,
            "points": [[lat, lng] for lat, lng in self.points],
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
        }


__all__ = [
    "DEFAULT_WAYPOINT_NAME",
    "TRAVEL_MODES",
    "DEFAULT_TRAVEL_MODE",
    "LatLng",
    "Waypoint",
    "SearchCandidate",
    "Route",
    "new_waypoint_id",
    "is_number",
    "validate_coordinates",
]
