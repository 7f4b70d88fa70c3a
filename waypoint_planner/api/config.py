# api/config.py
"""Configuration management for the waypoint planner API."""
import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name):
    """Read an optional float from the environment; unset or blank means None."""
    value = os.getenv(name, "").strip()
    if not value:
        return None
    return float(value)


def get_storage_config():
    """Get durable storage configuration."""
    default_path = os.path.join(os.path.expanduser("~"), ".waypoint_planner", "storage.json")
    return {
        "path": os.getenv("WAYPOINT_STORAGE_PATH", default_path),
        "key": os.getenv("WAYPOINT_STORAGE_KEY", "savedLocations"),
    }


def get_geocoder_config():
    """Get geocoder (Nominatim) configuration."""
    return {
        "url": os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/search"),
        "limit": int(os.getenv("GEOCODER_LIMIT", "5")),
        "user_agent": os.getenv("GEOCODER_USER_AGENT", "waypoint-planner/0.1"),
        # No timeout unless one is configured explicitly
        "timeout": _optional_float("GEOCODER_TIMEOUT"),
    }


def get_routing_config():
    """Get routing service (OSRM) configuration."""
    return {
        "url": os.getenv("ROUTING_URL", "https://router.project-osrm.org").rstrip("/"),
        "timeout": _optional_float("ROUTING_TIMEOUT"),
    }


def get_map_config():
    """Get map configuration for the front end."""
    return {
        "center": {
            "lat": float(os.getenv("MAP_CENTER_LAT", "25.033")),
            "lng": float(os.getenv("MAP_CENTER_LNG", "121.565")),
        },
        "zoom": int(os.getenv("MAP_ZOOM", "12")),
        "tile_url": os.getenv("MAP_TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"),
        "attribution": os.getenv(
            "MAP_ATTRIBUTION",
            '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors',
        ),
    }


def get_port():
    """Get port configuration."""
    return int(os.getenv("PORT", 5000))


def get_websocket_config():
    """Get WebSocket configuration."""
    origins = os.getenv("WEBSOCKET_CORS_ORIGINS", "*")
    return {
        # engine.io only treats the bare string "*" as "allow all"
        "cors_allowed_origins": origins if origins == "*" else origins.split(","),
    }
