# waypoint_planner/routes/__init__.py
from .waypoints import create_waypoints_blueprint
from .websocket import NAMESPACE, register_websocket_handlers

__all__ = ["create_waypoints_blueprint", "register_websocket_handlers", "NAMESPACE"]
