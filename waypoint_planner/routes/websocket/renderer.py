# waypoint_planner/routes/websocket/renderer.py
"""Map renderer that broadcasts draw calls to browsers over Socket.IO."""

import logging

from waypoint_planner.api.services.map_service import MapRenderer
from .base import NAMESPACE

logger = logging.getLogger(__name__)


class SocketIOMapRenderer(MapRenderer):
    """Bridges map draw calls → Socket.IO events on the planner namespace."""

    def __init__(self, socketio, namespace=NAMESPACE):
        super().__init__()
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, event, data):
        try:
            self.socketio.emit(event, data, namespace=self.namespace)
        except Exception as exc:
            logger.exception("Failed emitting %s: %s", event, exc)
