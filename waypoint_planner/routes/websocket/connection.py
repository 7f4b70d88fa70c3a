# waypoint_planner/routes/websocket/connection.py
"""WebSocket connection and disconnection handlers."""

import time
import logging

from .base import BaseWebSocketHandler, NAMESPACE

logger = logging.getLogger(__name__)


class ConnectionHandler(BaseWebSocketHandler):
    """Handles WebSocket connection lifecycle events."""

    def register_handlers(self):
        """Register connection-related event handlers."""

        @self.socketio.on('connect', namespace=NAMESPACE)
        def handle_connect(auth=None):
            """Send the current list and map layers to a new browser."""
            client_info = self.get_client_info()
            self.log_event('connect')

            self.emit_to_client('connected', {
                'sid': client_info['sid'],
                'status': 'connected',
            })
            self.emit_state()

            renderer = self.planner.renderer
            if renderer is not None:
                self.emit_to_client('map_state', renderer.state())

        @self.socketio.on('disconnect', namespace=NAMESPACE)
        def handle_disconnect(*args):
            """Handle WebSocket disconnection."""
            logger.info(f"🔌 Client disconnected from {NAMESPACE}")

        @self.socketio.on('ping', namespace=NAMESPACE)
        def handle_ping():
            """Handle ping for connection testing."""
            self.emit_to_client('pong', {'timestamp': time.time()})
