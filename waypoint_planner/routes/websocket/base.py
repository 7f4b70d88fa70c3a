# waypoint_planner/routes/websocket/base.py
"""Base WebSocket handler with common functionality."""

import logging
from flask import request
from flask_socketio import emit

logger = logging.getLogger(__name__)

# Define namespace constant
NAMESPACE = "/waypoints/ws"


class BaseWebSocketHandler:
    """Base class for WebSocket handlers with common functionality."""

    def __init__(self, socketio, planner, namespace=NAMESPACE):
        self.socketio = socketio
        self.planner = planner
        self.namespace = namespace

    def emit_to_client(self, event, data, room=None):
        """Emit event to a specific client or room."""
        try:
            if room:
                self.socketio.emit(event, data, room=room, namespace=self.namespace)
            else:
                emit(event, data, namespace=self.namespace)
        except Exception as e:
            logger.error(f"Failed to emit {event}: {e}")

    def emit_state(self):
        """Send the full planner state to the calling client."""
        self.emit_to_client('state', self.planner.state())

    def get_client_info(self):
        """Get information about the connected client."""
        return {"sid": request.sid}

    def log_event(self, event_name, data=None):
        """Log WebSocket events consistently."""
        client_info = self.get_client_info()
        if data:
            logger.info(f"[WS] {event_name} - Client: {client_info['sid']}, Data: {data}")
        else:
            logger.info(f"[WS] {event_name} - Client: {client_info['sid']}")

    def handle_error(self, error, event_name=""):
        """Handle and log errors consistently."""
        client_info = self.get_client_info()
        logger.error(f"[WS] Error in {event_name} - Client: {client_info['sid']}, Error: {error}")
        payload = error.to_payload() if hasattr(error, 'to_payload') else {'success': False, 'error': str(error)}
        payload['event'] = event_name
        self.emit_to_client('error', payload)
