# waypoint_planner/routes/websocket/__init__.py
"""WebSocket route handlers initialization."""

import logging

from .base import NAMESPACE
from .commands import CommandHandler
from .connection import ConnectionHandler
from .renderer import SocketIOMapRenderer

logger = logging.getLogger(__name__)


def register_websocket_handlers(socketio, planner):
    """Register all WebSocket event handlers with SocketIO.

    Also attaches a Socket.IO map renderer to the planner so route and
    marker changes reach connected browsers.

    Args:
        socketio: Flask-SocketIO instance
        planner: The Planner shared with the HTTP blueprint
    """
    logger.info("Registering WebSocket handlers...")

    try:
        connection_handler = ConnectionHandler(socketio, planner, NAMESPACE)
        command_handler = CommandHandler(socketio, planner, NAMESPACE)

        logger.info(f"Registering connection handler for namespace: {NAMESPACE}")
        connection_handler.register_handlers()

        logger.info(f"Registering command handler for namespace: {NAMESPACE}")
        command_handler.register_handlers()

        planner.attach_renderer(SocketIOMapRenderer(socketio, NAMESPACE))

        logger.info("✅ WebSocket handlers registered successfully")

    except Exception as e:
        logger.error(f"❌ Failed to register WebSocket handlers: {e}")
        logger.exception("WebSocket registration error:")
        raise


__all__ = ['register_websocket_handlers', 'SocketIOMapRenderer', 'NAMESPACE']
