"""Application factory: Flask app + Socket.IO bound to one Planner."""

import logging
import os

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from waypoint_planner.api.config import get_websocket_config
from waypoint_planner.api.planner import create_planner
from waypoint_planner.routes import create_waypoints_blueprint, register_websocket_handlers, NAMESPACE

logger = logging.getLogger(__name__)


def create_app(planner=None):
    """Build the Flask app and its Socket.IO server.

    Args:
        planner: Planner to serve; built from configuration when omitted

    Returns:
        (app, socketio) tuple
    """
    app = Flask(__name__)

    flask_secret_key = os.getenv("FLASK_SECRET_KEY") or os.urandom(32).hex()
    if "FLASK_SECRET_KEY" not in os.environ:
        logger.warning("No FLASK_SECRET_KEY found. Generated a temporary key.")
    app.secret_key = flask_secret_key

    # CORS for local dev / cross‑origin front‑end requests
    CORS(app, origins="*", supports_credentials=True)

    ws_config = get_websocket_config()
    socketio = SocketIO(
        app,
        cors_allowed_origins=ws_config["cors_allowed_origins"],
        async_mode="threading",
        logger=False,
        engineio_logger=False,
    )
    logger.info("Socket.IO initialised (async_mode=threading)")

    if planner is None:
        planner = create_planner()

    app.register_blueprint(create_waypoints_blueprint(planner))
    register_websocket_handlers(socketio, planner)

    @app.route("/debug")
    def debug():
        """Simple JSON health endpoint."""
        return {
            "status": "ok",
            "socketio_initialized": True,
            "waypoint_count": len(planner.store.waypoints),
            "endpoints": {
                "state": "/waypoints/api/state",
                "websocket_namespace": NAMESPACE,
            },
        }

    app.extensions["waypoint_planner"] = planner
    return app, socketio


__all__ = ["create_app"]
