"""
Waypoint Planner – main application entry point

* Flask app + Socket.IO (threading mode) serving one shared waypoint list.
* HTTP commands live under `/waypoints/api/...`; map draw events are pushed on
  the Socket.IO namespace `/waypoints/ws`.
"""

import logging

from dotenv import load_dotenv

# --------------------------------------------------------------------------- #
# Environment & logging
# --------------------------------------------------------------------------- #
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Application
# --------------------------------------------------------------------------- #
from waypoint_planner.api.config import get_port  # noqa: E402
from waypoint_planner.app import create_app  # noqa: E402

app, socketio = create_app()

# --------------------------------------------------------------------------- #
# Local development runner ( `python main.py` )
# --------------------------------------------------------------------------- #
if __name__ == "__main__":
    port = get_port()
    logger.info("Starting waypoint planner on http://localhost:%d", port)
    socketio.run(app, host="0.0.0.0", port=port, debug=False, allow_unsafe_werkzeug=True)

# Export both app and socketio so a parent service can mount them
__all__ = ["app", "socketio"]
