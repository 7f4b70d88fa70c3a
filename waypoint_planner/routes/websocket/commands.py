# waypoint_planner/routes/websocket/commands.py
"""WebSocket handlers forwarding user intents to the planner."""

import logging

from waypoint_planner.api.errors import ValidationFailure, WaypointPlannerError
from .base import BaseWebSocketHandler, NAMESPACE

logger = logging.getLogger(__name__)


class CommandHandler(BaseWebSocketHandler):
    """Handles add / remove / reorder / search / route events.

    Every event answers the caller with a ``state`` event; rejected input
    additionally produces an ``error`` event.
    """

    def _run(self, event_name, action, data=None, redraw=False):
        self.log_event(event_name, data)
        try:
            if data is None:
                data = {}
            elif not isinstance(data, dict):
                raise ValidationFailure(
                    "Event payload must be an object",
                    details={"event": event_name, "type": type(data).__name__},
                )
            action(data)
            if redraw:
                self.planner.refresh_markers()
        except WaypointPlannerError as e:
            self.handle_error(e, event_name)
        self.emit_state()

    def register_handlers(self):
        """Register planner command handlers."""
        planner = self.planner

        @self.socketio.on('get_state', namespace=NAMESPACE)
        def handle_get_state(data=None):
            self.emit_state()

        @self.socketio.on('add_waypoint', namespace=NAMESPACE)
        def handle_add_waypoint(data=None):
            """Add a waypoint from a map click."""
            self._run('add_waypoint', lambda d: planner.store.add({
                'lat': d.get('lat'),
                'lng': d.get('lng'),
                'name': d.get('name'),
            }), data, redraw=True)

        @self.socketio.on('remove_selected', namespace=NAMESPACE)
        def handle_remove_selected(data=None):
            self._run('remove_selected', lambda d: planner.store.remove_selected(d.get('ids')),
                      data, redraw=True)

        @self.socketio.on('clear_all', namespace=NAMESPACE)
        def handle_clear_all(data=None):
            self._run('clear_all', lambda d: planner.store.clear_all(), data, redraw=True)

        @self.socketio.on('toggle_selection', namespace=NAMESPACE)
        def handle_toggle_selection(data=None):
            self._run('toggle_selection', lambda d: planner.store.toggle_selection(d.get('id')), data)

        @self.socketio.on('reorder', namespace=NAMESPACE)
        def handle_reorder(data=None):
            """Apply a drag-and-drop move; a drop outside the list is ignored."""
            def _reorder(d):
                if d.get('destination_index') is not None:
                    planner.store.reorder(d.get('source_index'), d['destination_index'])

            self._run('reorder', _reorder, data, redraw=True)

        @self.socketio.on('search', namespace=NAMESPACE)
        def handle_search(data=None):
            self._run('search', lambda d: planner.geocode.search(d.get('query')), data)

        @self.socketio.on('select_candidate', namespace=NAMESPACE)
        def handle_select_candidate(data=None):
            self._run('select_candidate', lambda d: planner.geocode.select_candidate(d.get('index')),
                      data, redraw=True)

        @self.socketio.on('set_travel_mode', namespace=NAMESPACE)
        def handle_set_travel_mode(data=None):
            self._run('set_travel_mode', lambda d: planner.routes.set_travel_mode(d.get('mode')), data)

        @self.socketio.on('compute_route', namespace=NAMESPACE)
        def handle_compute_route(data=None):
            self._run('compute_route', lambda d: planner.routes.compute_route(d.get('mode')), data)
