# waypoint_planner/api/services/waypoint_store.py
"""Ordered waypoint collection, selection set and user-facing message."""

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from waypoint_planner.api.errors import ValidationFailure
from waypoint_planner.api.models import Waypoint
from waypoint_planner.api.persistence import WaypointPersistence

logger = logging.getLogger(__name__)


class WaypointStore:
    """Single source of truth for the user's waypoints.

    Every mutating call except ``toggle_selection`` writes the whole sequence
    through the persistence adapter before it returns.
    """

    def __init__(self, persistence: WaypointPersistence):
        self.persistence = persistence
        self.lock = threading.RLock()

        self._waypoints: List[Waypoint] = persistence.load()
        self._selection: Set[str] = set()
        self._message: str = ""

        logger.info(f"WaypointStore initialized with {len(self._waypoints)} waypoints")

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #
    @property
    def waypoints(self) -> List[Waypoint]:
        with self.lock:
            return list(self._waypoints)

    @property
    def selection(self) -> Set[str]:
        with self.lock:
            return set(self._selection)

    @property
    def message(self) -> str:
        return self._message

    def set_message(self, message: str) -> None:
        self._message = message

    def clear_message(self) -> None:
        self._message = ""

    def snapshot(self) -> Dict[str, Any]:
        """Return a JSON-ready view of the store."""
        with self.lock:
            return {
                "waypoints": [wp.to_dict() for wp in self._waypoints],
                "selection": sorted(self._selection),
                "message": self._message,
            }

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def add(self, location: Union[Waypoint, Mapping[str, Any]]) -> List[Waypoint]:
        """Append a waypoint and return the new sequence.

        Args:
            location: A Waypoint or a mapping with numeric ``lat``/``lng``
                and an optional ``name``

        Raises:
            ValidationFailure: If the coordinates are missing or invalid
        """
        if isinstance(location, Waypoint):
            waypoint = location
        else:
            try:
                waypoint = Waypoint.from_location(location)
            except (AttributeError, ValueError) as e:
                raise ValidationFailure(str(e), details={"location": _describe(location)}) from e

        with self.lock:
            self._waypoints.append(waypoint)
            self.persistence.save(self._waypoints)
            logger.info(f"Added waypoint '{waypoint.name}' ({waypoint.lat:.5f}, {waypoint.lng:.5f})")
            return list(self._waypoints)

    def remove_selected(self, selection: Optional[Iterable[str]] = None) -> List[Waypoint]:
        """Remove every waypoint whose id is selected; survivors keep their order.

        Uses the store's own selection set when ``selection`` is omitted. The
        selection set is cleared afterwards either way.

        Raises:
            ValidationFailure: If ``selection`` is not a collection of
                non-empty id strings
        """
        if selection is not None:
            if not isinstance(selection, (list, tuple, set, frozenset)):
                raise ValidationFailure("ids must be a list", details={"parameter": "ids"})
            selection = [_check_id(waypoint_id, "ids") for waypoint_id in selection]

        with self.lock:
            selected = set(self._selection if selection is None else selection)
            before = len(self._waypoints)
            self._waypoints = [wp for wp in self._waypoints if wp.id not in selected]
            self._selection.clear()
            self.persistence.save(self._waypoints)
            logger.info(f"Removed {before - len(self._waypoints)} selected waypoint(s)")
            return list(self._waypoints)

    def clear_all(self) -> List[Waypoint]:
        """Empty the sequence and selection and erase the stored entry."""
        with self.lock:
            self._waypoints = []
            self._selection.clear()
            self.persistence.clear()
            logger.info("Cleared all waypoints")
            return []

    def reorder(self, source_index: int, destination_index: int) -> List[Waypoint]:
        """Move one waypoint from ``source_index`` to ``destination_index``.

        Raises:
            ValidationFailure: If either index is outside the sequence; the
                sequence is left unchanged
        """
        with self.lock:
            size = len(self._waypoints)
            for label, index in (("source_index", source_index), ("destination_index", destination_index)):
                if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < size:
                    raise ValidationFailure(
                        f"{label} out of range",
                        details={"parameter": label, "value": index, "size": size},
                    )

            reordered = list(self._waypoints)
            moved = reordered.pop(source_index)
            reordered.insert(destination_index, moved)
            self._waypoints = reordered
            self.persistence.save(self._waypoints)
            logger.debug(f"Moved '{moved.name}' from {source_index} to {destination_index}")
            return list(self._waypoints)

    def toggle_selection(self, waypoint_id: str) -> Set[str]:
        """Flip membership of ``waypoint_id`` in the selection set.

        Raises:
            ValidationFailure: If ``waypoint_id`` is not a non-empty string
        """
        waypoint_id = _check_id(waypoint_id, "id")
        with self.lock:
            self._selection ^= {waypoint_id}
            return set(self._selection)


def _check_id(waypoint_id: Any, parameter: str) -> str:
    if not isinstance(waypoint_id, str) or not waypoint_id:
        raise ValidationFailure(
            "Waypoint id must be a non-empty string",
            details={"parameter": parameter, "value": repr(waypoint_id)},
        )
    return waypoint_id


def _describe(location: Any) -> Any:
    if isinstance(location, Mapping):
        return {key: location.get(key) for key in ("name", "lat", "lng")}
    return repr(location)


__all__ = ["WaypointStore"]
