# waypoint_planner/api/services/geocode_service.py
"""Service layer turning free-text searches into waypoint candidates."""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from waypoint_planner.api.errors import GeocodingError, ValidationFailure
from waypoint_planner.api.models import SearchCandidate, Waypoint, validate_coordinates
from waypoint_planner.api.services.waypoint_store import WaypointStore

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a location to search"
NOT_FOUND_MESSAGE = "Location not found"
REQUEST_FAILED_MESSAGE = "Request failed"


class GeocodeService:
    """Owns the pending search results and hands chosen ones to the store."""

    def __init__(self, store: WaypointStore, geocoder):
        self.store = store
        self.geocoder = geocoder
        self.lock = threading.Lock()

        self._candidates: List[SearchCandidate] = []
        self._latest_request = 0

    @property
    def candidates(self) -> List[SearchCandidate]:
        with self.lock:
            return list(self._candidates)

    def search(self, query: Optional[str]) -> List[SearchCandidate]:
        """Replace the candidate set with geocoder results for ``query``.

        Failures never raise: they leave an empty candidate set and a
        message on the store. If a newer search was issued while this one
        was in flight, this result is discarded.

        Returns:
            The candidate set after the call

        Raises:
            ValidationFailure: If ``query`` is neither None nor a string
        """
        if query is not None and not isinstance(query, str):
            raise ValidationFailure(
                "Search query must be a string",
                details={"parameter": "query", "value": repr(query)},
            )
        if not query or not query.strip():
            self.store.set_message(EMPTY_QUERY_MESSAGE)
            return self.candidates

        query = query.strip()
        with self.lock:
            self._latest_request += 1
            request_id = self._latest_request
            self._candidates = []

        logger.info(f"Search #{request_id}: '{query}'")
        try:
            results = self.geocoder.search(query)
        except GeocodingError as e:
            logger.error(f"Search #{request_id} failed: {e}")
            self._apply(request_id, [], REQUEST_FAILED_MESSAGE)
            return self.candidates

        candidates = self._to_candidates(results)
        if not candidates:
            logger.warning(f"Search #{request_id}: no results for '{query}'")
            self._apply(request_id, [], NOT_FOUND_MESSAGE)
        else:
            self._apply(request_id, candidates, "")
        return self.candidates

    def _apply(self, request_id: int, candidates: List[SearchCandidate], message: str) -> bool:
        with self.lock:
            if request_id != self._latest_request:
                logger.info(f"Discarding stale search #{request_id} (latest is #{self._latest_request})")
                return False
            self._candidates = candidates
        self.store.set_message(message)
        return True

    @staticmethod
    def _to_candidates(results: List[Dict[str, Any]]) -> List[SearchCandidate]:
        candidates = []
        for index, result in enumerate(results):
            try:
                lat = float(result["lat"])
                lng = float(result["lon"])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping geocoder result #{index} without usable coordinates")
                continue
            if not validate_coordinates(lat, lng):
                logger.warning(f"Skipping geocoder result #{index} with out-of-range coordinates")
                continue

            display_name = result.get("display_name")
            candidates.append(
                SearchCandidate(
                    name=display_name or f"Location {index + 1}",
                    lat=lat,
                    lng=lng,
                    full_location=display_name,
                )
            )
        return candidates

    def select_candidate(self, candidate: Union[SearchCandidate, int]) -> List[Waypoint]:
        """Add a candidate (or the candidate at an index) as a waypoint.

        Raises:
            ValidationFailure: If an index does not name a current candidate
        """
        if not isinstance(candidate, SearchCandidate):
            with self.lock:
                size = len(self._candidates)
                if isinstance(candidate, bool) or not isinstance(candidate, int) or not 0 <= candidate < size:
                    raise ValidationFailure(
                        "No such search result",
                        details={"parameter": "index", "value": candidate, "size": size},
                    )
                candidate = self._candidates[candidate]

        waypoints = self.store.add(candidate.to_location())
        self.clear_candidates()
        self.store.clear_message()
        return waypoints

    def clear_candidates(self) -> None:
        with self.lock:
            self._candidates = []


__all__ = [
    "GeocodeService",
    "EMPTY_QUERY_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "REQUEST_FAILED_MESSAGE",
]
