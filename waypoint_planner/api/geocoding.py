# waypoint_planner/api/geocoding.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from waypoint_planner.api.config import get_geocoder_config
from waypoint_planner.api.errors import GeocodingError

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    """Thin client for a Nominatim-compatible ``/search`` endpoint.

    Returns the raw result records (``display_name``, ``lat``, ``lon`` as
    decimal strings); mapping them onto candidates is the caller's job.
    """

    def __init__(
        self,
        url: str,
        limit: int = 5,
        user_agent: str = "waypoint-planner",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.limit = limit
        self.timeout = timeout
        self.session = session or requests.Session()
        # Nominatim's usage policy requires an identifying User-Agent
        self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "NominatimGeocoder":
        cfg = config or get_geocoder_config()
        return cls(
            url=cfg["url"],
            limit=cfg.get("limit", 5),
            user_agent=cfg.get("user_agent", "waypoint-planner"),
            timeout=cfg.get("timeout"),
        )

    def search(self, query: str) -> List[Dict[str, Any]]:
        """Look up ``query`` and return the service's results in ranking order.

        Raises:
            GeocodingError: On transport errors, non-2xx responses or a
                payload that is not a JSON array
        """
        params = {
            "q": query,
            "limit": self.limit,
            "format": "json",
            "addressdetails": 1,
        }
        logger.debug(f"Geocoding query: {query}")
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            results = response.json()
        except requests.RequestException as e:
            logger.error(f"Geocoding request failed for '{query}': {e}")
            raise GeocodingError("Geocoding request failed", details={"query": query}) from e
        except ValueError as e:
            logger.error(f"Geocoder returned invalid JSON for '{query}': {e}")
            raise GeocodingError("Geocoder returned invalid JSON", details={"query": query}) from e

        if not isinstance(results, list):
            raise GeocodingError("Unexpected geocoder response", details={"query": query})

        logger.debug(f"Geocoder returned {len(results)} result(s) for '{query}'")
        return results


__all__ = ["NominatimGeocoder"]
