"""
Road Distance Module
--------------------------------

Road-distance collaborators for the nearby listing search. Every collaborator
follows the same contract:

    distance_fn(user_lat, user_lng, target_lat, target_lng) -> float

It returns kilometers on success and +inf (UNREACHABLE) on any failure. It
never raises. A failed lookup only excludes its own listing from the results.

Classes:
    RoadDistanceClient: Driving distance via the Geoapify routing API (requests).
    HaversineDistance:  Offline great-circle distance with the same contract.

Functions:
    build_distance_client: Pick a collaborator from configuration.

Configuration:
    GEOAPIFY_API_KEY:     Routing credential, injected at construction.
    GEOAPIFY_ROUTING_URL: Routing endpoint.
    ROUTING_MODE:         Travel mode (default "drive").
    REQUEST_TIMEOUT:      Per-request timeout in seconds.
"""

import math
import uuid
from typing import Any, Optional

import requests

from .coordinates import is_coordinate
from ..spatial.bounds import haversine_km
from ..utils.logger import logger
from ..utils.metrics import RoutingMetrics, routing_metrics
from .. import config

UNREACHABLE = math.inf


class RoadDistanceClient:
    """
    Resolve driving distances through the Geoapify routing API.

    Usage:
        client = RoadDistanceClient(api_key="...")
        km = client(53.34, -6.26, 53.35, -6.25)
    """

    def __init__(
            self,
            api_key: Optional[str],
            mode: str = config.ROUTING_MODE,
            url: str = config.GEOAPIFY_ROUTING_URL,
            timeout: float = config.REQUEST_TIMEOUT,
            session: Any = None,
            metrics: Optional[RoutingMetrics] = None,
            ) -> None:
        self.api_key = api_key
        self.mode = mode
        self.url = url
        self.timeout = timeout
        self.http = session if session is not None else requests
        self.metrics = metrics if metrics is not None else routing_metrics

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def __call__(self, user_lat, user_lng, target_lat, target_lng) -> float:
        return self.road_distance_km(user_lat, user_lng, target_lat, target_lng)

    def road_distance_km(self, user_lat, user_lng, target_lat, target_lng) -> float:
        """
        Driving distance in kilometers between the user and a listing.

        Returns UNREACHABLE for non-numeric input, a missing API key, HTTP or
        network errors, an unparsable body, or a response without a route.
        """
        lookup_id = str(uuid.uuid4())[:8]

        if not all(is_coordinate(v) for v in (user_lat, user_lng, target_lat, target_lng)):
            self.metrics.record("failure")
            logger.warning("Rejected non-numeric coordinates", extra={
                "operation": "road_distance",
                "lookup_id": lookup_id,
                "reason": "invalid_coordinates"
            })
            return UNREACHABLE

        if not self.has_credential:
            self.metrics.record("missing_credential")
            logger.debug("No routing API key configured", extra={
                "operation": "road_distance",
                "lookup_id": lookup_id,
                "reason": "missing_credential"
            })
            return UNREACHABLE

        params = {
            "waypoints": f"{user_lat},{user_lng}|{target_lat},{target_lng}",
            "mode": self.mode,
            "apiKey": self.api_key
        }

        try:
            response = self.http.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            features = response.json().get("features") or []
            if not features:
                self.metrics.record("failure")
                logger.info("No route found", extra={
                    "operation": "road_distance",
                    "lookup_id": lookup_id,
                    "reason": "no_route"
                })
                return UNREACHABLE
            meters = features[0]["properties"]["distance"]
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError, IndexError) as e:
            self.metrics.record("failure")
            logger.warning(f"Route lookup failed: {str(e)}", extra={
                "operation": "road_distance",
                "lookup_id": lookup_id,
                "reason": type(e).__name__,
                "error": str(e)
            })
            return UNREACHABLE

        if not is_coordinate(meters) or meters < 0:
            self.metrics.record("failure")
            logger.warning("Route distance not usable", extra={
                "operation": "road_distance",
                "lookup_id": lookup_id,
                "reason": "bad_distance",
                "distance": meters
            })
            return UNREACHABLE

        self.metrics.record("success")
        return meters / 1000


class HaversineDistance:
    """Straight-line stand-in for the routing API, for offline runs and tests."""

    has_credential = True

    def __call__(self, user_lat, user_lng, target_lat, target_lng) -> float:
        if not all(is_coordinate(v) for v in (user_lat, user_lng, target_lat, target_lng)):
            return UNREACHABLE
        return haversine_km(user_lat, user_lng, target_lat, target_lng)


def build_distance_client(backend: str = config.DISTANCE_BACKEND, api_key: Optional[str] = config.GEOAPIFY_API_KEY):
    """Return the road-distance collaborator named by `backend` ("geoapify" or "haversine")."""
    if backend == "haversine":
        return HaversineDistance()
    if backend == "geoapify":
        return RoadDistanceClient(api_key=api_key)
    raise ValueError(f"Unknown distance backend: {backend}")
