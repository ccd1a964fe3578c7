"""
Distance Filter Pipeline Module
--------------------------------

Turns the flat candidate set of one search request into listings filtered and
ordered by road distance.

Steps:
    1. Build a fresh quadtree over the whole longitude/latitude domain.
    2. Insert every listing whose coordinates resolve. Listings without a usable location
       can never match a location search and are dropped here.
    3. Query the bounding box around the user (see spatial.bounds.search_region).
    4. Scatter one road-distance lookup per bounding-box candidate over a thread pool,
       then gather them all.
    5. Drop candidates farther than max_distance_km. Unreachable (+inf) candidates always go.
    6. Order the survivors nearest-first with the hand-written quicksort.

A failing lookup turns into +inf and only costs its own candidate. When the collaborator
has no credential at all, every lookup is unreachable and the run logs a distinct
`missing_credential` warning, so an empty answer is not mistaken for "nothing nearby".

Classes:
    Candidate:               A listing paired with its resolved distance.
    DistanceFilterPipeline:  The orchestrator.
"""

import math
import time
import uuid
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from .coordinates import is_coordinate, resolve_coordinates
from .ordering import quick_sort
from .routing import UNREACHABLE
from ..spatial.bounds import search_region, world_boundary
from ..spatial.geometry import SpatialPoint
from ..spatial.quadtree import QuadTree
from ..utils.logger import logger
from .. import config

DistanceFn = Callable[[float, float, float, float], float]


@dataclass
class Candidate:
    listing: Dict[str, Any]
    distance: float = UNREACHABLE

    def to_record(self) -> Dict[str, Any]:
        """Copy of the listing with the resolved distance attached."""
        return {**self.listing, "distance": self.distance}


class DistanceFilterPipeline:
    """
    Bounding-box prefilter, concurrent road-distance resolution, threshold filter and ordering.

    The road-distance collaborator is injected, so the pipeline never reads a
    credential from the environment. Any callable honoring the routing contract works
    (see core.routing).

    Attributes:
        distance_fn (DistanceFn): Road-distance collaborator.
        capacity (int): Quadtree points per node before subdividing.
        max_depth (int): Quadtree depth cap.
        max_workers (int): Size of the lookup thread pool.
        km_per_degree (float): Flat-earth conversion for the search box.
        lookup_timeout (float | None): Seconds to wait for the whole fan-out. Lookups still
            running after that are abandoned and count as unreachable.
        latitude_corrected (bool): Widen the box's longitude extent by 1/cos(lat).

    Usage:
        pipeline = DistanceFilterPipeline(RoadDistanceClient(api_key))
        nearby = pipeline.run(listings, user_lat=53.34, user_lng=-6.26, max_distance_km=5)
    """

    def __init__(
            self,
            distance_fn: DistanceFn,
            capacity: int = config.QUADTREE_CAPACITY,
            max_depth: int = config.QUADTREE_MAX_DEPTH,
            max_workers: int = config.MAX_WORKERS,
            km_per_degree: float = config.KM_PER_DEGREE,
            lookup_timeout: Optional[float] = config.LOOKUP_TIMEOUT,
            latitude_corrected: bool = config.LATITUDE_CORRECTED,
            ) -> None:
        self.distance_fn = distance_fn
        self.capacity = capacity
        self.max_depth = max_depth
        self.max_workers = max_workers
        self.km_per_degree = km_per_degree
        self.lookup_timeout = lookup_timeout
        self.latitude_corrected = latitude_corrected

# -------------------------------------------------- Helper Functions ---------------------------------------------------------

    def build_index(self, records: Iterable[Dict[str, Any]]) -> QuadTree:
        """Index every record with a resolvable location. Records without one are skipped."""
        tree = QuadTree(world_boundary(), self.capacity, self.max_depth)
        for record in records:
            coords = resolve_coordinates(record)
            if coords is None:
                continue
            lng, lat = coords
            tree.insert(SpatialPoint(lng, lat, record))
        return tree

    def _lookup(self, user_lat: float, user_lng: float, listing: Dict[str, Any]) -> float:
        coords = resolve_coordinates(listing)
        if coords is None:
            return UNREACHABLE
        lng, lat = coords
        try:
            distance = self.distance_fn(user_lat, user_lng, lat, lng)
        except Exception as e:
            # The contract says collaborators never raise; one that does only loses its candidate
            logger.warning(f"Distance collaborator raised: {str(e)}", extra={
                "operation": "filter_pipeline",
                "reason": "collaborator_error",
                "error": str(e)
            })
            return UNREACHABLE
        # Candidates carry a distance >= 0 or +inf, nothing else
        if is_coordinate(distance) and distance >= 0:
            return float(distance)
        return UNREACHABLE

    def resolve_distances(self, user_lat: float, user_lng: float, listings: List[Dict[str, Any]]) -> List[float]:
        """Look up every listing's road distance concurrently, keeping input order."""
        if not listings:
            return []

        distances = [UNREACHABLE] * len(listings)
        pool = ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(listings))))
        try:
            futures = {
                pool.submit(self._lookup, user_lat, user_lng, listing): index
                for index, listing in enumerate(listings)
            }
            done, not_done = wait(futures, timeout=self.lookup_timeout)
            for future in done:
                distances[futures[future]] = future.result()
            if not_done:
                logger.warning("Abandoned unfinished distance lookups", extra={
                    "operation": "filter_pipeline",
                    "reason": "lookup_timeout",
                    "abandoned": len(not_done),
                    "timeout_sec": self.lookup_timeout
                })
        finally:
            # Never join abandoned lookups; queued ones are cancelled outright
            pool.shutdown(wait=False, cancel_futures=True)
        return distances

# -------------------------------------------------- Pipeline ---------------------------------------------------------

    def run(
            self,
            records: Iterable[Dict[str, Any]],
            user_lat: float,
            user_lng: float,
            max_distance_km: float,
            ) -> List[Dict[str, Any]]:
        """
        Filter and order listings by road distance from the user.

        Args:
            records: Candidate listing records (dicts). Not mutated.
            user_lat: Latitude of the user.
            user_lng: Longitude of the user.
            max_distance_km: Maximum road distance in kilometers.

        Returns:
            Copies of the matching listings, each with a `distance` field in km,
            nearest first.
        """
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        records = list(records)

        tree = self.build_index(records)
        region = search_region(
            user_lat,
            user_lng,
            max_distance_km,
            km_per_degree=self.km_per_degree,
            latitude_corrected=self.latitude_corrected,
        )
        nearby = tree.query(region)

        logger.debug("Bounding box query complete", extra={
            "operation": "filter_pipeline",
            "request_id": request_id,
            "records": len(records),
            "indexed": len(tree),
            "unindexed": len(records) - len(tree),
            "box_candidates": len(nearby),
            "region": {"cx": region.cx, "cy": region.cy, "half_w": region.half_w, "half_h": region.half_h}
        })

        distances = self.resolve_distances(user_lat, user_lng, nearby)
        candidates = [
            Candidate(listing, distance)
            for listing, distance in zip(nearby, distances)
            if distance <= max_distance_km
        ]
        quick_sort(candidates)

        unreachable = sum(1 for d in distances if math.isinf(d))
        if nearby and not getattr(self.distance_fn, "has_credential", True):
            logger.warning("Routing credential missing; every distance lookup is unreachable", extra={
                "operation": "filter_pipeline",
                "request_id": request_id,
                "reason": "missing_credential",
                "box_candidates": len(nearby)
            })

        logger.info("Completed nearby search", extra={
            "operation": "filter_pipeline",
            "request_id": request_id,
            "user": {"lat": user_lat, "lng": user_lng},
            "max_distance_km": max_distance_km,
            "box_candidates": len(nearby),
            "unreachable": unreachable,
            "matched": len(candidates),
            "duration_sec": round(time.time() - start_time, 3)
        })

        return [candidate.to_record() for candidate in candidates]
