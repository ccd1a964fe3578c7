"""
Nearby Listing Search Module
--------------------------------

The search endpoint contract, independent of any web framework.

A search takes raw query parameters (strings, as they arrive on a query string):

    lat, lng, maxDistance   location triple, activates the spatial pipeline
    status, type            equality filters
    facilities              comma separated, every listed facility must be offered

Filters always apply first, through the listing store. The spatial pipeline
only runs when all three location parameters are present and numeric. Otherwise
the filtered records come back as-is, in store order and without a `distance`
field. That bypass is a mode of the endpoint, not a fallback on error.

Functions:
    search_listings(store, pipeline, query) -> list[dict]

Classes:
    SearchParams: Parsed query parameters.
    SearchError:  Unexpected failure while serving a search; no partial results.
"""

import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .pipeline import DistanceFilterPipeline
from .store import ListingStore, ListingStoreError
from ..utils.logger import logger


class SearchError(Exception):
    """A search request failed as a whole."""



def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None



@dataclass
class SearchParams:
    lat: Optional[float] = None
    lng: Optional[float] = None
    max_distance_km: Optional[float] = None
    status: Optional[str] = None
    type_: Optional[str] = None
    facilities: List[str] = field(default_factory=list)

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> "SearchParams":
        facilities = query.get("facilities") or ""
        if isinstance(facilities, str):
            facilities = [f.strip() for f in facilities.split(",") if f.strip()]
        return cls(
            lat=_parse_float(query.get("lat")),
            lng=_parse_float(query.get("lng")),
            max_distance_km=_parse_float(query.get("maxDistance")),
            status=query.get("status") or None,
            type_=query.get("type") or None,
            facilities=list(facilities),
        )

    @property
    def is_spatial(self) -> bool:
        """True when the full location triple is present."""
        return None not in (self.lat, self.lng, self.max_distance_km)



def search_listings(
        store: ListingStore,
        pipeline: DistanceFilterPipeline,
        query: Mapping[str, Any],
        ) -> List[Dict[str, Any]]:
    """
    Serve one search request.

    Args:
        store: Record store to read candidate listings from.
        pipeline: Spatial pipeline used when the location triple is present.
        query: Raw query parameters.

    Returns:
        Listings nearest-first with a `distance` field (km) in spatial mode,
        otherwise the filtered listings in store order.

    Raises:
        ListingStoreError: The record store could not be read.
        SearchError: Any other failure while serving the request.
    """
    search_id = str(uuid.uuid4())[:8]
    params = SearchParams.from_query(query)

    logger.info("Search requested", extra={
        "operation": "search",
        "search_id": search_id,
        "spatial": params.is_spatial,
        "filters": {"status": params.status, "type": params.type_, "facilities": params.facilities}
    })

    try:
        listings = store.find(status=params.status, type_=params.type_, facilities=params.facilities)

        if not params.is_spatial:
            logger.info("No location filter; returning all matches", extra={
                "operation": "search",
                "search_id": search_id,
                "status": "bypass",
                "results_count": len(listings)
            })
            return listings

        results = pipeline.run(listings, params.lat, params.lng, params.max_distance_km)
    except ListingStoreError:
        raise
    except Exception as e:
        logger.error(f"Error in nearby search: {str(e)}", exc_info=True, extra={
            "operation": "search",
            "search_id": search_id,
            "status": "error"
        })
        raise SearchError("Failed to fetch listings") from e

    logger.info("Search completed", extra={
        "operation": "search",
        "search_id": search_id,
        "status": "success",
        "results_count": len(results)
    })
    return results
