"""
listing_search
~~~~~~~~~~~~~~~

Nearby listing search: quadtree prefiltering, road-distance filtering and ordering.

This package narrows a flat set of listing records to those within a travel distance of
a user, using a region quadtree as a bounding-box prefilter and an external routing
service for the exact road distance.
"""

__version__ = "0.1.0"

# -------------------------------------------------------------------
# Package-level logger (this lives in utils/logger.py, not to be
# confused with the stdlib `logging` package)
# -------------------------------------------------------------------
from .utils.logger     import logger

# -------------------------------------------------------------------
# Spatial index
# -------------------------------------------------------------------
from .spatial.geometry import Rectangle, SpatialPoint
from .spatial.quadtree import QuadTree
from .spatial.bounds   import search_region, world_boundary, haversine_km

# -------------------------------------------------------------------
# Core search pipeline
# -------------------------------------------------------------------
from .core.coordinates import resolve_coordinates
from .core.ordering    import quick_sort
from .core.routing     import RoadDistanceClient, HaversineDistance, build_distance_client, UNREACHABLE
from .core.pipeline    import Candidate, DistanceFilterPipeline
from .core.store       import ListingStore, ListingStoreError
from .core.search      import SearchParams, SearchError, search_listings

# -------------------------------------------------------------------
# Metrics
# -------------------------------------------------------------------
from .utils.metrics    import RoutingMetrics, routing_metrics

# -------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------
__all__ = [
    # logging
    "logger",
    # spatial
    "Rectangle",
    "SpatialPoint",
    "QuadTree",
    "search_region",
    "world_boundary",
    "haversine_km",
    # core
    "resolve_coordinates",
    "quick_sort",
    "RoadDistanceClient",
    "HaversineDistance",
    "build_distance_client",
    "UNREACHABLE",
    "Candidate",
    "DistanceFilterPipeline",
    "ListingStore",
    "ListingStoreError",
    "SearchParams",
    "SearchError",
    "search_listings",
    # utils
    "RoutingMetrics",
    "routing_metrics",
]
