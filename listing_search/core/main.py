#!/usr/bin/env python3
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .pipeline import DistanceFilterPipeline
from .routing import build_distance_client
from .search import search_listings
from .store import ListingStore
from ..config import DISTANCE_BACKEND, GEOAPIFY_API_KEY, get_config
from ..utils.logger import setup_logger
from ..utils.metrics import routing_metrics

logger = setup_logger(__name__)

def main(
    records_path: Union[str, Path],
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    max_distance: Optional[float] = None,
    type_: Optional[str] = None,
    facilities: Optional[List[str]] = None,
    status: Optional[str] = None,
    straight_line: bool = False,
) -> Dict[str, Any]:
    """
    Main entry point for a nearby listing search.

    Args:
        records_path: JSON or CSV file of listing records
        lat: User latitude
        lng: User longitude
        max_distance: Maximum road distance in kilometers
        type_: Listing type filter
        facilities: Facilities every result must offer
        status: Listing status filter
        straight_line: Use great-circle distance instead of the routing API

    Returns:
        Dict containing the status and either the results or the error
    """
    query = {
        "lat": lat,
        "lng": lng,
        "maxDistance": max_distance,
        "type": type_,
        "facilities": ",".join(facilities or []),
        "status": status,
    }

    try:
        logger.info(f"Starting nearby listing search over {records_path}", extra={
            "records_path": str(records_path),
            "query": query,
            "config": get_config()
        })

        store = ListingStore.from_file(records_path)
        backend = "haversine" if straight_line else DISTANCE_BACKEND
        pipeline = DistanceFilterPipeline(build_distance_client(backend, GEOAPIFY_API_KEY))

        results = search_listings(store, pipeline, query)
        routing_metrics.log_metrics()

        logger.info(f"Nearby listing search completed with {len(results)} results")

        return {
            'status': 'success',
            'count': len(results),
            'results': results
        }

    except Exception as e:
        logger.error(f"Error in nearby listing search: {str(e)}", exc_info=True)
        return {
            'status': 'error',
            'error': str(e)
        }


def _json_default(value: Any) -> Any:
    return str(value)


def cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Find listings near a location, ordered by road distance")
    parser.add_argument("records", help="Path to a JSON or CSV file of listings")
    parser.add_argument("--lat", type=float, help="User latitude")
    parser.add_argument("--lng", type=float, help="User longitude")
    parser.add_argument("--max-distance", type=float, help="Maximum road distance in kilometers")
    parser.add_argument("--type", dest="type_", help="Only listings of this type")
    parser.add_argument("--facilities", help="Comma separated facilities every listing must offer")
    parser.add_argument("--status", help="Only listings with this status")
    parser.add_argument("--straight-line", action="store_true",
                        help="Use great-circle distance instead of the routing API")
    args = parser.parse_args(argv)

    facilities = [f.strip() for f in args.facilities.split(",") if f.strip()] if args.facilities else None

    outcome = main(
        args.records,
        lat=args.lat,
        lng=args.lng,
        max_distance=args.max_distance,
        type_=args.type_,
        facilities=facilities,
        status=args.status,
        straight_line=args.straight_line,
    )
    json.dump(outcome, sys.stdout, indent=2, default=_json_default)
    sys.stdout.write("\n")
    return 0 if outcome['status'] == 'success' else 1


if __name__ == "__main__":
    sys.exit(cli())
