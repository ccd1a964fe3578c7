"""
Search Region Module for Nearby Listing Search
--------------------------------

Utilities for turning a user location plus a travel radius into the bounding
box used to prefilter the quadtree, and for straight-line distances.

Functions:
  world_boundary() -> Rectangle:
    The full longitude/latitude domain, (+-180, +-90), used as the root boundary.

  search_region(user_lat, user_lng, max_distance_km, km_per_degree, latitude_corrected) -> Rectangle:
    Square box centered on the user with half-extent max_distance_km / km_per_degree degrees.

  haversine_km(lat1, lng1, lat2, lng2) -> float:
    Great-circle distance in kilometers.
"""

import math

from .geometry import Rectangle
from ..config import KM_PER_DEGREE

EARTH_RADIUS_KM = 6371.0

# Past this latitude 1/cos(lat) explodes, so the box simply spans every longitude
_POLAR_LATITUDE = 89.0


def world_boundary() -> Rectangle:
    """Root boundary covering every valid longitude and latitude."""
    return Rectangle(0.0, 0.0, 180.0, 90.0)



def search_region(
        user_lat: float,
        user_lng: float,
        max_distance_km: float,
        km_per_degree: float = KM_PER_DEGREE,
        latitude_corrected: bool = False,
        ) -> Rectangle:
    """Build the bounding-box prefilter around a user location.

    The default is a flat-earth conversion: about 111 km per degree, reused
    for longitude. It is a coarse superset test. The exact distance check
    happens later against road distance.

    With `latitude_corrected`, the longitude half-extent is divided by
    cos(latitude). A degree of longitude shrinks toward the poles, so the box
    then stays a superset of the true search circle at any latitude.

    Args:
        user_lat (float): Latitude of the user.
        user_lng (float): Longitude of the user.
        max_distance_km (float): Search radius in kilometers. Negative values give an empty box.
        km_per_degree (float): Kilometers per degree of latitude.
        latitude_corrected (bool): Scale the longitude extent by 1/cos(lat).

    Returns:
        Rectangle: Box centered at (user_lng, user_lat).
    """
    degrees_range = max(0.0, max_distance_km / km_per_degree)
    half_w = degrees_range

    if latitude_corrected:
        if abs(user_lat) >= _POLAR_LATITUDE:
            half_w = 180.0
        else:
            half_w = min(180.0, degrees_range / math.cos(math.radians(user_lat)))

    return Rectangle(user_lng, user_lat, half_w, degrees_range)



def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlng = math.radians(lng2 - lng1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
