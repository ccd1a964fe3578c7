"""
Listing coordinate resolution.

Listings store their location in one of two shapes:

  - structured:  {"geo": {"type": "Point", "coordinates": [lng, lat]}}
  - legacy:      {"latitude": lat, "longitude": lng}

Records created before the structured field existed only carry the legacy
scalars, and some carry neither. Absence is an expected outcome, never an error.
"""

import math
import numbers
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Tuple


def is_coordinate(value: Any) -> bool:
    # bool is an int subclass; NaN shows up for empty cells in pandas-loaded rows
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _from_geo(record: Mapping) -> Optional[Tuple[float, float]]:
    geo = record.get("geo")
    if not isinstance(geo, Mapping):
        return None
    coordinates = geo.get("coordinates")
    if not isinstance(coordinates, Sequence) or isinstance(coordinates, (str, bytes)):
        return None
    if len(coordinates) != 2:
        return None
    lng, lat = coordinates
    if is_coordinate(lng) and is_coordinate(lat):
        return float(lng), float(lat)
    return None


def _from_scalars(record: Mapping) -> Optional[Tuple[float, float]]:
    lat = record.get("latitude")
    lng = record.get("longitude")
    if is_coordinate(lng) and is_coordinate(lat):
        return float(lng), float(lat)
    return None


def resolve_coordinates(record: Any) -> Optional[Tuple[float, float]]:
    """
    Extract a canonical (longitude, latitude) pair from a listing record.

    Tries the structured `geo.coordinates` pair first, then the separate
    `latitude` / `longitude` fields.

    Args:
        record: Listing record, normally a dict.

    Returns:
        (lng, lat) as floats, or None if no usable location is present.
    """
    if not isinstance(record, Mapping):
        return None
    return _from_geo(record) or _from_scalars(record)
