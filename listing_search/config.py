"""
Configuration module for the Nearby Listing Search application.
-------------------------------------------

This module defines all of the tunable parameters, file paths, and environment-driven settings
used by the spatial search pipeline. Values are read from the process environment, after a
local `.env` file (if any) has been loaded with python-dotenv.

The routing credential is read here once and handed to the road-distance client at
construction time; nothing in the pipeline reads the environment at call time.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value in (None, ""):
        return None
    return float(value)


# Base paths
LISTING_SEARCH_HOME = Path(os.getenv('LISTING_SEARCH_HOME', Path.home() / '.listing_search'))
LOGS_DIR = LISTING_SEARCH_HOME / 'logs'

# Spatial index parameters
QUADTREE_CAPACITY = int(os.getenv('QUADTREE_CAPACITY', 4))  # points per node before subdividing
QUADTREE_MAX_DEPTH = int(os.getenv('QUADTREE_MAX_DEPTH', 32))  # 360 / 2**32 deg is well under a millimetre
KM_PER_DEGREE = float(os.getenv('KM_PER_DEGREE', 111.0))  # approx km per degree of latitude
LATITUDE_CORRECTED = _env_flag('LATITUDE_CORRECTED')  # widen the longitude extent by 1/cos(lat)

# Concurrency settings
MAX_WORKERS = int(os.getenv('MAX_WORKERS', 10))
LOOKUP_TIMEOUT = _env_optional_float('LOOKUP_TIMEOUT')  # seconds for the whole fan-out, None waits forever

# Routing API configuration
DISTANCE_BACKEND = os.getenv('DISTANCE_BACKEND', 'geoapify')  # geoapify | haversine
GEOAPIFY_API_KEY = os.getenv('GEOAPIFY_API_KEY')
GEOAPIFY_ROUTING_URL = os.getenv('GEOAPIFY_ROUTING_URL', 'https://api.geoapify.com/v1/routing')
ROUTING_MODE = os.getenv('ROUTING_MODE', 'drive')
REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', 10))


def get_config() -> Dict[str, Any]:
    """
    Get the current configuration as a dictionary.
    Useful for logging and debugging. The API key itself is never included.
    """
    return {
        'paths': {
            'listing_search_home': str(LISTING_SEARCH_HOME),
            'logs_dir': str(LOGS_DIR)
        },
        'spatial': {
            'quadtree_capacity': QUADTREE_CAPACITY,
            'quadtree_max_depth': QUADTREE_MAX_DEPTH,
            'km_per_degree': KM_PER_DEGREE,
            'latitude_corrected': LATITUDE_CORRECTED
        },
        'processing': {
            'max_workers': MAX_WORKERS,
            'lookup_timeout': LOOKUP_TIMEOUT
        },
        'routing': {
            'backend': DISTANCE_BACKEND,
            'url': GEOAPIFY_ROUTING_URL,
            'mode': ROUTING_MODE,
            'request_timeout': REQUEST_TIMEOUT,
            'has_api_key': bool(GEOAPIFY_API_KEY)
        }
    }
