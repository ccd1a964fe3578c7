import os
import tempfile

import pytest

# Keep JSON log files out of the user's home while testing
os.environ.setdefault("LISTING_SEARCH_HOME", tempfile.mkdtemp(prefix="listing_search_tests_"))

from listing_search.spatial.bounds import haversine_km


def make_listing(title, lng=None, lat=None, legacy=False, **fields):
    listing = {"title": title, **fields}
    if lng is None or lat is None:
        return listing
    if legacy:
        listing["latitude"] = lat
        listing["longitude"] = lng
    else:
        listing["geo"] = {"type": "Point", "coordinates": [lng, lat]}
    return listing


class StraightLineDistance:
    """Fake road-distance collaborator that records every call."""

    has_credential = True

    def __init__(self):
        self.calls = []

    def __call__(self, user_lat, user_lng, target_lat, target_lng):
        self.calls.append((user_lat, user_lng, target_lat, target_lng))
        return haversine_km(user_lat, user_lng, target_lat, target_lng)


@pytest.fixture
def straight_line():
    return StraightLineDistance()
