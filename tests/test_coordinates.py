import math

import pytest

from listing_search.core.coordinates import resolve_coordinates


def test_structured_geo_field_is_lng_lat():
    room = {"geo": {"type": "Point", "coordinates": [77.59, 12.97]}}
    assert resolve_coordinates(room) == (77.59, 12.97)


def test_legacy_scalar_fields():
    room = {"latitude": 12.97, "longitude": 77.59}
    assert resolve_coordinates(room) == (77.59, 12.97)


def test_structured_field_wins_over_scalars():
    room = {
        "geo": {"coordinates": [1.0, 2.0]},
        "latitude": 50.0,
        "longitude": 60.0,
    }
    assert resolve_coordinates(room) == (1.0, 2.0)


def test_falls_back_to_scalars_when_geo_is_malformed():
    room = {"geo": {"coordinates": [1.0]}, "latitude": 5, "longitude": 6}
    assert resolve_coordinates(room) == (6.0, 5.0)


@pytest.mark.parametrize("record", [
    {},
    {"title": "No location"},
    {"geo": None},
    {"geo": {"coordinates": "77.59,12.97"}},
    {"geo": {"coordinates": ["77.59", "12.97"]}},
    {"geo": {"coordinates": [True, False]}},
    {"latitude": "12.97", "longitude": "77.59"},
    {"latitude": 12.97},
    {"latitude": math.nan, "longitude": math.nan},
    None,
    "not a record",
])
def test_unresolvable_records_return_none(record):
    assert resolve_coordinates(record) is None
