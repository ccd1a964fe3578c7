import json

import pandas as pd
import pytest

from listing_search.core.store import ListingStore, ListingStoreError

from conftest import make_listing


@pytest.fixture
def rooms():
    return [
        make_listing("a", lng=77.1, lat=12.1, status="active", type="1 BHK", facilities=["wifi", "parking"]),
        make_listing("b", lng=77.2, lat=12.2, status="inactive", type="1 BHK", facilities=["wifi"]),
        make_listing("c", lng=77.3, lat=12.3, legacy=True, status="active", type="2 BHK", facilities=[]),
    ]


def titles(records):
    return [r["title"] for r in records]


def test_find_without_filters_keeps_store_order(rooms):
    assert titles(ListingStore(rooms).find()) == ["a", "b", "c"]


def test_equality_filters(rooms):
    store = ListingStore(rooms)
    assert titles(store.find(status="active")) == ["a", "c"]
    assert titles(store.find(type_="1 BHK")) == ["a", "b"]
    assert titles(store.find(status="active", type_="1 BHK")) == ["a"]
    assert store.find(status="pending") == []


def test_facilities_must_all_be_offered(rooms):
    store = ListingStore(rooms)
    assert titles(store.find(facilities=["wifi"])) == ["a", "b"]
    assert titles(store.find(facilities=["wifi", "parking"])) == ["a"]
    assert store.find(facilities=["pool"]) == []


def test_absent_fields_are_left_out_of_records(rooms):
    records = ListingStore(rooms).find()
    assert "geo" not in records[2]
    assert "latitude" not in records[0]
    assert records[0]["geo"] == {"type": "Point", "coordinates": [77.1, 12.1]}


def test_empty_store():
    assert ListingStore().find(status="active") == []
    assert len(ListingStore()) == 0


def test_filter_on_missing_column_matches_nothing():
    store = ListingStore([{"title": "bare"}])
    assert store.find(status="active") == []
    assert store.find(facilities=["wifi"]) == []


def test_from_json_file(tmp_path, rooms):
    path = tmp_path / "rooms.json"
    path.write_text(json.dumps(rooms))

    store = ListingStore.from_file(path)
    assert titles(store.find(facilities=["parking"])) == ["a"]


def test_from_csv_file_parses_list_columns(tmp_path):
    df = pd.DataFrame([
        {"title": "x", "status": "active", "latitude": 12.5, "longitude": 77.5, "facilities": "['wifi', 'ac']"},
        {"title": "y", "status": "active", "latitude": 13.0, "longitude": 78.0, "facilities": "['ac']"},
    ])
    path = tmp_path / "rooms.csv"
    df.to_csv(path, index=False)

    records = ListingStore.from_file(path).find(facilities=["wifi"])
    assert titles(records) == ["x"]
    assert records[0]["facilities"] == ["wifi", "ac"]
    assert records[0]["latitude"] == 12.5


def test_missing_file_raises(tmp_path):
    with pytest.raises(ListingStoreError):
        ListingStore.from_file(tmp_path / "nope.json")


def test_unsupported_format_raises(tmp_path):
    path = tmp_path / "rooms.xml"
    path.write_text("<rooms/>")
    with pytest.raises(ListingStoreError):
        ListingStore.from_file(path)


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "rooms.json"
    path.write_text("{not json")
    with pytest.raises(ListingStoreError):
        ListingStore.from_file(path)


def test_json_object_instead_of_array_raises(tmp_path):
    path = tmp_path / "rooms.json"
    path.write_text(json.dumps({"title": "one"}))
    with pytest.raises(ListingStoreError):
        ListingStore.from_file(path)


def test_records_keep_their_value_types():
    store = ListingStore([
        {"title": "a", "capacity": 2, "price": 100, "furnished": True},
        {"title": "b"},
    ])

    records = store.find()
    assert type(records[0]["capacity"]) is int
    assert type(records[0]["price"]) is int
    assert records[0]["furnished"] is True
    assert records[1] == {"title": "b"}


def test_returned_records_are_copies(rooms):
    store = ListingStore(rooms)
    store.find()[0]["title"] = "changed"
    assert titles(store.find()) == ["a", "b", "c"]


def test_csv_values_come_back_as_python_types(tmp_path):
    path = tmp_path / "rooms.csv"
    pd.DataFrame([{"title": "x", "capacity": 3, "price": 1250.5}]).to_csv(path, index=False)

    record = ListingStore.from_file(path).find()[0]
    assert type(record["capacity"]) is int
    assert type(record["price"]) is float
