import json

import pytest

from listing_search.core import main as entry

from conftest import make_listing


def write_rooms(tmp_path):
    path = tmp_path / "rooms.json"
    path.write_text(json.dumps([
        make_listing("far", lng=0, lat=5),
        make_listing("here", lng=0, lat=0),
        make_listing("half-degree", lng=0, lat=0.5),
    ]))
    return path


def test_main_straight_line_search(tmp_path):
    outcome = entry.main(write_rooms(tmp_path), lat=0, lng=0, max_distance=60, straight_line=True)

    assert outcome["status"] == "success"
    assert outcome["count"] == 2
    assert [r["title"] for r in outcome["results"]] == ["here", "half-degree"]


def test_main_reports_errors_instead_of_raising(tmp_path):
    outcome = entry.main(tmp_path / "missing.json")
    assert outcome["status"] == "error"
    assert "missing.json" in outcome["error"]


def test_cli_prints_json(tmp_path, capsys):
    code = entry.cli([str(write_rooms(tmp_path)), "--lat", "0", "--lng", "0",
                      "--max-distance", "60", "--straight-line"])

    printed = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [r["title"] for r in printed["results"]] == ["here", "half-degree"]
    assert printed["results"][0]["distance"] == 0
    assert printed["results"][1]["distance"] == pytest.approx(55.6, abs=0.1)


def test_cli_without_location_returns_everything(tmp_path, capsys):
    code = entry.cli([str(write_rooms(tmp_path))])

    printed = json.loads(capsys.readouterr().out)
    assert code == 0
    assert printed["count"] == 3
