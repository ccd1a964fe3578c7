import math

import pytest
import requests

from listing_search.core.routing import (
    HaversineDistance,
    RoadDistanceClient,
    UNREACHABLE,
    build_distance_client,
)
from listing_search.utils.metrics import RoutingMetrics


class FakeResponse:
    def __init__(self, payload=None, status_code=200, raw_error=None):
        self.payload = payload
        self.status_code = status_code
        self.raw_error = raw_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.raw_error:
            raise self.raw_error
        return self.payload


class FakeSession:
    """Stands in for the requests module; records each GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def route(meters):
    return {"features": [{"properties": {"distance": meters}}]}


@pytest.fixture
def metrics():
    return RoutingMetrics()


def test_successful_lookup_converts_meters_to_km(metrics):
    session = FakeSession(FakeResponse(route(12500)))
    client = RoadDistanceClient("secret", session=session, metrics=metrics, timeout=3)

    assert client(53.34, -6.26, 53.35, -6.25) == pytest.approx(12.5)

    call = session.calls[0]
    assert call["params"]["waypoints"] == "53.34,-6.26|53.35,-6.25"
    assert call["params"]["mode"] == "drive"
    assert call["params"]["apiKey"] == "secret"
    assert call["timeout"] == 3
    assert metrics.successful_requests == 1


def test_missing_credential_makes_no_request(metrics):
    session = FakeSession(FakeResponse(route(1000)))
    client = RoadDistanceClient(None, session=session, metrics=metrics)

    assert client(1.0, 2.0, 3.0, 4.0) == UNREACHABLE
    assert session.calls == []
    assert not client.has_credential
    assert metrics.missing_credential == 1
    assert metrics.failed_requests == 0


@pytest.mark.parametrize("args", [
    ("53.3", -6.2, 53.4, -6.3),
    (None, -6.2, 53.4, -6.3),
    (53.3, -6.2, math.nan, -6.3),
    (53.3, True, 53.4, -6.3),
])
def test_non_numeric_input_is_unreachable(args, metrics):
    session = FakeSession(FakeResponse(route(1000)))
    client = RoadDistanceClient("secret", session=session, metrics=metrics)
    assert client(*args) == UNREACHABLE
    assert session.calls == []


@pytest.mark.parametrize("session", [
    FakeSession(error=requests.ConnectionError("down")),
    FakeSession(error=requests.Timeout("slow")),
    FakeSession(FakeResponse(status_code=401)),
    FakeSession(FakeResponse(raw_error=ValueError("not json"))),
    FakeSession(FakeResponse({"features": []})),
    FakeSession(FakeResponse({})),
    FakeSession(FakeResponse({"features": [{"properties": {}}]})),
    FakeSession(FakeResponse(route("far"))),
    FakeSession(FakeResponse(route(-5))),
    FakeSession(FakeResponse(["unexpected"])),
])
def test_every_failure_mode_is_unreachable_and_never_raises(session, metrics):
    client = RoadDistanceClient("secret", session=session, metrics=metrics)
    assert client(53.34, -6.26, 53.35, -6.25) == UNREACHABLE
    assert metrics.failed_requests == 1
    assert metrics.successful_requests == 0


def test_haversine_distance_follows_the_same_contract():
    straight = HaversineDistance()
    assert straight(0, 0, 0.5, 0) == pytest.approx(55.6, abs=0.1)
    assert straight("0", 0, 0.5, 0) == UNREACHABLE


def test_build_distance_client_selects_backend():
    assert isinstance(build_distance_client("haversine"), HaversineDistance)
    client = build_distance_client("geoapify", api_key="k")
    assert isinstance(client, RoadDistanceClient)
    assert client.api_key == "k"
    with pytest.raises(ValueError):
        build_distance_client("carrier-pigeon")
