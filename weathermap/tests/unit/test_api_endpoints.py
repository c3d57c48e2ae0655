import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from weathermap.api import dependencies
from weathermap.api.main import app
from weathermap.api.schemas.geo import BoundingBox, Coordinate
from weathermap.api.schemas.places import MapItem, Route
from weathermap.services.directions import DirectionsError
from weathermap.services.forecast import ForecastRequestError
from weathermap.services.location import LocationProvider
from weathermap.services.precipitation import PrecipitationJob


class FakePlaces:
    async def search(self, query, region):
        return [MapItem(name=f"{query} shop", coordinate=region.center)]


class FakeDirections:
    def __init__(self, route=None, error=None):
        self.route = route
        self.error = error

    async def calculate(self, source, destination):
        if self.error:
            raise self.error
        return self.route


@pytest.fixture
def location():
    return LocationProvider()


@pytest.fixture
def client(fake_weather, location):
    job = PrecipitationJob(fake_weather)
    app.dependency_overrides[dependencies.get_weather_service] = lambda: fake_weather
    app.dependency_overrides[dependencies.get_precipitation_job] = lambda: job
    app.dependency_overrides[dependencies.get_location_provider] = lambda: location
    app.dependency_overrides[dependencies.get_places_service] = lambda: FakePlaces()
    with TestClient(app) as test_client:
        test_client.job = job
        yield test_client
    app.dependency_overrides.clear()


def test_root_and_status(client):
    assert client.get("/health").json() == {"status": "healthy"}
    body = client.get("/status").json()
    assert body["status"] == "ready"
    assert "precipitation" in body


def test_sample_points_defaults(client):
    response = client.post("/precipitation/points", json={})
    assert response.status_code == 200
    assert len(response.json()) == 10


def test_sample_points_degenerate_radius(client):
    response = client.post("/precipitation/points", json={
        "center": {"latitude": 0, "longitude": 0}, "radius": 0, "count": 5,
    })
    assert response.json() == [{"latitude": 0.0, "longitude": 0.0}] * 5


def test_sample_points_rejects_pole(client):
    response = client.post("/precipitation/points", json={"center": {"latitude": 90, "longitude": 0}})
    assert response.status_code == 400


def test_hourly_precipitation(client, abc):
    response = client.post("/precipitation/hourly", json={"locations": [c.model_dump() for c in abc]})

    assert response.status_code == 200
    records = response.json()
    assert [r["coordinate"] for r in records] == [c.model_dump() for c in abc]
    assert all(len(r["hourly_data"]) == 12 for r in records)


def test_hourly_precipitation_failure_has_no_partial_data(client, fake_weather, abc):
    fake_weather.fail_on = [abc[2]]

    response = client.post("/precipitation/hourly", json={"locations": [c.model_dump() for c in abc]})

    assert response.status_code == 502
    assert "detail" in response.json()


def test_sample_run(client):
    response = client.post("/precipitation/sample", json={"count": 3, "radius": 5000})

    assert response.status_code == 200
    body = response.json()
    assert body["error"] is None
    assert len(body["records"]) == 3
    assert client.get("/status").json()["precipitation"]["last_fetch"]["records"] == 3


def test_sample_run_conflict_while_in_flight(client):
    client.job._running = True
    try:
        response = client.post("/precipitation/sample", json={})
    finally:
        client.job._running = False
    assert response.status_code == 409


def test_sample_run_reports_forecast_failure(client, fake_weather):
    failing = AsyncMock(side_effect=ForecastRequestError("forecast service down"))
    with patch.object(fake_weather, "hourly_forecast", failing):
        response = client.post("/precipitation/sample", json={"count": 2})

    assert response.status_code == 200
    body = response.json()
    assert "forecast service down" in body["error"]
    assert body["records"] == []
    assert len(body["locations"]) == 2


def test_location_update_and_region(client, location):
    assert client.get("/location").json()["is_default"] is True

    response = client.put("/location", json={"locations": [
        {"latitude": -6.2, "longitude": 106.8}, {"latitude": -6.3, "longitude": 106.9},
    ]})
    assert response.status_code == 200
    assert response.json()["accepted"] is True
    assert location.location == Coordinate(latitude=-6.3, longitude=106.9)

    region = client.get("/location/region").json()
    assert region["min_lat"] < -6.3 < region["max_lat"]


def test_location_update_rejects_invalid(client, location):
    response = client.put("/location", json={"locations": [{"latitude": 123, "longitude": 0}]})
    assert response.status_code == 400
    assert location.last_error is not None


def test_places_search(client):
    body = client.get("/places/search", params={"q": "coffee"}).json()
    assert body["query"] == "coffee"
    assert body["results"][0]["name"] == "coffee shop"


def test_route_found(client):
    polyline = [Coordinate(latitude=25.76, longitude=-80.19), Coordinate(latitude=25.78, longitude=-80.18)]
    route = Route(distance_m=2500, expected_travel_time_s=300, polyline=polyline,
                  bounding_box=BoundingBox(min_lat=25.76, min_lon=-80.19, max_lat=25.78, max_lon=-80.18))
    app.dependency_overrides[dependencies.get_directions_service] = lambda: FakeDirections(route=route)

    response = client.post("/routes", json={
        "destination": {"name": "Bayside", "coordinate": {"latitude": 25.78, "longitude": -80.18}},
    })

    assert response.status_code == 200
    assert response.json()["source"] == {"latitude": 25.7602, "longitude": -80.1959}
    assert response.json()["route"]["distance_m"] == 2500


def test_route_missing_and_failing(client):
    destination = {"name": "Island", "coordinate": {"latitude": 0, "longitude": 0}}

    app.dependency_overrides[dependencies.get_directions_service] = lambda: FakeDirections()
    assert client.post("/routes", json={"destination": destination}).status_code == 404

    app.dependency_overrides[dependencies.get_directions_service] = lambda: FakeDirections(error=DirectionsError("down"))
    assert client.post("/routes", json={"destination": destination}).status_code == 502


@pytest.mark.parametrize("payload", [{"count": 10**7}, {"radius": 5e7}, {"count": -1}])
def test_sample_request_limits(client, payload):
    assert client.post("/precipitation/points", json=payload).status_code == 422
    assert client.post("/precipitation/sample", json=payload).status_code == 422


def test_route_and_search_follow_device_fix(client, location):
    fix = Coordinate(latitude=-6.2, longitude=106.8)
    location.update([fix])
    route = Route(distance_m=1, expected_travel_time_s=1, polyline=[fix],
                  bounding_box=BoundingBox(min_lat=-6.2, min_lon=106.8, max_lat=-6.2, max_lon=106.8))
    app.dependency_overrides[dependencies.get_directions_service] = lambda: FakeDirections(route=route)

    response = client.post("/routes", json={
        "destination": {"name": "Monas", "coordinate": {"latitude": -6.1754, "longitude": 106.8272}},
    })
    assert response.json()["source"] == {"latitude": -6.2, "longitude": 106.8}

    region = client.get("/places/search", params={"q": "kopi"}).json()["region"]
    assert region["min_lat"] < -6.2 < region["max_lat"]
    assert region["min_lon"] < 106.8 < region["max_lon"]
