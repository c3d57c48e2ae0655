import os
import tempfile

# settings are read at import time
os.environ.setdefault("FETCH_ON_STARTUP", "false")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "weathermap-test-logs"))

from datetime import datetime, timedelta, timezone

import pytest

from weathermap.api.schemas.geo import Coordinate
from weathermap.services.forecast import ForecastRequestError, HourlyForecast

BASE_TIME = datetime(2024, 7, 9, 0, 0, tzinfo=timezone.utc)


class FakeWeatherService:
    """Returns `hours` forecast entries per call; fails for coordinates in `fail_on`."""

    def __init__(self, hours=20, fail_on=()):
        self.hours = hours
        self.fail_on = list(fail_on)
        self.calls = []

    async def hourly_forecast(self, coordinate):
        self.calls.append(coordinate)
        if coordinate in self.fail_on:
            raise ForecastRequestError("service unavailable", coordinate)
        return [
            HourlyForecast(date=BASE_TIME + timedelta(hours=i), precipitation_chance=i / 100)
            for i in range(self.hours)
        ]


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def weather_cls():
    return FakeWeatherService


@pytest.fixture
def fake_weather():
    return FakeWeatherService()


@pytest.fixture
def abc():
    return [
        Coordinate(latitude=-6.1, longitude=106.1),
        Coordinate(latitude=-6.2, longitude=106.2),
        Coordinate(latitude=-6.3, longitude=106.3),
    ]
