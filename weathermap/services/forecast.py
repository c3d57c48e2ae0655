# weathermap/services/forecast.py
"""
Hourly forecast client (Open-Meteo).

Each call returns the time ordered hourly forecast for one coordinate,
starting at the current hour. Failures surface as ForecastRequestError;
there is no retry and no caching.
"""
import httpx
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from weathermap.api.schemas.geo import Coordinate
from weathermap.config.settings import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def is_success(status_code: int) -> bool:
    return status_code in (200, 201, 202)


class ForecastRequestError(Exception):
    """A forecast request failed (network, service or decoding error)."""

    def __init__(self, message: str, coordinate: Optional[Coordinate] = None):
        super().__init__(message)
        self.coordinate = coordinate


@dataclass(frozen=True)
class HourlyForecast:
    date: datetime
    precipitation_chance: float  # fraction 0..1


class WeatherService(Protocol):
    async def hourly_forecast(self, coordinate: Coordinate) -> List[HourlyForecast]:
        ...


class OpenMeteoWeatherService:
    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None,
                 forecast_hours: Optional[int] = None):
        self.base_url = base_url or settings.OPEN_METEO_URL
        self.timeout = settings.http_timeout
        # never ask for fewer hours than get_hourly_precipitation keeps
        self.forecast_hours = forecast_hours or max(settings.FORECAST_HOURS, 24)
        self._client = client
        logger.debug(f"Forecast service configured at {self.base_url}")

    def _params(self, coordinate: Coordinate) -> dict:
        return {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "hourly": "precipitation_probability",
            "timeformat": "unixtime",
            "timezone": "GMT",
            "forecast_hours": self.forecast_hours,
        }

    async def _get(self, params: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.base_url, params=params)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params)

    async def hourly_forecast(self, coordinate: Coordinate) -> List[HourlyForecast]:
        """Fetch the hourly precipitation forecast for one coordinate."""
        try:
            response = await self._get(self._params(coordinate))
        except httpx.HTTPError as e:
            logger.error(f"Forecast request failed for ({coordinate.latitude}, {coordinate.longitude}): {e}")
            raise ForecastRequestError(f"Forecast request failed: {e}", coordinate) from e

        if not is_success(response.status_code):
            logger.error(f"Forecast service returned {response.status_code}: {response.text[:200]}")
            raise ForecastRequestError(
                f"Forecast service returned HTTP {response.status_code}", coordinate
            )

        try:
            return parse_hourly_forecast(response.json())
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed forecast response for ({coordinate.latitude}, {coordinate.longitude}): {e}")
            raise ForecastRequestError(f"Malformed forecast response: {e}", coordinate) from e

    async def check_alive(self) -> bool:
        """True when the forecast endpoint answers a minimal request."""
        params = self._params(Coordinate(latitude=settings.CENTER_LAT, longitude=settings.CENTER_LON))
        params["forecast_hours"] = 1
        try:
            response = await self._get(params)
            return is_success(response.status_code)
        except httpx.HTTPError as e:
            logger.warning(f"Forecast service unreachable: {e}")
            return False


def parse_hourly_forecast(payload: dict) -> List[HourlyForecast]:
    """
    Convert an Open-Meteo payload into HourlyForecast entries.

    Probabilities arrive as percentages and may be null; nulls become 0.0.
    Raises ValueError when the time and value arrays disagree in length.
    """
    hourly = payload["hourly"]
    times = hourly["time"]
    chances = hourly["precipitation_probability"]

    if len(times) != len(chances):
        raise ValueError(f"hourly arrays differ in length ({len(times)} times, {len(chances)} values)")

    forecasts = []
    for t, chance in zip(times, chances):
        forecasts.append(HourlyForecast(
            date=datetime.fromtimestamp(int(t), tz=timezone.utc),
            precipitation_chance=float(chance) / 100.0 if chance is not None else 0.0,
        ))
    return forecasts
