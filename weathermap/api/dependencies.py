# weathermap/api/dependencies.py
"""
Shared service instances handed to routers through FastAPI's Depends().
Tests swap them out with app.dependency_overrides.
"""
import httpx
import logging
from typing import Optional

from weathermap.config.settings import get_settings
from weathermap.services.directions import DirectionsService
from weathermap.services.forecast import OpenMeteoWeatherService
from weathermap.services.location import LocationProvider
from weathermap.services.places import PlacesService
from weathermap.services.precipitation import PrecipitationJob

settings = get_settings()
logger = logging.getLogger(__name__)

_http_client: Optional[httpx.AsyncClient] = None
_precipitation_job: Optional[PrecipitationJob] = None
location_provider = LocationProvider()


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    return _http_client


async def close_http_client() -> None:
    global _http_client, _precipitation_job
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None
    _precipitation_job = None


def get_location_provider() -> LocationProvider:
    return location_provider


def get_weather_service() -> OpenMeteoWeatherService:
    return OpenMeteoWeatherService(client=get_http_client())


def get_places_service() -> PlacesService:
    return PlacesService(client=get_http_client())


def get_directions_service() -> DirectionsService:
    return DirectionsService(client=get_http_client())


def get_precipitation_job() -> PrecipitationJob:
    global _precipitation_job
    if _precipitation_job is None:
        _precipitation_job = PrecipitationJob(get_weather_service())
    return _precipitation_job
