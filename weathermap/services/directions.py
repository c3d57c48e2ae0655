# weathermap/services/directions.py
import httpx
import logging
from typing import Optional

from weathermap.api.schemas.geo import Coordinate
from weathermap.api.schemas.places import Route
from weathermap.config.settings import get_settings
from weathermap.services.forecast import is_success
from weathermap.utils.geo import bounding_box_of

settings = get_settings()
logger = logging.getLogger(__name__)


class DirectionsError(Exception):
    """The directions service could not be reached or answered garbage."""


class DirectionsService:
    """Driving directions from an OSRM-compatible routing server."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.OSRM_URL).rstrip("/")
        self.timeout = settings.http_timeout
        self._client = client

    async def _get(self, url: str, params: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, params=params)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params)

    async def calculate(self, source: Coordinate, destination: Coordinate) -> Optional[Route]:
        """First route between two coordinates, or None when the server finds none."""
        url = (
            f"{self.base_url}/{source.longitude},{source.latitude};"
            f"{destination.longitude},{destination.latitude}"
        )
        params = {"overview": "full", "geometries": "geojson", "alternatives": "false"}

        try:
            response = await self._get(url, params)
        except httpx.HTTPError as e:
            raise DirectionsError(f"Directions request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise DirectionsError(f"Directions response is not JSON (HTTP {response.status_code})") from e
        if not isinstance(payload, dict):
            raise DirectionsError("Malformed directions response")

        code = payload.get("code")
        if code == "NoRoute" or (code == "Ok" and is_success(response.status_code) and not payload.get("routes")):
            logger.info(f"No route from {source} to {destination}")
            return None
        if not is_success(response.status_code) or code != "Ok":
            raise DirectionsError(
                f"Directions service error (HTTP {response.status_code}): {code} {payload.get('message', '')}".strip()
            )

        try:
            first = payload["routes"][0]
            polyline = [
                Coordinate(latitude=float(lat), longitude=float(lon))
                for lon, lat in first["geometry"]["coordinates"]
            ]
            return Route(
                distance_m=float(first["distance"]),
                expected_travel_time_s=float(first["duration"]),
                polyline=polyline,
                bounding_box=bounding_box_of(polyline),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DirectionsError(f"Malformed directions response: {e}") from e
