# weathermap/services/places.py
"""
Place search against a Nominatim-compatible endpoint.

A failed search is reported as "no results": it is logged and the caller
gets an empty list.
"""
import httpx
import logging
from typing import List, Optional

from weathermap.api.schemas.geo import BoundingBox, Coordinate
from weathermap.api.schemas.places import MapItem
from weathermap.config.settings import get_settings
from weathermap.services.forecast import is_success

settings = get_settings()
logger = logging.getLogger(__name__)


class PlacesService:
    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None, limit: int = 10):
        self.base_url = base_url or settings.NOMINATIM_URL
        self.timeout = settings.http_timeout
        self.limit = limit
        self._client = client

    async def _get(self, params: dict) -> httpx.Response:
        headers = {"User-Agent": settings.USER_AGENT}
        if self._client is not None:
            return await self._client.get(self.base_url, params=params, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params, headers=headers)

    async def search(self, query: str, region: BoundingBox) -> List[MapItem]:
        query = query.strip()
        if not query:
            return []

        params = {
            "q": query,
            "format": "jsonv2",
            "limit": self.limit,
            # left, top, right, bottom
            "viewbox": f"{region.min_lon},{region.max_lat},{region.max_lon},{region.min_lat}",
        }

        try:
            response = await self._get(params)
            if not is_success(response.status_code):
                logger.warning(f"Place search for '{query}' returned {response.status_code}")
                return []
            return [_map_item(place) for place in response.json()]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Place search for '{query}' failed: {e}")
            return []


def _map_item(place: dict) -> MapItem:
    name = place.get("name") or place.get("display_name") or ""
    return MapItem(
        name=name,
        coordinate=Coordinate(latitude=float(place["lat"]), longitude=float(place["lon"])),
        category=place.get("category"),
    )
