# weathermap/api/schemas/places.py
from pydantic import BaseModel
from typing import List, Optional

from weathermap.api.schemas.geo import BoundingBox, Coordinate


class MapItem(BaseModel):
    name: str
    coordinate: Coordinate
    category: Optional[str] = None


class PlaceSearchResponse(BaseModel):
    query: str
    region: BoundingBox
    results: List[MapItem]


class Route(BaseModel):
    distance_m: float
    expected_travel_time_s: float
    polyline: List[Coordinate]
    bounding_box: BoundingBox


class RouteRequest(BaseModel):
    destination: MapItem
    source: Optional[Coordinate] = None  # defaults to the user location


class RouteResponse(BaseModel):
    source: Coordinate
    destination: MapItem
    route: Route


class LocationUpdate(BaseModel):
    """Batch of location fixes; the last one wins."""
    locations: List[Coordinate]
