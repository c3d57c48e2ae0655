# weathermap/api/schemas/geo.py
from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    """A (latitude, longitude) pair in degrees. Not range-checked."""
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @property
    def center(self) -> Coordinate:
        return Coordinate(
            latitude=(self.min_lat + self.max_lat) / 2,
            longitude=(self.min_lon + self.max_lon) / 2,
        )
