# weathermap/api/schemas/precipitation.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from weathermap.api.schemas.geo import Coordinate


class HourlyPrecipitationReading(BaseModel):
    timestamp: datetime
    probability: float  # 0.0 - 1.0 as reported by the forecast source, not clamped


class LocationPrecipitationData(BaseModel):
    coordinate: Coordinate
    hourly_data: List[HourlyPrecipitationReading]


MAX_SAMPLE_RADIUS_M = 1000000.0  # beyond this the flat-plane offsets stop being meaningful
MAX_SAMPLE_COUNT = 100


class SampleRequest(BaseModel):
    center: Optional[Coordinate] = None
    radius: Optional[float] = Field(default=None, le=MAX_SAMPLE_RADIUS_M)
    count: Optional[int] = Field(default=None, ge=0, le=MAX_SAMPLE_COUNT)


class HourlyPrecipitationRequest(BaseModel):
    locations: List[Coordinate]


class PrecipitationFetchResult(BaseModel):
    center: Coordinate
    radius: float
    locations: List[Coordinate]
    max_distance_km: float = 0.0  # farthest sampled point from the center
    records: List[LocationPrecipitationData] = []
    error: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.error is None
