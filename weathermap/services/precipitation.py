# weathermap/services/precipitation.py
"""
Precipitation fetcher and the sample + fetch orchestrator.

get_hourly_precipitation() walks the locations one at a time and awaits each
forecast before issuing the next, so records come back in input order. The
first failing location aborts the whole batch: callers get either every
record or a ForecastRequestError, never a partial list.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import numpy as np

from weathermap.api.schemas.geo import Coordinate
from weathermap.api.schemas.precipitation import (
    HourlyPrecipitationReading,
    LocationPrecipitationData,
    PrecipitationFetchResult,
)
from weathermap.config.settings import get_settings
from weathermap.services.forecast import ForecastRequestError, WeatherService
from weathermap.utils.geo import generate_locations, haversine_distance

settings = get_settings()
logger = logging.getLogger(__name__)


class FetchInProgressError(Exception):
    """A precipitation run is already in flight."""


async def get_hourly_precipitation(
    locations: Sequence[Coordinate],
    weather_service: WeatherService,
    hours: int = 12,
) -> List[LocationPrecipitationData]:
    """Fetch the first `hours` hourly precipitation chances for each location."""
    location_data = []

    for location in locations:
        forecasts = await weather_service.hourly_forecast(location)

        hourly_data = [
            HourlyPrecipitationReading(timestamp=f.date, probability=f.precipitation_chance)
            for f in forecasts[:hours]
        ]
        logger.debug(f"({location.latitude:.4f}, {location.longitude:.4f}): {len(hourly_data)} hourly readings")

        location_data.append(LocationPrecipitationData(coordinate=location, hourly_data=hourly_data))

    return location_data


class PrecipitationJob:
    """
    Owns the sample + fetch sequence.

    Only one run may be in flight at a time; a second call while one is
    running raises FetchInProgressError instead of queueing.
    """

    def __init__(self, weather_service: WeatherService, rng: Optional[np.random.Generator] = None):
        self.weather_service = weather_service
        self.rng = rng
        self.task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def in_flight(self) -> bool:
        return self._running

    async def run(
        self,
        center: Optional[Coordinate] = None,
        radius: Optional[float] = None,
        count: Optional[int] = None,
    ) -> PrecipitationFetchResult:
        self._acquire()
        return await self._guarded(center, radius, count)

    def _acquire(self) -> None:
        if self._running:
            raise FetchInProgressError("A precipitation fetch is already running")
        self._running = True

    async def _guarded(self, center, radius, count) -> PrecipitationFetchResult:
        try:
            return await self._run(center, radius, count)
        finally:
            self._running = False

    async def _run(self, center, radius, count) -> PrecipitationFetchResult:
        center = center or Coordinate(latitude=settings.CENTER_LAT, longitude=settings.CENTER_LON)
        radius = settings.SAMPLE_RADIUS_M if radius is None else radius
        count = settings.SAMPLE_COUNT if count is None else count

        locations = generate_locations(radius, center, count, rng=self.rng)
        result = PrecipitationFetchResult(
            center=center,
            radius=radius,
            locations=locations,
            started_at=datetime.now(timezone.utc),
        )
        if locations:
            km = haversine_distance(
                np.array([p.longitude for p in locations]), np.array([p.latitude for p in locations]),
                center.longitude, center.latitude,
            )
            result.max_distance_km = float(np.max(km))
        logger.info(f"Sampled {len(locations)} points, farthest {result.max_distance_km:.1f}km from center")

        try:
            result.records = await get_hourly_precipitation(
                locations, self.weather_service, hours=settings.FORECAST_HOURS
            )
            logger.info(f"Fetched precipitation for {len(result.records)} locations around "
                        f"({center.latitude}, {center.longitude})")
            for record in result.records:
                logger.info(f"  {record.coordinate.latitude:.4f}, {record.coordinate.longitude:.4f}: "
                            f"{[round(r.probability, 2) for r in record.hourly_data]}")
        except ForecastRequestError as e:
            result.error = str(e)
            logger.error(f"Failed to fetch weather data: {e}")

        result.finished_at = datetime.now(timezone.utc)
        return result

    def start(
        self,
        center: Optional[Coordinate] = None,
        radius: Optional[float] = None,
        count: Optional[int] = None,
    ) -> asyncio.Task:
        """Spawn a run as a task owned by this job (the app startup hook uses this)."""
        self._acquire()
        self.task = asyncio.create_task(self._guarded(center, radius, count))
        return self.task

    async def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                logger.info("Precipitation fetch cancelled")
            # a task cancelled before its first step never reaches _guarded's finally
            self._running = False
