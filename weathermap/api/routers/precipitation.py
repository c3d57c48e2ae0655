# weathermap/api/routers/precipitation.py
"""
Precipitation endpoints: point sampling around a center and hourly
precipitation chances for those points.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from weathermap.api.dependencies import get_precipitation_job, get_weather_service
from weathermap.api.schemas.geo import Coordinate
from weathermap.api.schemas.precipitation import (
    HourlyPrecipitationRequest,
    LocationPrecipitationData,
    PrecipitationFetchResult,
    SampleRequest,
)
from weathermap.config.settings import get_settings
from weathermap.services.forecast import ForecastRequestError, WeatherService
from weathermap.services.precipitation import FetchInProgressError, PrecipitationJob, get_hourly_precipitation
from weathermap.state import app_state
from weathermap.utils.geo import generate_locations, validate_coordinates


router = APIRouter(prefix="/precipitation", tags=["Precipitation"])
logger = logging.getLogger(__name__)
settings = get_settings()


def _check_center(center: Coordinate):
    is_valid, error = validate_coordinates(center.latitude, center.longitude)
    if not is_valid:
        raise HTTPException(status_code=400, detail=error)
    if abs(center.latitude) == 90:
        raise HTTPException(status_code=400, detail="Sampling center cannot be a pole")


@router.post("/points", response_model=List[Coordinate])
async def sample_points(request: SampleRequest):
    """Random points around a center (defaults come from settings)."""
    center = request.center or Coordinate(latitude=settings.CENTER_LAT, longitude=settings.CENTER_LON)
    _check_center(center)
    radius = settings.SAMPLE_RADIUS_M if request.radius is None else request.radius
    count = settings.SAMPLE_COUNT if request.count is None else request.count
    return generate_locations(radius, center, count)


@router.post("/hourly", response_model=List[LocationPrecipitationData])
async def hourly_precipitation(
    request: HourlyPrecipitationRequest,
    weather_service: WeatherService = Depends(get_weather_service),
):
    """Hourly precipitation chances for every location, or an error and nothing."""
    for location in request.locations:
        is_valid, error = validate_coordinates(location.latitude, location.longitude)
        if not is_valid:
            raise HTTPException(status_code=400, detail=error)

    try:
        return await get_hourly_precipitation(request.locations, weather_service, hours=settings.FORECAST_HOURS)
    except ForecastRequestError as e:
        logger.error(f"Failed to fetch weather data: {e}")
        raise HTTPException(status_code=502, detail=f"Forecast service error: {e}")


@router.post("/sample", response_model=PrecipitationFetchResult)
async def sample_precipitation(
    request: SampleRequest,
    job: PrecipitationJob = Depends(get_precipitation_job),
):
    """Run the sample + fetch sequence and return its result (records or error)."""
    if request.center is not None:
        _check_center(request.center)

    try:
        result = await job.run(center=request.center, radius=request.radius, count=request.count)
    except FetchInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    app_state.last_fetch = result
    return result
