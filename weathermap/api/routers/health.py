#weathermap/api/routers/health.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi import status
from weathermap.api.dependencies import get_weather_service
from weathermap.services.forecast import OpenMeteoWeatherService
from weathermap.state import app_state
import logging
from typing import Dict, Any

router = APIRouter(tags=["Health Checks"])
logger = logging.getLogger(__name__)


@router.get("/health/weather",
           summary="Forecast Service Health Check",
           response_description="Forecast service connection status")
async def weather_health(weather: OpenMeteoWeatherService = Depends(get_weather_service)) -> Dict[str, Any]:
    """
    Check that the forecast service answers.

    Returns:
        dict: Health status with connection details
    """
    is_alive = await weather.check_alive()

    status_info = {
        "service": "forecast",
        "status": "online" if is_alive else "offline",
        "url": weather.base_url,
        "ready": app_state.ready,
    }

    if not is_alive:
        logger.warning(f"Forecast service health check failed: {status_info}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=status_info
        )

    return status_info
