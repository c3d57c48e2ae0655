# weathermap/api/routers/routes.py
import logging
from fastapi import APIRouter, Depends, HTTPException

from weathermap.api.dependencies import get_directions_service, get_location_provider
from weathermap.api.schemas.places import RouteRequest, RouteResponse
from weathermap.services.directions import DirectionsError, DirectionsService
from weathermap.services.location import LocationProvider

router = APIRouter(prefix="/routes", tags=["Directions"])
logger = logging.getLogger(__name__)


@router.post("", response_model=RouteResponse)
async def get_route(
    request: RouteRequest,
    directions: DirectionsService = Depends(get_directions_service),
    location: LocationProvider = Depends(get_location_provider),
):
    """Driving route from the user (or an explicit source) to the selected place."""
    source = request.source or location.current_or_default()

    try:
        route = await directions.calculate(source, request.destination.coordinate)
    except DirectionsError as e:
        logger.error(f"Directions to '{request.destination.name}' failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    if route is None:
        raise HTTPException(status_code=404, detail=f"No route found to '{request.destination.name}'")

    return RouteResponse(source=source, destination=request.destination, route=route)
