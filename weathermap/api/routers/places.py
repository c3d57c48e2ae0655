# weathermap/api/routers/places.py
import logging
from fastapi import APIRouter, Depends, Query

from weathermap.api.dependencies import get_location_provider, get_places_service
from weathermap.api.schemas.places import PlaceSearchResponse
from weathermap.services.location import LocationProvider
from weathermap.services.places import PlacesService

router = APIRouter(prefix="/places", tags=["Places"])
logger = logging.getLogger(__name__)


@router.get("/search", response_model=PlaceSearchResponse)
async def search_places(
    q: str = Query(..., description="Free text, e.g. 'coffee' or 'airport'"),
    places: PlacesService = Depends(get_places_service),
    location: LocationProvider = Depends(get_location_provider),
):
    """Places matching the query, biased to the region around the user."""
    region = location.region()
    results = await places.search(q, region)
    logger.info(f"Place search '{q}': {len(results)} results")
    return PlaceSearchResponse(query=q, region=region, results=results)
