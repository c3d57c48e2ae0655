# weathermap/api/routers/location.py
from fastapi import APIRouter, Depends, HTTPException

from weathermap.api.dependencies import get_location_provider
from weathermap.api.schemas.geo import BoundingBox
from weathermap.api.schemas.places import LocationUpdate
from weathermap.services.location import LocationProvider
from weathermap.utils.geo import validate_coordinates

router = APIRouter(prefix="/location", tags=["Location"])


def _location_payload(location: LocationProvider) -> dict:
    return {
        "location": location.location,
        "current": location.current_or_default(),
        "is_default": location.location is None,
        "updating": location.updating,
        "last_error": location.last_error,
    }


@router.get("")
async def get_location(location: LocationProvider = Depends(get_location_provider)):
    return _location_payload(location)


@router.put("")
async def update_location(update: LocationUpdate, location: LocationProvider = Depends(get_location_provider)):
    for fix in update.locations:
        is_valid, error = validate_coordinates(fix.latitude, fix.longitude)
        if not is_valid:
            location.fail(error)
            raise HTTPException(status_code=400, detail=error)

    accepted = location.update(update.locations)
    return {**_location_payload(location), "accepted": accepted}


@router.post("/start")
async def start_updates(location: LocationProvider = Depends(get_location_provider)):
    """Listen for the next location fix."""
    location.start_updates()
    return _location_payload(location)


@router.get("/region", response_model=BoundingBox)
async def get_region(location: LocationProvider = Depends(get_location_provider)):
    return location.region()
