# weathermap/services/location.py
import logging
from typing import Optional, Sequence

from weathermap.api.schemas.geo import BoundingBox, Coordinate
from weathermap.config.settings import get_settings
from weathermap.utils.geo import region_bounding_box

settings = get_settings()
logger = logging.getLogger(__name__)


class LocationProvider:
    """
    Latest known device location.

    Updates arrive in batches; the last coordinate of a batch wins and the
    provider stops listening after the first fix until start_updates() is
    called again.
    """

    def __init__(self, default: Optional[Coordinate] = None, region_meters: Optional[float] = None):
        self.default = default or Coordinate(latitude=settings.USER_LAT, longitude=settings.USER_LON)
        self.region_meters = region_meters or settings.USER_REGION_METERS
        self.location: Optional[Coordinate] = None
        self.updating = True
        self.last_error: Optional[str] = None

    def start_updates(self) -> None:
        self.updating = True

    def update(self, locations: Sequence[Coordinate]) -> bool:
        """Record a batch of fixes. Returns False when the batch was ignored."""
        if not self.updating or not locations:
            return False
        self.location = locations[-1]
        self.updating = False
        self.last_error = None
        logger.info(f"Location updated to ({self.location.latitude}, {self.location.longitude})")
        return True

    def fail(self, error: str) -> None:
        self.last_error = error
        logger.error(f"Failed to find user's location: {error}")

    def current_or_default(self) -> Coordinate:
        return self.location or self.default

    def region(self) -> BoundingBox:
        return region_bounding_box(self.current_or_default(), self.region_meters, self.region_meters)
