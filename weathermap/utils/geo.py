"""
Shared geographic helpers: spatial sampling, distances and region spans
"""
import numpy as np
import logging
from typing import List, Optional

from weathermap.api.schemas.geo import BoundingBox, Coordinate

logger = logging.getLogger(__name__)

# Geographic constants
EARTH_RADIUS_M = 6371000.0
DEGREES_TO_KM = 111.32


def generate_locations(
    radius: float,
    center: Coordinate,
    number_of_points: int,
    rng: Optional[np.random.Generator] = None,
) -> List[Coordinate]:
    """
    Generate random coordinates within `radius` meters of `center`.

    Each point picks an angle in [0, 2π) and a distance in [0, radius] and
    projects that polar offset onto a local flat plane. Distances are drawn
    uniformly, so points cluster toward the center; this distribution is
    intentional and must not be replaced by an area-uniform one.

    Args:
        radius: Maximum distance from the center, in meters. Values <= 0
            collapse every point onto the center.
        center: Origin of the sampling. Must not sit exactly on a pole.
        number_of_points: How many coordinates to generate (0 gives []).
        rng: Optional numpy Generator, for reproducible sampling.

    Returns:
        Coordinates in generation order.

    Example:
        >>> generate_locations(100000, Coordinate(latitude=-6, longitude=106), 10)
    """
    rng = rng if rng is not None else np.random.default_rng()
    radius = max(float(radius), 0.0)
    lat_scale = EARTH_RADIUS_M
    lon_scale = EARTH_RADIUS_M * np.cos(np.radians(center.latitude))

    locations = []
    for _ in range(number_of_points):
        angle = rng.uniform(0.0, 2 * np.pi)
        distance = rng.uniform(0.0, radius)

        dx = distance * np.cos(angle)
        dy = distance * np.sin(angle)

        delta_lat = dy / lat_scale
        delta_lon = dx / lon_scale

        locations.append(Coordinate(
            latitude=float(center.latitude + np.degrees(delta_lat)),
            longitude=float(center.longitude + np.degrees(delta_lon)),
        ))

    logger.debug(f"Generated {len(locations)} locations within {radius}m of ({center.latitude}, {center.longitude})")
    return locations


def haversine_distance(lon1, lat1, lon2, lat2):
    """
    Calculate the great-circle distance between two points (in decimal degrees).
    
    Args:
        lon1: Longitude of point 1 (or array)
        lat1: Latitude of point 1 (or array)
        lon2: Longitude of point 2 (or array)
        lat2: Latitude of point 2 (or array)
    
    Returns:
        Distance in kilometers (scalar or array)
    
    Example:
        >>> haversine_distance(106.8456, -6.2088, 106.7990, -6.5950)
        43.2  # Jakarta to Bogor ~43km
    """
    R = EARTH_RADIUS_M / 1000
    
    lon1, lat1, lon2, lat2 = map(np.radians, [lon1, lat1, lon2, lat2])
    
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    
    a = np.sin(dlat/2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon/2)**2
    c = 2 * np.arcsin(np.sqrt(a))
    
    return R * c


def region_bounding_box(center: Coordinate, latitudinal_meters: float, longitudinal_meters: float) -> BoundingBox:
    """
    Bounding box spanning the given meters around a center (total span, not half).

    Note:
        - For latitude: 1 degree ≈ 111.32 km (constant)
        - For longitude: shrinks with cos(latitude)
    """
    half_lat = (latitudinal_meters / 2000) / DEGREES_TO_KM
    half_lon = (longitudinal_meters / 2000) / (DEGREES_TO_KM * np.cos(np.radians(center.latitude)))

    return BoundingBox(
        min_lat=float(center.latitude - half_lat),
        min_lon=float(center.longitude - half_lon),
        max_lat=float(center.latitude + half_lat),
        max_lon=float(center.longitude + half_lon),
    )


def bounding_box_of(coordinates: List[Coordinate]) -> BoundingBox:
    """Smallest box containing every coordinate. Raises ValueError on an empty list."""
    if not coordinates:
        raise ValueError("Cannot compute a bounding box of no coordinates")

    lats = [c.latitude for c in coordinates]
    lons = [c.longitude for c in coordinates]
    return BoundingBox(min_lat=min(lats), min_lon=min(lons), max_lat=max(lats), max_lon=max(lons))


def validate_coordinates(lat: float, lon: float) -> tuple[bool, str]:
    """
    Validate latitude and longitude values.
    
    Args:
        lat: Latitude
        lon: Longitude
    
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not -90 <= lat <= 90:
        return False, f"Latitude must be between -90 and 90, got {lat}"
    
    if not -180 <= lon <= 180:
        return False, f"Longitude must be between -180 and 180, got {lon}"
    
    return True, ""
