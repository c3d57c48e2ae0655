from .geo import generate_locations, haversine_distance, region_bounding_box, EARTH_RADIUS_M

__all__ = ['generate_locations', 'haversine_distance', 'region_bounding_box', 'EARTH_RADIUS_M']
