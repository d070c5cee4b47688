from .distance import NearbyEntity, distance_km, find_within_radius, EARTH_RADIUS_KM

__all__ = [
    "NearbyEntity",
    "distance_km",
    "find_within_radius",
    "EARTH_RADIUS_KM",
]
