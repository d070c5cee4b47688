"""
Great-circle distance helpers for ranking offices by proximity.
"""
import math
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Mapping, Tuple, TypeVar

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 10.0

T = TypeVar("T")

@dataclass(frozen=True)
class NearbyEntity(Generic[T]):
    """
    An entity annotated with its distance from a reference point.
    """
    entity: T
    distance_km: float

def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance in kilometers between two lat/lon pairs (degrees).
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Rounding error can push `a` slightly above 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c

def _coordinates(entity: Any) -> Tuple[float, float]:
    if isinstance(entity, Mapping):
        return entity["latitude"], entity["longitude"]
    return entity.latitude, entity.longitude

def find_within_radius(
    ref_lat: float,
    ref_lon: float,
    entities: Iterable[T],
    radius_km: float = DEFAULT_RADIUS_KM
) -> List[NearbyEntity[T]]:
    """
    Entities within `radius_km` of the reference point, nearest first.
    Equidistant entities keep their input order.
    """
    annotated = []
    for entity in entities:
        lat, lon = _coordinates(entity)
        distance = distance_km(ref_lat, ref_lon, lat, lon)
        if distance <= radius_km:
            annotated.append(NearbyEntity(entity=entity, distance_km=distance))

    # sorted() is stable
    return sorted(annotated, key=lambda item: item.distance_km)
