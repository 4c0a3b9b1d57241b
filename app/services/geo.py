"""
Geo primitives for dispatch.
Great-circle distance and city-traffic ETA.
"""

from math import atan2, ceil, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVG_SPEED_KMH = 25.0  # city traffic


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the great circle distance between two points in kilometers.

    Inputs are decimal degrees and must not be None.
    """
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    delta_lat = radians(lat2 - lat1)
    delta_lng = radians(lng2 - lng1)

    a = sin(delta_lat / 2) ** 2 + cos(lat1_rad) * cos(lat2_rad) * sin(delta_lng / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def estimate_eta(distance_km: float, avg_speed_kmh: float = DEFAULT_AVG_SPEED_KMH) -> int:
    """
    Estimate travel time in whole minutes, rounded up.

    Args:
        distance_km: Distance to travel
        avg_speed_kmh: Assumed average speed

    Returns:
        ETA in minutes, never negative
    """
    if distance_km <= 0:
        return 0
    return int(ceil(distance_km / avg_speed_kmh * 60))
