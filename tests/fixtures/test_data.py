"""
Test data generators for creating realistic dispatch scenarios.
"""

import random
from math import cos, radians

from faker import Faker

fake = Faker()

KM_PER_DEGREE_LAT = 111.19493  # 6371 km * pi / 180

# Manila city centre, used as the default pickup point
MANILA = (14.5995, 120.9842)


def offset_point(lat: float, lng: float, north_km: float = 0.0, east_km: float = 0.0) -> tuple:
    """
    Move a point by the given number of kilometres.

    Exact for pure north/south moves under the haversine formula, close
    enough for east/west moves at city scale.
    """
    new_lat = lat + north_km / KM_PER_DEGREE_LAT
    new_lng = lng + east_km / (KM_PER_DEGREE_LAT * cos(radians(lat)))
    return new_lat, new_lng


def generate_drivers(
    count: int = 8,
    center: tuple = MANILA,
    max_radius_km: float = 8.0,
    seed: int = 42,
) -> list:
    """
    Generate realistic driver data scattered around a centre point.

    Args:
        count: Number of drivers to generate
        center: (lat, lng) to scatter around
        max_radius_km: Maximum offset on each axis
        seed: Random seed, so generated fleets are reproducible

    Returns:
        List of dictionaries containing driver data
    """
    rng = random.Random(seed)
    Faker.seed(seed)

    drivers = []
    for i in range(count):
        lat, lng = offset_point(
            center[0],
            center[1],
            north_km=rng.uniform(-max_radius_km, max_radius_km),
            east_km=rng.uniform(-max_radius_km, max_radius_km),
        )
        drivers.append({
            "full_name": fake.name(),
            "phone": fake.numerify("09#########"),
            "latitude": lat,
            "longitude": lng,
            "rating": round(rng.uniform(3.0, 5.0), 1),
            "total_deliveries": rng.randint(0, 2000),
        })

    return drivers


def generate_order(center: tuple = MANILA, drop_off_km: float = 3.0) -> dict:
    """
    Generate customer-side order data with a drop-off near the centre.
    """
    lat, lng = offset_point(center[0], center[1], north_km=drop_off_km)
    return {
        "order_number": fake.bothify("FD-#####"),
        "customer_name": fake.name(),
        "customer_phone": fake.numerify("09#########"),
        "delivery_address": fake.street_address(),
        "delivery_latitude": lat,
        "delivery_longitude": lng,
    }
