"""
Geometry processing utilities for the food desert checker.

Provides distance calculations between coordinates and lookups over
food sources. GeoDataFrame building lives in map_builder.
"""

from math import radians, sin, cos, sqrt, atan2
from typing import List, Optional, Tuple

from models import FoodSource

# Earth's radius in meters
EARTH_RADIUS_M = 6_371_000.0


def calculate_distance(
    point1: Tuple[float, float],
    point2: Tuple[float, float]
) -> float:
    """
    Calculate distance between two points in meters using Haversine formula.

    Args:
        point1: (latitude, longitude) tuple
        point2: (latitude, longitude) tuple

    Returns:
        Distance in meters, rounded to 0.1 m
    """
    lat1, lon1 = point1
    lat2, lon2 = point2

    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = radians(lon2) - radians(lon1)

    a = sin(dlat / 2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon / 2)**2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return round(EARTH_RADIUS_M * c, 1)


def find_nearest_source(sources: List[FoodSource]) -> Optional[FoodSource]:
    """
    Find the nearest food source with a known distance.

    Args:
        sources: Food sources to search

    Returns:
        Nearest source, or None if no source has a distance
    """
    measured = [source for source in sources if source.distance is not None]
    if not measured:
        return None
    return min(measured, key=lambda source: source.distance)


if __name__ == "__main__":
    """Test geometry utilities."""
    print("=" * 60)
    print("Geometry Utilities Test")
    print("=" * 60)

    philly = (39.9526, -75.1652)
    nyc = (40.7128, -74.0060)
    print(f"\nPhiladelphia to New York: {calculate_distance(philly, nyc)} m")
