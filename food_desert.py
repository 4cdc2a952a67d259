"""
Food desert evaluator for the food desert checker.

This module handles:
- Searching Mapbox for food-related points of interest near a coordinate
- Normalising the returned features into food sources
- Classifying the location against the fixed distance threshold
"""

import logging
from typing import Any, Dict, List

import requests

from config import Config
from exceptions import ConfigurationError, UpstreamError
from models import Coordinate, FoodDesertResult, FoodSource
from utils.geo_utils import calculate_distance, find_nearest_source

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


def build_search_url() -> str:
    """Build the POI search URL for the food keyword set."""
    return f"{Config.MAPBOX_API_URL}/{','.join(Config.FOOD_KEYWORDS)}.json"


def parse_feature(feature: Dict[str, Any], origin: Coordinate) -> FoodSource:
    """
    Convert a Mapbox feature into a food source.

    Args:
        feature: GeoJSON feature returned by Mapbox
        origin: Query point, used when Mapbox does not report a distance

    Returns:
        FoodSource
    """
    properties = feature.get("properties") or {}
    center = feature.get("center")

    latitude = longitude = None
    if center and len(center) == 2:
        longitude, latitude = center

    distance = properties.get("distance")
    if distance is None and latitude is not None:
        distance = calculate_distance(origin.as_tuple(), (latitude, longitude))

    return FoodSource(
        name=feature.get("text") or feature.get("place_name") or "Unnamed",
        distance=distance,
        latitude=latitude,
        longitude=longitude,
        category=properties.get("category", ""),
        address=feature.get("place_name") or properties.get("address", ""),
    )


def search_nearby_food(
    coordinate: Coordinate,
    access_token: str,
    timeout: float = 10
) -> List[FoodSource]:
    """
    Search Mapbox for food sources near a coordinate.

    Args:
        coordinate: Query point
        access_token: Mapbox server access token
        timeout: Request timeout in seconds

    Returns:
        Food sources in the order Mapbox returned them

    Raises:
        ConfigurationError: If no access token is given
        UpstreamError: If the request fails or Mapbox returns a non-success status
    """
    if not access_token:
        raise ConfigurationError("MAPBOX_TOKEN is not set in environment variables")

    params = {
        "types": "poi",
        "proximity": f"{coordinate.longitude},{coordinate.latitude}",
        "limit": Config.POI_SEARCH_LIMIT,
        "access_token": access_token,
    }

    try:
        response = _SESSION.get(build_search_url(), params=params, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Mapbox POI search failed: {e}")
        raise UpstreamError(f"Mapbox API request failed: {e}") from e

    if not response.ok:
        logger.error(f"Mapbox API response: {response.status_code} {response.text}")
        raise UpstreamError(
            f"Mapbox API responded with status {response.status_code}: {response.text}",
            status=response.status_code,
            body=response.text
        )

    try:
        features = response.json().get("features") or []
    except (ValueError, AttributeError) as e:
        logger.error(f"Unexpected Mapbox API response: {response.text}")
        raise UpstreamError(
            f"Unexpected response from Mapbox API: {e}",
            status=response.status_code,
            body=response.text
        ) from e

    return [parse_feature(feature, coordinate) for feature in features]


def is_near(source: FoodSource, threshold: float = Config.DISTANCE_THRESHOLD_METERS) -> bool:
    """Whether a source lies strictly inside the threshold."""
    return source.distance is not None and source.distance < threshold


def is_food_desert(
    sources: List[FoodSource],
    threshold: float = Config.DISTANCE_THRESHOLD_METERS
) -> bool:
    """
    Classify a location from the food sources found around it.

    Args:
        sources: Food sources near the location
        threshold: Distance in meters a source must be under to count

    Returns:
        True if no source is closer than the threshold
    """
    return not any(is_near(source, threshold) for source in sources)


def nearest_sources(
    sources: List[FoodSource],
    limit: int = Config.MAX_FOOD_SOURCES
) -> List[FoodSource]:
    """
    Order sources by distance and keep the nearest ones.

    The sort is stable so Mapbox order is kept for ties; sources without
    a distance go last.

    Args:
        sources: Food sources in upstream order
        limit: Maximum number to keep

    Returns:
        Up to `limit` food sources
    """
    ordered = sorted(
        sources,
        key=lambda source: (source.distance is None, source.distance or 0.0)
    )
    return ordered[:limit]


def check_food_desert(
    coordinate: Coordinate,
    access_token: str,
    timeout: float = 10
) -> FoodDesertResult:
    """
    Decide whether a coordinate lies in a food desert.

    Args:
        coordinate: Query point
        access_token: Mapbox server access token
        timeout: Request timeout in seconds

    Returns:
        FoodDesertResult with the nearest food sources
    """
    sources = search_nearby_food(coordinate, access_token, timeout=timeout)
    logger.info(f"Found {len(sources)} food sources near {coordinate.as_tuple()}")

    result = FoodDesertResult(
        is_food_desert=is_food_desert(sources),
        food_sources=nearest_sources(sources)
    )

    nearest = find_nearest_source(sources)
    if nearest is not None:
        logger.info(f"Nearest food source: {nearest.name} ({nearest.distance} m)")

    return result
