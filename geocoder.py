"""
Address geocoder for the food desert checker.

Resolves a free-text address into coordinates using the Mapbox
geocoding API. The first candidate returned by Mapbox is used.
"""

import logging
from typing import Optional
from urllib.parse import quote

import requests

from config import Config
from exceptions import ConfigurationError, RequestError
from models import Coordinate
from utils.validation import validate_address

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


def build_geocode_url(address: str) -> str:
    """
    Build the geocoding URL for an address.

    Args:
        address: Sanitized address

    Returns:
        Request URL without query string
    """
    return f"{Config.MAPBOX_API_URL}/{quote(address, safe='')}.json"


def geocode_address(
    address: str,
    access_token: str,
    timeout: float = 10
) -> Optional[Coordinate]:
    """
    Geocode an address to a coordinate.

    Args:
        address: Free-text address (e.g., "350 5th Ave, New York")
        access_token: Mapbox public access token
        timeout: Request timeout in seconds

    Returns:
        Coordinate of the first match, or None if nothing matched

    Raises:
        ValidationError: If the address is empty
        ConfigurationError: If no access token is given
        RequestError: If the request fails, Mapbox returns a non-success status
            or the response cannot be read
    """
    address = validate_address(address)

    if not access_token:
        raise ConfigurationError("Mapbox public access token is not configured")

    url = build_geocode_url(address)
    params = {"access_token": access_token, "limit": 1}

    logger.info(f"Geocoding address: {address}")

    try:
        response = _SESSION.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Geocoding request failed: {e}")
        raise RequestError("Geocoding request failed") from e

    if not response.ok:
        logger.error(f"Geocoding responded with status {response.status_code}: {response.text}")
        raise RequestError(
            "Geocoding request failed",
            status=response.status_code,
            body=response.text
        )

    try:
        features = response.json().get("features") or []
        if not features:
            logger.warning(f"No geocoding match for: {address}")
            return None
        longitude, latitude = features[0]["center"]
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Unexpected geocoding response: {e}: {response.text}")
        raise RequestError(
            "Unexpected response from the geocoding service",
            status=response.status_code,
            body=response.text
        ) from e

    logger.info(f"Geocoded '{address}' to ({latitude}, {longitude})")

    return Coordinate(latitude=latitude, longitude=longitude)
