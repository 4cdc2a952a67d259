"""
Browser location acquisition for the food desert checker.

Asks the browser for its current position once, through
streamlit_js_eval, and turns the answer into a coordinate or a
readable error.
"""

import logging
from typing import Any, Optional

from streamlit_js_eval import get_geolocation

from exceptions import LocationError, UnsupportedCapabilityError
from models import Coordinate

logger = logging.getLogger(__name__)

GEOLOCATION_COMPONENT_KEY = "oasis_geolocation"


def parse_position(payload: Any) -> Coordinate:
    """
    Convert a browser position payload into a coordinate.

    Args:
        payload: Value returned by the browser, either
            {"coords": {"latitude": .., "longitude": ..}, ...} or
            {"error": {"code": .., "message": ..}}

    Returns:
        Coordinate

    Raises:
        LocationError: If the browser denied or failed to get a position
        UnsupportedCapabilityError: If the payload shows no positioning support
    """
    if not isinstance(payload, dict):
        raise UnsupportedCapabilityError()

    if payload.get("error"):
        error = payload["error"]
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise LocationError(f"Error: {message or 'Unable to retrieve your location'}")

    coords = payload.get("coords")
    if not isinstance(coords, dict):
        raise UnsupportedCapabilityError()

    latitude = coords.get("latitude")
    longitude = coords.get("longitude")
    if latitude is None or longitude is None:
        raise LocationError("Error: Position did not include coordinates")

    return Coordinate(latitude=float(latitude), longitude=float(longitude))


def request_browser_position(component_key: str = GEOLOCATION_COMPONENT_KEY) -> Optional[Any]:
    """
    Request the browser position.

    Returns None until the browser answers; Streamlit reruns the script
    when the answer arrives.
    """
    return get_geolocation(component_key=component_key)


def acquire_location(component_key: str = GEOLOCATION_COMPONENT_KEY) -> Optional[Coordinate]:
    """
    One-shot browser location.

    Returns:
        Coordinate once the browser answers, None while waiting

    Raises:
        LocationError, UnsupportedCapabilityError: See parse_position
    """
    payload = request_browser_position(component_key)
    if payload is None:
        return None

    coordinate = parse_position(payload)
    logger.info(f"Browser location acquired: {coordinate.as_tuple()}")
    return coordinate
