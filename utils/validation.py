"""
Input validation utilities for the food desert checker.

Provides functions to validate and sanitize the address typed into
the form and the coordinates posted to the evaluator endpoint.
"""

import math
import re
from typing import Any, Dict

from exceptions import ValidationError
from models import Coordinate


def sanitize_input(text: str) -> str:
    """
    Sanitize user input by removing extra whitespace.

    Args:
        text: Input text to sanitize

    Returns:
        Sanitized text
    """
    if not text or not isinstance(text, str):
        return ""

    # Replace runs of whitespace with a single space
    return re.sub(r'\s+', ' ', text.strip())


def validate_address(address: str) -> str:
    """
    Validate that an address is present.

    Args:
        address: Free-text address

    Returns:
        Sanitized address

    Raises:
        ValidationError: If the address is empty
    """
    address = sanitize_input(address)
    if not address:
        raise ValidationError("Address is required")
    return address


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    Validate that latitude and longitude are inside the valid ranges.

    Args:
        lat: Latitude
        lon: Longitude

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False

    if lat < -90 or lat > 90:
        return False

    if lon < -180 or lon > 180:
        return False

    return True


def _to_degrees(value: Any, field: str) -> float:
    # bool is an int subclass; true/false are not coordinates
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        degrees = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    # float() also parses "nan" and "inf"
    if not math.isfinite(degrees):
        raise ValidationError(f"{field} must be a number")
    return degrees


def parse_coordinate_payload(payload: Dict[str, Any]) -> Coordinate:
    """
    Extract a coordinate from a request body.

    Only presence and numeric form are checked; out-of-range values pass.

    Args:
        payload: Decoded JSON body

    Returns:
        Coordinate

    Raises:
        ValidationError: If latitude or longitude is absent or not a finite number
    """
    latitude = payload.get("latitude")
    longitude = payload.get("longitude")

    if latitude is None or longitude is None or latitude == "" or longitude == "":
        raise ValidationError("Latitude and longitude are required")

    return Coordinate(
        latitude=_to_degrees(latitude, "latitude"),
        longitude=_to_degrees(longitude, "longitude"),
    )
