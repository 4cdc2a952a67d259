"""Exception hierarchy for the food desert checker."""

from typing import Optional


class FoodDesertError(Exception):
    """Base exception for all food desert checker errors."""


class ValidationError(FoodDesertError):
    """Required input is missing or malformed."""


class ConfigurationError(FoodDesertError):
    """A required access credential or setting is missing."""


class UpstreamError(FoodDesertError):
    """An external service returned a non-successful response."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(message)


class RequestError(UpstreamError):
    """The geocoding request failed in transport or with a non-success status."""


class UnsupportedCapabilityError(FoodDesertError):
    """Positioning is not available in the host environment."""

    def __init__(self, message: str = "Geolocation is not supported by your browser"):
        super().__init__(message)


class LocationError(FoodDesertError):
    """Positioning was denied or failed."""


class InvalidTransitionError(FoodDesertError):
    """The form was asked to move between two states that are not connected."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move form from '{current.value}' to '{target.value}'")
