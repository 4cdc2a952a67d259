"""
Configuration settings for the Oasis food desert checker.

Holds the fixed application constants and loads the environment-sourced
settings (Mapbox credentials, evaluator URL, timeouts) that are injected
into the server and the Streamlit app at startup.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Config:
    """Application constants."""

    # ============================================================================
    # APPLICATION SETTINGS
    # ============================================================================
    APP_TITLE = "Oasis"
    APP_ICON = "🥕"
    APP_DESCRIPTION = (
        "Discover if you're in a food desert and find better food options in your area."
    )

    # ============================================================================
    # MAPBOX SETTINGS
    # ============================================================================
    MAPBOX_API_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    MAPBOX_TILE_URL = (
        "https://api.mapbox.com/styles/v1/{style}/tiles/256/{{z}}/{{x}}/{{y}}"
        "?access_token={token}"
    )
    MAPBOX_ATTRIBUTION = "© Mapbox © OpenStreetMap"
    MAP_STYLE = "mapbox/streets-v11"

    # Upstream returns at most 10 features per query
    POI_SEARCH_LIMIT = 10

    # ============================================================================
    # FOOD DESERT SETTINGS
    # ============================================================================
    FOOD_KEYWORDS = ("supermarket", "grocery", "food", "vegetable", "restaurant")

    # 1 mile in meters
    DISTANCE_THRESHOLD_METERS = 1609.34

    MAX_FOOD_SOURCES = 5

    # ============================================================================
    # MAP SETTINGS
    # ============================================================================
    MAP_ZOOM = 14

    # Tiles used when no Mapbox token is available
    MAP_TILES = "OpenStreetMap"
    MAP_HEIGHT = 400
    QUERY_MARKER_COLOR = "red"
    THRESHOLD_RING_COLOR = "#FF4444"
    NEAR_SOURCE_COLOR = "#28a745"      # Green
    FAR_SOURCE_COLOR = "#ffc107"       # Yellow
    UNKNOWN_SOURCE_COLOR = "#6c757d"   # Gray

    # ============================================================================
    # EVALUATOR ENDPOINT
    # ============================================================================
    CHECK_FOOD_DESERT_PATH = "/api/checkFoodDesert"

    @classmethod
    def get_source_color(cls, distance) -> str:
        """
        Get marker color for a food source based on its distance.

        Args:
            distance: Distance from the query point in meters, or None

        Returns:
            Hex color code
        """
        if distance is None:
            return cls.UNKNOWN_SOURCE_COLOR
        if distance < cls.DISTANCE_THRESHOLD_METERS:
            return cls.NEAR_SOURCE_COLOR
        return cls.FAR_SOURCE_COLOR


@dataclass(frozen=True)
class Settings:
    """Environment-sourced settings, loaded once and passed explicitly."""

    mapbox_token: str = ""
    mapbox_public_token: str = ""
    evaluator_url: str = "http://localhost:8080"
    port: int = 8080
    request_timeout: float = 10.0
    log_level: str = "INFO"

    def require_server_token(self) -> str:
        if not self.mapbox_token:
            raise ConfigurationError("MAPBOX_TOKEN is not set in environment variables")
        return self.mapbox_token

    def require_public_token(self) -> str:
        if not self.mapbox_public_token:
            raise ConfigurationError(
                "MAPBOX_PUBLIC_TOKEN is not set in environment variables"
            )
        return self.mapbox_public_token


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables (and a .env file if present)."""
    load_dotenv()

    mapbox_token = os.getenv("MAPBOX_TOKEN", "")
    mapbox_public_token = os.getenv("MAPBOX_PUBLIC_TOKEN") or os.getenv(
        "NEXT_PUBLIC_MAPBOX_TOKEN", ""
    )
    evaluator_url = os.getenv("EVALUATOR_URL", "http://localhost:8080").rstrip("/")
    port = int(os.getenv("PORT", "8080"))
    request_timeout = float(os.getenv("REQUEST_TIMEOUT", "10"))
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if not mapbox_token:
        logger.warning("MAPBOX_TOKEN is not set; the evaluator endpoint will refuse to start.")
    if not mapbox_public_token:
        logger.warning("MAPBOX_PUBLIC_TOKEN is not set; geocoding and map tiles will fail.")

    return Settings(
        mapbox_token=mapbox_token,
        mapbox_public_token=mapbox_public_token,
        evaluator_url=evaluator_url,
        port=port,
        request_timeout=request_timeout,
        log_level=log_level,
    )


if __name__ == "__main__":
    """Test configuration loading."""
    settings = get_settings()

    print("=" * 60)
    print("Configuration Test")
    print("=" * 60)

    print("\nCredentials:")
    print(f"  Server token: {'*' * 8 if settings.mapbox_token else 'NOT SET'}")
    print(f"  Public token: {'*' * 8 if settings.mapbox_public_token else 'NOT SET'}")

    print("\nEvaluator:")
    print(f"  URL: {settings.evaluator_url}")
    print(f"  Port: {settings.port}")
    print(f"  Timeout: {settings.request_timeout}s")

    print("\nFood Desert Rule:")
    print(f"  Keywords: {', '.join(Config.FOOD_KEYWORDS)}")
    print(f"  Threshold: {Config.DISTANCE_THRESHOLD_METERS} m")
