"""
Utility functions for the food desert checker.

This package contains helper modules for:
- Input validation
- Distance calculations
- Map building and visualization (utils.map_builder, imported directly
  by the Streamlit app so the evaluator server stays free of folium
  and geopandas)
- Logging setup
"""

from .validation import (
    sanitize_input,
    validate_address,
    validate_coordinates,
    parse_coordinate_payload
)

from .geo_utils import (
    calculate_distance,
    find_nearest_source
)

from .logger_config import setup_logging

__all__ = [
    # Validation
    'sanitize_input',
    'validate_address',
    'validate_coordinates',
    'parse_coordinate_payload',

    # Geo utilities
    'calculate_distance',
    'find_nearest_source',

    # Logging
    'setup_logging',
]
