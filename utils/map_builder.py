"""
Map building utilities for the food desert checker.

Provides functions to create Folium maps centred on the checked
location, with the one-mile threshold ring and the nearby food sources.
"""

import logging
import traceback
from typing import List, Optional, Tuple

import folium
import geopandas as gpd
import pandas as pd
from branca.element import MacroElement
from jinja2 import Template
from shapely.geometry import Point

from config import Config
from models import Coordinate, FoodDesertResult, FoodSource

logger = logging.getLogger(__name__)


def create_base_map(
    center: Tuple[float, float],
    zoom: Optional[int] = None,
    access_token: str = ""
) -> folium.Map:
    """
    Create a base Folium map.

    Args:
        center: (latitude, longitude) tuple for map center
        zoom: Initial zoom level
        access_token: Mapbox public token for street tiles

    Returns:
        Folium Map object
    """
    if zoom is None:
        zoom = Config.MAP_ZOOM

    if not access_token:
        logger.warning("No Mapbox token for map tiles, using OpenStreetMap")
        return folium.Map(
            location=center,
            zoom_start=zoom,
            tiles=Config.MAP_TILES,
            control_scale=True
        )

    m = folium.Map(location=center, zoom_start=zoom, tiles=None, control_scale=True)

    folium.TileLayer(
        tiles=Config.MAPBOX_TILE_URL.format(style=Config.MAP_STYLE, token=access_token),
        attr=Config.MAPBOX_ATTRIBUTION,
        name="Mapbox Streets"
    ).add_to(m)

    return m


def add_query_point_to_map(
    map_obj: folium.Map,
    point: Tuple[float, float],
    radius_m: float = Config.DISTANCE_THRESHOLD_METERS
) -> folium.Map:
    """
    Add the checked location and the threshold ring to map.

    Args:
        map_obj: Folium Map object
        point: (latitude, longitude) tuple
        radius_m: Threshold radius in meters

    Returns:
        Updated Folium Map object
    """
    lat, lon = point

    folium.Marker(
        location=[lat, lon],
        popup=folium.Popup(
            f"""
            <div style="font-family: Arial, sans-serif;">
                <h4 style="margin: 0 0 5px 0;">Your Location</h4>
                <p style="margin: 5px 0; font-size: 12px;">
                    <b>Lat:</b> {lat:.6f}<br>
                    <b>Lon:</b> {lon:.6f}
                </p>
            </div>
            """,
            max_width=200
        ),
        tooltip="Checked location",
        icon=folium.Icon(color=Config.QUERY_MARKER_COLOR, icon='info-sign', prefix='glyphicon')
    ).add_to(map_obj)

    folium.Circle(
        location=[lat, lon],
        radius=radius_m,
        color=Config.THRESHOLD_RING_COLOR,
        fill=True,
        fillColor=Config.THRESHOLD_RING_COLOR,
        fillOpacity=0.08,
        weight=2,
        tooltip=f"{radius_m / Config.DISTANCE_THRESHOLD_METERS:.0f} mile radius"
    ).add_to(map_obj)

    return map_obj


def build_sources_gdf(sources: List[FoodSource]) -> gpd.GeoDataFrame:
    """
    Build a GeoDataFrame of food sources that have a position.

    Args:
        sources: Food sources, possibly without coordinates

    Returns:
        GeoDataFrame in EPSG:4326 with name, category, address and distance columns
    """
    located = [
        source for source in sources
        if source.latitude is not None and source.longitude is not None
    ]

    skipped = len(sources) - len(located)
    if skipped:
        logger.info(f"Skipping {skipped} food sources without coordinates")

    return gpd.GeoDataFrame(
        {
            'name': [source.name for source in located],
            'category': [source.category for source in located],
            'address': [source.address for source in located],
            'distance': [source.distance for source in located],
        },
        geometry=[Point(source.longitude, source.latitude) for source in located],
        crs='EPSG:4326'
    )


def add_food_sources_to_map(
    map_obj: folium.Map,
    sources_gdf: gpd.GeoDataFrame
) -> folium.Map:
    """
    Add food sources to a Folium map.

    Args:
        map_obj: Folium Map object
        sources_gdf: GeoDataFrame from build_sources_gdf

    Returns:
        Updated Folium Map object
    """
    if sources_gdf is None or sources_gdf.empty:
        logger.info("No located food sources to draw")
        return map_obj

    layer = folium.FeatureGroup(name='Food Sources').add_to(map_obj)

    for _, source in sources_gdf.iterrows():
        name = source['name'] or 'Unnamed'
        distance = None if pd.isna(source["distance"]) else float(source["distance"])
        distance_text = f"{distance:.0f} m" if distance is not None else "unknown"

        popup_html = f"""
        <div style="font-family: Arial, sans-serif; min-width: 150px;">
            <h4 style="margin: 0 0 10px 0;">{name}</h4>
            <p style="margin: 5px 0;"><b>Distance:</b> {distance_text}</p>
            <p style="margin: 5px 0;">{source['address']}</p>
        </div>
        """

        folium.CircleMarker(
            location=[source.geometry.y, source.geometry.x],
            radius=7,
            popup=folium.Popup(popup_html, max_width=300),
            tooltip=name,
            color="black",
            fill=True,
            fillColor=Config.get_source_color(distance),
            fillOpacity=0.8,
            weight=2
        ).add_to(layer)

    return map_obj


def create_legend() -> str:
    """
    Create HTML legend for the result map.

    Returns:
        HTML string for legend
    """
    entries = [
        (Config.NEAR_SOURCE_COLOR, "Within 1 mile"),
        (Config.FAR_SOURCE_COLOR, "Farther than 1 mile"),
        (Config.UNKNOWN_SOURCE_COLOR, "Distance unknown"),
        (Config.THRESHOLD_RING_COLOR, "1 mile radius"),
    ]

    legend_html = '''
    <div id="map-legend" style="
        position: absolute;
        top: 10px;
        right: 10px;
        width: 190px;
        background-color: white;
        border: 2px solid #333;
        border-radius: 8px;
        padding: 12px;
        font-family: 'Arial', sans-serif;
        font-size: 13px;
        z-index: 1000;
    ">
        <h4 style="margin: 0 0 8px 0; font-size: 15px;">Food Sources</h4>
    '''

    for color, label in entries:
        legend_html += f'''
        <div style="margin: 6px 0; display: flex; align-items: center;">
            <span style="
                display: inline-block;
                width: 14px;
                height: 14px;
                background-color: {color};
                border-radius: 50%;
                margin-right: 8px;
                border: 2px solid #333;
            "></span>
            <span style="color: #333;">{label}</span>
        </div>
        '''

    legend_html += '</div>'

    return legend_html


def add_legend_to_map(map_obj: folium.Map) -> folium.Map:
    """
    Add a legend to the map.

    Args:
        map_obj: Folium Map object

    Returns:
        Updated Folium Map object
    """
    template = """
    {% macro html(this, kwargs) %}
    """ + create_legend() + """
    {% endmacro %}
    """

    macro = MacroElement()
    macro._template = Template(template)

    map_obj.get_root().add_child(macro)

    return map_obj


def create_result_map(
    coordinate: Coordinate,
    access_token: str = "",
    result: Optional[FoodDesertResult] = None
) -> folium.Map:
    """
    Create the map shown on the check-area page.

    Args:
        coordinate: Checked location, used as map center
        access_token: Mapbox public token for street tiles
        result: Evaluator result; its food sources are drawn when given

    Returns:
        Complete Folium Map object
    """
    center = coordinate.as_tuple()
    m = create_base_map(center=center, access_token=access_token)

    try:
        m = add_query_point_to_map(m, center)

        if result is not None and result.food_sources:
            m = add_food_sources_to_map(m, build_sources_gdf(result.food_sources))
            m = add_legend_to_map(m)

    except Exception as e:
        logger.error(f"Error creating result map: {e}")
        logger.error(traceback.format_exc())

    return m
