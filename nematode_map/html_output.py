import logging

import folium
import geojson

from nematode_map import output
from nematode_map.defaults import MAP_CENTER_LAT, MAP_CENTER_LNG, MAP_ZOOM

logger = logging.getLogger(__name__)

MARKER_RADIUS = 6

# Popup rows shown for a marker, with their headings
MARKER_POPUP_FIELDS = {
    "nematode": "Taxa",
    "plants": "Plants",
    "location": "Region",
    "density": "Highest Recorded Density",
}


def _region_style(feature: dict) -> dict:
    properties = feature["properties"]
    return {
        "fillColor": properties["fillColor"],
        "fillOpacity": properties["fillOpacity"],
        "color": properties["color"],
        "weight": properties["weight"],
        "opacity": properties["opacity"],
    }


def _marker_style(feature: dict) -> dict:
    properties = feature["properties"]
    return {
        "fillColor": properties["color"],
        "color": properties["darkened_color"],
        "fillOpacity": 0.9,
        "weight": 1,
    }


def build_map(
    presence_feature_collection: geojson.FeatureCollection,
    marker_feature_collection: geojson.FeatureCollection,
    center: tuple[float, float] = (MAP_CENTER_LAT, MAP_CENTER_LNG),
    zoom: int = MAP_ZOOM,
) -> folium.Map:
    """
    Build an interactive map with the region choropleth and the markers on top.

    Args:
        presence_feature_collection: Region features with style properties
        marker_feature_collection: Point features at declustered positions
        center: Initial (lat, lng) of the map
        zoom: Initial zoom level

    Returns:
        A folium Map ready to be saved
    """
    _map = folium.Map(
        location=list(center),
        zoom_start=zoom,
        tiles="Esri.WorldGrayCanvas",
    )

    if presence_feature_collection["features"]:
        folium.GeoJson(
            presence_feature_collection,
            name="Regions",
            style_function=_region_style,
            tooltip=folium.GeoJsonTooltip(fields=["tooltip"], labels=False),
        ).add_to(_map)

    if marker_feature_collection["features"]:
        folium.GeoJson(
            marker_feature_collection,
            name="Records",
            marker=folium.CircleMarker(radius=MARKER_RADIUS),
            style_function=_marker_style,
            tooltip=folium.GeoJsonTooltip(fields=["label"], labels=False),
            popup=folium.GeoJsonPopup(
                fields=list(MARKER_POPUP_FIELDS),
                aliases=list(MARKER_POPUP_FIELDS.values()),
            ),
        ).add_to(_map)

    folium.LayerControl().add_to(_map)
    return _map


def write_html(map_: folium.Map, output_file: str) -> None:
    """
    Write the map to a standalone HTML file.

    Args:
        map_: The map to save
        output_file: Path to output file
    """
    # Prepare the output file path
    output_file = output.prepare_file_path(output_file)

    map_.save(output_file)
    logger.info(f"HTML map written to {output_file}")
