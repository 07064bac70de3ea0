import math
from typing import Any, Optional

import dataframely as dy
import geojson
import shapely

from nematode_map import output
from nematode_map.constants import OVERVIEW_STYLE, PresenceStyle
from nematode_map.dataframes.display_point import DisplayPointSchema
from nematode_map.dataframes.label_color import LabelColorSchema
from nematode_map.dataframes.presence import (
    PresenceSchema,
    presence_index,
    unique_labels,
)
from nematode_map.dataframes.region import RegionSchema
from nematode_map.types import Label, RegionName

NOT_AVAILABLE = "N/A"


def build_presence_tooltip(labels: list[Label], style: PresenceStyle) -> str:
    if not labels:
        return style.absent_tooltip
    lines = [f"{len(labels)} records"]
    lines.extend(unique_labels(labels))
    return "\n".join(lines)


def build_presence_feature(
    region_index: int,
    geometry: shapely.Geometry,
    region: RegionName,
    labels: list[Label],
    style: PresenceStyle,
) -> geojson.Feature:
    present = len(labels) > 0
    return geojson.Feature(
        id=region_index,
        properties={
            "region": region,
            "count": len(labels),
            "labels": unique_labels(labels),
            "tooltip": build_presence_tooltip(labels, style),
            # Leaflet path options
            "fillColor": style.present_fill if present else style.absent_fill,
            "fillOpacity": (
                style.present_fill_opacity if present else style.absent_fill_opacity
            ),
            "color": style.stroke,
            "weight": style.weight,
            "opacity": style.opacity,
        },
        geometry=shapely.geometry.mapping(geometry),  # type: ignore
    )


def build_presence_feature_collection(
    region_df: dy.DataFrame[RegionSchema],
    presence_df: dy.DataFrame[PresenceSchema],
    style: PresenceStyle = OVERVIEW_STYLE,
) -> geojson.FeatureCollection:
    """One feature per region, colored by whether it has any records."""
    index = presence_index(presence_df)
    features: list[geojson.Feature] = []

    for region_index, region, geometry in region_df.sort("regionIndex").select(
        "regionIndex", "region", "geometry"
    ).iter_rows():
        features.append(
            build_presence_feature(
                region_index,
                shapely.from_wkb(geometry),
                region,
                index.get(region, []),
                style,
            )
        )
    return geojson.FeatureCollection(features)


def format_plants(plants: Optional[str]) -> str:
    cleaned = (plants or "").replace("*", "").strip()
    return cleaned or NOT_AVAILABLE


def format_location(region: Optional[str], state: Optional[str]) -> str:
    parts = [part.strip() for part in (region, state) if part and part.strip()]
    return ", ".join(parts) or NOT_AVAILABLE


def format_density(sample_size: Optional[float]) -> Optional[str]:
    if sample_size is None:
        return None
    # Halves round up
    return f"{math.floor(sample_size + 0.5)} nematodes/200 mL soil"


def build_marker_properties(row: dict[str, Any]) -> dict[str, Any]:
    """Popup fields for one display point joined with its label color."""
    return {
        "observationIndex": row["observationIndex"],
        "label": row["label"],
        "nematode": row["nematode"],
        "color": row["color"],
        "darkened_color": row["darkened_color"],
        "plants": format_plants(row["plantAssociated"]),
        "location": format_location(row["samplingRegion"], row["samplingState"]),
        "density": format_density(row["sampleSize"]),
        "siteDescription": row["siteDescription"],
        "reference": row["reference"],
        "samplingDate": row["samplingDate"],
    }


def build_marker_feature_collection(
    display_point_df: dy.DataFrame[DisplayPointSchema],
    label_color_df: dy.DataFrame[LabelColorSchema],
) -> geojson.FeatureCollection:
    """
    Point features at the declustered positions, one per displayed observation.

    Args:
        display_point_df: Declustered observations
        label_color_df: Marker color for each label

    Returns:
        A FeatureCollection ordered like ``display_point_df``
    """
    features: list[geojson.Feature] = []

    df = display_point_df.join(label_color_df, on="label", how="left").sort(
        "observationIndex"
    )
    for row in df.iter_rows(named=True):
        features.append(
            geojson.Feature(
                id=row["observationIndex"],
                properties=build_marker_properties(row),
                geometry=geojson.Point(
                    (row["displayLongitude"], row["displayLatitude"])
                ),
            )
        )
    return geojson.FeatureCollection(features)


def write_geojson(
    feature_collection: geojson.FeatureCollection, output_file: str
) -> None:
    # Prepare the output file path
    output_file = output.prepare_file_path(output_file)

    with open(output_file, "w") as geojson_writer:
        geojson.dump(feature_collection, geojson_writer)
