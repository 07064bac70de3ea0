"""Constants for nematode observation data.

This module defines the field names of the grouped observation source
document, the marker palette, and the choropleth style presets used
throughout the project.
"""

from typing import NamedTuple

# Group-level fields
COMMON_NAME_FIELD = "Common name"
SCIENTIFIC_TAXA_FIELD = "Scientific taxa"
ENTRIES_FIELD = "Entries"

# Entry-level fields
LATITUDE_FIELD = "Latitude (°S)"
LONGITUDE_FIELD = "Longitude (°E)"
NEMATODE_TAXA_FIELD = "Nematode Taxa"
SAMPLE_SIZE_FIELD = "Sample Size"

# Entry fields copied verbatim, mapped to observation column names. The text
# fields default to an empty string, the rest to null.
TEXT_ENTRY_FIELDS: dict[str, str] = {
    "Sampling Region": "samplingRegion",
    "Sampling State": "samplingState",
    "Site Description": "siteDescription",
    "Plant Associated": "plantAssociated",
}
OPTIONAL_ENTRY_FIELDS: dict[str, str] = {
    "Reference": "reference",
    "Material": "material",
    "Collected by": "collectedBy",
    "Sampling Date": "samplingDate",
}

# Marker colors, indexed by label hash
LABEL_PALETTE: list[str] = [
    "#FF5733",
    "#33FF57",
    "#3357FF",
    "#FF33A1",
    "#A1FF33",
    "#33A1FF",
    "#FF8C33",
    "#8CFF33",
    "#33FF8C",
    "#FF33E0",
    "#E0FF33",
    "#33E0FF",
    "#FF3333",
    "#33FF33",
    "#3333FF",
    "#FFD700",
    "#ADFF2F",
    "#00FFFF",
    "#FF00FF",
    "#8A2BE2",
]


class PresenceStyle(NamedTuple):
    """Leaflet path style for regions with and without records."""

    present_fill: str
    absent_fill: str
    present_fill_opacity: float
    absent_fill_opacity: float
    absent_tooltip: str
    stroke: str = "#ffffff"
    weight: float = 0.6
    opacity: float = 1.0


# All records at once, "Overview" tab
OVERVIEW_STYLE = PresenceStyle(
    present_fill="#f87171",
    absent_fill="#e5e7eb",
    present_fill_opacity=0.75,
    absent_fill_opacity=0.75,
    absent_tooltip="Unconfirmed presence of PPN",
)

# Records for the chosen common names
SELECTION_STYLE = PresenceStyle(
    present_fill="#60a5fa",
    absent_fill="#e5e7eb",
    present_fill_opacity=0.8,
    absent_fill_opacity=0.4,
    absent_tooltip="No records",
)

PRESENCE_STYLES: dict[str, PresenceStyle] = {
    "overview": OVERVIEW_STYLE,
    "selection": SELECTION_STYLE,
}
