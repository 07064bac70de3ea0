"""Centralized default configuration values for the nematode map pipeline.

This module provides a single source of truth for all default parameter values.
These defaults are used by:
- CLI argument parsing (as fallbacks when args aren't provided)
- The pipeline and dataframe builders (as keyword argument defaults)
"""

# Data source defaults
REGIONS_PATH = "data/LGA_2024_context.json"
OBSERVATIONS_PATH = "data/combined_nematodes_with_coords.json"
LOG_FILE = "run.log"

# Property holding the region name in the LGA feature collection
REGION_NAME_PROPERTY = "LGA_NAME24"

# Declustering defaults
COORDINATE_PRECISION = 6  # decimal places, about 0.11 m
JITTER_BASE_DEGREES = 0.00035
JITTER_POINTS_PER_RING = 6
JITTER_MAX_RADIUS_DEGREES = 0.005
MIN_LONGITUDE_SCALE = 0.25

# Map defaults (center of Australia)
MAP_CENTER_LAT = -25.2744
MAP_CENTER_LNG = 133.7751
MAP_ZOOM = 5
PRESENCE_STYLE = "overview"  # Options: "overview", "selection"
