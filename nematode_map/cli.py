"""Command-line argument parser for the nematode presence map."""

import argparse
from typing import Any, Optional, Sequence

from nematode_map.constants import PRESENCE_STYLES
from nematode_map.types import ALL_LABELS, Selection


def create_argument_parser(
    regions_path: str,
    observations_path: str,
    region_name_property: str,
    presence_style: str,
    log_file: str,
) -> argparse.ArgumentParser:
    """
    Create and configure the CLI argument parser.

    Args:
        regions_path: Default path to the region GeoJSON FeatureCollection
        observations_path: Default path to the grouped observation JSON
        region_name_property: Default feature property holding the region name
        presence_style: Default choropleth style preset
        log_file: Default log file name

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Aggregate nematode records by region and build a presence map."
    )

    parser.add_argument(
        "--label",
        action="append",
        dest="labels",
        metavar="LABEL",
        help="Common name to show (repeatable). Defaults to all common names.",
    )
    parser.add_argument(
        "--all-labels",
        action="store_true",
        help="Show every common name, ignoring --label",
    )
    parser.add_argument(
        "--style",
        choices=sorted(PRESENCE_STYLES),
        default=presence_style,
        help="Choropleth style preset",
    )
    parser.add_argument(
        "--region-name-property",
        type=str,
        default=region_name_property,
        help="Feature property holding the region name",
    )
    parser.add_argument(
        "--log-file", type=str, default=log_file, help="Path to the log file"
    )

    # Positional arguments
    parser.add_argument(
        "regions_path",
        type=str,
        nargs="?",
        help="Path to the region GeoJSON FeatureCollection",
        default=regions_path,
    )
    parser.add_argument(
        "observations_path",
        type=str,
        nargs="?",
        help="Path to the grouped observation JSON document",
        default=observations_path,
    )

    return parser


def parse_args_with_defaults(
    regions_path: str,
    observations_path: str,
    region_name_property: str,
    presence_style: str,
    log_file: str,
    argv: Optional[Sequence[str]] = None,
) -> Any:
    """
    Create argument parser and parse command-line arguments.

    Args:
        regions_path: Default path to the region GeoJSON FeatureCollection
        observations_path: Default path to the grouped observation JSON
        region_name_property: Default feature property holding the region name
        presence_style: Default choropleth style preset
        log_file: Default log file name
        argv: Arguments to parse instead of ``sys.argv[1:]``

    Returns:
        Parsed command-line arguments
    """
    parser = create_argument_parser(
        regions_path=regions_path,
        observations_path=observations_path,
        region_name_property=region_name_property,
        presence_style=presence_style,
        log_file=log_file,
    )
    return parser.parse_args(argv)


def selection_from_args(args: Any) -> Selection:
    if args.all_labels or not args.labels:
        return ALL_LABELS
    return frozenset(args.labels)
