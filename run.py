import json
import logging
import sys
from typing import Optional, Sequence

from contexttimer import Timer

from nematode_map import defaults, output
from nematode_map.cli import parse_args_with_defaults, selection_from_args
from nematode_map.constants import PRESENCE_STYLES
from nematode_map.dataframes.observation import ObservationSchema
from nematode_map.dataframes.region import RegionSchema
from nematode_map.geojson import (
    build_marker_feature_collection,
    build_presence_feature_collection,
    write_geojson,
)
from nematode_map.html_output import build_map, write_html
from nematode_map.json_output import write_presence_index_json
from nematode_map.logging import configure_logging
from nematode_map.pipeline import MapInputs, MapOutputs, recompute
from nematode_map.source import SourceDocumentError, load_json_document
from nematode_map.types import Selection

logger = logging.getLogger(__name__)


def load_inputs(
    regions_path: str,
    observations_path: str,
    selection: Selection,
    region_name_property: str = defaults.REGION_NAME_PROPERTY,
) -> MapInputs:
    with Timer() as timer:
        region_df = RegionSchema.build_df(
            load_json_document(regions_path), name_property=region_name_property
        )
        observation_lf = ObservationSchema.build_lf(
            load_json_document(observations_path)
        )
    logger.info(
        f"Loaded {region_df.height} regions from {regions_path} and observations "
        f"from {observations_path} in {timer.elapsed:.4f}s"
    )
    return MapInputs(regions=region_df, observations=observation_lf, selection=selection)


def write_outputs(inputs: MapInputs, outputs: MapOutputs, style_name: str) -> None:
    presence_feature_collection = build_presence_feature_collection(
        inputs.regions, outputs.presence, PRESENCE_STYLES[style_name]
    )
    marker_feature_collection = build_marker_feature_collection(
        outputs.display_points, outputs.label_colors
    )

    write_geojson(presence_feature_collection, output.get_presence_geojson_path())
    write_geojson(marker_feature_collection, output.get_markers_geojson_path())
    write_presence_index_json(outputs.presence, output.get_presence_index_path())

    html_path = output.get_html_path()
    write_html(
        build_map(presence_feature_collection, marker_feature_collection), html_path
    )
    logger.info(
        f"{len(outputs.presence_index)} regions with records, "
        f"{outputs.display_points.height} markers, map written to {html_path}"
    )


def run(
    regions_path: str,
    observations_path: str,
    selection: Selection,
    style_name: str = defaults.PRESENCE_STYLE,
    region_name_property: str = defaults.REGION_NAME_PROPERTY,
) -> int:
    try:
        inputs = load_inputs(
            regions_path, observations_path, selection, region_name_property
        )
    except (OSError, json.JSONDecodeError, SourceDocumentError) as e:
        logger.exception("Failed to load input data")
        print(f"Data unavailable: {e}", file=sys.stderr)
        return 1

    write_outputs(inputs, recompute(inputs), style_name)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args_with_defaults(
        regions_path=defaults.REGIONS_PATH,
        observations_path=defaults.OBSERVATIONS_PATH,
        region_name_property=defaults.REGION_NAME_PROPERTY,
        presence_style=defaults.PRESENCE_STYLE,
        log_file=defaults.LOG_FILE,
        argv=argv,
    )

    # Ensure output directory exists
    output.ensure_output_dir()
    configure_logging(output.normalize_path(args.log_file))

    sys.exit(
        run(
            regions_path=args.regions_path,
            observations_path=args.observations_path,
            selection=selection_from_args(args),
            style_name=args.style,
            region_name_property=args.region_name_property,
        )
    )


if __name__ == "__main__":
    main()
