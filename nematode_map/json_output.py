import json

import dataframely as dy

from nematode_map import output
from nematode_map.dataframes.presence import PresenceSchema, presence_index
from nematode_map.types import PresenceValue


def write_presence_index_json(
    presence_df: dy.DataFrame[PresenceSchema],
    output_path: str,
    value: PresenceValue = "label",
) -> None:
    """
    Writes the region to labels mapping to a JSON file.

    Regions without records are left out. Each list keeps one entry per
    record, so its length is the region's record count.

    Args:
        presence_df: Placed observations.
        output_path: The path to write the JSON file to.
        value: Which column to list for each record, ``label`` or ``nematode``.
    """
    output_data = presence_index(presence_df, value=value)

    # Prepare the output file path
    output_file = output.prepare_file_path(output_path)

    with open(output_file, "w", encoding="utf-8") as json_writer:
        json.dump(output_data, json_writer, indent=2, ensure_ascii=False)
