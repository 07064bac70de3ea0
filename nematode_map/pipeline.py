"""Recompute every derived map structure from a snapshot of the inputs.

Callers invoke ``recompute`` whenever the regions, the observations, or the
selection change. Nothing is kept between calls except what an explicitly
passed ``PresenceCache`` holds.
"""

from typing import NamedTuple, Optional

import dataframely as dy

from nematode_map.cache import PresenceCache
from nematode_map.dataframes.display_point import DisplayPointSchema
from nematode_map.dataframes.label_color import LabelColorSchema
from nematode_map.dataframes.observation import ObservationSchema
from nematode_map.dataframes.presence import PresenceSchema, presence_index
from nematode_map.dataframes.region import RegionSchema
from nematode_map.logging import log_action
from nematode_map.types import ALL_LABELS, RegionName, Selection


class MapInputs(NamedTuple):
    regions: dy.DataFrame[RegionSchema]
    observations: dy.LazyFrame[ObservationSchema]
    selection: Selection = ALL_LABELS


class MapOutputs(NamedTuple):
    presence: dy.DataFrame[PresenceSchema]
    presence_index: dict[RegionName, list[str]]
    display_points: dy.DataFrame[DisplayPointSchema]
    label_colors: dy.DataFrame[LabelColorSchema]


def recompute(
    inputs: MapInputs, cache: Optional[PresenceCache] = None
) -> MapOutputs:
    # Declustering runs after aggregation and never feeds back into it
    if cache is not None:
        presence_df = log_action(
            "presence aggregation (cached)",
            lambda: cache.get_or_build(
                inputs.regions, inputs.observations, inputs.selection
            ),
        )
    else:
        presence_df = log_action(
            "presence aggregation",
            lambda: PresenceSchema.build_df(
                inputs.regions, inputs.observations, inputs.selection
            ),
        )

    display_point_df = log_action(
        "marker declustering",
        lambda: DisplayPointSchema.build_df(inputs.observations, inputs.selection),
    )
    label_color_df = log_action(
        "label colors", lambda: LabelColorSchema.build_df(inputs.observations)
    )

    return MapOutputs(
        presence=presence_df,
        presence_index=presence_index(presence_df),
        display_points=display_point_df,
        label_colors=label_color_df,
    )
