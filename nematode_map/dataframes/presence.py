"""Which regions contain records for the selected common names.

Each placeable observation is assigned to at most one region: the first
region, in collection order, whose boundary covers the point. Points lying
exactly on a boundary count as inside.
"""

import logging
from typing import Union

import dataframely as dy
import polars as pl
import shapely

from nematode_map.dataframes.observation import ObservationSchema, filter_by_selection
from nematode_map.dataframes.region import RegionSchema, region_geometries
from nematode_map.types import (
    Label,
    PresenceValue,
    RegionName,
    Selection,
    is_empty_selection,
)

logger = logging.getLogger(__name__)


class PresenceSchema(dy.Schema):
    """One row per placed observation, in observation order."""

    region = dy.String(nullable=False)
    observationIndex = dy.UInt32(nullable=False)
    label = dy.String(nullable=False)
    nematode = dy.String(nullable=True)

    @classmethod
    def build_df(
        cls,
        region_df: dy.DataFrame[RegionSchema],
        observation_lf: Union[
            dy.LazyFrame[ObservationSchema], dy.DataFrame[ObservationSchema]
        ],
        selection: Selection,
    ) -> dy.DataFrame["PresenceSchema"]:
        """
        Match observations to the regions containing them.

        Args:
            region_df: Region boundaries
            observation_lf: Flattened observations
            selection: Labels to include, or ALL_LABELS. An empty selection
                yields an empty result.

        Returns:
            A validated PresenceSchema dataframe
        """
        if is_empty_selection(selection):
            return cls.validate(_empty_df())

        observations = (
            filter_by_selection(observation_lf, selection)
            .select("observationIndex", "label", "nematode", "latitude", "longitude")
            .sort("observationIndex")
            .collect()
        )
        if observations.height == 0 or region_df.height == 0:
            return cls.validate(_empty_df())

        points = shapely.points(
            observations["longitude"].to_numpy(),
            observations["latitude"].to_numpy(),
        )
        tree = shapely.STRtree(region_geometries(region_df))

        # For points, "intersects" is containment including the boundary
        point_indices, region_rows = tree.query(points, predicate="intersects")

        matches = (
            pl.DataFrame(
                {
                    "point": pl.Series(point_indices).cast(pl.UInt32),
                    "regionRow": pl.Series(region_rows).cast(pl.UInt32),
                }
            )
            .group_by("point")
            .agg(pl.col("regionRow").min())
        )

        region_lookup = region_df.select(
            pl.int_range(pl.len(), dtype=pl.UInt32).alias("regionRow"), "region"
        )

        df = (
            observations.with_row_index("point")
            .join(matches, on="point", how="inner")
            .join(region_lookup, on="regionRow", how="inner")
            .sort("observationIndex")
            .select("region", "observationIndex", "label", "nematode")
        )

        logger.info(
            f"Placed {df.height} of {observations.height} observations in "
            f"{df['region'].n_unique()} regions"
        )

        return cls.validate(df)


def _empty_df() -> pl.DataFrame:
    return pl.DataFrame(
        schema={
            "region": pl.String(),
            "observationIndex": pl.UInt32(),
            "label": pl.String(),
            "nematode": pl.String(),
        }
    )


def presence_index(
    presence_df: dy.DataFrame[PresenceSchema],
    value: PresenceValue = "label",
) -> dict[RegionName, list[str]]:
    """
    Region name to the labels (or taxa) recorded in it.

    Regions appear in the order of their first record; values keep record
    order and duplicates, so ``len()`` is the region's record count.
    """
    index: dict[RegionName, list[str]] = {}
    for region, item in presence_df.select("region", value).iter_rows():
        index.setdefault(region, []).append(item)
    return index


def region_record_counts(
    presence_df: dy.DataFrame[PresenceSchema],
) -> dict[RegionName, int]:
    return {region: len(items) for region, items in presence_index(presence_df).items()}


def unique_labels(items: list[Label]) -> list[Label]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(items))
