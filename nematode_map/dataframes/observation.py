"""Flattened nematode observation records.

One row per entry of the grouped observation document, tagged with the
common name of its group. Rows without coordinates are kept so that
non-geographic views (counts per common name) still see them.
"""

from typing import Any, Union

import dataframely as dy
import polars as pl

from nematode_map.source import iter_observation_records
from nematode_map.types import ALL_LABELS, Label, Selection, is_empty_selection

# Column order and types of a flattened record
_POLARS_SCHEMA: dict[str, pl.DataType] = {
    "observationIndex": pl.UInt32(),
    "label": pl.String(),
    "nematode": pl.String(),
    "scientificTaxa": pl.List(pl.String()),
    "latitude": pl.Float64(),
    "longitude": pl.Float64(),
    "samplingRegion": pl.String(),
    "samplingState": pl.String(),
    "siteDescription": pl.String(),
    "plantAssociated": pl.String(),
    "sampleSize": pl.Float64(),
    "reference": pl.String(),
    "material": pl.String(),
    "collectedBy": pl.String(),
    "samplingDate": pl.String(),
}


class ObservationSchema(dy.Schema):
    """Schema for flattened nematode observation records."""

    # Positional identity within the flattened sequence
    observationIndex = dy.UInt32(nullable=False)
    label = dy.String(nullable=False)  # Common name of the group
    nematode = dy.String(nullable=True)
    scientificTaxa = dy.List(dy.String(), nullable=False)

    # Missing coordinates mean the record can't be placed on a map
    latitude = dy.Float64(nullable=True)
    longitude = dy.Float64(nullable=True)

    samplingRegion = dy.String(nullable=False)
    samplingState = dy.String(nullable=False)
    siteDescription = dy.String(nullable=False)
    plantAssociated = dy.String(nullable=False)
    sampleSize = dy.Float64(nullable=True)
    reference = dy.String(nullable=True)
    material = dy.String(nullable=True)
    collectedBy = dy.String(nullable=True)
    samplingDate = dy.String(nullable=True)

    @dy.rule()
    def valid_latitude(cls) -> pl.Expr:
        """Validate that latitude, when present, is within [-90, 90]."""
        return pl.col("latitude").is_null() | pl.col("latitude").is_between(-90, 90)

    @dy.rule()
    def valid_longitude(cls) -> pl.Expr:
        """Validate that longitude, when present, is within [-180, 180]."""
        return pl.col("longitude").is_null() | pl.col("longitude").is_between(
            -180, 180
        )

    @classmethod
    def build_lf(cls, source: Any) -> dy.LazyFrame["ObservationSchema"]:
        """Build a validated observation lazyframe from a grouped source document.

        Args:
            source: The parsed observation document, either a mapping from
                group key to group or a list of groups.

        Returns:
            A validated LazyFrame conforming to ObservationSchema.

        Raises:
            SourceDocumentError: If the document has the wrong shape.
        """
        df = pl.DataFrame(
            list(iter_observation_records(source)),
            schema=_POLARS_SCHEMA,
        )
        return cls.validate(df.lazy(), eager=False)


def is_placeable() -> pl.Expr:
    """Rows with both coordinates present."""
    return (
        pl.col("latitude").is_not_null()
        & pl.col("longitude").is_not_null()
        & pl.col("latitude").is_not_nan()
        & pl.col("longitude").is_not_nan()
    )


def filter_by_selection(
    lf: Union[pl.LazyFrame, pl.DataFrame], selection: Selection
) -> pl.LazyFrame:
    """Keep placeable rows whose label is selected."""
    lf = lf.lazy().filter(is_placeable())
    if selection is ALL_LABELS:
        return lf
    if is_empty_selection(selection):
        return lf.filter(pl.lit(False))
    return lf.filter(pl.col("label").is_in(sorted(selection)))


def label_names(
    observation_lf: dy.LazyFrame[ObservationSchema],
) -> list[Label]:
    """Sorted, unique common names."""
    return (
        observation_lf.select(pl.col("label").unique().sort())
        .collect()
        .to_series()
        .to_list()
    )


def count_by_label(
    observation_lf: dy.LazyFrame[ObservationSchema],
) -> dict[Label, int]:
    """Number of records per common name, including records without coordinates."""
    counts = (
        observation_lf.group_by("label")
        .agg(pl.len().alias("count"))
        .sort("label")
        .collect()
    )
    return dict(counts.iter_rows())


def search_labels(labels: list[Label], query: str) -> list[Label]:
    """Case-insensitive substring search over labels. A blank query matches all."""
    q = query.strip().lower()
    if not q:
        return list(labels)
    return [label for label in labels if q in label.lower()]
