"""Spread markers that share a location so each one stays clickable.

Points whose coordinates print the same with ``COORDINATE_PRECISION``
decimal places form a group. Keys are fixed-point strings rounded half away
from zero from the exact binary value, the same text a browser's
``Number.toFixed`` produces, so markers drawn client side group identically.

Within a group of more than one point, the n-th member (in input order,
starting at zero) moves ``base * ceil(n / points_per_ring)`` degrees, capped
at ``max_radius_degrees``, in the direction ``n`` times the golden angle.
Longitude offsets are scaled by the cosine of the latitude so the spiral
looks round on a web mercator map. The first member of every group and all
singletons keep their coordinates exactly.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Union

import polars as pl

from nematode_map.defaults import (
    COORDINATE_PRECISION,
    JITTER_BASE_DEGREES,
    JITTER_MAX_RADIUS_DEGREES,
    JITTER_POINTS_PER_RING,
    MIN_LONGITUDE_SCALE,
)
from nematode_map.types import LatLng

GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))

_KEY_COLUMNS = ["_lat_key", "_lng_key"]


def coordinate_key(value: float, precision: int = COORDINATE_PRECISION) -> str:
    # Negative zero prints without a sign
    exact = Decimal(value + 0.0)
    step = Decimal(1).scaleb(-precision)
    return format(exact.quantize(step, rounding=ROUND_HALF_UP), "f")


def with_declustered_coordinates(
    lf: Union[pl.LazyFrame, pl.DataFrame],
    lat_col: str = "latitude",
    lng_col: str = "longitude",
    base_degrees: float = JITTER_BASE_DEGREES,
    points_per_ring: int = JITTER_POINTS_PER_RING,
    max_radius_degrees: float = JITTER_MAX_RADIUS_DEGREES,
    min_longitude_scale: float = MIN_LONGITUDE_SCALE,
    precision: int = COORDINATE_PRECISION,
) -> pl.LazyFrame:
    """
    Add ``displayLatitude`` and ``displayLongitude`` columns.

    Row count and row order are unchanged, as are the original coordinate
    columns. Rows with null coordinates get null display coordinates.
    """
    lat = pl.col(lat_col)
    lng = pl.col(lng_col)

    position = pl.col("_position")
    radius = (pl.lit(base_degrees) * (position / points_per_ring).ceil()).clip(
        upper_bound=max_radius_degrees
    )
    theta = position * GOLDEN_ANGLE
    longitude_scale = pl.max_horizontal(
        pl.lit(min_longitude_scale), lat.radians().cos()
    )
    collided = pl.col("_group_size") > 1

    return (
        lf.lazy()
        .with_columns(
            _lat_key=lat.map_elements(
                lambda v: coordinate_key(v, precision), return_dtype=pl.String
            ),
            _lng_key=lng.map_elements(
                lambda v: coordinate_key(v, precision), return_dtype=pl.String
            ),
        )
        .with_columns(
            _position=pl.int_range(pl.len()).over(_KEY_COLUMNS),
            _group_size=pl.len().over(_KEY_COLUMNS),
        )
        .with_columns(
            displayLatitude=pl.when(collided)
            .then(lat + radius * theta.sin())
            .otherwise(lat),
            displayLongitude=pl.when(collided)
            .then(lng + radius * theta.cos() * longitude_scale)
            .otherwise(lng),
        )
        .drop(*_KEY_COLUMNS, "_position", "_group_size")
    )


def decluster(
    points: Sequence[tuple[Optional[float], Optional[float]]],
    base_degrees: float = JITTER_BASE_DEGREES,
) -> list[LatLng]:
    """
    Decluster a list of (lat, lng) pairs.

    Returns a new list of the same length and order. Pairs with a missing
    coordinate are returned unchanged.
    """
    df = pl.DataFrame(
        {
            "latitude": [p[0] for p in points],
            "longitude": [p[1] for p in points],
        },
        schema={"latitude": pl.Float64(), "longitude": pl.Float64()},
    )
    result = (
        with_declustered_coordinates(df, base_degrees=base_degrees)
        .select("displayLatitude", "displayLongitude")
        .collect()
    )
    return [LatLng(lat, lng) for lat, lng in result.iter_rows()]
