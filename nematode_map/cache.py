import hashlib
import logging
from typing import Iterator, Union

import dataframely as dy

from nematode_map.dataframes.observation import ObservationSchema
from nematode_map.dataframes.presence import PresenceSchema
from nematode_map.dataframes.region import RegionSchema
from nematode_map.types import ALL_LABELS, Selection

logger = logging.getLogger(__name__)

# Observation columns that influence the presence result
_PRESENCE_INPUT_COLUMNS = [
    "observationIndex",
    "label",
    "nematode",
    "latitude",
    "longitude",
]


def presence_cache_key(
    region_df: dy.DataFrame[RegionSchema],
    observation_lf: Union[
        dy.LazyFrame[ObservationSchema], dy.DataFrame[ObservationSchema]
    ],
    selection: Selection,
) -> str:
    """SHA-256 over everything the presence computation reads."""
    digest = hashlib.sha256()

    for region, geometry in region_df.select("region", "geometry").iter_rows():
        digest.update(repr((region, len(geometry))).encode())
        digest.update(geometry)

    observations = observation_lf.lazy().select(_PRESENCE_INPUT_COLUMNS).collect()
    for row in observations.iter_rows():
        digest.update(repr(row).encode())

    if selection is ALL_LABELS:
        digest.update(b"selection:all")
    else:
        digest.update(repr(("selection", sorted(selection))).encode())

    return digest.hexdigest()


class PresenceCache:
    """Presence results memoized by a hash of their inputs."""

    def __init__(self) -> None:
        self._entries: dict[str, dy.DataFrame[PresenceSchema]] = {}

    def get_or_build(
        self,
        region_df: dy.DataFrame[RegionSchema],
        observation_lf: Union[
            dy.LazyFrame[ObservationSchema], dy.DataFrame[ObservationSchema]
        ],
        selection: Selection,
    ) -> dy.DataFrame[PresenceSchema]:
        key = presence_cache_key(region_df, observation_lf, selection)
        if key in self._entries:
            logger.info(f"Presence cache hit: {key[:12]}")
            return self._entries[key]

        logger.info(f"Presence cache miss: {key[:12]}")
        presence_df = PresenceSchema.build_df(region_df, observation_lf, selection)
        self._entries[key] = presence_df
        return presence_df

    def keys(self) -> Iterator[str]:
        return iter(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
