import logging
from typing import Any, List, Mapping

import dataframely as dy
import polars as pl
import shapely
from shapely.geometry import shape

from nematode_map.defaults import REGION_NAME_PROPERTY
from nematode_map.source import SourceDocumentError
from nematode_map.types import RegionName

logger = logging.getLogger(__name__)


class RegionSchema(dy.Schema):
    """
    Administrative region boundaries (Local Government Areas), in the order
    they appear in the source feature collection.
    """

    region = dy.String(nullable=False)
    regionIndex = dy.UInt32(nullable=False)
    geometry = dy.Any()  # Binary (WKB)

    @classmethod
    def build_df(
        cls,
        feature_collection: Mapping[str, Any],
        name_property: str = REGION_NAME_PROPERTY,
    ) -> dy.DataFrame["RegionSchema"]:
        """
        Build a RegionSchema dataframe from a GeoJSON FeatureCollection.

        Features without a geometry or without a name are skipped.

        Args:
            feature_collection: Parsed GeoJSON FeatureCollection
            name_property: Feature property holding the region name

        Returns:
            A validated RegionSchema dataframe

        Raises:
            SourceDocumentError: If the collection has no "features" list.
        """
        features = (
            feature_collection.get("features")
            if isinstance(feature_collection, Mapping)
            else None
        )
        if not isinstance(features, list):
            raise SourceDocumentError("Region collection has no 'features' list")

        names: List[str] = []
        indices: List[int] = []
        boundaries: List[bytes] = []

        for index, feature in enumerate(features):
            if not isinstance(feature, Mapping):
                continue
            geometry = feature.get("geometry")
            name = (feature.get("properties") or {}).get(name_property)
            name = name.strip() if isinstance(name, str) else None
            if not geometry or not name:
                continue

            names.append(name)
            indices.append(index)
            boundaries.append(shapely.to_wkb(shape(geometry)))

        skipped = len(features) - len(names)
        if skipped:
            logger.info(f"Skipped {skipped} region features without a name or geometry")

        df = pl.DataFrame(
            {
                "region": pl.Series(names, dtype=pl.String),
                "regionIndex": pl.Series(indices, dtype=pl.UInt32),
                "geometry": pl.Series(boundaries, dtype=pl.Binary),
            }
        )
        return cls.validate(df)


def region_names(region_df: dy.DataFrame[RegionSchema]) -> List[RegionName]:
    """Unique region names in collection order."""
    return region_df["region"].unique(maintain_order=True).to_list()


def region_geometries(region_df: dy.DataFrame[RegionSchema]) -> List[shapely.Geometry]:
    return [shapely.from_wkb(wkb) for wkb in region_df["geometry"]]
