import dataframely as dy

from nematode_map.dataframes.region import RegionSchema


def _square_feature(
    name: str, min_lng: float, min_lat: float, max_lng: float, max_lat: float
) -> dict:
    return {
        "type": "Feature",
        "properties": {"LGA_NAME24": name, "STE_NAME21": "Northern Territory"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [min_lng, min_lat],
                    [max_lng, min_lat],
                    [max_lng, max_lat],
                    [min_lng, max_lat],
                    [min_lng, min_lat],
                ]
            ],
        },
    }


def mock_region_feature_collection() -> dict:
    """
    Three LGA-like regions around Darwin.

    Darwin and Palmerston share the edge at longitude 130.9. Greater Darwin
    comes last and covers both, so points in Darwin or Palmerston are matched
    to those first.
    """
    return {
        "type": "FeatureCollection",
        "features": [
            _square_feature("Darwin", 130.8, -12.5, 130.9, -12.4),
            _square_feature("Palmerston", 130.9, -12.55, 131.0, -12.45),
            _square_feature("Greater Darwin", 130.7, -12.6, 131.1, -12.3),
        ],
    }


def mock_region_df() -> dy.DataFrame[RegionSchema]:
    return RegionSchema.build_df(mock_region_feature_collection())
