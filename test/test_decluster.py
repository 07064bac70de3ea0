import math
import unittest

import polars as pl

from nematode_map.dataframes.display_point import DisplayPointSchema
from nematode_map.dataframes.observation import ObservationSchema
from nematode_map.decluster import (
    GOLDEN_ANGLE,
    coordinate_key,
    decluster,
    with_declustered_coordinates,
)
from nematode_map.defaults import JITTER_BASE_DEGREES, JITTER_MAX_RADIUS_DEGREES
from nematode_map.types import ALL_LABELS, LatLng
from test.fixtures.observation_source import mock_observation_lf


class TestDecluster(unittest.TestCase):
    def test_singletons_are_unchanged(self):
        points = [(-12.46, 130.84), (-33.87, 151.21), (-27.47, 153.03)]
        self.assertEqual(decluster(points), [LatLng(*p) for p in points])

    def test_empty(self):
        self.assertEqual(decluster([]), [])

    def test_length_and_order(self):
        points = [(-12.46, 130.84)] * 4 + [(-33.87, 151.21)]
        result = decluster(points)

        self.assertEqual(len(result), len(points))
        self.assertEqual(result[-1], LatLng(-33.87, 151.21))

    def test_collisions_are_spread(self):
        points = [(-12.46, 130.84)] * 3
        result = decluster(points)

        # The first member of a group stays put
        self.assertEqual(result[0], LatLng(-12.46, 130.84))
        self.assertEqual(len(set(result)), 3)

        lng_scale = max(0.25, math.cos(math.radians(-12.46)))
        expected_lat = -12.46 + JITTER_BASE_DEGREES * math.sin(GOLDEN_ANGLE)
        expected_lng = (
            130.84 + JITTER_BASE_DEGREES * math.cos(GOLDEN_ANGLE) * lng_scale
        )
        self.assertAlmostEqual(result[1].lat, expected_lat, places=12)
        self.assertAlmostEqual(result[1].lng, expected_lng, places=12)

    def test_rounding_defines_collisions(self):
        # Equal after rounding to six decimal places
        result = decluster([(-12.4600001, 130.84), (-12.46, 130.8400002)])
        self.assertEqual(result[0], LatLng(-12.4600001, 130.84))
        self.assertNotEqual(result[1], LatLng(-12.46, 130.8400002))

    def test_exact_halves_round_away_from_zero(self):
        # 1/128 is exactly halfway between two six-place values
        result = decluster([(0.0078125, 10.0), (0.007813, 10.0)])
        self.assertEqual(result[0], LatLng(0.0078125, 10.0))
        self.assertNotEqual(result[1], LatLng(0.007813, 10.0))

    def test_displacement_is_bounded(self):
        points = [(10.0, 20.0)] * 500
        for lat, lng in decluster(points):
            self.assertLessEqual(abs(lat - 10.0), JITTER_MAX_RADIUS_DEGREES + 1e-12)
            self.assertLessEqual(abs(lng - 20.0), JITTER_MAX_RADIUS_DEGREES + 1e-12)

    def test_missing_coordinates_pass_through(self):
        result = decluster([(None, None), (-12.46, 130.84), (None, None)])
        self.assertEqual(result[1], LatLng(-12.46, 130.84))
        self.assertIsNone(result[0].lat)
        self.assertIsNone(result[2].lng)

    def test_base_degrees(self):
        result = decluster([(0.0, 0.0)] * 2, base_degrees=0.001)
        self.assertAlmostEqual(
            math.hypot(result[1].lat, result[1].lng), 0.001, places=12
        )

    def test_original_columns_are_kept(self):
        df = pl.DataFrame(
            {"latitude": [1.0, 1.0], "longitude": [2.0, 2.0], "id": ["a", "b"]}
        )
        result = with_declustered_coordinates(df).collect()

        self.assertEqual(result["latitude"].to_list(), [1.0, 1.0])
        self.assertEqual(result["id"].to_list(), ["a", "b"])
        self.assertEqual(
            result.columns,
            ["latitude", "longitude", "id", "displayLatitude", "displayLongitude"],
        )


class TestCoordinateKey(unittest.TestCase):
    def test_coordinate_key(self):
        self.assertEqual(coordinate_key(-12.46), "-12.460000")
        self.assertEqual(coordinate_key(130.8400002), "130.840000")
        self.assertEqual(coordinate_key(0.0078125), "0.007813")
        self.assertEqual(coordinate_key(-0.0078125), "-0.007813")
        self.assertEqual(coordinate_key(-0.0), "0.000000")
        self.assertEqual(coordinate_key(1.25, precision=1), "1.3")


class TestDisplayPointSchema(unittest.TestCase):
    def test_build_df(self):
        df = DisplayPointSchema.build_df(mock_observation_lf(), ALL_LABELS)

        # Observation 2 has no coordinates
        self.assertEqual(df["observationIndex"].to_list(), [0, 1, 3, 4, 5])
        self.assertEqual(
            (df["displayLatitude"][0], df["displayLongitude"][0]), (-12.46, 130.84)
        )
        self.assertNotEqual(
            (df["displayLatitude"][1], df["displayLongitude"][1]), (-12.46, 130.84)
        )
        self.assertEqual(df["latitude"][1], -12.46)
        self.assertEqual(df["displayLatitude"][4], df["latitude"][4])

    def test_selection(self):
        df = DisplayPointSchema.build_df(mock_observation_lf(), {"Root-knot nematodes"})
        self.assertEqual(df["observationIndex"].to_list(), [0, 1])

        df = DisplayPointSchema.build_df(mock_observation_lf(), set())
        self.assertEqual(df.height, 0)

    def test_out_of_range_coordinates_are_not_marked(self):
        observation_lf = ObservationSchema.build_lf(
            {
                "g": {
                    "Common name": "A",
                    "Entries": [
                        # Latitude and longitude swapped
                        {"Latitude (°S)": 130.84, "Longitude (°E)": -12.46},
                        {"Latitude (°S)": -12.46, "Longitude (°E)": 130.84},
                    ],
                }
            }
        )
        df = DisplayPointSchema.build_df(observation_lf, ALL_LABELS)

        self.assertEqual(df["observationIndex"].to_list(), [1])

    def test_non_finite_sample_size(self):
        observation_lf = ObservationSchema.build_lf(
            {
                "g": {
                    "Common name": "A",
                    "Entries": [
                        {
                            "Latitude (°S)": -12.46,
                            "Longitude (°E)": 130.84,
                            "Sample Size": float("nan"),
                        },
                        {
                            "Latitude (°S)": -12.46,
                            "Longitude (°E)": 130.84,
                            "Sample Size": "9" * 400,
                        },
                    ],
                }
            }
        )
        df = DisplayPointSchema.build_df(observation_lf, ALL_LABELS)

        self.assertEqual(df.height, 2)


if __name__ == "__main__":
    unittest.main()
