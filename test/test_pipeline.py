import unittest

from nematode_map.cache import PresenceCache, presence_cache_key
from nematode_map.pipeline import MapInputs, recompute
from nematode_map.types import ALL_LABELS
from test.fixtures.observation_source import mock_observation_lf
from test.fixtures.region import mock_region_df


class TestRecompute(unittest.TestCase):
    def test_recompute(self):
        outputs = recompute(MapInputs(mock_region_df(), mock_observation_lf()))

        self.assertEqual(
            outputs.presence_index,
            {
                "Darwin": ["Root-knot nematodes", "Root-knot nematodes"],
                "Palmerston": ["Root-lesion nematodes"],
                "Greater Darwin": ["Root-lesion nematodes"],
            },
        )
        self.assertEqual(outputs.presence.height, 4)
        self.assertEqual(outputs.display_points.height, 5)
        self.assertEqual(outputs.label_colors.height, 3)

    def test_display_points_do_not_change_presence(self):
        outputs = recompute(MapInputs(mock_region_df(), mock_observation_lf()))

        # Observation 1 is moved off the shared spot but is still counted in Darwin
        moved = outputs.display_points.filter(
            outputs.display_points["observationIndex"] == 1
        )
        self.assertNotEqual(moved["displayLongitude"][0], moved["longitude"][0])
        self.assertIn(1, outputs.presence["observationIndex"].to_list())

    def test_selection_change(self):
        region_df = mock_region_df()
        observation_lf = mock_observation_lf()

        selected = recompute(MapInputs(region_df, observation_lf, {"Cyst nematodes"}))
        self.assertEqual(selected.presence_index, {})
        self.assertEqual(selected.display_points.height, 1)

        # Colors cover every label regardless of selection
        self.assertEqual(selected.label_colors.height, 3)

        nothing = recompute(MapInputs(region_df, observation_lf, set()))
        self.assertEqual(nothing.presence.height, 0)
        self.assertEqual(nothing.display_points.height, 0)

    def test_recompute_with_cache(self):
        cache = PresenceCache()
        inputs = MapInputs(mock_region_df(), mock_observation_lf(), ALL_LABELS)

        first = recompute(inputs, cache=cache)
        second = recompute(inputs, cache=cache)

        self.assertEqual(len(cache), 1)
        self.assertIs(first.presence, second.presence)
        self.assertEqual(first.presence_index, second.presence_index)


class TestPresenceCache(unittest.TestCase):
    def test_key_depends_on_selection(self):
        region_df = mock_region_df()
        observation_lf = mock_observation_lf()

        all_key = presence_cache_key(region_df, observation_lf, ALL_LABELS)
        self.assertEqual(
            all_key, presence_cache_key(region_df, observation_lf, ALL_LABELS)
        )
        self.assertNotEqual(
            all_key, presence_cache_key(region_df, observation_lf, {"Cyst nematodes"})
        )
        self.assertEqual(
            presence_cache_key(region_df, observation_lf, {"a", "b"}),
            presence_cache_key(region_df, observation_lf, {"b", "a"}),
        )

    def test_key_depends_on_regions(self):
        observation_lf = mock_observation_lf()
        region_df = mock_region_df()

        self.assertNotEqual(
            presence_cache_key(region_df, observation_lf, ALL_LABELS),
            presence_cache_key(region_df.head(1), observation_lf, ALL_LABELS),
        )

    def test_get_or_build(self):
        cache = PresenceCache()
        region_df = mock_region_df()
        observation_lf = mock_observation_lf()

        first = cache.get_or_build(region_df, observation_lf, ALL_LABELS)
        second = cache.get_or_build(region_df, observation_lf, ALL_LABELS)
        self.assertIs(first, second)

        cache.get_or_build(region_df, observation_lf, {"Root-knot nematodes"})
        self.assertEqual(len(cache), 2)
        self.assertIn(
            presence_cache_key(region_df, observation_lf, ALL_LABELS), cache
        )

        cache.clear()
        self.assertEqual(len(cache), 0)
        self.assertEqual(list(cache.keys()), [])


if __name__ == "__main__":
    unittest.main()
