import unittest

from helpers import _timestamps, route_from

from route_overlay.alignment import (
    DistanceTimeMap,
    build_time_distance_map,
    find_index_at_distance,
    get_time_at_distance,
)
from route_overlay.models import Coordinate

THREE_POINTS = [Coordinate(0, 0), Coordinate(0.009, 0), Coordinate(0.018, 0)]


class TimeDistanceMapTests(unittest.TestCase):
    def test_builds_cumulative_map(self):
        route = route_from(THREE_POINTS, _timestamps(3, step_seconds=300))

        time_map = build_time_distance_map(route)

        self.assertEqual(time_map.distances[0], 0)
        self.assertEqual(time_map.times, (0, 300, 600))
        self.assertAlmostEqual(time_map.max_distance, 2.0, places=2)

    def test_untimed_sample_still_adds_distance(self):
        t = _timestamps(3, step_seconds=300)
        route = route_from(THREE_POINTS, [t[0], None, t[2]])

        time_map = build_time_distance_map(route)

        self.assertEqual(len(time_map.distances), 2)
        self.assertAlmostEqual(time_map.distances[1], 2.0, places=2)
        self.assertEqual(time_map.times[1], 600)

    def test_no_map_without_usable_timestamps(self):
        t = _timestamps(3)
        self.assertIsNone(build_time_distance_map(route_from([Coordinate(0, 0)], [None])))
        self.assertIsNone(build_time_distance_map(route_from([], [])))
        self.assertIsNone(build_time_distance_map(route_from(THREE_POINTS, [None, t[1], t[2]])))
        self.assertIsNone(build_time_distance_map(route_from([Coordinate(0, 0)], [t[0]])))


class TimeAtDistanceTests(unittest.TestCase):
    time_map = DistanceTimeMap((0, 1, 2, 3), (0, 300, 600, 900))

    def test_interpolates(self):
        self.assertEqual(get_time_at_distance(self.time_map, 1.5), 450)

    def test_exact_and_edge_distances(self):
        self.assertEqual(get_time_at_distance(self.time_map, 1), 300)
        self.assertEqual(get_time_at_distance(self.time_map, 3), 900)
        self.assertEqual(get_time_at_distance(self.time_map, 0), 0)
        self.assertEqual(get_time_at_distance(self.time_map, -1), 0)

    def test_beyond_route_or_missing_map(self):
        self.assertIsNone(get_time_at_distance(self.time_map, 3.5))
        self.assertIsNone(get_time_at_distance(None, 1))

    def test_repeated_distances(self):
        time_map = DistanceTimeMap((0, 1, 1, 2), (0, 300, 320, 620))
        self.assertEqual(get_time_at_distance(time_map, 1.5), 470)
        self.assertEqual(get_time_at_distance(time_map, 1), 320)


class FindIndexTests(unittest.TestCase):
    def test_last_index_not_past_target(self):
        distances = [0, 1, 2, 3, 4, 5]
        self.assertEqual(find_index_at_distance(distances, 2.5), 2)
        self.assertEqual(find_index_at_distance(distances, 3), 3)

    def test_clamped(self):
        distances = [0, 1, 2, 3, 4, 5]
        self.assertEqual(find_index_at_distance(distances, -1), 0)
        self.assertEqual(find_index_at_distance(distances, 10), 5)


if __name__ == "__main__":
    unittest.main()
