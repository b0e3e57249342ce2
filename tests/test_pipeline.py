import os
import tempfile
import unittest

from helpers import _timestamps, gpx_document

from route_overlay.loader import RouteParseError
from route_overlay.models import Coordinate, RawRoute
from route_overlay.pipeline import build_route, load_route

# ~27.8 m of latitude: 10 km/h when covered in 10 s
STEP_10KMH = 0.00025


def _raw(count=21, **channels):
    return RawRoute(
        coordinates=[Coordinate(i * STEP_10KMH, 0) for i in range(count)],
        timestamps=_timestamps(count, step_seconds=10),
        elevations=[100.0 + i for i in range(count)],
        filename='Sunday_Long_Run.gpx',
        **channels,
    )


class BuildRouteTests(unittest.TestCase):
    def test_derived_speeds_and_stats(self):
        route = build_route(_raw())

        self.assertEqual(route.display_name, 'Sunday Long Run')
        self.assertEqual(len(route.speeds), 21)
        self.assertEqual(len(route.paces), 21)
        self.assertIsNone(route.speeds[0])
        self.assertAlmostEqual(route.speeds[10], 10.0, delta=0.1)
        self.assertAlmostEqual(route.paces[10], 6.0, delta=0.1)
        self.assertAlmostEqual(route.stats.distance, 0.556, places=2)
        self.assertEqual(route.stats.elevation_gain, 20)
        self.assertEqual(route.stats.duration, 200)

    def test_device_speeds_are_preferred(self):
        route = build_route(_raw(speeds=[10.8] * 21))

        self.assertEqual(route.speeds[0], 10.8)
        self.assertAlmostEqual(route.paces[5], 60 / 10.8)

    def test_gps_spike_is_rejected(self):
        raw = _raw()
        raw.coordinates[8] = Coordinate(0.05, 0)

        route = build_route(raw)

        self.assertIsNone(route.speeds[8])
        self.assertIsNone(route.paces[8])
        for speed, pace in zip(route.speeds, route.paces):
            self.assertEqual(speed is None, pace is None)
            if speed is not None:
                self.assertAlmostEqual(pace, 60 / speed)

    def test_skipped_points_are_reported(self):
        raw = _raw()
        raw.coordinates[3] = Coordinate(95, 0)

        route = build_route(raw)

        self.assertEqual(route.skipped, 1)
        self.assertEqual(len(route.coordinates), 20)
        self.assertEqual(len(route.timestamps), 20)
        self.assertIn('Point 3: skipped (lat_out_of_range)', route.warnings)

    def test_nothing_valid(self):
        raw = RawRoute(coordinates=[Coordinate(None, None), Coordinate(100, 0)], filename='bad.gpx')
        with self.assertRaisesRegex(RouteParseError, 'No valid track points'):
            build_route(raw)


class LoadRouteTests(unittest.TestCase):
    def test_load_route_from_gpx(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'track.gpx')
            with open(path, 'w') as f:
                f.write(gpx_document(31, hr=150))

            route = load_route(path)

        self.assertEqual(route.filename, 'track.gpx')
        self.assertTrue(route.has_timestamps())
        self.assertAlmostEqual(route.stats.distance, 3.0, delta=0.01)
        self.assertEqual(route.stats.duration, 900)
        self.assertEqual(route.heart_rates[0], 150)
        # 100 m every 30 s
        self.assertAlmostEqual(route.speeds[15], 12.0, delta=0.1)


if __name__ == "__main__":
    unittest.main()
