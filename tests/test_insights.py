import unittest

from helpers import START, _timestamps, route_from

from route_overlay.geo import cumulative_distances
from route_overlay.insights import (
    calculate_activity_totals,
    calculate_elevation_summary,
    calculate_fastest_pace,
    calculate_heart_rate_drift,
    calculate_optimal_cadence,
    calculate_pace_consistency,
    calculate_split_analysis,
    calculate_time_of_day,
    time_of_day_label,
)
from route_overlay.models import Coordinate


def _route(paces=None, heart_rates=None, cadences=None):
    count = max(len(paces or []), len(heart_rates or []), len(cadences or []))
    coords = [Coordinate(i * 0.0009, 0) for i in range(count)]
    return route_from(coords, _timestamps(count, 30), heart_rates=heart_rates, cadences=cadences, paces=paces)


class SplitAnalysisTests(unittest.TestCase):
    def test_negative_split(self):
        result = calculate_split_analysis(_route(paces=[5.0] * 10 + [4.5] * 10))

        self.assertEqual(result.verdict, 'negative')
        self.assertAlmostEqual(result.difference_percent, -10.0)
        self.assertEqual(result.first_half_pace, 5.0)

    def test_even_and_positive(self):
        self.assertEqual(calculate_split_analysis(_route(paces=[5.0] * 20)).verdict, 'even')
        self.assertEqual(calculate_split_analysis(_route(paces=[5.0] * 10 + [5.5] * 10)).verdict, 'positive')

    def test_missing_half(self):
        self.assertIsNone(calculate_split_analysis(_route(paces=[None] * 10 + [5.0] * 10)))


class ConsistencyTests(unittest.TestCase):
    def test_steady(self):
        result = calculate_pace_consistency(_route(paces=[5.0] * 20))
        self.assertEqual(result.verdict, 'steady')
        self.assertEqual(result.coefficient_of_variation, 0)

    def test_variable(self):
        result = calculate_pace_consistency(_route(paces=[3.0, 7.0] * 10))
        self.assertEqual(result.verdict, 'variable')
        self.assertAlmostEqual(result.coefficient_of_variation, 40.0)

    def test_too_few_reasonable_paces(self):
        self.assertIsNone(calculate_pace_consistency(_route(paces=[5.0] * 5 + [25.0] * 10)))


class HeartRateDriftTests(unittest.TestCase):
    def test_drift(self):
        result = calculate_heart_rate_drift(_route(heart_rates=[140] * 10 + [160] * 10 + [250]))

        self.assertEqual(result.drift, 20)
        self.assertEqual(result.maximum, 160)
        self.assertEqual(result.average, 150)

    def test_not_enough_samples(self):
        self.assertIsNone(calculate_heart_rate_drift(_route(heart_rates=[150] * 9)))


class CadenceAndPeakTests(unittest.TestCase):
    def test_optimal_cadence_uses_fastest_tenth(self):
        route = _route(paces=[4.0] * 2 + [6.0] * 18, cadences=[180] * 2 + [160] * 18)
        self.assertEqual(calculate_optimal_cadence(route), 180)

    def test_optimal_cadence_needs_pairs(self):
        self.assertIsNone(calculate_optimal_cadence(_route(paces=[5.0] * 10, cadences=[170] * 10)))

    def test_fastest_pace(self):
        paces = [6.0] * 20
        paces[10] = paces[11] = 4.0
        route = _route(paces=paces)

        result = calculate_fastest_pace(route)

        self.assertEqual(result.window, 2)
        self.assertEqual(result.pace, 4.0)
        self.assertEqual(result.distance_km, cumulative_distances(route.coordinates)[11])

    def test_fastest_pace_needs_samples(self):
        self.assertIsNone(calculate_fastest_pace(_route(paces=[5.0] * 5)))


class ElevationSummaryTests(unittest.TestCase):
    def _route(self, elevations):
        coords = [Coordinate(i * 0.0009, 0) for i in range(len(elevations))]
        return route_from(coords, _timestamps(len(elevations), 30), elevations=elevations)

    def test_net_uphill(self):
        route = self._route([100.0 + 2 * i for i in range(20)])

        result = calculate_elevation_summary(route)

        self.assertEqual(result.net, 38.0)
        self.assertEqual(result.direction, 'uphill')
        self.assertEqual(result.gain, route.stats.elevation_gain)

    def test_net_downhill_and_level(self):
        self.assertEqual(calculate_elevation_summary(self._route([200.0 - 3 * i for i in range(12)])).direction,
                         'downhill')
        level = calculate_elevation_summary(self._route([100.0, 130.0] * 6 + [110.0]))
        self.assertEqual(level.net, 10.0)
        self.assertIsNone(level.direction)

    def test_needs_elevations(self):
        self.assertIsNone(calculate_elevation_summary(self._route([100.0] * 5 + [None] * 10)))


class ActivityTotalsTests(unittest.TestCase):
    def test_steps_and_heartbeats(self):
        # 21 samples, 30 s apart: 10 minutes
        totals = calculate_activity_totals(_route(heart_rates=[150] * 21, cadences=[180] * 21))

        self.assertEqual(totals.steps, 1800)
        self.assertEqual(totals.heartbeats, 1500)

    def test_default_cadence_without_sensors(self):
        totals = calculate_activity_totals(_route(paces=[5.0] * 21))

        self.assertEqual(totals.steps, 1700)
        self.assertIsNone(totals.heartbeats)

    def test_needs_duration(self):
        coords = [Coordinate(i * 0.0009, 0) for i in range(5)]
        self.assertIsNone(calculate_activity_totals(route_from(coords, [None] * 5)))


class TimeOfDayTests(unittest.TestCase):
    def test_labels(self):
        self.assertEqual(time_of_day_label(5), 'Early Bird')
        self.assertEqual(time_of_day_label(6), 'Morning')
        self.assertEqual(time_of_day_label(12), 'Afternoon')
        self.assertEqual(time_of_day_label(19), 'Evening')
        self.assertEqual(time_of_day_label(20), 'Night Owl')

    def test_uses_local_start(self):
        result = calculate_time_of_day(_route(paces=[5.0] * 3))

        self.assertEqual(result.start, START)
        self.assertEqual(result.label, time_of_day_label(START.astimezone().hour))

    def test_missing_first_timestamp(self):
        coords = [Coordinate(0, 0), Coordinate(0.001, 0)]
        self.assertIsNone(calculate_time_of_day(route_from(coords, [None, START])))


if __name__ == "__main__":
    unittest.main()
