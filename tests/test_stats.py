import unittest

from route_overlay.stats import calculate_mad, filter_outliers_iqr, filter_outliers_mad, median, rolling_median


class RobustStatisticsTests(unittest.TestCase):
    def test_median(self):
        self.assertEqual(median([3, 1, 2]), 2)
        self.assertEqual(median([1, 2, 3, 4]), 2.5)
        self.assertIsNone(median([]))
        self.assertIsNone(median(None))

    def test_mad(self):
        result = calculate_mad([1, 2, 3, 4, 100])
        self.assertEqual(result.median, 3)
        self.assertEqual(result.mad, 1)

        empty = calculate_mad([])
        self.assertIsNone(empty.median)
        self.assertIsNone(empty.mad)

    def test_iqr_removes_outlier_and_keeps_order(self):
        self.assertEqual(filter_outliers_iqr([10, 12, 11, 13, 100, 12]), [10, 12, 11, 13, 12])

    def test_iqr_short_input_unchanged(self):
        data = [1, 1000, 2]
        self.assertIs(filter_outliers_iqr(data), data)

    def test_mad_filter(self):
        self.assertEqual(filter_outliers_mad([10, 11, 12, 11, 10, 50]), [10, 11, 12, 11, 10])

    def test_mad_short_input_unchanged(self):
        data = [1, 1000, 2]
        self.assertIs(filter_outliers_mad(data), data)

    def test_mad_filter_with_zero_spread_keeps_everything(self):
        data = [5, 5, 5, 5, 9]
        self.assertEqual(filter_outliers_mad(data), data)

    def test_rolling_median_skips_missing(self):
        smoothed = rolling_median([10, None, 12, 11, 13], 3)

        self.assertEqual(len(smoothed), 5)
        self.assertEqual(smoothed[2], 11.5)
        self.assertEqual(smoothed[1], 11)

    def test_rolling_median_keeps_original_when_window_empty(self):
        self.assertEqual(rolling_median([None, None, None], 3), [None, None, None])

    def test_rolling_median_short_input_unchanged(self):
        data = [1, 2]
        self.assertIs(rolling_median(data, 5), data)

    def test_rolling_median_damps_spike(self):
        smoothed = rolling_median([10, 10, 50, 10, 10], 5)
        self.assertEqual(smoothed[2], 10)


if __name__ == "__main__":
    unittest.main()
