"""Tests for historical window computation."""

from datetime import date
import unittest

from engagement_analytics.core.time_range import compute_window
from engagement_analytics.models import DateWindow, TimeRange, ViewMode


class TestComputeWindow(unittest.TestCase):

    def test_average_mode_has_no_window(self):
        self.assertIsNone(compute_window("average", "week", "2024-01-10"))
        self.assertIsNone(compute_window(ViewMode.AVERAGE, TimeRange.YEAR, date(2024, 1, 10)))

    def test_any_other_mode_has_no_window(self):
        self.assertIsNone(compute_window("live", "day", "2024-01-10"))

    def test_day(self):
        window = compute_window("historical", "day", "2024-01-10")
        self.assertEqual(window, DateWindow(start_date=date(2024, 1, 10), end_date=date(2024, 1, 10)))

    def test_week_runs_sunday_to_saturday(self):
        window = compute_window("historical", "week", "2024-01-10")
        self.assertEqual(window.start_date, date(2024, 1, 7))
        self.assertEqual(window.end_date, date(2024, 1, 13))

    def test_week_on_boundaries(self):
        sunday = compute_window("historical", "week", date(2024, 1, 7))
        saturday = compute_window("historical", "week", date(2024, 1, 13))
        self.assertEqual(sunday, saturday)
        self.assertEqual(sunday.start_date, date(2024, 1, 7))

    def test_week_crossing_year_end(self):
        window = compute_window(ViewMode.HISTORICAL, TimeRange.WEEK, date(2025, 1, 1))
        self.assertEqual(window.start_date, date(2024, 12, 29))
        self.assertEqual(window.end_date, date(2025, 1, 4))

    def test_month_in_leap_year(self):
        window = compute_window("historical", "month", "2024-02-15")
        self.assertEqual(window.start_date, date(2024, 2, 1))
        self.assertEqual(window.end_date, date(2024, 2, 29))

    def test_month_in_common_year(self):
        window = compute_window("historical", "month", "2023-02-15")
        self.assertEqual(window.end_date, date(2023, 2, 28))

    def test_year(self):
        window = compute_window("historical", "year", "2024-06-30")
        self.assertEqual(window.start_date, date(2024, 1, 1))
        self.assertEqual(window.end_date, date(2024, 12, 31))

    def test_window_bounds_are_inclusive(self):
        window = compute_window("historical", "week", "2024-01-10")
        self.assertTrue(window.contains(date(2024, 1, 7)))
        self.assertTrue(window.contains(date(2024, 1, 13)))
        self.assertFalse(window.contains(date(2024, 1, 14)))
        self.assertFalse(window.contains(date(2024, 1, 6)))

    def test_unknown_time_range_is_rejected(self):
        with self.assertRaises(ValueError):
            compute_window("historical", "decade", "2024-01-10")


if __name__ == "__main__":
    unittest.main()
