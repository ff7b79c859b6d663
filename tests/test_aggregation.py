"""Tests for engagement aggregation."""

from datetime import date
import math
import unittest

from engagement_analytics.core.aggregation import (
    aggregate,
    aggregate_event_types,
    aggregate_hourly_data,
    safe_average,
    to_weekday_totals,
)
from engagement_analytics.core.scoring import EventScorer
from engagement_analytics.models import EngagementAggregate, EventType, RawEvent
from engagement_analytics.models.config import DEFAULT_EVENT_WEIGHTS
from tests.fixtures import epoch_millis, scored_event


class TestAggregate(unittest.TestCase):

    def test_groups_by_artist_hour_and_day(self):
        events = [
            scored_event(10, 3, 1),
            scored_event(10, 3, 3),
            scored_event(11, 3, 2),
            scored_event(10, 3, 2, artist_id=2, artist_name="Artist 2"),
        ]
        result = aggregate(events)

        self.assertEqual(len(result), 3)
        first = result[0]
        self.assertEqual((first.artist_id, first.local_hour, first.day_of_week), (1, 10, 3))
        self.assertEqual(first.total_engagement, 4)
        self.assertEqual(first.event_count, 2)
        self.assertEqual(first.mean_engagement, 2.0)
        self.assertIsNone(first.event_date)

    def test_event_count_matches_input(self):
        events = [scored_event(h % 24, h % 7, 1 + h % 3) for h in range(100)]
        result = aggregate(events)
        self.assertEqual(sum(agg.event_count for agg in result), 100)
        self.assertEqual(sum(agg.total_engagement for agg in result), sum(e.engagement_score for e in events))

    def test_ordering(self):
        events = [
            scored_event(5, 6, 1, artist_id=2, artist_name="Artist 2"),
            scored_event(23, 0, 1),
            scored_event(1, 0, 1),
            scored_event(0, 4, 1),
        ]
        keys = [(a.artist_id, a.day_of_week, a.local_hour) for a in aggregate(events)]
        self.assertEqual(keys, [(1, 0, 1), (1, 0, 23), (1, 4, 0), (2, 6, 5)])

    def test_historical_grouping_keeps_dates_apart(self):
        events = [
            scored_event(10, 3, 1, event_date=date(2024, 1, 17)),
            scored_event(10, 3, 2, event_date=date(2024, 1, 10)),
        ]
        result = aggregate(events, include_date=True)
        self.assertEqual([a.event_date for a in result], [date(2024, 1, 10), date(2024, 1, 17)])
        self.assertEqual(len(aggregate(events)), 1)

    def test_is_idempotent(self):
        events = [scored_event(h % 24, h % 7, 1 + h % 3) for h in range(50)]
        self.assertEqual(aggregate(events), aggregate(events))


class TestAggregateHourlyData(unittest.TestCase):

    def test_weekday_average(self):
        events = [scored_event(10, 3, 1), scored_event(10, 3, 2), scored_event(10, 3, 3)]
        result = aggregate_hourly_data(events)
        self.assertEqual(result.weekday[10], 2.0)
        self.assertEqual(result.all_days[10], 2.0)
        self.assertEqual(result.weekend[10], 0.0)

    def test_saturday_and_sunday_are_weekend(self):
        result = aggregate_hourly_data([scored_event(8, 0, 2), scored_event(8, 6, 4)])
        self.assertEqual(result.weekend[8], 3.0)
        self.assertEqual(result.weekday[8], 0.0)

    def test_arrays_have_24_entries_and_empty_hours_are_zero(self):
        result = aggregate_hourly_data([])
        for series in (result.weekday, result.weekend, result.all_days):
            self.assertEqual(len(series), 24)
            self.assertTrue(all(v == 0.0 and not math.isnan(v) for v in series))

    def test_all_days_combines_weekday_and_weekend(self):
        entries = [
            scored_event(9, 1, 1),
            scored_event(9, 2, 3),
            scored_event(9, 0, 2),
            scored_event(20, 6, 3),
        ]
        result = aggregate_hourly_data(entries)
        self.assertEqual(result.weekday[9], 2.0)
        self.assertEqual(result.weekend[9], 2.0)
        self.assertEqual(result.all_days[9], 6 / 3)
        self.assertEqual(result.all_days[20], 3.0)

    def test_counts_each_grouped_row_once(self):
        rows = [
            EngagementAggregate(artist_id=1, artist_name="Artist 1", local_hour=14,
                                day_of_week=1, total_engagement=6, event_count=3),
            EngagementAggregate(artist_id=1, artist_name="Artist 1", local_hour=14,
                                day_of_week=2, total_engagement=2, event_count=1),
        ]
        result = aggregate_hourly_data(rows)
        self.assertEqual(result.weekday[14], 4.0)

    def test_out_of_range_values_are_dropped(self):
        entries = [
            {"local_hour": 24, "day_of_week": 1, "total_engagement": 5},
            {"local_hour": -1, "day_of_week": 1, "total_engagement": 5},
            {"local_hour": 3, "day_of_week": 7, "total_engagement": 5},
            {"local_hour": 3, "day_of_week": "x", "total_engagement": 5},
            {"local_hour": "3", "day_of_week": "2", "total_engagement": 4},
        ]
        result = aggregate_hourly_data(entries)
        self.assertEqual(result.weekday[3], 4.0)
        self.assertEqual(result.all_days[3], 4.0)
        self.assertEqual(sum(result.all_days), 4.0)

    def test_float_strings_for_hour_and_day(self):
        entries = [{"local_hour": "3.0", "day_of_week": "6.0", "total_engagement": 8}]
        result = aggregate_hourly_data(entries)
        self.assertEqual(result.weekend[3], 8.0)
        self.assertEqual(result.all_days[3], 8.0)


class TestWeekdayTotals(unittest.TestCase):

    def test_sums_per_day(self):
        entries = [scored_event(1, 0, 1), scored_event(2, 0, 2), scored_event(3, 5, 3)]
        self.assertEqual(to_weekday_totals(entries), [3, 0, 0, 0, 0, 3, 0])

    def test_malformed_days_are_skipped(self):
        entries = [
            {"day_of_week": "3", "total_engagement": 4},
            {"day_of_week": "x", "total_engagement": 100},
            {"day_of_week": 9, "total_engagement": 100},
            {"day_of_week": -1, "total_engagement": 100},
            {"day_of_week": None, "total_engagement": 100},
        ]
        self.assertEqual(to_weekday_totals(entries), [0, 0, 0, 4, 0, 0, 0])

    def test_numeric_strings_are_accepted(self):
        entries = [
            {"day_of_week": "3.0", "total_engagement": "4"},
            {"day_of_week": " 5 ", "total_engagement": 2},
            {"day_of_week": "2.5", "total_engagement": 100},
            {"day_of_week": "inf", "total_engagement": 100},
        ]
        self.assertEqual(to_weekday_totals(entries), [0, 0, 0, 4, 0, 2, 0])


class TestEventTypeAggregation(unittest.TestCase):

    def test_weighted_counts_sorted_per_artist(self):
        scorer = EventScorer(DEFAULT_EVENT_WEIGHTS)
        millis = epoch_millis(2024, 1, 10, 12)
        events = [
            RawEvent(artist_id=2, user_id=1, event_type="play_track", created_at=millis),
            RawEvent(artist_id=1, user_id=1, event_type="play_track", created_at=millis),
            RawEvent(artist_id=1, user_id=1, event_type="play_track", created_at=millis),
            RawEvent(artist_id=1, user_id=1, event_type="play_track", created_at=millis),
            RawEvent(artist_id=1, user_id=2, event_type="share_track", created_at=millis),
            RawEvent(artist_id=1, user_id=2, event_type="like_track", created_at=millis),
            RawEvent(artist_id=1, user_id=2, event_type="skip_track", created_at=millis),
            RawEvent(artist_id=7, user_id=2, event_type="share_track", created_at=millis),
        ]
        result = aggregate_event_types(events, {1: "Artist 1", 2: "Artist 2"}, scorer)

        self.assertEqual(
            [(a.artist_id, a.event_type, a.weighted_count) for a in result],
            [
                (1, EventType.PLAY_TRACK, 3),
                (1, EventType.SHARE_TRACK, 3),
                (1, EventType.LIKE_TRACK, 2),
                (2, EventType.PLAY_TRACK, 1),
            ],
        )
        share = result[1]
        self.assertEqual((share.count, share.weight), (1, 3))


class TestSafeAverage(unittest.TestCase):

    def test_empty_bucket_is_zero(self):
        self.assertEqual(safe_average(0, 0), 0.0)
        self.assertEqual(safe_average(5, 0), 0.0)

    def test_average(self):
        self.assertEqual(safe_average(6, 3), 2.0)


if __name__ == "__main__":
    unittest.main()
