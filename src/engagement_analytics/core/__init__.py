"""Core aggregation engine components."""

from .service import EngagementAnalyticsService, EngagementReport
from .processor import EventProcessor
from .scoring import EventScorer
from .time_range import compute_window
from .timezone_utils import TimezoneResolver, project_local_time
from .aggregation import (
    aggregate,
    aggregate_event_types,
    aggregate_hourly_data,
    safe_average,
    to_weekday_totals,
)

__all__ = [
    "EngagementAnalyticsService",
    "EngagementReport",
    "EventProcessor",
    "EventScorer",
    "compute_window",
    "TimezoneResolver",
    "project_local_time",
    "aggregate",
    "aggregate_event_types",
    "aggregate_hourly_data",
    "safe_average",
    "to_weekday_totals",
]
