"""
Artist Engagement Analytics

Time-of-day and day-of-week engagement aggregation for artists, with
renderer-agnostic chart descriptors.
"""

from .core import EngagementAnalyticsService
from .models import ServiceConfig, AnalyticsQuery, EventType, ViewMode, TimeRange

__version__ = "0.1.0"
__all__ = [
    "EngagementAnalyticsService",
    "ServiceConfig",
    "AnalyticsQuery",
    "EventType",
    "ViewMode",
    "TimeRange",
]
