"""Data models and types for the engagement analytics service."""

from .events import (
    EventType,
    RawEvent,
    User,
    Artist,
    ScoredLocalEvent,
    EngagementAggregate,
    EventTypeAggregate,
    DayAggregation,
    VisitSummary,
)
from .query import AnalyticsQuery, DateBasis, DateWindow, TimeRange, ViewMode
from .config import AnalyticsConfig, ChartStyleConfig, DatabaseConfig, ServiceConfig

__all__ = [
    "EventType",
    "RawEvent",
    "User",
    "Artist",
    "ScoredLocalEvent",
    "EngagementAggregate",
    "EventTypeAggregate",
    "DayAggregation",
    "VisitSummary",
    "AnalyticsQuery",
    "DateBasis",
    "DateWindow",
    "TimeRange",
    "ViewMode",
    "AnalyticsConfig",
    "ChartStyleConfig",
    "DatabaseConfig",
    "ServiceConfig",
]
