"""Data access layer for the engagement analytics service."""

from .repository import DataSourceError, EventRepository

__all__ = ["DataSourceError", "EventRepository"]
