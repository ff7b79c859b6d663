"""Chart descriptor generation."""

from .builder import ChartConfigBuilder, hour_labels, sort_artists

__all__ = ["ChartConfigBuilder", "hour_labels", "sort_artists"]
