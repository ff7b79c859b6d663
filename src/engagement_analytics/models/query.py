"""Query parameter models."""

from datetime import date
from enum import Enum
from pydantic import BaseModel, Field, model_validator


class ViewMode(str, Enum):
    """Whether to use all history or a bounded calendar window."""
    AVERAGE = "average"
    HISTORICAL = "historical"


class TimeRange(str, Enum):
    """Calendar window sizes for historical mode."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class DateBasis(str, Enum):
    """Which calendar date of an event is compared against a window."""
    LOCAL = "local"
    UTC = "utc"


class AnalyticsQuery(BaseModel):
    """Caller supplied query parameters."""
    view_mode: ViewMode = ViewMode.AVERAGE
    time_range: TimeRange = TimeRange.DAY
    reference_date: date = Field(default_factory=date.today, description="Anchor date for historical windows")

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def is_historical(self) -> bool:
        return self.view_mode == ViewMode.HISTORICAL


class DateWindow(BaseModel):
    """Inclusive calendar date window."""
    start_date: date
    end_date: date

    class Config:
        """Pydantic config."""
        frozen = True

    @model_validator(mode="after")
    def _check_order(self) -> "DateWindow":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def contains(self, value: date) -> bool:
        """Check whether a date falls inside the window, bounds included."""
        return self.start_date <= value <= self.end_date
