"""Event and aggregate models."""

from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

HOURS_IN_DAY = 24


class EventType(str, Enum):
    """Interaction event types that carry an engagement score."""
    PLAY_TRACK = "play_track"
    LIKE_TRACK = "like_track"
    ADD_TRACK_TO_PLAYLIST = "add_track_to_playlist"
    SHARE_TRACK = "share_track"

    @property
    def display_name(self) -> str:
        """Human readable label used in charts."""
        names = {
            EventType.PLAY_TRACK: "Play Track",
            EventType.LIKE_TRACK: "Like Track",
            EventType.ADD_TRACK_TO_PLAYLIST: "Add to Playlist",
            EventType.SHARE_TRACK: "Share Track",
        }
        return names[self]


class RawEvent(BaseModel):
    """A single user interaction as stored upstream.

    ``event_type`` stays a plain string: the source may carry types outside
    the scored set, and those are filtered rather than rejected.
    """
    artist_id: int
    user_id: int
    event_type: str
    created_at: int = Field(description="Epoch milliseconds, UTC")

    class Config:
        """Pydantic config."""
        frozen = True


class User(BaseModel):
    """User reference data used to resolve timezone offsets."""
    id: int
    timezone: str

    class Config:
        """Pydantic config."""
        frozen = True


class Artist(BaseModel):
    """Artist reference data."""
    id: int
    name: str

    class Config:
        """Pydantic config."""
        frozen = True


class ScoredLocalEvent(BaseModel):
    """An event projected into its user's local time and scored."""
    artist_id: int
    artist_name: str
    local_hour: int = Field(ge=0, le=23)
    day_of_week: int = Field(ge=0, le=6, description="0=Sunday .. 6=Saturday")
    engagement_score: int
    event_date: date = Field(description="Local calendar date")
    utc_date: date

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def total_engagement(self) -> int:
        """Score of this event, so single events and groups read alike."""
        return self.engagement_score


class EngagementAggregate(BaseModel):
    """Summed engagement for one (artist, hour, day-of-week[, date]) group.

    Hour and day are not range-checked here: rows may come from an external
    query layer and are guarded by the aggregation functions instead.
    """
    artist_id: int
    artist_name: str
    local_hour: int
    day_of_week: int
    event_date: Optional[date] = None
    total_engagement: int
    event_count: int

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def mean_engagement(self) -> float:
        """Mean score of the events in this group."""
        if self.event_count <= 0:
            return 0.0
        return self.total_engagement / self.event_count


class EventTypeAggregate(BaseModel):
    """Per artist and event type counts."""
    artist_id: int
    artist_name: str
    event_type: EventType
    count: int
    weight: int
    weighted_count: int

    class Config:
        """Pydantic config."""
        frozen = True


class DayAggregation(BaseModel):
    """Average engagement per local hour, split by weekday and weekend."""
    weekday: List[float]
    weekend: List[float]
    all_days: List[float]

    class Config:
        """Pydantic config."""
        frozen = True

    @field_validator("weekday", "weekend", "all_days")
    @classmethod
    def _check_length(cls, value: List[float]) -> List[float]:
        if len(value) != HOURS_IN_DAY:
            raise ValueError(f"expected {HOURS_IN_DAY} hourly values, got {len(value)}")
        return value


class VisitSummary(BaseModel):
    """Visit duration and audience size for one artist."""
    artist_id: int
    artist_name: str
    total_visit_duration: int = 0
    unique_session_count: int = 0
