"""Configuration models for the engagement analytics service."""

import os
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from .events import EventType
from .query import DateBasis

# Fixed offsets, not DST aware.
DEFAULT_TIMEZONE_OFFSETS: Dict[str, int] = {
    "America/New_York": -4,
    "America/Los_Angeles": -7,
    "Europe/London": 1,
    "Asia/Tokyo": 9,
    "Australia/Sydney": 10,
    "Africa/Johannesburg": 2,
}

DEFAULT_EVENT_WEIGHTS: Dict[EventType, int] = {
    EventType.PLAY_TRACK: 1,
    EventType.LIKE_TRACK: 2,
    EventType.ADD_TRACK_TO_PLAYLIST: 2,
    EventType.SHARE_TRACK: 3,
}

DEFAULT_DAY_NAMES: List[str] = [
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
]

DEFAULT_PALETTE: List[str] = [
    "#FF6384",  # Sunday
    "#36A2EB",  # Monday
    "#FFCE56",  # Tuesday
    "#4BC0C0",  # Wednesday
    "#9966FF",  # Thursday
    "#FF9F40",  # Friday
    "#2ecc71",  # Saturday
]


def _load_env_file():
    """Load environment variables from .env file in common locations."""
    env_paths = [
        Path.cwd() / ".env",
        Path(__file__).parent.parent.parent.parent / "config" / ".env",
    ]

    for env_path in env_paths:
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
            break


class AnalyticsConfig(BaseModel):
    """Lookup tables and policies for the aggregation engine."""
    timezone_offsets: Dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_TIMEZONE_OFFSETS),
        description="Timezone name to fixed UTC offset in hours"
    )
    event_weights: Dict[EventType, int] = Field(
        default_factory=lambda: dict(DEFAULT_EVENT_WEIGHTS),
        description="Engagement score per event type"
    )
    date_basis: DateBasis = Field(
        default=DateBasis.LOCAL,
        description="Calendar date compared against historical windows"
    )

    class Config:
        """Pydantic config."""
        frozen = True

    @field_validator("event_weights")
    @classmethod
    def _require_every_event_type(cls, value: Dict[EventType, int]) -> Dict[EventType, int]:
        missing = [t.value for t in EventType if t not in value]
        if missing:
            raise ValueError(f"event_weights is missing weights for: {', '.join(missing)}")
        return value


class ChartStyleConfig(BaseModel):
    """Colors and labels used by the chart builder."""
    palette: List[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE))
    day_names: List[str] = Field(default_factory=lambda: list(DEFAULT_DAY_NAMES))

    class Config:
        """Pydantic config."""
        frozen = True

    @field_validator("day_names")
    @classmethod
    def _seven_days(cls, value: List[str]) -> List[str]:
        if len(value) != 7:
            raise ValueError("day_names must list seven days starting with Sunday")
        return value

    @field_validator("palette")
    @classmethod
    def _enough_colors(cls, value: List[str]) -> List[str]:
        if len(value) < len(EventType):
            raise ValueError(f"palette needs at least {len(EventType)} colors")
        return value


class DatabaseConfig(BaseModel):
    """Database connection configuration."""
    path: Path = Field(default_factory=lambda: Path("data/engagement.db"))
    connection_timeout: int = Field(default=30, description="Connection timeout in seconds")

    def model_post_init(self, __context) -> None:
        """Ensure database path is absolute."""
        if not self.path.is_absolute():
            self.path = Path.cwd() / self.path


class ServiceConfig(BaseModel):
    """Complete service configuration."""
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    charts: ChartStyleConfig = Field(default_factory=ChartStyleConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create from environment variables."""
        _load_env_file()

        database = DatabaseConfig()
        db_path = os.getenv("ENGAGEMENT_DB_PATH")
        if db_path:
            database = DatabaseConfig(path=Path(db_path))

        analytics = AnalyticsConfig()
        date_basis = os.getenv("ENGAGEMENT_DATE_BASIS")
        if date_basis:
            analytics = AnalyticsConfig(date_basis=DateBasis(date_basis.lower()))

        return cls(
            database=database,
            analytics=analytics,
            log_level=os.getenv("ENGAGEMENT_LOG_LEVEL", "INFO"),
        )
