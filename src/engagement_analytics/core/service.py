"""Main engagement analytics service."""

from typing import Dict, Iterable, List, Optional
import time
import structlog
from pydantic import BaseModel, Field

from ..charts import sort_artists
from ..data import EventRepository
from ..models.config import ServiceConfig
from ..models.events import (
    Artist,
    DayAggregation,
    EngagementAggregate,
    EventTypeAggregate,
    RawEvent,
    User,
    VisitSummary,
)
from ..models.query import AnalyticsQuery, DateWindow
from .aggregation import (
    aggregate,
    aggregate_event_types,
    aggregate_hourly_data,
    group_by_artist,
    to_weekday_totals,
)
from .processor import EventProcessor
from .time_range import compute_window

logger = structlog.get_logger()


class EngagementReport(BaseModel):
    """Aggregates for every artist, computed fresh for one query."""
    query: AnalyticsQuery
    window: Optional[DateWindow] = None
    artists: List[Artist] = Field(default_factory=list)
    hourly: List[EngagementAggregate] = Field(default_factory=list)
    event_types: List[EventTypeAggregate] = Field(default_factory=list)
    events_processed: int = 0

    def artist_by_name(self, name: str) -> Artist:
        for artist in self.artists:
            if artist.name == name:
                return artist
        raise ValueError(f"Artist {name!r} not found")

    def hourly_for(self, artist_id: int) -> List[EngagementAggregate]:
        return group_by_artist(self.hourly).get(artist_id, [])

    def day_aggregation(self, artist_id: int) -> DayAggregation:
        """Hourly averages split by weekday and weekend for one artist."""
        return aggregate_hourly_data(self.hourly_for(artist_id))

    def weekday_totals(self, artist_id: int) -> List[float]:
        """Engagement summed per day of week for one artist."""
        return to_weekday_totals(self.hourly_for(artist_id))

    def event_types_for(self, artist_id: int) -> List[EventTypeAggregate]:
        return [agg for agg in self.event_types if agg.artist_id == artist_id]


class EngagementAnalyticsService:
    """Computes engagement reports from an event source."""

    def __init__(
        self,
        config: ServiceConfig,
        repository: Optional[EventRepository] = None
    ):
        """Initialize the service."""
        self.config = config
        self.repository = repository or EventRepository(config.database)
        self.processor = EventProcessor(config.analytics)

        logger.info(
            "Engagement analytics service initialized",
            db_path=str(config.database.path),
            date_basis=config.analytics.date_basis.value,
            timezones=len(config.analytics.timezone_offsets)
        )

    async def start(self, create: bool = False) -> None:
        """Open the event source."""
        await self.repository.initialize(create=create)

    async def stop(self) -> None:
        """Close the event source."""
        await self.repository.close()

    def build_report_from_events(
        self,
        query: AnalyticsQuery,
        events: Iterable[RawEvent],
        users: Iterable[User],
        artists: Iterable[Artist]
    ) -> EngagementReport:
        """Run the full pipeline over an already materialized event list."""
        start = time.time()
        events = list(events)
        artists = list(artists)

        window = compute_window(query.view_mode, query.time_range, query.reference_date)
        scored = self.processor.process(events, users, artists, window)
        hourly = aggregate(scored, include_date=query.is_historical)

        artist_names: Dict[int, str] = {artist.id: artist.name for artist in artists}
        event_types = aggregate_event_types(events, artist_names, self.processor.scorer)

        report = EngagementReport(
            query=query,
            window=window,
            artists=sort_artists(artists),
            hourly=hourly,
            event_types=event_types,
            events_processed=len(scored),
        )

        logger.debug(
            "Built engagement report",
            view_mode=query.view_mode.value,
            time_range=query.time_range.value,
            reference_date=query.reference_date.isoformat(),
            raw_events=len(events),
            scored_events=len(scored),
            groups=len(hourly),
            processing_time_seconds=round(time.time() - start, 4)
        )

        return report

    async def build_report(self, query: AnalyticsQuery) -> EngagementReport:
        """Fetch events from the repository and build a report.

        Raises:
            DataSourceError: The event source could not be read
        """
        allowed = [t.value for t in self.processor.scorer.allowed_types]
        events = await self.repository.get_events(allowed)
        users = await self.repository.get_users()
        artists = await self.repository.get_artists()
        return self.build_report_from_events(query, events, users, artists)

    async def build_precomputed_report(self, query: AnalyticsQuery) -> EngagementReport:
        """Build a report from aggregates the database computes itself.

        Events are never loaded or localized in process. Only all-history
        queries are supported.

        Raises:
            ValueError: The query is historical
            DataSourceError: The event source could not be read
        """
        if query.is_historical:
            raise ValueError("Precomputed reports only support the average view mode")

        hourly = await self.precomputed_hourly()
        report = EngagementReport(
            query=query,
            artists=await self.list_artists(),
            hourly=hourly,
            event_types=await self.precomputed_event_types(),
            events_processed=sum(agg.event_count for agg in hourly),
        )

        logger.debug("Built precomputed engagement report", groups=len(hourly))
        return report

    async def precomputed_hourly(self) -> List[EngagementAggregate]:
        """All-history hourly aggregates computed by the database itself."""
        return await self.repository.get_hourly_engagement(self.config.analytics)

    async def precomputed_event_types(self) -> List[EventTypeAggregate]:
        """Event type breakdown computed by the database itself."""
        return await self.repository.get_event_type_counts(self.config.analytics.event_weights)

    async def list_artists(self) -> List[Artist]:
        """Artists in display order."""
        return sort_artists(await self.repository.get_artists())

    async def visit_summaries(self) -> List[VisitSummary]:
        return await self.repository.get_visit_summaries()
