"""Event processing pipeline."""

from typing import Iterable, List, Optional
import structlog

from ..models.config import AnalyticsConfig
from ..models.events import Artist, RawEvent, ScoredLocalEvent, User
from ..models.query import DateBasis, DateWindow
from .scoring import EventScorer
from .timezone_utils import TimezoneResolver, local_date, project_local_time, utc_date

logger = structlog.get_logger()


class EventProcessor:
    """Turns raw events into scored events in each user's local time."""

    def __init__(self, config: AnalyticsConfig):
        """Initialize the processor."""
        self.config = config
        self.resolver = TimezoneResolver(config.timezone_offsets)
        self.scorer = EventScorer(config.event_weights)

    def localize(
        self,
        events: Iterable[RawEvent],
        users: Iterable[User],
        artists: Iterable[Artist]
    ) -> List[ScoredLocalEvent]:
        """Join events with users and artists, project and score them.

        Events are dropped when their type is not on the allow-list, their
        user is unknown or has an unresolvable timezone, or their artist is
        unknown.
        """
        offsets = {}
        for user in users:
            offset = self.resolver.resolve(user.timezone)
            if offset is not None:
                offsets[user.id] = offset
        artist_names = {artist.id: artist.name for artist in artists}

        result = []
        skipped_type = skipped_user = skipped_artist = 0

        for event in events:
            if not self.scorer.is_allowed(event.event_type):
                skipped_type += 1
                continue
            offset = offsets.get(event.user_id)
            if offset is None:
                skipped_user += 1
                continue
            artist_name = artist_names.get(event.artist_id)
            if artist_name is None:
                skipped_artist += 1
                continue

            local = project_local_time(event.created_at, offset)
            result.append(ScoredLocalEvent(
                artist_id=event.artist_id,
                artist_name=artist_name,
                local_hour=local.hour,
                day_of_week=local.day_of_week,
                engagement_score=self.scorer.score(event.event_type),
                event_date=local_date(event.created_at, offset),
                utc_date=utc_date(event.created_at),
            ))

        logger.debug(
            "Localized events",
            kept=len(result),
            skipped_type=skipped_type,
            skipped_user=skipped_user,
            skipped_artist=skipped_artist
        )

        return result

    def filter_window(
        self,
        events: Iterable[ScoredLocalEvent],
        window: Optional[DateWindow]
    ) -> List[ScoredLocalEvent]:
        """Keep events whose calendar date falls inside the window."""
        events = list(events)
        if window is None:
            return events

        if self.config.date_basis == DateBasis.UTC:
            kept = [e for e in events if window.contains(e.utc_date)]
        else:
            kept = [e for e in events if window.contains(e.event_date)]

        logger.debug(
            "Applied date window",
            date_basis=self.config.date_basis.value,
            start_date=window.start_date.isoformat(),
            end_date=window.end_date.isoformat(),
            kept=len(kept),
            dropped=len(events) - len(kept)
        )
        return kept

    def process(
        self,
        events: Iterable[RawEvent],
        users: Iterable[User],
        artists: Iterable[Artist],
        window: Optional[DateWindow] = None
    ) -> List[ScoredLocalEvent]:
        """Localize, score and window-filter raw events."""
        return self.filter_window(self.localize(events, users, artists), window)
