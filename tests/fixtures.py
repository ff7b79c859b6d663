"""Shared sample data for the test suite."""

from datetime import date, datetime, timezone
from typing import List

from engagement_analytics.models import Artist, RawEvent, ScoredLocalEvent, User


def epoch_millis(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    """UTC wall time to epoch milliseconds."""
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp() * 1000)


def scored_event(
    hour: int,
    day_of_week: int,
    score: int,
    artist_id: int = 1,
    artist_name: str = "Artist 1",
    event_date: date = date(2024, 1, 10)
) -> ScoredLocalEvent:
    return ScoredLocalEvent(
        artist_id=artist_id,
        artist_name=artist_name,
        local_hour=hour,
        day_of_week=day_of_week,
        engagement_score=score,
        event_date=event_date,
        utc_date=event_date,
    )


def sample_artists() -> List[Artist]:
    return [
        Artist(id=1, name="Artist 1"),
        Artist(id=2, name="Artist 2"),
        Artist(id=10, name="Artist 10"),
    ]


def sample_users() -> List[User]:
    return [
        User(id=1, timezone="America/New_York"),   # -4
        User(id=2, timezone="Asia/Tokyo"),         # +9
        User(id=3, timezone="Europe/London"),      # +1
        User(id=4, timezone="Mars/Olympus_Mons"),  # not in the offset table
    ]


def sample_events() -> List[RawEvent]:
    """Events spread over users, artists and types.

    Local times per user:
      user 1 at 2024-01-10 02:00Z -> 2024-01-09 22:00 (Tuesday)
      user 2 at 2024-01-10 20:00Z -> 2024-01-11 05:00 (Thursday)
      user 3 at 2024-01-13 09:00Z -> 2024-01-13 10:00 (Saturday)
      user 3 at 2024-02-04 09:00Z -> 2024-02-04 10:00 (Sunday)
    """
    return [
        RawEvent(artist_id=1, user_id=1, event_type="play_track", created_at=epoch_millis(2024, 1, 10, 2)),
        RawEvent(artist_id=1, user_id=1, event_type="share_track", created_at=epoch_millis(2024, 1, 10, 2, 30)),
        RawEvent(artist_id=1, user_id=2, event_type="like_track", created_at=epoch_millis(2024, 1, 10, 20)),
        RawEvent(artist_id=1, user_id=3, event_type="add_track_to_playlist", created_at=epoch_millis(2024, 1, 13, 9)),
        RawEvent(artist_id=1, user_id=3, event_type="play_track", created_at=epoch_millis(2024, 2, 4, 9)),
        RawEvent(artist_id=2, user_id=2, event_type="share_track", created_at=epoch_millis(2024, 1, 10, 20, 15)),
        RawEvent(artist_id=2, user_id=2, event_type="play_track", created_at=epoch_millis(2024, 1, 10, 20, 45)),
        # Unresolvable timezone
        RawEvent(artist_id=1, user_id=4, event_type="share_track", created_at=epoch_millis(2024, 1, 10, 12)),
        # Not on the type allow-list
        RawEvent(artist_id=1, user_id=1, event_type="skip_track", created_at=epoch_millis(2024, 1, 10, 3)),
        # Unknown artist
        RawEvent(artist_id=99, user_id=1, event_type="play_track", created_at=epoch_millis(2024, 1, 10, 4)),
    ]
