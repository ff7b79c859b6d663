"""Engagement aggregation.

Hourly entries may be scored single events or pre-grouped rows from a query
layer; both expose ``local_hour``, ``day_of_week`` and ``total_engagement``,
either as attributes or as mapping keys. Every entry counts once toward its
hour bucket.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import math
import structlog

from ..models.events import (
    HOURS_IN_DAY,
    DayAggregation,
    EngagementAggregate,
    EventTypeAggregate,
    RawEvent,
    ScoredLocalEvent,
)
from .scoring import EventScorer, parse_event_type

logger = structlog.get_logger()

DAYS_IN_WEEK = 7
WEEKEND_DAYS = frozenset({0, 6})


@dataclass
class _Bucket:
    """Running sum and count."""
    total: float = 0.0
    count: int = 0

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1

    @property
    def average(self) -> float:
        return safe_average(self.total, self.count)


def safe_average(total: float, count: int) -> float:
    """Average that is defined as 0 for an empty bucket."""
    if count <= 0:
        return 0.0
    return total / count


def _read(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def _as_int(value: Any) -> Optional[int]:
    """Coerce a grouping value to int, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, float):
        try:
            value = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(value) or not value.is_integer():
        return None
    return int(value)


def _as_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def aggregate(
    events: Iterable[ScoredLocalEvent],
    include_date: bool = False
) -> List[EngagementAggregate]:
    """Group scored events by artist, hour and day of week.

    Args:
        events: Scored, localized events
        include_date: Also group by local event date (historical mode)

    Returns:
        One aggregate per group ordered by artist, date, day of week, hour
    """
    groups: Dict[Tuple[int, Optional[date], int, int], _Bucket] = defaultdict(_Bucket)
    names: Dict[int, str] = {}

    for event in events:
        event_date = event.event_date if include_date else None
        key = (event.artist_id, event_date, event.day_of_week, event.local_hour)
        groups[key].add(event.engagement_score)
        names[event.artist_id] = event.artist_name

    def sort_key(key: Tuple[int, Optional[date], int, int]):
        artist_id, event_date, day_of_week, local_hour = key
        return (artist_id, event_date or date.min, day_of_week, local_hour)

    result = []
    for key in sorted(groups, key=sort_key):
        artist_id, event_date, day_of_week, local_hour = key
        bucket = groups[key]
        result.append(EngagementAggregate(
            artist_id=artist_id,
            artist_name=names[artist_id],
            local_hour=local_hour,
            day_of_week=day_of_week,
            event_date=event_date,
            total_engagement=int(bucket.total),
            event_count=bucket.count,
        ))

    logger.debug("Aggregated engagement", groups=len(result))
    return result


def aggregate_hourly_data(entries: Iterable[Any]) -> DayAggregation:
    """Average engagement per local hour for weekdays, weekends and all days.

    Entries with an hour outside 0..23 or a day outside 0..6 are dropped so
    they can neither index past the hour buckets nor skew the weekday and
    weekend split.
    """
    weekday = [_Bucket() for _ in range(HOURS_IN_DAY)]
    weekend = [_Bucket() for _ in range(HOURS_IN_DAY)]
    all_days = [_Bucket() for _ in range(HOURS_IN_DAY)]
    dropped = 0

    for entry in entries:
        hour = _as_int(_read(entry, "local_hour"))
        day_of_week = _as_int(_read(entry, "day_of_week"))
        if hour is None or not 0 <= hour < HOURS_IN_DAY:
            dropped += 1
            continue
        if day_of_week is None or not 0 <= day_of_week < DAYS_IN_WEEK:
            dropped += 1
            continue

        value = _as_number(_read(entry, "total_engagement"))
        if day_of_week in WEEKEND_DAYS:
            weekend[hour].add(value)
        else:
            weekday[hour].add(value)
        all_days[hour].add(value)

    if dropped:
        logger.debug("Dropped malformed hourly entries", dropped=dropped)

    return DayAggregation(
        weekday=[b.average for b in weekday],
        weekend=[b.average for b in weekend],
        all_days=[b.average for b in all_days],
    )


def to_weekday_totals(entries: Iterable[Any]) -> List[float]:
    """Sum engagement per day of week (0=Sunday .. 6=Saturday).

    Entries whose day is non-numeric or out of range are silently skipped.
    """
    totals = [0.0] * DAYS_IN_WEEK
    for entry in entries:
        day_of_week = _as_int(_read(entry, "day_of_week"))
        if day_of_week is None or not 0 <= day_of_week < DAYS_IN_WEEK:
            continue
        totals[day_of_week] += _as_number(_read(entry, "total_engagement"))
    return totals


def aggregate_event_types(
    events: Iterable[RawEvent],
    artists: Mapping[int, str],
    scorer: EventScorer
) -> List[EventTypeAggregate]:
    """Count events per artist and type, weighted by score.

    Events of unknown type or for unknown artists are excluded. Results are
    ordered by artist id, then weighted count descending.
    """
    counts: Dict[Tuple[int, Any], int] = defaultdict(int)
    for event in events:
        event_type = parse_event_type(event.event_type)
        if event_type is None or event.artist_id not in artists:
            continue
        counts[(event.artist_id, event_type)] += 1

    result = []
    for (artist_id, event_type), count in counts.items():
        weight = scorer.score(event_type)
        result.append(EventTypeAggregate(
            artist_id=artist_id,
            artist_name=artists[artist_id],
            event_type=event_type,
            count=count,
            weight=weight,
            weighted_count=count * weight,
        ))

    result.sort(key=lambda agg: (agg.artist_id, -agg.weighted_count, agg.event_type.value))
    return result


def group_by_artist(entries: Iterable[Any]) -> Dict[int, List[Any]]:
    """Partition entries by artist id, preserving order within each artist."""
    grouped: Dict[int, List[Any]] = defaultdict(list)
    for entry in entries:
        grouped[_read(entry, "artist_id")].append(entry)
    return dict(grouped)
