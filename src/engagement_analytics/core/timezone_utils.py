"""Timezone utilities for the aggregation engine.

Events are stored with UTC epoch-millisecond timestamps. Each user carries a
named timezone that maps to a fixed hour offset; daylight saving time is not
modeled, so a name always resolves to the same offset all year.
"""

from datetime import datetime, date, timedelta, timezone
from typing import Dict, Mapping, NamedTuple, Optional
import structlog

logger = structlog.get_logger()

UTC_TZ = timezone.utc


class LocalTime(NamedTuple):
    """Local hour (0-23) and day of week (0=Sunday .. 6=Saturday)."""
    hour: int
    day_of_week: int


class TimezoneResolver:
    """Resolves timezone names against a fixed offset table."""

    def __init__(self, offsets: Mapping[str, int]):
        """Initialize the resolver with a name to offset-hours table."""
        self._offsets: Dict[str, int] = dict(offsets)

    def resolve(self, timezone_name: str) -> Optional[int]:
        """Get the offset in hours, or None when the name is not in the table."""
        offset = self._offsets.get(timezone_name)
        if offset is None:
            logger.debug("Unresolvable timezone", timezone=timezone_name)
        return offset


def utc_from_millis(epoch_millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime, truncated to seconds."""
    return datetime.fromtimestamp(epoch_millis // 1000, tz=UTC_TZ)


def shift_to_local(epoch_millis: int, offset_hours: int) -> datetime:
    """Shift a UTC instant by a fixed offset, returning naive local wall time."""
    return utc_from_millis(epoch_millis).replace(tzinfo=None) + timedelta(hours=offset_hours)


def sunday_based_weekday(value: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return value.isoweekday() % 7


def project_local_time(epoch_millis: int, offset_hours: int) -> LocalTime:
    """Project a UTC timestamp into local hour and day of week.

    The hour comes from modular arithmetic on the UTC hour while the day of
    week is read from the separately shifted instant. The two are computed
    independently and are not reconciled against each other.
    """
    utc_hour = utc_from_millis(epoch_millis).hour
    local_hour = (utc_hour + offset_hours + 24) % 24
    day_of_week = sunday_based_weekday(shift_to_local(epoch_millis, offset_hours).date())
    return LocalTime(hour=local_hour, day_of_week=day_of_week)


def local_date(epoch_millis: int, offset_hours: int) -> date:
    """Local calendar date of a UTC timestamp under a fixed offset."""
    return shift_to_local(epoch_millis, offset_hours).date()


def utc_date(epoch_millis: int) -> date:
    """UTC calendar date of a timestamp."""
    return utc_from_millis(epoch_millis).date()
