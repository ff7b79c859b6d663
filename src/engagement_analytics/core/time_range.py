"""Historical time window computation."""

import calendar
from datetime import date, timedelta
from typing import Optional, Union
import structlog

from ..models.query import DateWindow, TimeRange, ViewMode
from .timezone_utils import sunday_based_weekday

logger = structlog.get_logger()


def compute_window(
    view_mode: Union[str, ViewMode],
    time_range: Union[str, TimeRange],
    reference_date: Union[str, date]
) -> Optional[DateWindow]:
    """Compute the inclusive date window for a query.

    Args:
        view_mode: "historical" restricts to a window; any other value uses
            all history and yields None
        time_range: "day", "week" (Sunday..Saturday), "month" or "year"
        reference_date: Anchor date, as a date or ISO string

    Returns:
        The inclusive window, or None when no filtering applies
    """
    mode = view_mode.value if isinstance(view_mode, ViewMode) else str(view_mode)
    if mode != ViewMode.HISTORICAL.value:
        return None

    if isinstance(reference_date, str):
        reference_date = date.fromisoformat(reference_date)

    span = TimeRange(time_range)

    if span == TimeRange.DAY:
        start = end = reference_date
    elif span == TimeRange.WEEK:
        start = reference_date - timedelta(days=sunday_based_weekday(reference_date))
        end = start + timedelta(days=6)
    elif span == TimeRange.MONTH:
        last_day = calendar.monthrange(reference_date.year, reference_date.month)[1]
        start = reference_date.replace(day=1)
        end = reference_date.replace(day=last_day)
    else:  # YEAR
        start = date(reference_date.year, 1, 1)
        end = date(reference_date.year, 12, 31)

    logger.debug(
        "Computed historical window",
        time_range=span.value,
        reference_date=reference_date.isoformat(),
        start_date=start.isoformat(),
        end_date=end.isoformat()
    )

    return DateWindow(start_date=start, end_date=end)
