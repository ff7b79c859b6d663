"""Chart descriptor builder.

Pure mapping from aggregate structures to chart descriptors; no business
logic lives here.
"""

import re
from typing import Iterable, List, Literal, Mapping, Optional, Sequence, TypeVar
import structlog

from ..models.chart import ChartConfig, ChartData, ChartDataset
from ..models.config import ChartStyleConfig
from ..models.events import HOURS_IN_DAY, DayAggregation, EventTypeAggregate
from . import options as presets

logger = structlog.get_logger()

ARTIST_NAME_PATTERN = re.compile(r"^Artist (\d+)$")

SeriesMode = Literal["all", "split"]
T = TypeVar("T")


def hour_labels() -> List[str]:
    """Labels "00:00" .. "23:00"."""
    return [f"{hour:02d}:00" for hour in range(HOURS_IN_DAY)]


def _artist_sort_key(name: str):
    match = ARTIST_NAME_PATTERN.match(name)
    if match:
        return (0, int(match.group(1)), name)
    return (1, 0, name)


def sort_artists(artists: Iterable[T]) -> List[T]:
    """Order artists named "Artist <n>" by n ascending.

    Accepts Artist models or mappings with a "name" key. Names that do not
    follow the pattern sort after the numbered ones, alphabetically.
    """
    def name_of(artist) -> str:
        if isinstance(artist, Mapping):
            return str(artist.get("name", ""))
        return str(getattr(artist, "name", ""))

    return sorted(artists, key=lambda artist: _artist_sort_key(name_of(artist)))


class ChartConfigBuilder:
    """Builds chart descriptors using an injected palette and day names."""

    def __init__(self, style: Optional[ChartStyleConfig] = None):
        """Initialize the builder."""
        self.style = style or ChartStyleConfig()

    def _color(self, index: int) -> str:
        return self.style.palette[index % len(self.style.palette)]

    def _line_series(self, label: str, data: Sequence[float], color: str) -> ChartDataset:
        return ChartDataset(
            label=label,
            data=list(data),
            border_color=color,
            background_color=f"{color}33",
            border_width=2,
            tension=0.4,
            fill=False,
        )

    def engagement_chart(
        self,
        artist_name: str,
        aggregation: DayAggregation,
        mode: SeriesMode = "all"
    ) -> ChartConfig:
        """Hourly engagement line chart, either one series or weekday/weekend."""
        if mode == "split":
            datasets = [
                self._line_series("Weekdays", aggregation.weekday, self._color(1)),
                self._line_series("Weekends", aggregation.weekend, self._color(0)),
            ]
        else:
            datasets = [self._line_series("All", aggregation.all_days, self._color(2))]

        options = presets.hourly_options()
        options["plugins"]["title"] = presets.title_plugin(
            f"Hourly Engagement Pattern for {artist_name}"
        )
        options["plugins"]["tooltip"]["labelFormat"] = "{label}: {value:.1f} points"

        return ChartConfig(
            type="line",
            data=ChartData(labels=hour_labels(), datasets=datasets),
            options=options,
        )

    def daily_chart(self, artist_name: str, weekday_totals: Sequence[float]) -> ChartConfig:
        """Bar chart with one bar per day of week, Sunday first."""
        if len(weekday_totals) != len(self.style.day_names):
            raise ValueError(
                f"expected {len(self.style.day_names)} day values, got {len(weekday_totals)}"
            )

        options = presets.daily_options()
        options["plugins"]["title"] = presets.title_plugin(
            f"Daily Engagement Pattern for {artist_name}"
        )

        dataset = ChartDataset(
            label="Average Engagement Score",
            data=list(weekday_totals),
            background_color="#e2e8f0",
            border_color="#64748b",
            border_width=1,
        )
        return ChartConfig(
            type="bar",
            data=ChartData(labels=list(self.style.day_names), datasets=[dataset]),
            options=options,
        )

    def event_types_chart(
        self,
        artist_name: str,
        event_types: Sequence[EventTypeAggregate]
    ) -> ChartConfig:
        """Pie chart with one slice per event type present."""
        dataset = ChartDataset(
            data=[agg.weighted_count for agg in event_types],
            background_color=self.style.palette[:len(event_types)],
            border_width=1,
        )

        logger.debug(
            "Built event type chart",
            artist=artist_name,
            slices=len(event_types)
        )

        return ChartConfig(
            type="pie",
            data=ChartData(
                labels=[agg.event_type.display_name for agg in event_types],
                datasets=[dataset],
            ),
            options=presets.pie_options(),
        )
