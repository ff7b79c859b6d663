"""Main CLI interface."""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Optional
import typer
import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..charts import ChartConfigBuilder
from ..core import EngagementAnalyticsService, EngagementReport
from ..data import DataSourceError
from ..models.config import DatabaseConfig, ServiceConfig
from ..models.query import AnalyticsQuery, TimeRange, ViewMode

console = Console()
app = typer.Typer(help="Artist engagement analytics")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

DB_PATH_OPTION = typer.Option(None, "--db-path", help="Database file path")
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level")
VIEW_MODE_OPTION = typer.Option(ViewMode.AVERAGE, "--view-mode", help="All history or a calendar window")
TIME_RANGE_OPTION = typer.Option(TimeRange.DAY, "--time-range", help="Window size in historical mode")
DATE_OPTION = typer.Option(None, "--date", help="Reference date (ISO format), default today")


@app.command("init-db")
def init_db(
    db_path: Optional[Path] = DB_PATH_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Create the database and its tables."""
    config = _load_config(db_path, log_level)
    _setup_logging(config.log_level, config.log_file)

    try:
        asyncio.run(_init_db(config))
    except DataSourceError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Database ready:[/green] {config.database.path}")


@app.command()
def artists(
    db_path: Optional[Path] = DB_PATH_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """List artists in display order."""
    config = _load_config(db_path, log_level)
    _setup_logging(config.log_level, config.log_file)

    ordered = _run(config, lambda service: service.list_artists())

    table = Table(title="Artists")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    for artist in ordered:
        table.add_row(str(artist.id), artist.name)
    console.print(table)


@app.command()
def hourly(
    artist: str = typer.Option(..., "--artist", "-a", help="Artist name"),
    mode: str = typer.Option("all", "--mode", help="Series layout: all or split"),
    view_mode: ViewMode = VIEW_MODE_OPTION,
    time_range: TimeRange = TIME_RANGE_OPTION,
    reference_date: Optional[str] = DATE_OPTION,
    precomputed: bool = typer.Option(
        False,
        "--precomputed",
        help="Let the database localize and group events (all history only)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the chart descriptor as JSON"),
    db_path: Optional[Path] = DB_PATH_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Show average engagement by local hour for an artist."""
    if mode not in ("all", "split"):
        console.print(f"[red]Unknown mode {mode!r}, expected 'all' or 'split'[/red]")
        raise typer.Exit(1)

    query = _build_query(view_mode, time_range, reference_date)
    if precomputed and query.is_historical:
        console.print("[red]--precomputed only supports the average view mode[/red]")
        raise typer.Exit(1)

    config = _load_config(db_path, log_level)
    _setup_logging(config.log_level, config.log_file)

    report = _fetch_report(config, query, precomputed=precomputed)
    selected = _select_artist(report, artist)
    aggregation = report.day_aggregation(selected.id)

    if as_json:
        builder = ChartConfigBuilder(config.charts)
        chart = builder.engagement_chart(selected.name, aggregation, mode)
        console.print_json(data=chart.to_dict())
        return

    table = Table(title=f"Hourly Engagement for {selected.name}")
    table.add_column("Hour", style="cyan")
    if mode == "split":
        table.add_column("Weekdays", style="green")
        table.add_column("Weekends", style="yellow")
    else:
        table.add_column("All", style="green")

    for hour in range(24):
        label = f"{hour:02d}:00"
        if mode == "split":
            table.add_row(label, f"{aggregation.weekday[hour]:.1f}", f"{aggregation.weekend[hour]:.1f}")
        else:
            table.add_row(label, f"{aggregation.all_days[hour]:.1f}")
    console.print(table)


@app.command()
def daily(
    artist: str = typer.Option(..., "--artist", "-a", help="Artist name"),
    view_mode: ViewMode = VIEW_MODE_OPTION,
    time_range: TimeRange = TIME_RANGE_OPTION,
    reference_date: Optional[str] = DATE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the chart descriptor as JSON"),
    db_path: Optional[Path] = DB_PATH_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Show engagement totals by day of week for an artist."""
    query = _build_query(view_mode, time_range, reference_date)
    config = _load_config(db_path, log_level)
    _setup_logging(config.log_level, config.log_file)

    report = _fetch_report(config, query)
    selected = _select_artist(report, artist)
    totals = report.weekday_totals(selected.id)

    if as_json:
        builder = ChartConfigBuilder(config.charts)
        chart = builder.daily_chart(selected.name, totals)
        console.print_json(data=chart.to_dict())
        return

    table = Table(title=f"Daily Engagement for {selected.name}")
    table.add_column("Day", style="cyan")
    table.add_column("Engagement", style="green")
    for day_name, total in zip(config.charts.day_names, totals):
        table.add_row(day_name, f"{total:g}")
    console.print(table)


@app.command("event-types")
def event_types(
    artist: str = typer.Option(..., "--artist", "-a", help="Artist name"),
    precomputed: bool = typer.Option(
        False,
        "--precomputed",
        help="Let the database count and weight events"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the chart descriptor as JSON"),
    db_path: Optional[Path] = DB_PATH_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Show weighted engagement by event type for an artist."""
    config = _load_config(db_path, log_level)
    _setup_logging(config.log_level, config.log_file)

    report = _fetch_report(config, AnalyticsQuery(), precomputed=precomputed)
    selected = _select_artist(report, artist)
    breakdown = report.event_types_for(selected.id)

    if as_json:
        builder = ChartConfigBuilder(config.charts)
        chart = builder.event_types_chart(selected.name, breakdown)
        console.print_json(data=chart.to_dict())
        return

    table = Table(title=f"Engagement Types for {selected.name}")
    table.add_column("Event Type", style="cyan")
    table.add_column("Count", style="green")
    table.add_column("Weight", style="yellow")
    table.add_column("Weighted", style="magenta")
    for agg in breakdown:
        table.add_row(agg.event_type.display_name, str(agg.count), str(agg.weight), str(agg.weighted_count))
    console.print(table)


@app.command()
def visits(
    db_path: Optional[Path] = DB_PATH_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Show total visit duration and unique visitors per artist."""
    config = _load_config(db_path, log_level)
    _setup_logging(config.log_level, config.log_file)

    summaries = _run(config, lambda service: service.visit_summaries())

    table = Table(title="Artist Visits")
    table.add_column("Artist", style="cyan")
    table.add_column("Total Visit Duration", style="green")
    table.add_column("Unique Sessions", style="yellow")
    for summary in summaries:
        table.add_row(summary.artist_name, str(summary.total_visit_duration), str(summary.unique_session_count))
    console.print(table)


async def _init_db(config: ServiceConfig) -> None:
    service = EngagementAnalyticsService(config)
    try:
        await service.start(create=True)
    finally:
        await service.stop()


async def _with_service(config: ServiceConfig, action):
    """Run an action against a started service, always closing it."""
    service = EngagementAnalyticsService(config)
    try:
        await service.start()
        return await action(service)
    finally:
        await service.stop()


def _run(config: ServiceConfig, action):
    """Run an action and turn data source failures into a CLI error."""
    try:
        return asyncio.run(_with_service(config, action))
    except DataSourceError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)


def _fetch_report(
    config: ServiceConfig,
    query: AnalyticsQuery,
    precomputed: bool = False
) -> EngagementReport:
    async def action(service: EngagementAnalyticsService) -> EngagementReport:
        if precomputed:
            return await service.build_precomputed_report(query)
        return await service.build_report(query)

    return _run(config, action)


def _select_artist(report: EngagementReport, name: str):
    try:
        return report.artist_by_name(name)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _build_query(
    view_mode: ViewMode,
    time_range: TimeRange,
    reference_date: Optional[str]
) -> AnalyticsQuery:
    """Parse query parameters, defaulting the reference date to today."""
    try:
        parsed = date.fromisoformat(reference_date) if reference_date else date.today()
    except ValueError as e:
        console.print(f"[red]Error parsing date: {e}[/red]")
        raise typer.Exit(1)

    return AnalyticsQuery(view_mode=view_mode, time_range=time_range, reference_date=parsed)


def _load_config(
    db_path: Optional[Path] = None,
    log_level: Optional[str] = None
) -> ServiceConfig:
    """Load service configuration."""
    try:
        config = ServiceConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    # Override with CLI options
    if db_path:
        config.database = DatabaseConfig(path=db_path)
    if log_level:
        config.log_level = log_level

    return config


def _setup_logging(log_level: str, log_file: Optional[Path]) -> None:
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)

    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setLevel(level)
        logging.getLogger().addHandler(handler)


def main() -> None:
    """Main entry point."""
    app()
