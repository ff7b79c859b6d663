"""Engagement event repository for database access."""

import asyncio
import sqlite3
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence
import structlog

from ..models.config import AnalyticsConfig, DatabaseConfig
from ..models.events import (
    Artist,
    EngagementAggregate,
    EventType,
    EventTypeAggregate,
    RawEvent,
    User,
    VisitSummary,
)

logger = structlog.get_logger()


class DataSourceError(Exception):
    """The event source is unavailable or a query against it failed."""

    def __init__(self, message: str = "Failed to fetch data"):
        super().__init__(message)


SCHEMA = """
    CREATE TABLE IF NOT EXISTS artists (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY,
        timezone TEXT NOT NULL
    );
    CREATE TABLE IF NOT EXISTS user_events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        artist_id INTEGER NOT NULL,
        event_type TEXT NOT NULL,
        created_at INTEGER NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_user_events_artist
        ON user_events(artist_id, event_type);
    CREATE TABLE IF NOT EXISTS sessions (
        id INTEGER PRIMARY KEY,
        user_id INTEGER NOT NULL
    );
    CREATE TABLE IF NOT EXISTS visits (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        session_id INTEGER NOT NULL,
        artist_id INTEGER NOT NULL,
        start_time INTEGER NOT NULL,
        end_time INTEGER NOT NULL
    );
"""


def _placeholders(count: int, template: str = "?", separator: str = ", ") -> str:
    return separator.join(template for _ in range(count))


class EventRepository:
    """Repository for artist, user and interaction data in SQLite."""

    def __init__(self, config: DatabaseConfig):
        """Initialize the repository."""
        self.config = config
        self.db_path = config.path
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = asyncio.Lock()

    async def initialize(self, create: bool = False) -> None:
        """Open the database, creating it and its tables when asked to.

        Raises:
            DataSourceError: The database does not exist and ``create`` is False
        """
        async with self._lock:
            if not create and not self.db_path.exists():
                logger.error("Database not found", db_path=str(self.db_path))
                raise DataSourceError(f"Failed to fetch data: database {self.db_path} not found")

            if create:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            with self._guard("initialize"):
                conn = self._get_connection()
                conn.executescript(SCHEMA)
            logger.info("Database initialized", db_path=str(self.db_path))

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                timeout=self.config.connection_timeout,
                isolation_level=None  # autocommit mode
            )
            self._connection.execute("PRAGMA journal_mode=WAL")
        return self._connection

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Surface SQLite failures as DataSourceError."""
        try:
            yield
        except sqlite3.Error as e:
            logger.error("Database operation failed", operation=operation, error=str(e))
            raise DataSourceError() from e

    def _fetch(self, operation: str, query: str, params: Sequence = ()) -> List[tuple]:
        with self._guard(operation):
            conn = self._get_connection()
            rows = conn.execute(query, list(params)).fetchall()

        logger.debug("Executed query", operation=operation, rows=len(rows))
        return rows

    async def get_artists(self) -> List[Artist]:
        """Get all artists ordered by name."""
        rows = self._fetch(
            "get_artists",
            "SELECT DISTINCT id, name FROM artists ORDER BY name"
        )
        return [Artist(id=row[0], name=row[1]) for row in rows]

    async def get_users(self) -> List[User]:
        """Get all users with their timezone names."""
        rows = self._fetch("get_users", "SELECT id, timezone FROM users ORDER BY id")
        return [User(id=row[0], timezone=row[1]) for row in rows]

    async def get_events(
        self,
        event_types: Optional[Sequence[str]] = None
    ) -> List[RawEvent]:
        """Get raw interaction events, optionally limited to an allow-list of types."""
        query = "SELECT artist_id, user_id, event_type, created_at FROM user_events"
        params: List = []

        if event_types is not None:
            if not event_types:
                return []
            query += f" WHERE event_type IN ({_placeholders(len(event_types))})"
            params.extend(event_types)

        query += " ORDER BY created_at ASC, id ASC"

        rows = self._fetch("get_events", query, params)
        return [
            RawEvent(artist_id=row[0], user_id=row[1], event_type=row[2], created_at=row[3])
            for row in rows
        ]

    async def get_hourly_engagement(self, config: AnalyticsConfig) -> List[EngagementAggregate]:
        """Localize, score and group events in SQL.

        The timezone offset and weight tables are bound from ``config`` so
        the result matches the in-process pipeline for all-history queries.
        """
        offsets = list(config.timezone_offsets.items())
        weights = [(t.value, w) for t, w in config.event_weights.items()]
        if not offsets or not weights:
            return []

        query = f"""
            WITH timezone_offsets(timezone, offset_hours) AS (
                VALUES {_placeholders(len(offsets), "(?, ?)")}
            ),
            adjusted_events AS (
                SELECT
                    ue.artist_id,
                    a.name AS artist_name,
                    (CAST(strftime('%H', datetime(ue.created_at / 1000, 'unixepoch')) AS INTEGER)
                        + tzo.offset_hours + 24) % 24 AS local_hour,
                    CAST(strftime('%w', datetime(ue.created_at / 1000, 'unixepoch',
                        tzo.offset_hours || ' hours')) AS INTEGER) AS day_of_week,
                    CASE ue.event_type
                        {_placeholders(len(weights), "WHEN ? THEN ?", " ")}
                        ELSE 0
                    END AS engagement_score
                FROM user_events ue
                JOIN artists a ON ue.artist_id = a.id
                JOIN users u ON ue.user_id = u.id
                JOIN timezone_offsets tzo ON u.timezone = tzo.timezone
                WHERE ue.event_type IN ({_placeholders(len(weights))})
            )
            SELECT
                artist_id,
                artist_name,
                local_hour,
                day_of_week,
                SUM(engagement_score) AS total_engagement,
                COUNT(*) AS event_count
            FROM adjusted_events
            GROUP BY artist_id, artist_name, local_hour, day_of_week
            ORDER BY artist_id, day_of_week, local_hour
        """

        params: List = []
        for name, offset in offsets:
            params.extend([name, offset])
        for name, weight in weights:
            params.extend([name, weight])
        params.extend(name for name, _ in weights)

        rows = self._fetch("get_hourly_engagement", query, params)
        return [
            EngagementAggregate(
                artist_id=row[0],
                artist_name=row[1],
                local_hour=row[2],
                day_of_week=row[3],
                total_engagement=row[4],
                event_count=row[5],
            )
            for row in rows
        ]

    async def get_event_type_counts(
        self,
        weights: Mapping[EventType, int]
    ) -> List[EventTypeAggregate]:
        """Count events per artist and type with weighted totals."""
        pairs = [(t.value, w) for t, w in weights.items()]
        if not pairs:
            return []

        weight_case = f"CASE ue.event_type {_placeholders(len(pairs), 'WHEN ? THEN ?', ' ')} END"
        query = f"""
            SELECT
                ue.artist_id,
                a.name AS artist_name,
                ue.event_type,
                COUNT(*) AS count,
                {weight_case} AS weight,
                COUNT(*) * {weight_case} AS weighted_count
            FROM user_events ue
            JOIN artists a ON ue.artist_id = a.id
            WHERE ue.event_type IN ({_placeholders(len(pairs))})
            GROUP BY ue.artist_id, a.name, ue.event_type
            ORDER BY ue.artist_id, weighted_count DESC, ue.event_type
        """

        params: List = []
        for _ in range(2):
            for name, weight in pairs:
                params.extend([name, weight])
        params.extend(name for name, _ in pairs)

        rows = self._fetch("get_event_type_counts", query, params)
        return [
            EventTypeAggregate(
                artist_id=row[0],
                artist_name=row[1],
                event_type=EventType(row[2]),
                count=row[3],
                weight=row[4],
                weighted_count=row[5],
            )
            for row in rows
        ]

    async def get_visit_summaries(self) -> List[VisitSummary]:
        """Total visit duration and distinct visiting users per artist."""
        rows = self._fetch("get_visit_summaries", """
            SELECT
                a.id AS artist_id,
                a.name AS artist_name,
                COALESCE(SUM(v.end_time - v.start_time), 0) AS total_visit_duration,
                COUNT(DISTINCT s.user_id) AS unique_session_count
            FROM artists a
            LEFT JOIN visits v ON a.id = v.artist_id
            LEFT JOIN sessions s ON v.session_id = s.id
            GROUP BY a.id, a.name
            ORDER BY total_visit_duration DESC, a.id
        """)
        return [
            VisitSummary(
                artist_id=row[0],
                artist_name=row[1],
                total_visit_duration=row[2],
                unique_session_count=row[3],
            )
            for row in rows
        ]

    async def add_artists(self, artists: Iterable[Artist]) -> None:
        with self._guard("add_artists"):
            self._get_connection().executemany(
                "INSERT OR REPLACE INTO artists (id, name) VALUES (?, ?)",
                [(a.id, a.name) for a in artists]
            )

    async def add_users(self, users: Iterable[User]) -> None:
        with self._guard("add_users"):
            self._get_connection().executemany(
                "INSERT OR REPLACE INTO users (id, timezone) VALUES (?, ?)",
                [(u.id, u.timezone) for u in users]
            )

    async def add_events(self, events: Iterable[RawEvent]) -> None:
        with self._guard("add_events"):
            self._get_connection().executemany(
                "INSERT INTO user_events (user_id, artist_id, event_type, created_at) "
                "VALUES (?, ?, ?, ?)",
                [(e.user_id, e.artist_id, e.event_type, e.created_at) for e in events]
            )

    async def add_session(self, session_id: int, user_id: int) -> None:
        with self._guard("add_session"):
            self._get_connection().execute(
                "INSERT OR REPLACE INTO sessions (id, user_id) VALUES (?, ?)",
                (session_id, user_id)
            )

    async def add_visit(
        self,
        session_id: int,
        artist_id: int,
        start_time: int,
        end_time: int
    ) -> None:
        with self._guard("add_visit"):
            self._get_connection().execute(
                "INSERT INTO visits (session_id, artist_id, start_time, end_time) "
                "VALUES (?, ?, ?, ?)",
                (session_id, artist_id, start_time, end_time)
            )

    async def close(self) -> None:
        """Close the database connection."""
        async with self._lock:
            if self._connection is not None:
                try:
                    self._connection.close()
                except sqlite3.Error as e:
                    logger.warning("Error closing connection", error=str(e))
                self._connection = None
                logger.info("Database connection closed")
