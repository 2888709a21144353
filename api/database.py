"""SQLite event store keyed by (user_id, uid)."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        uid TEXT NOT NULL,
        source TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        start_utc TEXT NOT NULL,
        end_utc TEXT,
        timezone TEXT,
        venue_name TEXT,
        address TEXT,
        lat REAL,
        lng REAL,
        category TEXT,
        tag TEXT NOT NULL DEFAULT 'Other',
        url TEXT,
        created_by_user INTEGER NOT NULL DEFAULT 0,
        city TEXT,
        country TEXT,
        status TEXT,
        last_seen_at_utc TEXT NOT NULL,
        created_at TEXT DEFAULT (datetime('now')),
        updated_at TEXT DEFAULT (datetime('now')),
        UNIQUE(user_id, uid)
    );

    CREATE INDEX IF NOT EXISTS idx_events_start_utc ON events(start_utc);
    CREATE INDEX IF NOT EXISTS idx_events_source ON events(source);
"""

# Columns written on insert; the rest keep their defaults.
INSERT_COLUMNS = (
    "uid",
    "source",
    "title",
    "description",
    "start_utc",
    "end_utc",
    "venue_name",
    "address",
    "url",
    "last_seen_at_utc",
)

# Columns refreshed when a provider re-delivers a known event.
UPDATE_COLUMNS = (
    "title",
    "description",
    "start_utc",
    "end_utc",
    "venue_name",
    "address",
    "url",
    "last_seen_at_utc",
)


class DuplicateEventError(Exception):
    """An event with the same (user_id, uid) already exists."""


class EventStore:
    """Explicitly opened handle on the events database.

    Use as ``async with EventStore(path) as store:`` or call :meth:`open` and
    :meth:`close` around the owning scope (API lifespan, CLI command).
    """

    def __init__(self, path: Path | str) -> None:
        self.path = path
        self._db: aiosqlite.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._db is not None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("EventStore is not open")
        return self._db

    async def open(self) -> EventStore:
        if self._db is None:
            if str(self.path) != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(self.path)
            self._db.row_factory = aiosqlite.Row
            await self._db.execute("PRAGMA journal_mode=WAL")
            await self.init_schema()
            logger.debug("Opened event store at %s", self.path)
        return self

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> EventStore:
        return await self.open()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def init_schema(self) -> None:
        await self.db.executescript(SCHEMA)
        await self.db.commit()

    async def get_event(self, user_id: str, uid: str) -> dict[str, Any] | None:
        cursor = await self.db.execute(
            "SELECT * FROM events WHERE user_id = ? AND uid = ?", (user_id, uid)
        )
        row = await cursor.fetchone()
        return dict(row) if row else None

    async def insert_event(self, user_id: str, record: dict[str, Any]) -> int:
        """Insert a new row and return its id.

        Raises :class:`DuplicateEventError` when ``(user_id, uid)`` is taken.
        """
        columns = ("user_id", *INSERT_COLUMNS)
        placeholders = ", ".join("?" for _ in columns)
        try:
            cursor = await self.db.execute(
                f"INSERT INTO events ({', '.join(columns)}) VALUES ({placeholders})",
                (user_id, *(record.get(c) for c in INSERT_COLUMNS)),
            )
            await self.db.commit()
        except sqlite3.IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateEventError(f"{user_id}/{record.get('uid')}") from exc
        return cursor.lastrowid

    async def update_event(self, event_id: int, record: dict[str, Any]) -> None:
        assignments = ", ".join(f"{c} = ?" for c in UPDATE_COLUMNS)
        await self.db.execute(
            f"UPDATE events SET {assignments}, updated_at = datetime('now') WHERE id = ?",
            (*(record.get(c) for c in UPDATE_COLUMNS), event_id),
        )
        await self.db.commit()

    @staticmethod
    def _filters(user_id: str, source: str | None) -> tuple[str, list[Any]]:
        conditions = ["user_id = ?"]
        params: list[Any] = [user_id]
        if source:
            conditions.append("source = ?")
            params.append(source)
        return "WHERE " + " AND ".join(conditions), params

    async def count_events(self, user_id: str, source: str | None = None) -> int:
        where_clause, params = self._filters(user_id, source)
        cursor = await self.db.execute(f"SELECT COUNT(*) FROM events {where_clause}", params)
        return (await cursor.fetchone())[0]

    async def list_events(
        self,
        user_id: str,
        source: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> list[dict[str, Any]]:
        where_clause, params = self._filters(user_id, source)
        offset = (page - 1) * per_page
        cursor = await self.db.execute(
            f"SELECT * FROM events {where_clause} ORDER BY start_utc ASC LIMIT ? OFFSET ?",
            params + [per_page, offset],
        )
        return [dict(row) for row in await cursor.fetchall()]
