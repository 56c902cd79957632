"""SQLite record sink."""

import asyncio
import json
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite

from lambdascope.core.models import TelemetryRecord

_RECORDS_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    kind TEXT NOT NULL,
    service_name TEXT,
    document TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_records_service_name ON records(service_name);
CREATE INDEX IF NOT EXISTS idx_records_kind ON records(kind);
"""

_INSERT_RECORD = """
INSERT INTO records (kind, service_name, document) VALUES (?, ?, ?)
"""

_SELECT_RECORDS = """
SELECT kind, document
FROM records
WHERE (? IS NULL OR service_name = ?) AND (? IS NULL OR kind = ?)
ORDER BY id ASC
"""

_COUNT_RECORDS = """
SELECT COUNT(*) FROM records
"""

_CLEAR_RECORDS = """
DELETE FROM records
"""


def _safe_json_loads(data: str) -> dict[str, Any]:
    """Parse a stored document, returning {} if it is not a JSON object."""
    try:
        result = json.loads(data)
    except json.JSONDecodeError:
        return {}
    return result if isinstance(result, dict) else {}


class SQLiteRecordSink:
    """SQLite implementation of RecordSinkPort.

    Stores records using aiosqlite for non-blocking async operations.
    File databases use WAL mode for concurrent access.

    For :memory: databases, a persistent connection is maintained since
    in-memory databases are connection-scoped in SQLite.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._persistent_conn: aiosqlite.Connection | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        """Initialize database schema once."""
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            if self._db_path == ":memory:":
                self._persistent_conn = await aiosqlite.connect(":memory:")
                await self._persistent_conn.executescript(_RECORDS_SCHEMA)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(_RECORDS_SCHEMA)
            self._initialized = True

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection, closing it afterwards for file databases."""
        await self._ensure_initialized()
        if self._db_path == ":memory:":
            if self._persistent_conn is None:
                raise RuntimeError("Memory database connection not initialized")
            yield self._persistent_conn
            return
        db = await aiosqlite.connect(self._db_path)
        try:
            yield db
        finally:
            await db.close()

    async def write(self, record: TelemetryRecord) -> None:
        """Write a record to the sink."""
        async with self._connection() as db:
            await db.execute(
                _INSERT_RECORD,
                (
                    record.kind,
                    record.service_name,
                    json.dumps(record.document, ensure_ascii=False),
                ),
            )
            await db.commit()

    async def read(
        self, service_name: str | None = None, kind: str | None = None
    ) -> AsyncIterable[TelemetryRecord]:
        """Read records in write order, optionally filtered."""
        params = (service_name, service_name, kind, kind)
        async with self._connection() as db:
            async with db.execute(_SELECT_RECORDS, params) as cursor:
                async for row in cursor:
                    yield TelemetryRecord(
                        document=_safe_json_loads(row[1]), kind=row[0]
                    )

    async def count(self) -> int:
        """Return total number of stored records."""
        async with self._connection() as db:
            async with db.execute(_COUNT_RECORDS) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def clear(self) -> None:
        """Remove all records."""
        async with self._connection() as db:
            await db.execute(_CLEAR_RECORDS)
            await db.commit()

    async def close(self) -> None:
        """Close persistent connection (for :memory: databases)."""
        if self._persistent_conn is not None:
            await self._persistent_conn.close()
            self._persistent_conn = None
            self._initialized = False
