"""SqliteBackend — messages as rows of a single SQLite table (aiosqlite)."""

from __future__ import annotations

import asyncio
import os
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, AsyncIterator

import aiosqlite

from messagestore.constants import SQLITE_FILENAME, SQLITE_MAX_ROWID, SQLITE_TABLE
from messagestore.errors import BackendError, InvalidMessageIdError, MessageNotFoundError

if TYPE_CHECKING:
    from messagestore.config import StoreConfig

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {SQLITE_TABLE} (
    id       INTEGER PRIMARY KEY,
    payload  TEXT NOT NULL
);
"""

_UPSERT_SQL = f"""
INSERT INTO {SQLITE_TABLE} (id, payload) VALUES (?, ?)
ON CONFLICT(id) DO UPDATE SET payload = excluded.payload
"""

_SELECT_SQL = f"SELECT payload FROM {SQLITE_TABLE} WHERE id = ?"


class SqliteBackend:
    """Message persistence in an SQLite database file.

    The location of a message is its integer row key, so ids above
    ``SQLITE_MAX_ROWID`` are rejected by ``locate``. The table is
    created on first use; each write is a single-statement upsert
    committed in its own transaction.
    """

    def __init__(self, db_path: str | os.PathLike[str]) -> None:
        self._db_path = Path(db_path)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    @classmethod
    def for_config(cls, config: StoreConfig) -> SqliteBackend:
        """Place the database file inside the configured working directory."""
        return cls(config.working_directory / SQLITE_FILENAME)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def locate(self, message_id: int) -> int:
        if message_id > SQLITE_MAX_ROWID:
            raise InvalidMessageIdError(
                f"message_id {message_id} exceeds the SQLite row key limit {SQLITE_MAX_ROWID}"
            )
        return message_id

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        async with aiosqlite.connect(self._db_path) as db:
            if not self._schema_ready:
                async with self._schema_lock:
                    if not self._schema_ready:
                        await db.executescript(SCHEMA_SQL)
                        await db.commit()
                        self._schema_ready = True
            yield db

    async def write(self, location: int, payload: str) -> None:
        try:
            async with self._connect() as db:
                await db.execute(_UPSERT_SQL, (location, payload))
                await db.commit()
        except sqlite3.Error as exc:
            raise BackendError(f"Failed to write message {location}: {exc}") from exc

    async def read(self, location: int) -> str:
        try:
            async with self._connect() as db:
                async with db.execute(_SELECT_SQL, (location,)) as cursor:
                    row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise BackendError(f"Failed to read message {location}: {exc}") from exc

        if row is None:
            raise MessageNotFoundError(location)
        return row[0]
