"""SQLite implementation of engine snapshot storage."""

from datetime import datetime, timezone

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from batchtrace.config import get_logger, get_settings
from batchtrace.core.entities.snapshot import EngineSnapshot
from batchtrace.core.exceptions import DatabaseError, SnapshotCorruptedError
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore
from batchtrace.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS engine_snapshots (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class SQLiteSnapshotStore(ISnapshotStore):
    """Stores the whole engine state as one JSON document per key."""

    def __init__(self, key: str | None = None):
        self.key = key or get_settings().storage.snapshot_key
        self._schema_ready = False

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        try:
            async with get_transaction() as conn:
                await conn.execute(SCHEMA)
        except aiosqlite.Error as e:
            raise DatabaseError("create_schema", str(e)) from e
        self._schema_ready = True

    async def load(self) -> EngineSnapshot | None:
        await self._ensure_schema()
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT payload FROM engine_snapshots WHERE key = ?", (self.key,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("load_snapshot", str(e)) from e

        if row is None:
            logger.debug("snapshot_missing", key=self.key)
            return None

        try:
            snapshot = EngineSnapshot.model_validate_json(row["payload"])
        except PydanticValidationError as e:
            logger.error("snapshot_corrupted", key=self.key, error=str(e))
            raise SnapshotCorruptedError(self.key, str(e)) from e

        logger.debug("snapshot_loaded", key=self.key, ledger_size=len(snapshot.ledger))
        return snapshot

    async def save(self, snapshot: EngineSnapshot) -> None:
        await self._ensure_schema()
        payload = snapshot.model_dump_json()
        now = datetime.now(timezone.utc).isoformat()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO engine_snapshots (key, payload, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload = excluded.payload,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, payload, now),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("save_snapshot", str(e)) from e

        logger.info(
            "snapshot_saved",
            key=self.key,
            ledger_size=len(snapshot.ledger),
            batches=len(snapshot.batches),
        )

    async def clear(self) -> None:
        await self._ensure_schema()
        try:
            async with get_transaction() as conn:
                await conn.execute("DELETE FROM engine_snapshots WHERE key = ?", (self.key,))
        except aiosqlite.Error as e:
            raise DatabaseError("clear_snapshot", str(e)) from e
        logger.info("snapshot_cleared", key=self.key)
