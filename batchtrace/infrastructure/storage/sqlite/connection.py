"""
SQLite connections for the snapshot store.

A small set of aiosqlite connections to the snapshot database is opened on
first use and handed out one at a time. Snapshot writes go through
``get_transaction()`` so a failed save never leaves a half-written row.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from batchtrace.config import get_logger, get_settings
from batchtrace.core.exceptions import DatabaseError

logger = get_logger(__name__)


async def open_connection(db_path: Path, busy_timeout: int) -> aiosqlite.Connection:
    """Open one connection in WAL mode with name-addressable rows."""
    conn = await aiosqlite.connect(db_path)
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA synchronous=NORMAL")
    await conn.execute(f"PRAGMA busy_timeout={busy_timeout}")
    conn.row_factory = aiosqlite.Row
    return conn


class ConnectionPool:
    """Connections to one snapshot database, borrowed one at a time."""

    def __init__(self, db_path: Path, pool_size: int = 2, busy_timeout: int = 30000):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self._idle: asyncio.Queue[aiosqlite.Connection] | None = None
        self._connections: list[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        """Open every connection; a no-op once the pool is open."""
        async with self._lock:
            if self._idle is not None:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
            try:
                while len(self._connections) < self.pool_size:
                    conn = await open_connection(self.db_path, self.busy_timeout)
                    self._connections.append(conn)
                    idle.put_nowait(conn)
            except aiosqlite.Error as e:
                await self._close_all()
                raise DatabaseError("connect", str(e)) from e

            self._idle = idle
            logger.info("sqlite_opened", db_path=str(self.db_path), connections=self.pool_size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection, waiting while all of them are in use."""
        await self.open()
        idle = self._idle
        if idle is None:
            raise DatabaseError("acquire", "connection pool is closed")
        conn = await idle.get()
        try:
            yield conn
        finally:
            idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection that commits on success and rolls back on error."""
        async with self.acquire() as conn:
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        async with self._lock:
            await self._close_all()
            self._idle = None
            logger.info("sqlite_closed", db_path=str(self.db_path))

    async def _close_all(self) -> None:
        while self._connections:
            await self._connections.pop().close()


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Open the process-wide pool from storage settings on first call."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(storage.db_path, storage.pool_size, storage.busy_timeout)
        await _pool.open()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
