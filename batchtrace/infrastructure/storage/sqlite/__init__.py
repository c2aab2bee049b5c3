"""SQLite storage implementations."""

from batchtrace.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from batchtrace.infrastructure.storage.sqlite.snapshot_store import SQLiteSnapshotStore

SnapshotStore = SQLiteSnapshotStore

# Singleton instance
_snapshot_store: SQLiteSnapshotStore | None = None


async def get_snapshot_store() -> SQLiteSnapshotStore:
    """Get singleton snapshot store instance."""
    global _snapshot_store
    if _snapshot_store is None:
        _snapshot_store = SQLiteSnapshotStore()
    return _snapshot_store


def reset_snapshot_store() -> None:
    """Drop the singleton (for testing)."""
    global _snapshot_store
    _snapshot_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Stores
    "SQLiteSnapshotStore",
    "SnapshotStore",
    "get_snapshot_store",
    "reset_snapshot_store",
]
