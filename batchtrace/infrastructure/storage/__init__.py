"""Storage infrastructure implementations."""

from batchtrace.infrastructure.storage.memory import InMemorySnapshotStore
from batchtrace.infrastructure.storage.sqlite import (
    SQLiteSnapshotStore,
    get_snapshot_store,
    reset_snapshot_store,
)

__all__ = [
    "SQLiteSnapshotStore",
    "InMemorySnapshotStore",
    "get_snapshot_store",
    "reset_snapshot_store",
]
