"""Core interfaces (ports) for dependency injection."""

from batchtrace.core.interfaces.snapshot_store import ISnapshotStore

__all__ = [
    "ISnapshotStore",
]
