"""In-process snapshot storage for tests and throwaway sessions."""

from batchtrace.core.entities.snapshot import EngineSnapshot
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore


class InMemorySnapshotStore(ISnapshotStore):
    """Keeps a deep copy of the last saved snapshot."""

    def __init__(self, snapshot: EngineSnapshot | None = None):
        self._snapshot = snapshot.model_copy(deep=True) if snapshot else None
        self.saves = 0

    async def load(self) -> EngineSnapshot | None:
        if self._snapshot is None:
            return None
        return self._snapshot.model_copy(deep=True)

    async def save(self, snapshot: EngineSnapshot) -> None:
        self._snapshot = snapshot.model_copy(deep=True)
        self.saves += 1

    async def clear(self) -> None:
        self._snapshot = None
