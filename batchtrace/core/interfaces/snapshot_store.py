"""Abstract interface for engine snapshot persistence."""

from abc import ABC, abstractmethod

from batchtrace.core.entities.snapshot import EngineSnapshot


class ISnapshotStore(ABC):
    """Interface for loading and saving the full engine state."""

    @abstractmethod
    async def load(self) -> EngineSnapshot | None:
        """Load the stored snapshot, or None when nothing has been saved."""
        pass

    @abstractmethod
    async def save(self, snapshot: EngineSnapshot) -> None:
        """Replace the stored snapshot."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove the stored snapshot."""
        pass
