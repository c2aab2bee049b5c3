"""Get Traceability Use Case: recall graph for one batch."""

from batchtrace.application.dto.responses import TraceabilityResponse
from batchtrace.application.use_cases.engine_session import load_engine, snapshot_lock
from batchtrace.config import get_logger, get_settings
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.results import TraceabilityGraph
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore

logger = get_logger(__name__)


class GetTraceabilityUseCase:
    """Resolve the source chain of a batch. Read-only."""

    def __init__(
        self,
        snapshot_store: ISnapshotStore | None = None,
        settings: EngineSettings | None = None,
    ):
        self._snapshot_store = snapshot_store
        self._settings = settings

    async def _get_snapshot_store(self) -> ISnapshotStore:
        if self._snapshot_store is None:
            from batchtrace.infrastructure.storage.sqlite import get_snapshot_store

            self._snapshot_store = await get_snapshot_store()
        return self._snapshot_store

    def _get_settings(self) -> EngineSettings:
        if self._settings is None:
            self._settings = get_settings().engine
        return self._settings

    async def execute(self, batch_code: str) -> TraceabilityGraph:
        """
        Raises:
            ValidationError: empty batch code
            BatchNotFoundError: unknown batch or source batch
            TraceDepthExceededError: chain longer than max_trace_depth
        """
        store = await self._get_snapshot_store()
        async with snapshot_lock(store):
            engine = await load_engine(store, self._get_settings())
        return engine.traceability(batch_code)

    def to_response(self, graph: TraceabilityGraph) -> TraceabilityResponse:
        return TraceabilityResponse(
            batch_code=graph.root.batch_code,
            depth=graph.root.depth(),
            root=graph.root,
        )
