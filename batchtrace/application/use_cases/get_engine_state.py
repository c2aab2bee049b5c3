"""Get Engine State Use Case."""

from dataclasses import dataclass

from batchtrace.application.dto.responses import (
    AlertResponse,
    BatchResponse,
    EngineStateResponse,
    LedgerEntryResponse,
    LotResponse,
    StockPositionResponse,
)
from batchtrace.application.use_cases.engine_session import (
    guided_response,
    kpi_response,
    load_engine,
    snapshot_lock,
)
from batchtrace.config import get_logger, get_settings
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.results import Kpi
from batchtrace.core.entities.snapshot import EngineSnapshot
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore

logger = get_logger(__name__)


@dataclass
class EngineState:
    """Snapshot plus the KPI derived from it."""

    snapshot: EngineSnapshot
    kpi: Kpi


class GetEngineStateUseCase:
    """Read the current engine state, seeding and saving it on first use."""

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

    async def execute(self) -> EngineState:
        store = await self._get_snapshot_store()
        async with snapshot_lock(store):
            engine = await load_engine(store, self._get_settings())
            snapshot = engine.snapshot()
            await store.save(snapshot)

        logger.debug(
            "engine_state_read",
            batches=len(snapshot.batches),
            ledger_size=len(snapshot.ledger),
            alerts=len(snapshot.alerts),
        )
        return EngineState(snapshot=snapshot, kpi=engine.kpi())

    async def kpi(self) -> Kpi:
        state = await self.execute()
        return state.kpi

    def to_response(self, state: EngineState) -> EngineStateResponse:
        snapshot = state.snapshot
        return EngineStateResponse(
            seed_profile=snapshot.seed_profile,
            currency=snapshot.currency,
            positions=[
                StockPositionResponse(**p.model_dump()) for p in snapshot.positions.values()
            ],
            batches=[BatchResponse(**b.model_dump(mode="json")) for b in snapshot.batches],
            lots=[LotResponse(**lot.model_dump()) for lot in snapshot.lots],
            ledger=[LedgerEntryResponse(**e.model_dump(mode="json")) for e in snapshot.ledger],
            alerts=[AlertResponse(**a.model_dump()) for a in snapshot.alerts],
            kpi=kpi_response(state.kpi),
            guided=guided_response(snapshot.guided),
            activity_timeline=list(snapshot.activity_timeline),
        )
