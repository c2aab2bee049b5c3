"""Run Guided Step Use Case."""

from dataclasses import dataclass

from batchtrace.application.dto.responses import GuidedStepResponse
from batchtrace.application.use_cases.engine_session import (
    action_result_response,
    guided_response,
    kpi_response,
    load_engine,
    snapshot_lock,
)
from batchtrace.config import get_logger, get_settings
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.results import ActionResult, Kpi
from batchtrace.core.entities.snapshot import GuidedProgress
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore
from batchtrace.core.services.guided_sequencer import GuidedSequencer

logger = get_logger(__name__)


@dataclass
class GuidedStepResult:
    """Result of running one guided step."""

    step_id: str
    results: list[ActionResult]
    guided: GuidedProgress
    kpi: Kpi


class RunGuidedStepUseCase:
    """Run one scripted walkthrough step against the persisted engine."""

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

    async def execute(self, step_id: str) -> GuidedStepResult:
        """
        Raises:
            StepNotFoundError: step_id is not part of the script
        """
        store = await self._get_snapshot_store()
        async with snapshot_lock(store):
            engine = await load_engine(store, self._get_settings())
            # Unknown steps raise before anything is saved
            results = GuidedSequencer(engine).run_step(step_id)
            await store.save(engine.snapshot())

        return GuidedStepResult(
            step_id=step_id,
            results=results,
            guided=engine.guided.model_copy(deep=True),
            kpi=engine.kpi(),
        )

    def to_response(self, result: GuidedStepResult) -> GuidedStepResponse:
        return GuidedStepResponse(
            step_id=result.step_id,
            results=[action_result_response(r) for r in result.results],
            guided=guided_response(result.guided),
            kpi=kpi_response(result.kpi),
        )
