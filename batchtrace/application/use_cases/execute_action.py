"""Execute Action Use Case: one engine action inside a load/save cycle."""

from batchtrace.application.dto.requests import ActionRequest
from batchtrace.application.dto.responses import ActionResultResponse
from batchtrace.application.use_cases.engine_session import (
    action_result_response,
    load_engine,
    snapshot_lock,
)
from batchtrace.config import get_logger, get_settings
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.results import ActionResult
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore

logger = get_logger(__name__)


class ExecuteActionUseCase:
    """Apply a business action to the persisted engine state."""

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

    async def execute(self, request: ActionRequest) -> ActionResult:
        """
        Run the action and persist the resulting state.

        Rejected actions are not exceptions: they come back with
        ``success=False`` and the state is saved unchanged apart from
        refreshed alerts. Storage failures propagate.
        """
        logger.info("execute_action_started", action_type=request.type)

        store = await self._get_snapshot_store()
        async with snapshot_lock(store):
            engine = await load_engine(store, self._get_settings())
            result = engine.execute_raw({"type": request.type, "payload": request.payload})
            await store.save(engine.snapshot())

        logger.info(
            "execute_action_complete",
            action_type=request.type,
            success=result.success,
            error_code=result.error_code,
        )
        return result

    def to_response(self, result: ActionResult) -> ActionResultResponse:
        return action_result_response(result)
