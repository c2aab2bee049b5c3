"""Reset Engine Use Case: replace the stored state with a fresh seed."""

from batchtrace.application.dto.requests import ResetRequest
from batchtrace.application.dto.responses import ResetResponse
from batchtrace.application.use_cases.engine_session import guided_response, snapshot_lock
from batchtrace.config import get_logger, get_settings
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.snapshot import EngineSnapshot
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore
from batchtrace.core.services.seed import make_seed

logger = get_logger(__name__)


class ResetEngineUseCase:
    """Discard all movements and start again from a seed profile."""

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

    async def execute(self, request: ResetRequest | None = None) -> EngineSnapshot:
        """
        Raises:
            ConfigurationError: unknown seed profile
        """
        settings = self._get_settings()
        profile = (request.profile if request else None) or settings.seed_profile

        snapshot = make_seed(profile, settings.currency)

        store = await self._get_snapshot_store()
        async with snapshot_lock(store):
            await store.save(snapshot)

        logger.info("engine_reset", profile=profile)
        return snapshot

    def to_response(self, snapshot: EngineSnapshot) -> ResetResponse:
        return ResetResponse(
            seed_profile=snapshot.seed_profile,
            items=len(snapshot.items),
            recipes=len(snapshot.recipes),
            guided=guided_response(snapshot.guided),
        )
