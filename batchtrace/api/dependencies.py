"""
Dependency injection for FastAPI.

Route handlers get use cases wired to the snapshot store from here. Tests
override ``get_store`` to swap in an in-memory store.
"""

from fastapi import Depends

from batchtrace.application.use_cases import (
    ExecuteActionUseCase,
    GetEngineStateUseCase,
    GetTraceabilityUseCase,
    ResetEngineUseCase,
    RunGuidedStepUseCase,
)
from batchtrace.config import Settings, get_settings
from batchtrace.config.settings import EngineSettings
from batchtrace.core.interfaces import ISnapshotStore
from batchtrace.infrastructure.storage.sqlite import get_snapshot_store


def get_app_settings() -> Settings:
    return get_settings()


def get_engine_settings() -> EngineSettings:
    return get_settings().engine


async def get_store() -> ISnapshotStore:
    """Get the snapshot store."""
    return await get_snapshot_store()


def get_execute_action_use_case(
    store: ISnapshotStore = Depends(get_store),
    settings: EngineSettings = Depends(get_engine_settings),
) -> ExecuteActionUseCase:
    return ExecuteActionUseCase(snapshot_store=store, settings=settings)


def get_engine_state_use_case(
    store: ISnapshotStore = Depends(get_store),
    settings: EngineSettings = Depends(get_engine_settings),
) -> GetEngineStateUseCase:
    return GetEngineStateUseCase(snapshot_store=store, settings=settings)


def get_traceability_use_case(
    store: ISnapshotStore = Depends(get_store),
    settings: EngineSettings = Depends(get_engine_settings),
) -> GetTraceabilityUseCase:
    return GetTraceabilityUseCase(snapshot_store=store, settings=settings)


def get_guided_step_use_case(
    store: ISnapshotStore = Depends(get_store),
    settings: EngineSettings = Depends(get_engine_settings),
) -> RunGuidedStepUseCase:
    return RunGuidedStepUseCase(snapshot_store=store, settings=settings)


def get_reset_use_case(
    store: ISnapshotStore = Depends(get_store),
    settings: EngineSettings = Depends(get_engine_settings),
) -> ResetEngineUseCase:
    return ResetEngineUseCase(snapshot_store=store, settings=settings)
