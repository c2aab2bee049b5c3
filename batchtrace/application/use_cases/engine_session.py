"""
Load/save cycle shared by the engine use cases.

Each use case loads the snapshot once, runs the engine, and saves once.
Calls against the same store are serialized by a per-store asyncio lock so
two requests in one process never interleave their load and save.
"""

import asyncio
from weakref import WeakKeyDictionary

from batchtrace.application.dto.responses import (
    ActionResultResponse,
    GuidedProgressResponse,
    KpiResponse,
)
from batchtrace.config import get_logger
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.results import ActionResult, Kpi
from batchtrace.core.entities.snapshot import GuidedProgress
from batchtrace.core.interfaces.snapshot_store import ISnapshotStore
from batchtrace.core.services.engine import InventoryEngine
from batchtrace.core.services.seed import make_seed

logger = get_logger(__name__)

_locks: "WeakKeyDictionary[ISnapshotStore, asyncio.Lock]" = WeakKeyDictionary()


def snapshot_lock(store: ISnapshotStore) -> asyncio.Lock:
    """Lock guarding one store's load/execute/save cycle."""
    lock = _locks.get(store)
    if lock is None:
        lock = asyncio.Lock()
        _locks[store] = lock
    return lock


async def load_engine(store: ISnapshotStore, settings: EngineSettings) -> InventoryEngine:
    """Build an engine from the stored snapshot, seeding a fresh one if empty."""
    snapshot = await store.load()
    if snapshot is None:
        logger.info("engine_seeded", profile=settings.seed_profile)
        snapshot = make_seed(settings.seed_profile, settings.currency)
    return InventoryEngine.from_snapshot(snapshot, settings=settings)


def kpi_response(kpi: Kpi) -> KpiResponse:
    return KpiResponse(**kpi.model_dump())


def action_result_response(result: ActionResult) -> ActionResultResponse:
    return ActionResultResponse(
        action_type=result.action_type,
        success=result.success,
        messages=list(result.messages),
        warnings=list(result.warnings),
        error_code=result.error_code,
        kpi=kpi_response(result.kpi) if result.kpi else None,
    )


def guided_response(guided: GuidedProgress) -> GuidedProgressResponse:
    return GuidedProgressResponse(
        current_step_id=guided.current_step_id,
        completed_steps=list(guided.completed_steps),
        step_ids=[step.id for step in guided.steps],
    )
