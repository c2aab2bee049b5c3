"""Integration test for the full receipt → production → packing → dispatch flow."""

from collections.abc import AsyncGenerator
from unittest.mock import MagicMock, patch

import pytest

from batchtrace.application.dto.requests import ActionRequest
from batchtrace.application.use_cases import (
    ExecuteActionUseCase,
    GetEngineStateUseCase,
    GetTraceabilityUseCase,
    RunGuidedStepUseCase,
)
from batchtrace.core.services.engine import InventoryEngine
from batchtrace.infrastructure.storage.sqlite import SQLiteSnapshotStore
from batchtrace.infrastructure.storage.sqlite import connection as conn_module
from tests.factories import dispatch, packing


@pytest.fixture
async def sqlite_store(tmp_path) -> AsyncGenerator[SQLiteSnapshotStore, None]:
    settings = MagicMock()
    settings.storage.db_path = tmp_path / "flow.db"
    settings.storage.pool_size = 2
    settings.storage.busy_timeout = 5000
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=settings):
        try:
            yield SQLiteSnapshotStore(key="flow")
        finally:
            await conn_module.close_pool()


def as_request(raw: dict) -> ActionRequest:
    return ActionRequest(type=raw["type"], payload=raw["payload"])


class TestManufacturingFlow:
    """Guided walkthrough persisted through SQLite, then a FIFO override."""

    async def test_guided_walkthrough_then_override(self, sqlite_store, engine_settings):
        guided = RunGuidedStepUseCase(snapshot_store=sqlite_store, settings=engine_settings)
        execute = ExecuteActionUseCase(snapshot_store=sqlite_store, settings=engine_settings)
        state = GetEngineStateUseCase(snapshot_store=sqlite_store, settings=engine_settings)
        trace = GetTraceabilityUseCase(snapshot_store=sqlite_store, settings=engine_settings)

        # Steps 1-6: masters, GRNs, bulk GRN, production, packing, dispatch
        for n in range(1, 7):
            result = await guided.execute(f"step-{n}")
            assert all(r.success for r in result.results), result.results

        snapshot = (await state.execute()).snapshot
        assert snapshot.positions["fg-garam-100"].quantity == 700.0
        assert snapshot.positions["fg-garam-100"].value == 17241.0
        assert snapshot.guided.current_step_id == "step-7"

        # A second FG batch packed from the external bulk
        packed = await execute.execute(as_request(packing("BAT-001", 300)))
        assert packed.success
        assert packed.messages == ["Packing run completed: BAT-004"]

        # Dispatching the newer batch needs an override
        rejected = await execute.execute(as_request(dispatch(100.0, "BAT-004")))
        assert rejected.error_code == "FIFO_POLICY_VIOLATION"

        overridden = await execute.execute(as_request(dispatch(100.0, "BAT-004", override=True)))
        assert overridden.success
        assert overridden.warnings == ["FIFO overridden. Suggested batch was BAT-003."]

        graph = await trace.execute("BAT-004")
        assert graph.root.children[0].batch_code == "BAT-001"

        final = await guided.execute("step-7")
        assert final.guided.completed_steps == [f"step-{n}" for n in range(1, 8)]

    async def test_ledger_reconciles_with_positions(self, sqlite_store, engine_settings):
        guided = RunGuidedStepUseCase(snapshot_store=sqlite_store, settings=engine_settings)
        for n in range(1, 8):
            await guided.execute(f"step-{n}")

        snapshot = await sqlite_store.load()
        engine = InventoryEngine.from_snapshot(snapshot, settings=engine_settings)

        totals = {}
        for entry in engine.ledger:
            qty, value = totals.get(entry.item_id, (0.0, 0.0))
            totals[entry.item_id] = (qty + entry.quantity, value + entry.value)

        for item_id, position in engine.positions.items():
            qty, value = totals.get(item_id, (0.0, 0.0))
            assert qty == pytest.approx(position.quantity, abs=1e-6)
            assert value == pytest.approx(position.value, abs=0.01)

    async def test_state_survives_new_store_instance(self, sqlite_store, engine_settings):
        guided = RunGuidedStepUseCase(snapshot_store=sqlite_store, settings=engine_settings)
        await guided.execute("step-1")
        await guided.execute("step-2")

        reopened = SQLiteSnapshotStore(key="flow")
        snapshot = await reopened.load()

        assert snapshot.guided.completed_steps == ["step-1", "step-2"]
        assert snapshot.positions["raw-coriander"].quantity == 220.0
        assert len(snapshot.lots) == 3
