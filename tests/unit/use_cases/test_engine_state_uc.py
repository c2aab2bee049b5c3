"""Tests for GetEngineStateUseCase and ResetEngineUseCase."""

from unittest.mock import AsyncMock

import pytest

from batchtrace.application.dto.requests import ResetRequest
from batchtrace.application.use_cases.get_engine_state import GetEngineStateUseCase
from batchtrace.application.use_cases.reset_engine import ResetEngineUseCase
from batchtrace.core.exceptions import ConfigurationError, SnapshotCorruptedError
from batchtrace.infrastructure.storage.memory import InMemorySnapshotStore


class TestGetEngineStateUseCase:
    async def test_seeds_on_first_read(self, memory_store, engine_settings):
        use_case = GetEngineStateUseCase(snapshot_store=memory_store, settings=engine_settings)

        state = await use_case.execute()

        assert state.snapshot.seed_profile == "standard"
        assert state.kpi.raw_value == 0.0
        assert memory_store.saves == 1
        assert await memory_store.load() is not None

    async def test_reads_stored_state(self, stocked_engine, engine_settings):
        store = InMemorySnapshotStore(stocked_engine.snapshot())
        use_case = GetEngineStateUseCase(snapshot_store=store, settings=engine_settings)

        state = await use_case.execute()

        assert state.snapshot.batches[0].code == "BAT-001"
        assert state.kpi.bulk_value == 23200.0
        assert await use_case.kpi() == state.kpi

    async def test_to_response(self, stocked_engine, engine_settings):
        store = InMemorySnapshotStore(stocked_engine.snapshot())
        use_case = GetEngineStateUseCase(snapshot_store=store, settings=engine_settings)

        response = use_case.to_response(await use_case.execute())

        assert {p.item_id for p in response.positions} == set(stocked_engine.positions)
        assert response.batches[0].source_type == "external"
        assert response.ledger[0].type == "GRN"
        assert response.guided.step_ids[0] == "step-1"
        assert len(response.lots) == 3

    async def test_corrupted_snapshot_propagates(self, engine_settings):
        store = AsyncMock()
        store.load.side_effect = SnapshotCorruptedError("default", "invalid json")
        use_case = GetEngineStateUseCase(snapshot_store=store, settings=engine_settings)

        with pytest.raises(SnapshotCorruptedError):
            await use_case.execute()
        store.save.assert_not_called()


class TestResetEngineUseCase:
    async def test_replaces_state_with_seed(self, stocked_engine, engine_settings):
        store = InMemorySnapshotStore(stocked_engine.snapshot())
        use_case = ResetEngineUseCase(snapshot_store=store, settings=engine_settings)

        snapshot = await use_case.execute(ResetRequest())

        assert snapshot.batches == []
        stored = await store.load()
        assert stored.ledger == []
        assert stored.serials["BAT"] == 1
        assert stored.guided.current_step_id == "step-1"

    async def test_without_request(self, memory_store, engine_settings):
        use_case = ResetEngineUseCase(snapshot_store=memory_store, settings=engine_settings)

        response = use_case.to_response(await use_case.execute())

        assert response.seed_profile == "standard"
        assert response.items == 5
        assert response.recipes == 1
        assert response.guided.completed_steps == []

    async def test_unknown_profile(self, memory_store, engine_settings):
        use_case = ResetEngineUseCase(snapshot_store=memory_store, settings=engine_settings)

        with pytest.raises(ConfigurationError):
            await use_case.execute(ResetRequest(profile="bakery"))
        assert memory_store.saves == 0
