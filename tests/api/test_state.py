"""API tests for state, KPI, reset and traceability endpoints."""

from httpx import AsyncClient

from batchtrace.infrastructure.storage.memory import InMemorySnapshotStore
from tests.factories import production, receipt


class TestStateAPI:
    async def test_initial_state(self, api_client: AsyncClient, memory_store: InMemorySnapshotStore):
        response = await api_client.get("/api/state")

        assert response.status_code == 200
        data = response.json()
        assert data["seed_profile"] == "standard"
        assert len(data["positions"]) == 5
        assert data["batches"] == []
        assert data["guided"]["current_step_id"] == "step-1"
        assert memory_store.saves == 1

    async def test_position_carries_avg_cost(self, api_client: AsyncClient):
        await api_client.post("/api/actions", json=receipt("raw-coriander", 100, 150))
        await api_client.post("/api/actions", json=receipt("raw-coriander", 200, 185))

        data = (await api_client.get("/api/state")).json()

        position = next(p for p in data["positions"] if p["item_id"] == "raw-coriander")
        assert position["quantity"] == 300.0
        assert position["avg_cost"] == 173.33
        assert [e["ref_code"] for e in data["ledger"]] == ["GRN-001", "GRN-002"]

    async def test_kpi(self, api_client: AsyncClient):
        await api_client.post("/api/actions", json=receipt("raw-chilli", 10, 200))

        response = await api_client.get("/api/kpi")

        assert response.status_code == 200
        assert response.json()["raw_value"] == 2000.0

    async def test_reset(self, api_client: AsyncClient):
        await api_client.post("/api/actions", json=receipt("raw-chilli", 10, 200))

        response = await api_client.post("/api/reset")

        assert response.status_code == 200
        assert response.json()["items"] == 5
        state = (await api_client.get("/api/state")).json()
        assert state["ledger"] == []

    async def test_reset_unknown_profile(self, api_client: AsyncClient):
        response = await api_client.post("/api/reset", json={"profile": "bakery"})

        assert response.status_code == 500
        assert response.json()["error_code"] == "ConfigurationError"


class TestTraceabilityAPI:
    async def test_resolves_production_batch(self, api_client: AsyncClient):
        await api_client.post("/api/actions", json=receipt("raw-coriander", 220, 160))
        await api_client.post("/api/actions", json=receipt("raw-chilli", 120, 210))
        await api_client.post("/api/actions", json=production(150, 8))

        response = await api_client.get("/api/traceability/BAT-001")

        assert response.status_code == 200
        data = response.json()
        assert data["batch_code"] == "BAT-001"
        assert data["depth"] == 1
        assert data["root"]["item_id"] == "bulk-garam"
        assert data["root"]["children"] == []

    async def test_unknown_batch_is_404(self, api_client: AsyncClient):
        response = await api_client.get("/api/traceability/BAT-404")

        assert response.status_code == 404
        assert response.json()["error_code"] == "BATCH_NOT_FOUND"
