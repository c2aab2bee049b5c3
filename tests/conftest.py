"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.snapshot import EngineSnapshot
from batchtrace.core.services.engine import InventoryEngine
from batchtrace.core.services.seed import make_seed
from batchtrace.infrastructure.storage.memory import InMemorySnapshotStore
from tests.factories import external_bulk, receipt


class TickingClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(
        self,
        start: datetime = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def engine_settings() -> EngineSettings:
    return EngineSettings(
        default_expiry_days=180,
        quantity_epsilon=1e-9,
        max_trace_depth=64,
        currency="INR",
        seed_profile="standard",
    )


@pytest.fixture
def seed_snapshot() -> EngineSnapshot:
    return make_seed("standard")


@pytest.fixture
def engine(seed_snapshot, engine_settings, clock) -> InventoryEngine:
    """Engine over the standard seed with all positions at zero."""
    return InventoryEngine.from_snapshot(seed_snapshot, settings=engine_settings, clock=clock)


@pytest.fixture
def memory_store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def stocked_engine(engine) -> InventoryEngine:
    """Engine with raw, packing and external bulk stock received."""
    for action in (
        receipt("raw-coriander", 220.0, 160.0, expiry_days=240),
        receipt("raw-chilli", 120.0, 210.0, expiry_days=210),
        receipt("pack-pouch-100", 12000.0, 1.8, supplier_id="sup-packaging"),
        external_bulk(80.0, 290.0),
    ):
        assert engine.execute_raw(action).success
    return engine
