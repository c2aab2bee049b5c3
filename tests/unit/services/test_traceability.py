"""Tests for recall graph resolution."""

from datetime import datetime, timezone

import pytest

from batchtrace.core.entities.inventory import Batch, BatchSourceType
from batchtrace.core.exceptions import (
    BatchNotFoundError,
    TraceDepthExceededError,
    ValidationError,
)
from batchtrace.core.services.registries import BatchRegistry
from batchtrace.core.services.traceability import TraceabilityResolver
from tests.factories import packing, production

T0 = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)


def linked(code: str, source: str | None) -> Batch:
    return Batch(
        code=code,
        item_id="bulk-garam",
        quantity=1.0,
        remaining_qty=1.0,
        value=1.0,
        source_batch_code=source,
        source_type=BatchSourceType.PACKED if source else BatchSourceType.IN_HOUSE,
        created_at=T0,
    )


class TestTraceabilityResolver:
    def test_packed_batch_two_node_chain(self, stocked_engine):
        stocked_engine.execute_raw(production(150.0, 8.0))
        stocked_engine.execute_raw(packing("BAT-002", 1200))

        root = stocked_engine.resolve("BAT-003")

        assert root.batch_code == "BAT-003"
        assert root.item_id == "fg-garam-100"
        assert root.quantity == 1200.0
        [child] = root.children
        assert child.batch_code == "BAT-002"
        assert child.item_id == "bulk-garam"
        assert child.children == []
        assert root.depth() == 2

    def test_production_batch_single_node(self, stocked_engine):
        stocked_engine.execute_raw(production(150.0, 8.0))

        root = stocked_engine.resolve("BAT-002")

        assert root.batch_code == "BAT-002"
        assert root.children == []

    def test_graph_wraps_root(self, stocked_engine):
        graph = stocked_engine.traceability("BAT-001")
        assert graph.root.batch_code == "BAT-001"

    def test_unknown_batch(self):
        resolver = TraceabilityResolver(BatchRegistry([]))
        with pytest.raises(BatchNotFoundError):
            resolver.resolve("BAT-404")

    def test_missing_ancestor(self):
        resolver = TraceabilityResolver(BatchRegistry([linked("BAT-002", "BAT-001")]))
        with pytest.raises(BatchNotFoundError) as exc_info:
            resolver.resolve("BAT-002")
        assert exc_info.value.details == {"batch_code": "BAT-001"}

    def test_empty_code(self):
        resolver = TraceabilityResolver(BatchRegistry([]))
        with pytest.raises(ValidationError):
            resolver.resolve("")

    def test_depth_cap(self):
        registry = BatchRegistry(
            [
                linked("BAT-001", None),
                linked("BAT-002", "BAT-001"),
                linked("BAT-003", "BAT-002"),
                linked("BAT-004", "BAT-003"),
            ]
        )

        with pytest.raises(TraceDepthExceededError):
            TraceabilityResolver(registry, max_depth=3).resolve("BAT-004")
        assert TraceabilityResolver(registry, max_depth=4).resolve("BAT-004").depth() == 4

    def test_cycle_terminates(self):
        registry = BatchRegistry([linked("BAT-001", "BAT-002"), linked("BAT-002", "BAT-001")])

        with pytest.raises(TraceDepthExceededError):
            TraceabilityResolver(registry).resolve("BAT-001")

    def test_chain_order(self):
        registry = BatchRegistry(
            [linked("BAT-001", None), linked("BAT-002", "BAT-001"), linked("BAT-003", "BAT-002")]
        )

        chain = TraceabilityResolver(registry).chain("BAT-003")
        assert [b.code for b in chain] == ["BAT-003", "BAT-002", "BAT-001"]
