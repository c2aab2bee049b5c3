"""Tests for inventory and catalog entities."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from batchtrace.core.entities.catalog import Item, ItemCategory, Recipe, RecipeIngredient
from batchtrace.core.entities.inventory import Batch, BatchSourceType, StockPosition
from batchtrace.core.entities.results import TraceabilityNode
from batchtrace.core.entities.snapshot import EngineSnapshot, default_serials


class TestStockPosition:
    """Tests for StockPosition entity."""

    def test_defaults(self):
        position = StockPosition(item_id="raw-a")
        assert position.quantity == 0.0
        assert position.value == 0.0
        assert position.avg_cost == 0.0
        assert position.updated_at is None

    def test_avg_cost_derived(self):
        position = StockPosition(item_id="raw-a", quantity=300.0, value=52000.0)
        assert position.avg_cost == 173.33

    def test_avg_cost_serialized(self):
        position = StockPosition(item_id="raw-a", quantity=4.0, value=10.0)
        assert position.model_dump()["avg_cost"] == 2.5

    def test_negative_quantity_rejected(self):
        with pytest.raises(PydanticValidationError):
            StockPosition(item_id="raw-a", quantity=-1.0)


class TestItem:
    """Tests for Item entity."""

    def test_lot_tracked_categories(self):
        raw = Item(id="r", name="R", category=ItemCategory.RAW, unit="kg")
        pack = Item(id="p", name="P", category=ItemCategory.PACK, unit="pcs")
        bulk = Item(id="b", name="B", category=ItemCategory.BULK, unit="kg")
        assert raw.is_lot_tracked
        assert pack.is_lot_tracked
        assert not bulk.is_lot_tracked

    def test_pack_weight_only_on_fg(self):
        with pytest.raises(PydanticValidationError):
            Item(id="b", name="B", category=ItemCategory.BULK, unit="kg", pack_weight_grams=100)

    def test_items_are_frozen(self):
        item = Item(id="r", name="R", category=ItemCategory.RAW, unit="kg")
        with pytest.raises(PydanticValidationError):
            item.min_stock = 5


class TestRecipe:
    def test_requires_ingredients(self):
        with pytest.raises(PydanticValidationError):
            Recipe(code="RCP", name="R", output_item_id="bulk", ingredients=[])

    def test_loss_percent_is_a_fraction(self):
        with pytest.raises(PydanticValidationError):
            Recipe(
                code="RCP",
                name="R",
                output_item_id="bulk",
                loss_percent=5,
                ingredients=[RecipeIngredient(item_id="raw", ratio_per_kg_out=1.0)],
            )


class TestBatch:
    def test_remaining_cannot_be_negative(self):
        with pytest.raises(PydanticValidationError):
            Batch(
                code="BAT-001",
                item_id="bulk",
                quantity=10.0,
                remaining_qty=-1.0,
                value=10.0,
                source_type=BatchSourceType.IN_HOUSE,
                created_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
            )

    def test_source_type_values(self):
        assert [t.value for t in BatchSourceType] == ["in-house", "external", "packed"]


class TestTraceabilityNode:
    def test_depth(self):
        leaf = TraceabilityNode(batch_code="BAT-001", item_id="bulk", quantity=1.0)
        root = TraceabilityNode(batch_code="BAT-002", item_id="fg", quantity=10.0, children=[leaf])
        assert leaf.depth() == 1
        assert root.depth() == 2


class TestEngineSnapshot:
    def test_defaults(self):
        snapshot = EngineSnapshot()
        assert snapshot.serials == default_serials()
        assert snapshot.guided.current_step_id is None

    def test_json_round_trip(self):
        snapshot = EngineSnapshot(
            positions={"raw-a": StockPosition(item_id="raw-a", quantity=2.0, value=3.0)}
        )
        restored = EngineSnapshot.model_validate_json(snapshot.model_dump_json())
        assert restored.positions["raw-a"].avg_cost == 1.5
