"""Tests for FIFO batch selection."""

from datetime import datetime, timedelta, timezone

import pytest

from batchtrace.core.entities.inventory import Batch, BatchSourceType
from batchtrace.core.exceptions import NoEligibleBatchError
from batchtrace.core.services.fifo_allocator import FifoAllocator
from batchtrace.core.services.registries import BatchRegistry

T0 = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)


def make_batch(code: str, created_at: datetime, remaining: float = 10.0, item_id: str = "fg-a") -> Batch:
    return Batch(
        code=code,
        item_id=item_id,
        quantity=10.0,
        remaining_qty=remaining,
        unit="pcs",
        value=100.0,
        source_type=BatchSourceType.PACKED,
        created_at=created_at,
    )


class TestFifoAllocator:
    def test_oldest_batch_wins(self):
        registry = BatchRegistry(
            [
                make_batch("BAT-002", T0 + timedelta(hours=1)),
                make_batch("BAT-001", T0),
            ]
        )

        assert FifoAllocator(registry).select("fg-a").code == "BAT-001"

    def test_tie_goes_to_first_registered(self):
        registry = BatchRegistry(
            [
                make_batch("BAT-007", T0),
                make_batch("BAT-003", T0),
            ]
        )

        assert FifoAllocator(registry).select("fg-a").code == "BAT-007"

    def test_exhausted_batches_skipped(self):
        registry = BatchRegistry(
            [
                make_batch("BAT-001", T0, remaining=0.0),
                make_batch("BAT-002", T0 + timedelta(minutes=5)),
            ]
        )

        assert FifoAllocator(registry).select("fg-a").code == "BAT-002"

    def test_other_items_ignored(self):
        registry = BatchRegistry(
            [
                make_batch("BAT-001", T0, item_id="fg-b"),
                make_batch("BAT-002", T0 + timedelta(minutes=5)),
            ]
        )

        allocator = FifoAllocator(registry)
        assert [b.code for b in allocator.candidates("fg-a")] == ["BAT-002"]

    def test_no_eligible_batch(self):
        registry = BatchRegistry([make_batch("BAT-001", T0, remaining=0.0)])

        with pytest.raises(NoEligibleBatchError) as exc_info:
            FifoAllocator(registry).select("fg-a")
        assert exc_info.value.message == "no eligible batch for fg-a"

    def test_same_state_same_answer(self):
        batches = [make_batch(f"BAT-{i:03d}", T0 + timedelta(seconds=i % 3)) for i in range(1, 7)]
        first = FifoAllocator(BatchRegistry(batches)).candidates("fg-a")
        second = FifoAllocator(BatchRegistry(batches)).candidates("fg-a")

        assert [b.code for b in first] == [b.code for b in second]
        assert [b.code for b in first][:2] == ["BAT-003", "BAT-006"]
