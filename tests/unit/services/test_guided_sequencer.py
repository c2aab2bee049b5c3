"""Tests for the guided walkthrough."""

import pytest

from batchtrace.core.exceptions import StepNotFoundError
from batchtrace.core.services.guided_sequencer import GuidedSequencer


@pytest.fixture
def sequencer(engine) -> GuidedSequencer:
    return GuidedSequencer(engine)


def run_through(sequencer: GuidedSequencer, last: int) -> None:
    for n in range(1, last + 1):
        sequencer.run_step(f"step-{n}")


class TestGuidedSequencer:
    def test_step_ids(self, sequencer):
        assert sequencer.step_ids == [f"step-{n}" for n in range(1, 8)]

    def test_unknown_step(self, sequencer, engine):
        with pytest.raises(StepNotFoundError):
            sequencer.run_step("step-99")
        assert engine.guided.completed_steps == []
        assert engine.guided.current_step_id == "step-1"

    def test_master_setup_records_activity_only(self, sequencer, engine):
        results = sequencer.run_step("step-1")

        assert results == []
        assert engine.ledger == []
        assert engine.activity_timeline[-1].endswith(
            "| Guided step completed: Master setup reviewed."
        )
        assert engine.guided.completed_steps == ["step-1"]
        assert engine.guided.current_step_id == "step-2"

    def test_raw_receipts(self, sequencer, engine):
        results = sequencer.run_step("step-2")

        assert [r.success for r in results] == [True, True, True]
        assert engine.position("raw-coriander").quantity == 220.0
        assert engine.position("raw-chilli").value == 25200.0
        assert engine.position("pack-pouch-100").quantity == 12000.0
        assert len(engine.lots) == 3

    def test_external_bulk_receipt(self, sequencer, engine):
        run_through(sequencer, 3)

        assert engine.batch("BAT-001").source_type.value == "external"
        assert engine.position("bulk-garam").value == 23200.0

    def test_production(self, sequencer, engine):
        run_through(sequencer, 4)

        batch = engine.batch("BAT-002")
        assert batch.source_type.value == "in-house"
        assert batch.quantity == 150.0
        assert engine.position("bulk-garam").quantity == 230.0
        assert engine.kpi().wastage_percent == 4.82

    def test_packing_prefers_in_house_batch(self, sequencer, engine):
        run_through(sequencer, 5)

        fg = engine.batch("BAT-003")
        assert fg.source_batch_code == "BAT-002"
        assert fg.quantity == 1200.0
        assert engine.position("fg-garam-100").value == 29556.0

    def test_packing_falls_back_to_external_batch(self, sequencer, engine):
        for step in ("step-1", "step-2", "step-3"):
            sequencer.run_step(step)

        # 1200 x 100g needs 120 kg; the external batch holds 80 kg
        [result] = sequencer.run_step("step-5")

        assert not result.success
        assert result.error_code == "INSUFFICIENT_BATCH_QUANTITY"
        assert "BAT-001" in result.messages[0]
        assert engine.batch("BAT-001").remaining_qty == 80.0

    def test_packing_without_source_reports_failure(self, sequencer, engine):
        [result] = sequencer.run_step("step-5")

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert "step-5" in engine.guided.completed_steps

    def test_dispatch_follows_fifo(self, sequencer, engine):
        run_through(sequencer, 6)

        fg = engine.position("fg-garam-100")
        assert fg.quantity == 700.0
        assert fg.value == 17241.0
        assert engine.batch("BAT-003").remaining_qty == 700.0
        assert engine.ledger[-1].ref_code == "DIS-001"

    def test_full_walkthrough(self, sequencer, engine):
        run_through(sequencer, 7)

        assert engine.guided.completed_steps == sequencer.step_ids
        assert engine.guided.current_step_id == "step-7"
        assert engine.activity_timeline[-1].endswith(
            "| Reports reviewed: valuation, wastage and traceability are visible."
        )
        assert engine.resolve("BAT-003").children[0].batch_code == "BAT-002"

    def test_rerun_does_not_duplicate_completion(self, sequencer, engine):
        sequencer.run_step("step-1")
        sequencer.run_step("step-1")

        assert engine.guided.completed_steps == ["step-1"]

    def test_alerts_refreshed_after_step(self, sequencer, engine):
        run_through(sequencer, 6)

        low = {a.item_id for a in engine.alerts}
        assert low == {"fg-garam-100"}
