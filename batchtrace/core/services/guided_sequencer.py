"""
Guided walkthrough of the manufacturing flow.

A fixed seven-step script that drives the engine with pre-built actions:
master setup, raw GRNs, third-party bulk GRN, production, packing,
dispatch and reports. The sequencer is a plain caller of the engine and
holds no state of its own; progress lives in ``engine.guided``.
"""

from collections.abc import Callable
from typing import Any

from batchtrace.config import get_logger
from batchtrace.core.entities.inventory import BatchSourceType
from batchtrace.core.entities.results import ActionResult
from batchtrace.core.exceptions import StepNotFoundError
from batchtrace.core.services.engine import InventoryEngine

logger = get_logger(__name__)

RAW_RECEIPTS: list[dict[str, Any]] = [
    {
        "item_id": "raw-coriander",
        "quantity": 220.0,
        "unit_rate": 160.0,
        "supplier_id": "sup-local-spice",
        "expiry_days": 240,
        "source": "raw",
    },
    {
        "item_id": "raw-chilli",
        "quantity": 120.0,
        "unit_rate": 210.0,
        "supplier_id": "sup-local-spice",
        "expiry_days": 210,
        "source": "raw",
    },
    {
        "item_id": "pack-pouch-100",
        "quantity": 12000.0,
        "unit_rate": 1.8,
        "supplier_id": "sup-packaging",
        "expiry_days": 365,
        "source": "raw",
    },
]

EXTERNAL_BULK_RECEIPT: dict[str, Any] = {
    "item_id": "bulk-garam",
    "quantity": 80.0,
    "unit_rate": 290.0,
    "supplier_id": "sup-ext-bulk",
    "source": "external",
}

PRODUCTION_RUN: dict[str, Any] = {
    "recipe_code": "RCP-GARAM-001",
    "output_qty_kg": 150.0,
    "wastage_kg": 8.0,
}

PACKING_FG_ITEM = "fg-garam-100"
PACKING_MATERIAL_ITEM = "pack-pouch-100"
PACKING_UNITS = 1200

DISPATCH_RUN: dict[str, Any] = {
    "fg_item_id": "fg-garam-100",
    "quantity": 500.0,
    "customer_id": "cust-a1",
    "override_fifo": False,
}


class GuidedSequencer:
    """Runs scripted walkthrough steps against an engine."""

    def __init__(self, engine: InventoryEngine):
        self.engine = engine
        self._steps: dict[str, Callable[[], list[ActionResult]]] = {
            "step-1": self._master_setup,
            "step-2": self._raw_receipts,
            "step-3": self._external_bulk_receipt,
            "step-4": self._production,
            "step-5": self._packing,
            "step-6": self._dispatch,
            "step-7": self._reports,
        }

    @property
    def step_ids(self) -> list[str]:
        return list(self._steps)

    def run_step(self, step_id: str) -> list[ActionResult]:
        """
        Run one step of the script.

        Individual action failures are reported in the returned results; the
        step is still marked completed.

        Raises:
            StepNotFoundError: step_id is not part of the script
        """
        runner = self._steps.get(step_id)
        if runner is None:
            raise StepNotFoundError(step_id)

        logger.info("guided_step_started", step_id=step_id)
        results = runner()
        self._complete(step_id)
        self.engine.refresh_alerts()

        logger.info(
            "guided_step_completed",
            step_id=step_id,
            actions=len(results),
            failed=sum(1 for r in results if not r.success),
        )
        return results

    def _complete(self, step_id: str) -> None:
        guided = self.engine.guided
        if step_id not in guided.completed_steps:
            guided.completed_steps.append(step_id)

        order = self.step_ids
        position = order.index(step_id)
        if position + 1 < len(order):
            guided.current_step_id = order[position + 1]
        else:
            guided.current_step_id = step_id

    def _run(self, action_type: str, payload: dict[str, Any]) -> ActionResult:
        return self.engine.execute_raw({"type": action_type, "payload": payload})

    def _master_setup(self) -> list[ActionResult]:
        self.engine.record_activity("Guided step completed: Master setup reviewed.")
        return []

    def _raw_receipts(self) -> list[ActionResult]:
        return [self._run("receipt", dict(payload)) for payload in RAW_RECEIPTS]

    def _external_bulk_receipt(self) -> list[ActionResult]:
        return [self._run("external_bulk_receipt", dict(EXTERNAL_BULK_RECEIPT))]

    def _production(self) -> list[ActionResult]:
        return [self._run("production", dict(PRODUCTION_RUN))]

    def _packing(self) -> list[ActionResult]:
        source = self._first_batch(BatchSourceType.IN_HOUSE) or self._first_batch(
            BatchSourceType.EXTERNAL
        )
        payload = {
            "source_batch_code": source or "",
            "fg_item_id": PACKING_FG_ITEM,
            "packaging_item_id": PACKING_MATERIAL_ITEM,
            "units_produced": PACKING_UNITS,
        }
        return [self._run("packing", payload)]

    def _dispatch(self) -> list[ActionResult]:
        return [self._run("dispatch", dict(DISPATCH_RUN))]

    def _reports(self) -> list[ActionResult]:
        self.engine.record_activity(
            "Reports reviewed: valuation, wastage and traceability are visible."
        )
        return []

    def _first_batch(self, source_type: BatchSourceType) -> str | None:
        for batch in self.engine.batches:
            if batch.source_type == source_type and batch.remaining_qty > 0:
                return batch.code
        return None
