"""
Costing & movement engine.

Turns business actions into stock positions, batches, lots and ledger
entries using weighted-average costing.

Every action runs in two phases:

1. validate - look up every reference and check every quantity against
   current stock without touching any store;
2. apply - mutate positions, registries, ledger and serial counters.

A rejected action therefore leaves every store exactly as it was, serial
counters included, because codes are only drawn during apply.
"""

import math
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from batchtrace.config import get_logger
from batchtrace.config.settings import EngineSettings
from batchtrace.core.entities.actions import (
    Action,
    DispatchPayload,
    PackingPayload,
    ProductionPayload,
    ReceiptPayload,
    parse_action,
)
from batchtrace.core.entities.catalog import Item, ItemCategory, Recipe
from batchtrace.core.entities.inventory import (
    Alert,
    Batch,
    BatchSourceType,
    LedgerEntry,
    Lot,
    MovementType,
    ProductionStats,
    StockPosition,
)
from batchtrace.core.entities.results import (
    ActionResult,
    Kpi,
    TraceabilityGraph,
    TraceabilityNode,
)
from batchtrace.core.entities.snapshot import EngineSnapshot, GuidedProgress
from batchtrace.core.exceptions import (
    BatchTraceError,
    FifoPolicyViolationError,
    InsufficientBatchQuantityError,
    InsufficientStockError,
    ValidationError,
)
from batchtrace.core.precision import round2, round4
from batchtrace.core.services.alerting import rebuild_alerts
from batchtrace.core.services.catalog import Catalog
from batchtrace.core.services.fifo_allocator import FifoAllocator
from batchtrace.core.services.kpi import compute_kpi
from batchtrace.core.services.registries import (
    BatchRegistry,
    LotRegistry,
    SerialCounters,
    StockPositionTable,
    TransactionLedger,
)
from batchtrace.core.services.traceability import TraceabilityResolver

logger = get_logger(__name__)

MAX_RECEIPT_VALUE = 1e15

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Outcome:
    messages: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class _ProductionPlan:
    recipe: Recipe
    output_item: Item
    output_qty: float
    wastage_qty: float
    lines: list[tuple[Item, float]]


@dataclass(frozen=True)
class _PackingPlan:
    source_batch: Batch
    bulk_item: Item
    fg_item: Item
    pack_item: Item
    units: int
    bulk_kg: float


@dataclass(frozen=True)
class _DispatchPlan:
    fg_item: Item
    batch: Batch
    quantity: float
    suggested_code: str
    customer_id: str


class InventoryEngine:
    """Applies receipts, production, packing and dispatch to the inventory stores."""

    def __init__(
        self,
        catalog: Catalog,
        *,
        positions: dict[str, StockPosition] | None = None,
        batches: list[Batch] | None = None,
        lots: list[Lot] | None = None,
        ledger: list[LedgerEntry] | None = None,
        serials: dict[str, int] | None = None,
        stats: ProductionStats | None = None,
        guided: GuidedProgress | None = None,
        activity_timeline: list[str] | None = None,
        seed_profile: str = "standard",
        currency: str | None = None,
        settings: EngineSettings | None = None,
        clock: Clock | None = None,
    ):
        self.catalog = catalog
        self.settings = settings or EngineSettings()
        self.currency = currency or self.settings.currency
        self.seed_profile = seed_profile
        self._clock = clock or utc_now
        self._eps = self.settings.quantity_epsilon

        self._positions = StockPositionTable(catalog.items, positions)
        self._batches = BatchRegistry(batches or [])
        self._lots = LotRegistry(lots or [])
        self._ledger = TransactionLedger(ledger or [])
        self._serials = SerialCounters(serials)
        self.stats = stats or ProductionStats()
        self.guided = guided or GuidedProgress()
        self.activity_timeline: list[str] = list(activity_timeline or [])
        self._alerts: list[Alert] = []

        self._rebind()
        self.refresh_alerts()

        self._handlers: dict[str, Callable[[Any], _Outcome]] = {
            "receipt": self._receipt,
            "external_bulk_receipt": self._external_bulk_receipt,
            "production": self._production,
            "packing": self._packing,
            "dispatch": self._dispatch,
        }

    def _rebind(self) -> None:
        self.allocator = FifoAllocator(self._batches)
        self.resolver = TraceabilityResolver(
            self._batches, max_depth=self.settings.max_trace_depth
        )

    # ------------------------------------------------------------------
    # Snapshot boundary
    # ------------------------------------------------------------------

    @classmethod
    def from_snapshot(
        cls,
        snapshot: EngineSnapshot,
        settings: EngineSettings | None = None,
        clock: Clock | None = None,
    ) -> "InventoryEngine":
        state = snapshot.model_copy(deep=True)
        catalog = Catalog(
            items=state.items,
            recipes=state.recipes,
            suppliers=state.suppliers,
            customers=state.customers,
        )
        return cls(
            catalog,
            positions=state.positions,
            batches=state.batches,
            lots=state.lots,
            ledger=state.ledger,
            serials=state.serials,
            stats=state.stats,
            guided=state.guided,
            activity_timeline=state.activity_timeline,
            seed_profile=state.seed_profile,
            currency=state.currency,
            settings=settings,
            clock=clock,
        )

    def snapshot(self) -> EngineSnapshot:
        """Copy of the full engine state."""
        return EngineSnapshot(
            seed_profile=self.seed_profile,
            currency=self.currency,
            items=self.catalog.items,
            recipes=self.catalog.recipes,
            suppliers=self.catalog.suppliers,
            customers=self.catalog.customers,
            positions=self._positions.as_dict(),
            batches=self._batches.as_list(),
            lots=self._lots.as_list(),
            ledger=self._ledger.as_list(),
            alerts=[a.model_copy() for a in self._alerts],
            serials=self._serials.as_dict(),
            stats=self.stats.model_copy(),
            guided=self.guided.model_copy(deep=True),
            activity_timeline=list(self.activity_timeline),
        )

    def _restore(self, snapshot: EngineSnapshot) -> None:
        self._positions = StockPositionTable(self.catalog.items, snapshot.positions)
        self._batches = BatchRegistry(snapshot.batches)
        self._lots = LotRegistry(snapshot.lots)
        self._ledger = TransactionLedger(snapshot.ledger)
        self._serials = SerialCounters(snapshot.serials)
        self.stats = snapshot.stats
        self.guided = snapshot.guided
        self.activity_timeline = snapshot.activity_timeline
        self._rebind()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def positions(self) -> dict[str, StockPosition]:
        return self._positions.as_dict()

    @property
    def batches(self) -> list[Batch]:
        return self._batches.as_list()

    @property
    def lots(self) -> list[Lot]:
        return self._lots.as_list()

    @property
    def ledger(self) -> list[LedgerEntry]:
        return self._ledger.as_list()

    @property
    def alerts(self) -> list[Alert]:
        return list(self._alerts)

    def position(self, item_id: str) -> StockPosition:
        return self._positions.get(item_id).model_copy()

    def batch(self, code: str) -> Batch:
        return self._batches.get(code).model_copy()

    def kpi(self) -> Kpi:
        return compute_kpi(
            self.catalog.items, self._positions.as_dict(), self.stats, self.currency
        )

    def refresh_alerts(self) -> list[Alert]:
        self._alerts = rebuild_alerts(self.catalog.items, self._positions.as_dict())
        return self.alerts

    def resolve(self, batch_code: str) -> TraceabilityNode:
        return self.resolver.resolve(batch_code)

    def traceability(self, batch_code: str) -> TraceabilityGraph:
        return self.resolver.graph(batch_code)

    def record_activity(self, message: str) -> None:
        self.activity_timeline.append(f"{self._clock():%H:%M:%S} | {message}")

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute_raw(self, raw: Mapping[str, Any]) -> ActionResult:
        """Parse an untyped ``{type, payload}`` mapping and execute it."""
        try:
            action = parse_action(raw)
        except ValidationError as e:
            action_type = raw.get("type") if isinstance(raw, Mapping) else None
            logger.warning(
                "action_rejected",
                action_type=action_type,
                error_code=e.code,
                error=e.message,
            )
            self.refresh_alerts()
            return ActionResult(
                action_type=str(action_type),
                success=False,
                messages=[e.message],
                error_code=e.code,
                kpi=self.kpi(),
            )
        return self.execute(action)

    def execute(self, action: Action) -> ActionResult:
        """Apply one action. Never raises; failures come back as ``success=False``."""
        result = ActionResult(action_type=action.type)
        logger.info("action_started", action_type=action.type)

        checkpoint = self.snapshot()
        try:
            outcome = self._handlers[action.type](action.payload)
        except BatchTraceError as e:
            result.messages.append(e.message)
            result.error_code = e.code
            logger.warning(
                "action_rejected",
                action_type=action.type,
                error_code=e.code,
                error=e.message,
            )
        except Exception:
            self._restore(checkpoint)
            result.messages.append(f"internal error while applying {action.type}")
            result.error_code = "INTERNAL_ERROR"
            logger.exception("action_failed", action_type=action.type)
        else:
            result.success = True
            result.messages.extend(outcome.messages)
            result.warnings.extend(outcome.warnings)
            logger.info(
                "action_applied",
                action_type=action.type,
                warnings=len(outcome.warnings),
                ledger_size=len(self._ledger),
            )

        self.refresh_alerts()
        result.kpi = self.kpi()
        return result

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _require_positive(self, field_name: str, value: float) -> float:
        rounded = round4(value)
        if rounded <= 0:
            raise ValidationError(field_name, f"{field_name} must be greater than zero", value)
        return rounded

    def _require_receipt_value(self, quantity: float, unit_rate: float) -> None:
        value = quantity * unit_rate
        if not math.isfinite(value) or value > MAX_RECEIPT_VALUE:
            raise ValidationError(
                "unit_rate",
                f"receipt value must not exceed {MAX_RECEIPT_VALUE:,.0f}",
                value,
            )

    def _require_stock(self, item: Item, required: float) -> None:
        available = self._positions.available(item.id)
        if available + self._eps < required:
            raise InsufficientStockError(item.id, required, available, label=item.name)

    def _post(
        self,
        ref_code: str,
        movement: MovementType,
        item_id: str,
        quantity: float,
        value: float,
        description: str,
        at: datetime,
    ) -> LedgerEntry:
        return self._ledger.append(
            LedgerEntry(
                ref_code=ref_code,
                type=movement,
                item_id=item_id,
                quantity=quantity,
                value=value,
                description=description,
                occurred_at=at,
            )
        )

    def _issue(self, item_id: str, quantity: float, at: datetime) -> tuple[float, float]:
        """Take stock out at weighted-average cost; returns applied (qty, value)."""
        value = self._positions.issue_value(item_id, quantity)
        return self._positions.apply(item_id, -quantity, -value, at)

    # ------------------------------------------------------------------
    # Receipts
    # ------------------------------------------------------------------

    def _receipt(self, payload: ReceiptPayload) -> _Outcome:
        item = self.catalog.item(payload.item_id)
        quantity = self._require_positive("quantity", payload.quantity)
        self._require_receipt_value(quantity, payload.unit_rate)

        ref = self._apply_receipt(item, quantity, payload)
        return _Outcome(messages=[f"GRN completed: {ref}"])

    def _external_bulk_receipt(self, payload: ReceiptPayload) -> _Outcome:
        item = self.catalog.item_of(
            payload.item_id,
            ItemCategory.BULK,
            "item_id",
            "third-party GRN only supports bulk items",
        )
        quantity = self._require_positive("quantity", payload.quantity)
        self._require_receipt_value(quantity, payload.unit_rate)

        ref = self._apply_receipt(item, quantity, payload)
        now = self._clock()
        code = self._serials.next_code("BAT")
        self._batches.add(
            Batch(
                code=code,
                item_id=item.id,
                quantity=quantity,
                remaining_qty=quantity,
                unit=item.unit,
                value=round2(quantity * payload.unit_rate),
                source_type=BatchSourceType.EXTERNAL,
                created_at=now,
            )
        )
        self.record_activity(f"External bulk batch created: {code}")
        return _Outcome(messages=[f"GRN completed: {ref}", f"External bulk batch created: {code}"])

    def _apply_receipt(self, item: Item, quantity: float, payload: ReceiptPayload) -> str:
        now = self._clock()
        ref = self._serials.next_code("GRN")
        value = round2(quantity * payload.unit_rate)
        qty_in, value_in = self._positions.apply(item.id, quantity, value, now)

        if item.is_lot_tracked:
            expiry_days = (
                payload.expiry_days
                if payload.expiry_days is not None
                else self.settings.default_expiry_days
            )
            self._lots.add(
                Lot(
                    code=self._serials.next_code("LOT"),
                    item_id=item.id,
                    quantity=quantity,
                    expiry_date=now + timedelta(days=expiry_days),
                    source_ref=ref,
                )
            )

        self._post(
            ref,
            MovementType.GRN,
            item.id,
            qty_in,
            value_in,
            f"GRN from supplier {payload.supplier_id} ({payload.source})",
            now,
        )
        logger.info(
            "receipt_posted",
            ref=ref,
            item_id=item.id,
            quantity=quantity,
            new_avg=self._positions.get(item.id).avg_cost,
        )
        self.record_activity(f"GRN recorded for {item.name}: {quantity:.2f} {item.unit}")
        return ref

    # ------------------------------------------------------------------
    # Production
    # ------------------------------------------------------------------

    def _production(self, payload: ProductionPayload) -> _Outcome:
        plan = self._plan_production(payload)
        code = self._apply_production(plan)
        return _Outcome(messages=[f"Production run completed: {code}"])

    def _plan_production(self, payload: ProductionPayload) -> _ProductionPlan:
        recipe = self.catalog.recipe(payload.recipe_code)
        output_item = self.catalog.item_of(
            recipe.output_item_id,
            ItemCategory.BULK,
            "recipe_code",
            f"recipe {recipe.code} must produce a bulk item",
        )
        output_qty = self._require_positive("output_qty_kg", payload.output_qty_kg)
        wastage_qty = round4(payload.wastage_kg)
        gross = output_qty + wastage_qty

        lines: list[tuple[Item, float]] = []
        required_by_item: dict[str, float] = defaultdict(float)
        for ingredient in recipe.ingredients:
            item = self.catalog.item(ingredient.item_id)
            required = round4(gross * ingredient.ratio_per_kg_out)
            lines.append((item, required))
            required_by_item[item.id] = round4(required_by_item[item.id] + required)

        # Check every ingredient before anything is deducted.
        for item, _ in lines:
            self._require_stock(item, required_by_item[item.id])

        return _ProductionPlan(
            recipe=recipe,
            output_item=output_item,
            output_qty=output_qty,
            wastage_qty=wastage_qty,
            lines=lines,
        )

    def _apply_production(self, plan: _ProductionPlan) -> str:
        now = self._clock()
        consumed_value = 0.0
        consumed_qty = 0.0

        for item, required in plan.lines:
            qty_out, value_out = self._issue(item.id, required, now)
            consumed_qty = round4(consumed_qty - qty_out)
            consumed_value = round2(consumed_value - value_out)
            self._post(
                self._serials.next_code("PRD"),
                MovementType.PRODUCTION_CONSUME,
                item.id,
                qty_out,
                value_out,
                f"Consumed in production recipe {plan.recipe.code}",
                now,
            )

        output = plan.output_item
        qty_in, value_in = self._positions.apply(output.id, plan.output_qty, consumed_value, now)
        code = self._serials.next_code("BAT")
        self._batches.add(
            Batch(
                code=code,
                item_id=output.id,
                quantity=plan.output_qty,
                remaining_qty=plan.output_qty,
                unit=output.unit,
                value=consumed_value,
                source_type=BatchSourceType.IN_HOUSE,
                created_at=now,
            )
        )
        self._post(
            self._serials.next_code("PRD"),
            MovementType.PRODUCTION_OUTPUT,
            output.id,
            qty_in,
            value_in,
            f"Produced bulk batch {code}",
            now,
        )

        self.stats.total_raw_input_kg = round4(self.stats.total_raw_input_kg + consumed_qty)
        self.stats.total_wastage_kg = round4(self.stats.total_wastage_kg + plan.wastage_qty)

        logger.info(
            "production_completed",
            batch_code=code,
            recipe_code=plan.recipe.code,
            output_qty=plan.output_qty,
            consumed_value=consumed_value,
        )
        loss_ratio = plan.wastage_qty / (plan.output_qty + plan.wastage_qty)
        if loss_ratio > plan.recipe.loss_percent:
            logger.warning(
                "production_loss_above_recipe",
                batch_code=code,
                recipe_code=plan.recipe.code,
                loss_percent=round2(loss_ratio * 100),
                allowed_percent=round2(plan.recipe.loss_percent * 100),
            )
        self.record_activity(f"Production batch created: {code} ({plan.output_qty:.2f} kg)")
        return code

    # ------------------------------------------------------------------
    # Packing
    # ------------------------------------------------------------------

    def _packing(self, payload: PackingPayload) -> _Outcome:
        plan = self._plan_packing(payload)
        code = self._apply_packing(plan)
        return _Outcome(messages=[f"Packing run completed: {code}"])

    def _plan_packing(self, payload: PackingPayload) -> _PackingPlan:
        source = self._batches.get(payload.source_batch_code)
        bulk_item = self.catalog.item_of(
            source.item_id,
            ItemCategory.BULK,
            "source_batch_code",
            "source batch must hold a bulk item",
        )
        fg_item = self.catalog.item_of(
            payload.fg_item_id,
            ItemCategory.FG,
            "fg_item_id",
            "fg_item_id must be a finished goods item",
        )
        if not fg_item.pack_weight_grams:
            raise ValidationError(
                "fg_item_id", f"{fg_item.id} has no pack weight", fg_item.id
            )
        pack_item = self.catalog.item_of(
            payload.packaging_item_id,
            ItemCategory.PACK,
            "packaging_item_id",
            "packaging_item_id must be a packing material item",
        )

        bulk_kg = round4(payload.units_produced * fg_item.pack_weight_grams / 1000)
        if source.remaining_qty + self._eps < bulk_kg:
            raise InsufficientBatchQuantityError(source.code, bulk_kg, source.remaining_qty)
        self._require_stock(bulk_item, bulk_kg)
        self._require_stock(pack_item, payload.units_produced)

        return _PackingPlan(
            source_batch=source,
            bulk_item=bulk_item,
            fg_item=fg_item,
            pack_item=pack_item,
            units=payload.units_produced,
            bulk_kg=bulk_kg,
        )

    def _apply_packing(self, plan: _PackingPlan) -> str:
        now = self._clock()
        source = plan.source_batch

        bulk_qty, bulk_value = self._issue(plan.bulk_item.id, plan.bulk_kg, now)
        pack_qty, pack_value = self._issue(plan.pack_item.id, plan.units, now)
        output_value = round2(-bulk_value - pack_value)
        fg_qty, fg_value = self._positions.apply(plan.fg_item.id, plan.units, output_value, now)

        self._batches.consume(source.code, plan.bulk_kg)

        code = self._serials.next_code("BAT")
        self._batches.add(
            Batch(
                code=code,
                item_id=plan.fg_item.id,
                quantity=float(plan.units),
                remaining_qty=float(plan.units),
                unit=plan.fg_item.unit,
                value=output_value,
                source_batch_code=source.code,
                source_type=BatchSourceType.PACKED,
                created_at=now,
            )
        )

        self._post(
            self._serials.next_code("PCK"),
            MovementType.PACKING_CONSUME_BULK,
            plan.bulk_item.id,
            bulk_qty,
            bulk_value,
            f"Packing against source batch {source.code}",
            now,
        )
        self._post(
            self._serials.next_code("PCK"),
            MovementType.PACKING_CONSUME_PACKING,
            plan.pack_item.id,
            pack_qty,
            pack_value,
            "Packing material consumed",
            now,
        )
        self._post(
            self._serials.next_code("PCK"),
            MovementType.PACKING_OUTPUT_FG,
            plan.fg_item.id,
            fg_qty,
            fg_value,
            f"FG batch created {code}",
            now,
        )

        logger.info(
            "packing_completed",
            batch_code=code,
            source_batch_code=source.code,
            units=plan.units,
            bulk_kg=plan.bulk_kg,
            output_value=output_value,
        )
        self.record_activity(
            f"Packing run completed: {plan.units} units from batch {source.code}"
        )
        return code

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, payload: DispatchPayload) -> _Outcome:
        plan = self._plan_dispatch(payload, payload.override_fifo)
        ref = self._apply_dispatch(plan)

        warnings = []
        if plan.batch.code != plan.suggested_code:
            warnings.append(f"FIFO overridden. Suggested batch was {plan.suggested_code}.")
            logger.warning(
                "fifo_overridden",
                batch_code=plan.batch.code,
                suggested_batch=plan.suggested_code,
            )
        return _Outcome(messages=[f"Dispatch completed: {ref}"], warnings=warnings)

    def _plan_dispatch(self, payload: DispatchPayload, override: bool) -> _DispatchPlan:
        fg_item = self.catalog.item_of(
            payload.fg_item_id,
            ItemCategory.FG,
            "fg_item_id",
            "dispatch allows finished goods only",
        )
        quantity = self._require_positive("quantity", payload.quantity)

        requested = self._batches.get(payload.batch_code) if payload.batch_code else None
        suggested = self.allocator.select(fg_item.id)
        batch = requested or suggested

        if batch.code != suggested.code and not override:
            raise FifoPolicyViolationError(batch.code, suggested.code)
        if batch.item_id != fg_item.id:
            raise ValidationError(
                "batch_code", "dispatch batch does not match selected FG item", batch.code
            )
        if batch.remaining_qty + self._eps < quantity:
            raise InsufficientBatchQuantityError(batch.code, quantity, batch.remaining_qty)
        self._require_stock(fg_item, quantity)

        return _DispatchPlan(
            fg_item=fg_item,
            batch=batch,
            quantity=quantity,
            suggested_code=suggested.code,
            customer_id=payload.customer_id,
        )

    def _apply_dispatch(self, plan: _DispatchPlan) -> str:
        now = self._clock()
        qty_out, value_out = self._issue(plan.fg_item.id, plan.quantity, now)
        self._batches.consume(plan.batch.code, plan.quantity)

        ref = self._serials.next_code("DIS")
        self._post(
            ref,
            MovementType.DISPATCH,
            plan.fg_item.id,
            qty_out,
            value_out,
            f"Dispatched to customer {plan.customer_id} from batch {plan.batch.code}",
            now,
        )
        logger.info(
            "dispatch_posted",
            ref=ref,
            batch_code=plan.batch.code,
            quantity=plan.quantity,
            value=-value_out,
        )
        self.record_activity(
            f"Dispatch recorded for {plan.quantity:.0f} units (batch {plan.batch.code})."
        )
        return ref
