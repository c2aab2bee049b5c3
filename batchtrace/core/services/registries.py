"""
In-memory stores owned by the costing engine.

Each store wraps the list or map that ends up in the engine snapshot. Only
the engine mutates them; readers get copies through the engine accessors.
"""

from collections import defaultdict
from collections.abc import Iterable, Iterator
from datetime import datetime

from batchtrace.core.entities.catalog import Item
from batchtrace.core.entities.inventory import Batch, LedgerEntry, Lot, StockPosition
from batchtrace.core.entities.snapshot import default_serials
from batchtrace.core.exceptions import BatchNotFoundError, ItemNotFoundError
from batchtrace.core.precision import round2, round4


class StockPositionTable:
    """Per-item running quantity and value."""

    def __init__(self, items: Iterable[Item], positions: dict[str, StockPosition] | None = None):
        self._positions: dict[str, StockPosition] = dict(positions or {})
        for item in items:
            if item.id not in self._positions:
                self._positions[item.id] = StockPosition(item_id=item.id, unit=item.unit)

    def get(self, item_id: str) -> StockPosition:
        position = self._positions.get(item_id)
        if position is None:
            raise ItemNotFoundError(item_id)
        return position

    def available(self, item_id: str) -> float:
        return self.get(item_id).quantity

    def issue_value(self, item_id: str, quantity: float) -> float:
        """Value leaving the position when ``quantity`` is issued at its average cost.

        Issuing the whole position takes its whole value so no residue is
        left behind on an empty position.
        """
        position = self.get(item_id)
        if position.quantity <= 0:
            return 0.0
        if quantity >= position.quantity:
            return position.value
        return min(position.value, round2(quantity * position.avg_cost))

    def apply(
        self, item_id: str, qty_delta: float, value_delta: float, at: datetime
    ) -> tuple[float, float]:
        """Move a position, clamping at zero.

        Returns:
            The (quantity, value) delta actually applied after rounding and
            clamping, which is what the ledger records.
        """
        position = self.get(item_id)
        old_qty, old_value = position.quantity, position.value
        position.quantity = round4(max(0.0, old_qty + qty_delta))
        position.value = round2(max(0.0, old_value + value_delta))
        position.updated_at = at
        return round4(position.quantity - old_qty), round2(position.value - old_value)

    def values(self) -> list[StockPosition]:
        return list(self._positions.values())

    def as_dict(self) -> dict[str, StockPosition]:
        return {item_id: pos.model_copy(deep=True) for item_id, pos in self._positions.items()}


class BatchRegistry:
    """Production, packing and bulk-receipt batches in creation order."""

    def __init__(self, batches: Iterable[Batch] = ()):
        self._batches: list[Batch] = list(batches)
        self._by_code: dict[str, Batch] = {b.code: b for b in self._batches}

    def __iter__(self) -> Iterator[Batch]:
        return iter(self._batches)

    def __len__(self) -> int:
        return len(self._batches)

    def get(self, code: str) -> Batch:
        batch = self._by_code.get(code)
        if batch is None:
            raise BatchNotFoundError(code)
        return batch

    def add(self, batch: Batch) -> Batch:
        if batch.code in self._by_code:
            raise ValueError(f"duplicate batch code: {batch.code}")
        self._batches.append(batch)
        self._by_code[batch.code] = batch
        return batch

    def consume(self, code: str, quantity: float) -> Batch:
        """Decrement a batch remainder, never below zero."""
        batch = self.get(code)
        batch.remaining_qty = round4(max(0.0, batch.remaining_qty - quantity))
        return batch

    def as_list(self) -> list[Batch]:
        return [b.model_copy(deep=True) for b in self._batches]


class LotRegistry:
    """Shelf-life lots for RAW and PACK receipts."""

    def __init__(self, lots: Iterable[Lot] = ()):
        self._lots: list[Lot] = list(lots)

    def __len__(self) -> int:
        return len(self._lots)

    def add(self, lot: Lot) -> Lot:
        self._lots.append(lot)
        return lot

    def as_list(self) -> list[Lot]:
        return [lot.model_copy(deep=True) for lot in self._lots]


class TransactionLedger:
    """Append-only, time-ordered log of stock movements."""

    def __init__(self, entries: Iterable[LedgerEntry] = ()):
        self._entries: list[LedgerEntry] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        self._entries.append(entry)
        return entry

    def totals_by_item(self) -> dict[str, tuple[float, float]]:
        """Net (quantity, value) per item over the whole ledger."""
        qty: dict[str, float] = defaultdict(float)
        value: dict[str, float] = defaultdict(float)
        for entry in self._entries:
            qty[entry.item_id] += entry.quantity
            value[entry.item_id] += entry.value
        return {item_id: (round4(qty[item_id]), round2(value[item_id])) for item_id in qty}

    def as_list(self) -> list[LedgerEntry]:
        return [e.model_copy(deep=True) for e in self._entries]


class SerialCounters:
    """Monotonic serial per code prefix, e.g. ``BAT-001``."""

    def __init__(self, serials: dict[str, int] | None = None):
        self._serials = default_serials()
        self._serials.update(serials or {})

    def next_code(self, prefix: str) -> str:
        serial = self._serials.get(prefix, 1)
        self._serials[prefix] = serial + 1
        return f"{prefix}-{serial:03d}"

    def as_dict(self) -> dict[str, int]:
        return dict(self._serials)
